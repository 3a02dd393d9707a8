from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from nacl.utils import random as nacl_random

from .cipher import CipherEngine
from .errors import CryptoError, StatusCode
from .format_config import HEADER_SIZE, IV_SIZE, CryptoAlgorithm
from .header import ContainerHeader, encode_header, split_container
from .key import Passphrase, derive_key, derive_key_from_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CryptoResult:
    """Outcome of an encrypt/decrypt call. Exactly one of payload or error is meaningful."""

    plaintext: bytes = b""
    ciphertext: bytes = b""
    header: Optional[ContainerHeader] = None
    error: Optional[CryptoError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def code(self) -> StatusCode:
        return StatusCode.OK if self.error is None else self.error.code

    def unwrap(self) -> bytes:
        if self.error is not None:
            raise self.error
        return self.ciphertext or self.plaintext


def generate_iv() -> bytes:
    return nacl_random(IV_SIZE)


def _key_for(algorithm: CryptoAlgorithm, password: Passphrase, iv: bytes) -> bytes:
    if algorithm == CryptoAlgorithm.AES256_CBC:
        return derive_key(password)
    if algorithm == CryptoAlgorithm.AES256_CBC_ARGON2ID:
        try:
            return derive_key_from_password(password, iv)
        except ValueError as exc:
            raise CryptoError(StatusCode.INVALID_IV_SIZE, str(exc)) from exc
    raise CryptoError(StatusCode.HEADER_INVALID_ALGORITHM, f"Unsupported crypto algorithm: {algorithm}")


def _check_password(password: Optional[Passphrase]) -> Passphrase:
    if not password:
        raise CryptoError(StatusCode.INVALID_KEY_SIZE, "Key is empty")
    return password


def encrypt(
    plaintext: bytes,
    password: Optional[Passphrase],
    iv: Optional[bytes] = None,
    algorithm: CryptoAlgorithm = CryptoAlgorithm.AES256_CBC,
) -> CryptoResult:
    """Encrypt ``plaintext`` into a header-prefixed container."""
    try:
        password = _check_password(password)
        if iv is None:
            iv = generate_iv()
        if len(iv) != IV_SIZE:
            raise CryptoError(StatusCode.INVALID_IV_SIZE, f"IV is not {IV_SIZE * 8} bits")

        key = _key_for(algorithm, password, iv)
        ciphertext = CipherEngine(key, iv).encrypt(plaintext)

        header = ContainerHeader(algorithm=algorithm, plaintext_size=len(plaintext), iv=bytes(iv))
        return CryptoResult(
            plaintext=bytes(plaintext),
            ciphertext=encode_header(header) + ciphertext,
            header=header,
        )
    except CryptoError as e:
        logger.debug("Encrypt failed: %s (%s)", e, e.code.name)
        return CryptoResult(error=e)


def decrypt(container: bytes, password: Optional[Passphrase]) -> CryptoResult:
    """Decrypt a container produced by :func:`encrypt`."""
    try:
        if len(container) < HEADER_SIZE:
            raise CryptoError(StatusCode.INVALID_DATA_SIZE, "Ciphertext is too small to contain header")
        password = _check_password(password)
        header, ciphertext = split_container(container)

        if header.plaintext_size == 0:
            return CryptoResult(plaintext=b"", header=header)

        key = _key_for(header.algorithm, password, header.iv)
        plaintext = CipherEngine(key, header.iv).decrypt(ciphertext, header.plaintext_size)
        return CryptoResult(plaintext=plaintext, header=header)
    except CryptoError as e:
        logger.debug("Decrypt failed: %s (%s)", e, e.code.name)
        return CryptoResult(error=e)


def is_key_correct(password: Optional[Passphrase], path: str) -> bool:
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        logger.warning("Could not read %s for key check: %s", path, e)
        return False
    return decrypt(data, password).ok

from __future__ import annotations

import logging

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import CryptoError, StatusCode
from .format_config import BLOCK_SIZE, IV_SIZE

logger = logging.getLogger(__name__)


def padded_size(plaintext_size: int) -> int:
    return (plaintext_size // BLOCK_SIZE + 1) * BLOCK_SIZE


class CipherEngine:
    """AES-CBC with PKCS#7 padding.

    ``cryptography`` reports every size problem as ``ValueError``; the stage
    that raised tells key and IV failures apart.
    """

    def __init__(self, key: bytes, iv: bytes):
        try:
            algorithm = algorithms.AES(bytes(key))
        except (TypeError, ValueError) as exc:
            raise CryptoError(StatusCode.INVALID_KEY_SIZE, f"Key size {len(key)} is not valid for AES") from exc
        if len(iv) != IV_SIZE:
            raise CryptoError(StatusCode.INVALID_IV_SIZE, f"IV is not {IV_SIZE * 8} bits")
        try:
            self._cipher = Cipher(algorithm, modes.CBC(bytes(iv)))
        except (TypeError, ValueError) as exc:
            raise CryptoError(StatusCode.INVALID_IV_SIZE, f"IV is not {IV_SIZE * 8} bits") from exc

    def encrypt(self, plaintext: bytes) -> bytes:
        padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
        padded = padder.update(bytes(plaintext)) + padder.finalize()
        encryptor = self._cipher.encryptor()
        return encryptor.update(padded) + encryptor.finalize()

    def decrypt(self, ciphertext: bytes, plaintext_size: int) -> bytes:
        """
        Decrypt the whole ciphertext and cut it to ``plaintext_size``.

        The header's declared size is authoritative: the bytes after it must
        be exactly the padding that size implies. Anything else means the key
        does not match.
        """
        if not ciphertext or len(ciphertext) % BLOCK_SIZE:
            raise CryptoError(StatusCode.INVALID_DATA_SIZE, "Ciphertext is not a whole number of blocks")
        if len(ciphertext) != padded_size(plaintext_size):
            raise CryptoError(StatusCode.INVALID_DATA_SIZE, "Ciphertext size does not match the declared plaintext size")

        decryptor = self._cipher.decryptor()
        try:
            decrypted = decryptor.update(bytes(ciphertext)) + decryptor.finalize()
        except ValueError as exc:
            raise CryptoError(StatusCode.UNKNOWN_ERROR, f"Cipher failure: {exc}") from exc

        pad = len(decrypted) - plaintext_size
        if decrypted[plaintext_size:] != bytes([pad]) * pad:
            logger.debug("Padding check failed after decrypt (declared %d, got %d)", plaintext_size, len(decrypted))
            raise CryptoError(StatusCode.INVALID_KEY, "Key is incorrect")
        return decrypted[:plaintext_size]

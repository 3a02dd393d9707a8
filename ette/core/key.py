from __future__ import annotations

import hashlib
from typing import Union

from argon2.low_level import Type, hash_secret_raw

from .errors import CryptoError, StatusCode
from .format_config import IV_SIZE

LEGACY_KEY_SIZE = 16
KEY_SIZE = 32
SALT_SIZE = IV_SIZE

ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST_KIB = 65536
ARGON2_PARALLELISM = 1

Passphrase = Union[str, bytes, bytearray]


def _password_bytes(password: Passphrase) -> bytes:
    if isinstance(password, str):
        return password.encode("utf-8")
    if isinstance(password, (bytes, bytearray)):
        return bytes(password)
    raise TypeError("password must be str, bytes, or bytearray")


def derive_key(password: Passphrase) -> bytes:
    """
    Hash the passphrase with SHA-256 and keep the first 16 characters of the
    hex digest. The key is those ASCII characters, not raw digest bytes, so
    only 64 bits of the hash reach the cipher. Kept for reading existing
    algorithm 1 containers.
    """
    secret = _password_bytes(password)
    if not secret:
        raise CryptoError(StatusCode.INVALID_KEY_SIZE, "Key is empty")
    return hashlib.sha256(secret).hexdigest()[:LEGACY_KEY_SIZE].encode("ascii")


def derive_key_from_password(password: Passphrase, salt: bytes) -> bytes:
    """
    Derive a 32-byte key using Argon2id.
    """
    secret = _password_bytes(password)
    if not secret:
        raise CryptoError(StatusCode.INVALID_KEY_SIZE, "Key is empty")
    if not isinstance(salt, (bytes, bytearray)) or len(salt) != SALT_SIZE:
        raise ValueError(f"salt must be {SALT_SIZE} bytes")

    return hash_secret_raw(
        secret=secret,
        salt=bytes(salt),
        time_cost=ARGON2_TIME_COST,
        memory_cost=ARGON2_MEMORY_COST_KIB,
        parallelism=ARGON2_PARALLELISM,
        hash_len=KEY_SIZE,
        type=Type.ID,
    )

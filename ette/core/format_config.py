"""
File format configuration for ette encrypted containers.

Header layout (32 bytes, integers big-endian):
  - magic (4 bytes, b"ETTE")
  - crypto algorithm id (1 byte)
  - format version (3 bytes: major, minor, patch)
  - plaintext size (uint64)
  - iv (16 bytes)
  - ciphertext (variable, padded to the AES block size)
"""

from enum import Enum

VERSION_MAJOR = 0
VERSION_MINOR = 0
VERSION_PATCH = 1
VERSION = (VERSION_MAJOR, VERSION_MINOR, VERSION_PATCH)
VERSION_STR = "%d.%d.%d" % VERSION

HEADER_MAGIC = b"ETTE"

MAGIC_SIZE = 4
ALGORITHM_SIZE = 1
VERSION_SIZE = 3
PLAINTEXT_SIZE_SIZE = 8
IV_SIZE = 16

ALGORITHM_OFFSET = MAGIC_SIZE
VERSION_OFFSET = ALGORITHM_OFFSET + ALGORITHM_SIZE
PLAINTEXT_SIZE_OFFSET = VERSION_OFFSET + VERSION_SIZE
IV_OFFSET = PLAINTEXT_SIZE_OFFSET + PLAINTEXT_SIZE_SIZE

HEADER_SIZE = MAGIC_SIZE + ALGORITHM_SIZE + VERSION_SIZE + PLAINTEXT_SIZE_SIZE + IV_SIZE

BLOCK_SIZE = 16

# Filenames containing this marker are stored encrypted.
ENCRYPTED_EXTENSION = ".aes256cbc"


class CryptoAlgorithm(Enum):
    NONE = 0x00
    # Legacy: key is the first 16 hex characters of SHA-256(passphrase).
    AES256_CBC = 0x01
    # 32-byte Argon2id key, salted with the header IV.
    AES256_CBC_ARGON2ID = 0x02


ALGORITHM_NAMES = {
    "aes256cbc": CryptoAlgorithm.AES256_CBC,
    "aes256cbc-argon2": CryptoAlgorithm.AES256_CBC_ARGON2ID,
}


def encode_version(version: tuple[int, int, int] = VERSION) -> bytes:
    if len(version) != VERSION_SIZE:
        raise ValueError("Version must have major, minor and patch parts")
    return bytes(version)


def decode_version(version_bytes: bytes) -> tuple[int, int, int]:
    if len(version_bytes) != VERSION_SIZE:
        raise ValueError("Invalid version bytes")
    return (version_bytes[0], version_bytes[1], version_bytes[2])


def encode_plaintext_size(size: int) -> bytes:
    return int(size).to_bytes(PLAINTEXT_SIZE_SIZE, "big")


def decode_plaintext_size(size_bytes: bytes) -> int:
    if len(size_bytes) != PLAINTEXT_SIZE_SIZE:
        raise ValueError("Invalid plaintext size bytes")
    return int.from_bytes(size_bytes, "big")


def algorithm_from_filename(filename: str) -> CryptoAlgorithm:
    if ENCRYPTED_EXTENSION in filename:
        return CryptoAlgorithm.AES256_CBC
    return CryptoAlgorithm.NONE

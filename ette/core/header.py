from __future__ import annotations

from dataclasses import dataclass

from .errors import CryptoError, StatusCode
from .format_config import (
    ALGORITHM_OFFSET,
    HEADER_MAGIC,
    HEADER_SIZE,
    IV_OFFSET,
    IV_SIZE,
    MAGIC_SIZE,
    PLAINTEXT_SIZE_OFFSET,
    PLAINTEXT_SIZE_SIZE,
    VERSION,
    VERSION_OFFSET,
    VERSION_SIZE,
    CryptoAlgorithm,
    decode_plaintext_size,
    decode_version,
    encode_plaintext_size,
    encode_version,
)


@dataclass(frozen=True)
class ContainerHeader:
    algorithm: CryptoAlgorithm
    plaintext_size: int
    iv: bytes
    version: tuple[int, int, int] = VERSION
    magic: bytes = HEADER_MAGIC


def encode_header(header: ContainerHeader) -> bytes:
    if len(header.magic) != MAGIC_SIZE:
        raise CryptoError(StatusCode.HEADER_NO_MAGIC_NUMBER, f"Magic must be {MAGIC_SIZE} bytes")
    if len(header.iv) != IV_SIZE:
        raise CryptoError(StatusCode.HEADER_INVALID_IV_SIZE, f"IV must be {IV_SIZE} bytes")
    if not 0 <= header.plaintext_size < 1 << (8 * PLAINTEXT_SIZE_SIZE):
        raise CryptoError(StatusCode.HEADER_INVALID_PLAINTEXT_SIZE, "Plaintext size out of range")

    try:
        version = encode_version(header.version)
    except ValueError as exc:
        raise CryptoError(StatusCode.UNKNOWN_ERROR, f"Invalid format version: {header.version}") from exc

    return (
        bytes(header.magic)
        + bytes([header.algorithm.value])
        + version
        + encode_plaintext_size(header.plaintext_size)
        + bytes(header.iv)
    )


def decode_header(data: bytes) -> ContainerHeader:
    """Parse the fixed-size header at the start of ``data``.

    The magic is verified before anything else so a foreign file fails here
    instead of surfacing later as a cipher error.
    """
    if len(data) < HEADER_SIZE:
        raise CryptoError(StatusCode.INVALID_DATA_SIZE, "Ciphertext is too small to contain header")

    magic = bytes(data[:MAGIC_SIZE])
    if magic != HEADER_MAGIC:
        raise CryptoError(StatusCode.HEADER_NO_MAGIC_NUMBER, "Not an ette container (bad magic number)")

    algorithm_byte = data[ALGORITHM_OFFSET]
    try:
        algorithm = CryptoAlgorithm(algorithm_byte)
    except ValueError:
        raise CryptoError(StatusCode.HEADER_INVALID_ALGORITHM, f"Unknown crypto algorithm: {algorithm_byte}")
    if algorithm == CryptoAlgorithm.NONE:
        raise CryptoError(StatusCode.HEADER_INVALID_ALGORITHM, "Container does not name a crypto algorithm")

    version = decode_version(bytes(data[VERSION_OFFSET:VERSION_OFFSET + VERSION_SIZE]))
    plaintext_size = decode_plaintext_size(
        bytes(data[PLAINTEXT_SIZE_OFFSET:PLAINTEXT_SIZE_OFFSET + PLAINTEXT_SIZE_SIZE])
    )
    iv = bytes(data[IV_OFFSET:IV_OFFSET + IV_SIZE])

    return ContainerHeader(
        algorithm=algorithm,
        plaintext_size=plaintext_size,
        iv=iv,
        version=version,
        magic=magic,
    )


def split_container(data: bytes) -> tuple[ContainerHeader, bytes]:
    return decode_header(data), bytes(data[HEADER_SIZE:])

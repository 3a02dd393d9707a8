from __future__ import annotations

from enum import Enum, auto
from typing import Optional


class StatusCode(Enum):
    OK = auto()
    HEADER_NO_MAGIC_NUMBER = auto()
    HEADER_INVALID_ALGORITHM = auto()
    HEADER_INVALID_PLAINTEXT_SIZE = auto()
    HEADER_INVALID_IV_SIZE = auto()
    INVALID_KEY_SIZE = auto()
    INVALID_KEY = auto()
    INVALID_DATA_SIZE = auto()
    INVALID_IV_SIZE = auto()
    UNKNOWN_ERROR = auto()


class ValidationError(Exception):
    """Input validation failure."""


class CryptoError(Exception):
    """Container encode/decode or cipher failure, tagged with a StatusCode."""

    def __init__(self, code: StatusCode, message: str = ""):
        super().__init__(message or code.name.replace("_", " ").capitalize())
        self.code = code

    @property
    def message(self) -> str:
        return str(self)


class DocumentIOError(Exception):
    """Reading or writing a document file failed; carries the OS error text."""

    def __init__(self, message: str, path: Optional[str] = None, errno: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.errno = errno

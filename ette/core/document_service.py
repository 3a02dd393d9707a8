from __future__ import annotations

import logging
import os
from typing import Callable, Optional, TYPE_CHECKING, Union

from ..editor.document import Document
from ..editor.syntax import Highlight, SyntaxProfile
from .errors import DocumentIOError
from .format_config import CryptoAlgorithm

if TYPE_CHECKING:
    from .encrypt import CryptoResult

logger = logging.getLogger(__name__)

Passphrase = Union[str, bytes, bytearray]


class DocumentService:
    """Turns bytes into documents and back, optionally through the
    encrypted container format."""

    def __init__(self):
        self._encrypt: Optional[Callable[..., "CryptoResult"]] = None
        self._decrypt: Optional[Callable[..., "CryptoResult"]] = None
        self._is_key_correct: Optional[Callable[..., bool]] = None

    def _ensure_encrypt_api(self) -> None:
        if self._encrypt is not None and self._decrypt is not None and self._is_key_correct is not None:
            return
        from .encrypt import decrypt, encrypt, is_key_correct

        self._encrypt = encrypt
        self._decrypt = decrypt
        self._is_key_correct = is_key_correct

    def encrypt(
        self,
        plaintext: bytes,
        password: Optional[Passphrase],
        iv: Optional[bytes] = None,
        algorithm: CryptoAlgorithm = CryptoAlgorithm.AES256_CBC,
    ) -> "CryptoResult":
        self._ensure_encrypt_api()
        assert self._encrypt is not None
        return self._encrypt(plaintext, password, iv=iv, algorithm=algorithm)

    def decrypt(self, container: bytes, password: Optional[Passphrase]) -> "CryptoResult":
        self._ensure_encrypt_api()
        assert self._decrypt is not None
        return self._decrypt(container, password)

    def is_key_correct(self, password: Optional[Passphrase], path: str) -> bool:
        self._ensure_encrypt_api()
        assert self._is_key_correct is not None
        return self._is_key_correct(password, path)

    def open_plain(self, data: bytes, syntax: Optional[SyntaxProfile] = None) -> Document:
        return Document.from_flat_text(data, syntax=syntax)

    def open_encrypted(
        self,
        data: bytes,
        password: Optional[Passphrase],
        syntax: Optional[SyntaxProfile] = None,
    ) -> Document:
        """Raises CryptoError when the container cannot be decrypted."""
        plaintext = self.decrypt(data, password).unwrap()
        return Document.from_flat_text(plaintext, syntax=syntax)

    def render(self, document: Document) -> list[tuple[str, list[Highlight]]]:
        return document.render()

    def save(self, document: Document) -> bytes:
        return document.to_bytes()

    def save_encrypted(
        self,
        document: Document,
        password: Optional[Passphrase],
        iv: Optional[bytes] = None,
        algorithm: CryptoAlgorithm = CryptoAlgorithm.AES256_CBC,
    ) -> bytes:
        """Raises CryptoError when encryption fails."""
        return self.encrypt(document.to_bytes(), password, iv=iv, algorithm=algorithm).unwrap()

    def read_file(self, path: str) -> Optional[bytes]:
        """Whole-file read. Returns None when the file does not exist yet."""
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise DocumentIOError(f"Can't open! I/O error: {e.strerror}", path, e.errno) from e

    def write_file(self, path: str, data: bytes) -> int:
        """Truncate and write ``data`` with a single write call.

        A failure part way leaves the file in whatever state the OS left it.
        """
        try:
            fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
        except OSError as e:
            raise DocumentIOError(f"Can't save! I/O error: {e.strerror}", path, e.errno) from e

        try:
            os.ftruncate(fd, len(data))
            written = os.write(fd, data)
        except OSError as e:
            raise DocumentIOError(f"Can't save! I/O error: {e.strerror}", path, e.errno) from e
        finally:
            os.close(fd)

        if written != len(data):
            raise DocumentIOError(f"Can't save! Short write ({written} of {len(data)} bytes)", path)
        return written

from __future__ import annotations

import logging
import os
from time import monotonic
from typing import Optional, Union

from ..editor.syntax import select_syntax
from ..utils.preferences import EttePreferences, Preferences
from .document_service import DocumentService
from .errors import CryptoError, DocumentIOError, ValidationError
from .format_config import ENCRYPTED_EXTENSION, CryptoAlgorithm, algorithm_from_filename
from .header import decode_header
from .session_state import EditorState

logger = logging.getLogger(__name__)

Passphrase = Union[str, bytes, bytearray]


def syntax_filename(path: str) -> str:
    """Name used for syntax selection: ``notes.c.aes256cbc`` highlights as C."""
    base = os.path.basename(path)
    if base.endswith(ENCRYPTED_EXTENSION):
        return base[: -len(ENCRYPTED_EXTENSION)]
    return base


class FileWorkflowController:
    """Open/save flows for one EditorState.

    Failures are logged and reported through the state's status message;
    the methods return False instead of raising.
    """

    def __init__(
        self,
        host: EditorState,
        document_service: Optional[DocumentService] = None,
        preferences: Optional[Preferences] = None,
    ):
        self.host = host
        self.document_service = document_service or DocumentService()
        self.preferences = preferences or EttePreferences

    def validate_file_path(self, path: str) -> bool:
        if not path:
            raise ValidationError("File path cannot be empty")
        if not isinstance(path, str):
            raise ValidationError("File path must be a string")
        if os.path.isdir(path):
            raise ValidationError("Path points to a directory, expected a file")
        return True

    def validate_password(self, password: Optional[Passphrase]) -> bool:
        if not password:
            raise ValidationError("Password cannot be empty")
        return True

    def prepare_encryption(
        self,
        path: str,
        password: Optional[Passphrase],
        confirm_password: Optional[Passphrase] = None,
    ) -> bool:
        """Decide whether ``path`` is encrypted and accept a password for it.

        An existing container must decrypt with ``password``. A new file needs
        the password entered twice.
        """
        algorithm = algorithm_from_filename(path)
        self.host.crypto_algorithm = algorithm
        if algorithm == CryptoAlgorithm.NONE:
            return True

        try:
            self.validate_password(password)
        except ValidationError as e:
            self.host.set_status_message(str(e))
            return False

        if os.path.exists(path):
            if not self.document_service.is_key_correct(password, path):
                logger.info("Password rejected for %s", path)
                self.host.set_status_message("Incorrect password. Try again.")
                return False
            self.host.set_password(password)
            self.host.set_status_message("Password correct.")
            return True

        if confirm_password is None or password != confirm_password:
            self.host.set_status_message("Password mismatch. Confirm password.")
            return False
        self.host.crypto_algorithm = self.preferences.crypto_algorithm
        self.host.set_password(password)
        return True

    def open_file(self, path: str) -> bool:
        timing_start = monotonic()
        last_tick = timing_start
        stage_timings_ms: list[tuple[str, float]] = []

        def _mark(stage: str) -> None:
            nonlocal last_tick
            now = monotonic()
            stage_timings_ms.append((stage, (now - last_tick) * 1000.0))
            last_tick = now

        try:
            self.validate_file_path(path)
            self.host.filename = path
            syntax = select_syntax(syntax_filename(path)) if self.preferences.syntax_highlighting else None

            data = self.document_service.read_file(path)
            _mark("read")
            if data is None:
                self.host.document = self.document_service.open_plain(b"", syntax=syntax)
                self.host.set_status_message("New file: %s", os.path.basename(path))
                return True

            if self.host.is_encrypted and data:
                password = self.host.get_password_bytes()
                try:
                    self.host.crypto_algorithm = decode_header(data).algorithm
                    document = self.document_service.open_encrypted(data, password, syntax=syntax)
                finally:
                    if password is not None:
                        password[:] = bytes(len(password))
                _mark("decrypt")
            else:
                document = self.document_service.open_plain(data, syntax=syntax)
            _mark("load")

            self.host.document = document
            logger.info("Opened %s (%d rows)", path, len(document))
            return True

        except ValidationError as e:
            self.host.set_status_message("Validation error: %s", e)
        except CryptoError as e:
            logger.warning("Could not decrypt %s: %s", path, e)
            self.host.set_status_message("Could not decrypt file: %s", e)
        except DocumentIOError as e:
            logger.error("Open failed for %s: %s", path, e)
            self.host.set_status_message(str(e))
        finally:
            total_ms = (monotonic() - timing_start) * 1000.0
            if stage_timings_ms:
                breakdown = ", ".join(f"{name}={ms:.1f}ms" for name, ms in stage_timings_ms)
                logger.info("Open file timing: total=%.1fms | %s", total_ms, breakdown)
        return False

    def save_file(self) -> bool:
        path = self.host.filename
        try:
            if not path:
                raise ValidationError("No file name to save to")
            document = self.host.document

            if self.host.is_encrypted:
                password = self.host.get_password_bytes()
                try:
                    data = self.document_service.save_encrypted(
                        document, password, algorithm=self.host.crypto_algorithm
                    )
                finally:
                    if password is not None:
                        password[:] = bytes(len(password))
            else:
                data = self.document_service.save(document)

            written = self.document_service.write_file(path, data)
            document.dirty = 0
            self.host.set_status_message("%d bytes written on disk", written)
            logger.info("Saved %d bytes to %s", written, path)
            return True

        except ValidationError as e:
            self.host.set_status_message("Validation error: %s", e)
        except CryptoError as e:
            logger.error("Encryption failed for %s: %s", path, e)
            self.host.set_status_message("ERROR! Failed to encrypt")
        except DocumentIOError as e:
            logger.error("Save failed for %s: %s", path, e)
            self.host.set_status_message(str(e))
        return False

from __future__ import annotations

import os
from collections import deque
from dataclasses import dataclass
from time import monotonic
from typing import Optional, Union

from ..editor.document import Document
from .format_config import CryptoAlgorithm


@dataclass(frozen=True)
class ResizeEvent:
    rows: int
    cols: int


class EditorState:
    """Everything one editing session owns, passed explicitly to the
    operations that need it."""

    def __init__(self, status_message_seconds: int = 5):
        self.document = Document()
        self.filename: Optional[str] = None
        self.crypto_algorithm = CryptoAlgorithm.NONE
        self.cached_password: Optional[bytearray] = None
        self._secret_mask = os.urandom(32)
        self.status_message = ""
        self.status_message_time: Optional[float] = None
        self.status_message_seconds = status_message_seconds
        self.events: deque[ResizeEvent] = deque()

    @property
    def dirty(self) -> int:
        return self.document.dirty

    @property
    def is_encrypted(self) -> bool:
        return self.crypto_algorithm != CryptoAlgorithm.NONE

    def _xor_with_mask(self, data: Union[bytes, bytearray]) -> bytearray:
        mask = self._secret_mask
        return bytearray(b ^ mask[i % len(mask)] for i, b in enumerate(bytes(data)))

    def set_password(self, password: Union[str, bytes, bytearray]) -> None:
        if isinstance(password, str):
            password = password.encode("utf-8")
        self.cached_password = self._xor_with_mask(password)

    def get_password_bytes(self) -> Optional[bytearray]:
        if self.cached_password is None:
            return None
        return self._xor_with_mask(self.cached_password)

    def has_password(self) -> bool:
        return bool(self.cached_password)

    def clear_password(self) -> None:
        if self.cached_password is not None:
            for i in range(len(self.cached_password)):
                self.cached_password[i] = 0
        self.cached_password = None

    def set_status_message(self, fmt: str, *args) -> None:
        self.status_message = fmt % args if args else fmt
        self.status_message_time = monotonic()

    def current_status_message(self, now: Optional[float] = None) -> str:
        if not self.status_message or self.status_message_time is None:
            return ""
        now = monotonic() if now is None else now
        if now - self.status_message_time >= self.status_message_seconds:
            return ""
        return self.status_message

    def post_resize(self, rows: int, cols: int) -> None:
        self.events.append(ResizeEvent(rows=rows, cols=cols))

    def drain_events(self) -> list[ResizeEvent]:
        events = list(self.events)
        self.events.clear()
        return events

    def reset_document(self) -> None:
        self.document = Document(syntax=self.document.syntax)

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .row import Row
from .syntax import Highlight, SyntaxProfile, highlight_all, update_row, update_syntax

logger = logging.getLogger(__name__)

TEXT_ENCODING = "utf-8"
# Undecodable bytes survive a load/save cycle unchanged.
TEXT_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class SearchMatch:
    row_index: int
    offset: int


class Document:
    """Ordered rows of an open file.

    Out-of-range edits are ignored (or padded, for ``insert_char``) rather
    than raising, which suits cursor-driven editing.
    """

    def __init__(self, syntax: Optional[SyntaxProfile] = None):
        self.rows: list[Row] = []
        self.syntax = syntax
        self.dirty = 0

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def lines(self) -> list[str]:
        return [row.chars for row in self.rows]

    def set_syntax(self, syntax: Optional[SyntaxProfile]) -> None:
        self.syntax = syntax
        highlight_all(self.rows, syntax)

    def _renumber(self, start: int) -> None:
        for j in range(start, len(self.rows)):
            self.rows[j].index = j

    def _update_row(self, index: int) -> None:
        update_row(self.rows, index, self.syntax)

    # Row level operations

    def insert_row(self, at: int, content: str = "") -> Optional[Row]:
        if not 0 <= at <= len(self.rows):
            return None
        # Seed with the state the row below used to inherit so a cascade only
        # starts when the new row actually changes it.
        inherited = self.rows[at - 1].hl_open_comment if at > 0 else False
        row = Row(index=at, chars=content, hl_open_comment=inherited)
        self.rows.insert(at, row)
        self._renumber(at + 1)
        self._update_row(at)
        self.dirty += 1
        return row

    def delete_row(self, at: int) -> None:
        if not 0 <= at < len(self.rows):
            return
        del self.rows[at]
        self._renumber(at)
        if at < len(self.rows):
            update_syntax(self.rows, at, self.syntax)
        self.dirty += 1

    def insert_char(self, row_index: int, column: int, c: str) -> None:
        """Insert ``c`` at ``column``, padding the row with spaces when the
        column lies past its end. Missing rows up to ``row_index`` are added."""
        if row_index < 0 or column < 0:
            return
        while len(self.rows) <= row_index:
            self.insert_row(len(self.rows), "")

        row = self.rows[row_index]
        if column > len(row.chars):
            row.chars = row.chars + " " * (column - len(row.chars)) + c
        else:
            row.chars = row.chars[:column] + c + row.chars[column:]
        self._update_row(row_index)
        self.dirty += 1

    def insert_string(self, row_index: int, column: int, text: str) -> int:
        """Insert ``text`` character by character; returns the column after it."""
        for c in text:
            self.insert_char(row_index, column, c)
            column += 1
        return column

    def delete_char(self, row_index: int, column: int) -> None:
        if not 0 <= row_index < len(self.rows):
            return
        row = self.rows[row_index]
        if not 0 <= column < len(row.chars):
            return
        row.chars = row.chars[:column] + row.chars[column + 1:]
        self._update_row(row_index)
        self.dirty += 1

    def append_string(self, row_index: int, text: str) -> None:
        if not 0 <= row_index < len(self.rows):
            return
        self.rows[row_index].chars += text
        self._update_row(row_index)
        self.dirty += 1

    def split_row(self, row_index: int, column: int) -> Optional[int]:
        """Insert a line break at ``column`` of ``row_index``.

        Returns the index of the row the cursor moves to (the one below the
        break), or None when ``row_index`` is out of range.
        """
        if row_index == len(self.rows):
            self.insert_row(row_index, "")
            return row_index + 1
        if not 0 <= row_index < len(self.rows):
            return None

        row = self.rows[row_index]
        column = max(0, min(column, len(row.chars)))
        if column == 0:
            self.insert_row(row_index, "")
        else:
            tail = row.chars[column:]
            row.chars = row.chars[:column]
            self._update_row(row_index)
            self.insert_row(row_index + 1, tail)
        return row_index + 1

    def join_with_previous(self, row_index: int) -> Optional[int]:
        """Backspace at column 0: move the row onto the end of the previous one.

        Returns the cursor column, the previous row's former length.
        """
        if not 1 <= row_index < len(self.rows):
            return None
        column = len(self.rows[row_index - 1].chars)
        self.append_string(row_index - 1, self.rows[row_index].chars)
        self.delete_row(row_index)
        return column

    # Serialization

    def to_flat_text(self) -> str:
        return "".join(row.chars + "\n" for row in self.rows)

    def to_bytes(self) -> bytes:
        return self.to_flat_text().encode(TEXT_ENCODING, TEXT_ERRORS)

    def load_flat_text(self, text: Union[str, bytes]) -> None:
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode(TEXT_ENCODING, TEXT_ERRORS)

        lines = text.split("\n") if text else []
        if lines and lines[-1] == "":
            lines.pop()

        self.rows = []
        for index, line in enumerate(lines):
            if line.endswith("\r"):
                line = line[:-1]
            self.rows.append(Row(index=index, chars=line))
        highlight_all(self.rows, self.syntax)
        self.dirty = 0
        logger.debug("Loaded %d rows", len(self.rows))

    @classmethod
    def from_flat_text(cls, text: Union[str, bytes], syntax: Optional[SyntaxProfile] = None) -> "Document":
        document = cls(syntax=syntax)
        document.load_flat_text(text)
        return document

    def render(self) -> list[tuple[str, list[Highlight]]]:
        return [(row.render, list(row.hl)) for row in self.rows]

    # Search

    def find(self, query: str, last_match: int = -1, direction: int = 1) -> Optional[SearchMatch]:
        """Search the rendered rows for ``query``, starting after
        ``last_match`` and wrapping around the document."""
        if not query or not self.rows:
            return None
        step = -1 if direction < 0 and last_match != -1 else 1
        current = last_match
        for _ in range(len(self.rows)):
            current = (current + step) % len(self.rows)
            offset = self.rows[current].render.find(query)
            if offset != -1:
                return SearchMatch(row_index=current, offset=offset)
        return None

    def highlight_match(self, match: SearchMatch, length: int) -> list[Highlight]:
        """Mark a search hit; returns the previous highlight for restore_highlight()."""
        row = self.rows[match.row_index]
        saved = list(row.hl)
        end = min(match.offset + length, len(row.hl))
        row.hl[match.offset:end] = [Highlight.MATCH] * (end - match.offset)
        return saved

    def restore_highlight(self, row_index: int, saved: list[Highlight]) -> None:
        if 0 <= row_index < len(self.rows) and len(saved) == len(self.rows[row_index].render):
            self.rows[row_index].hl = list(saved)

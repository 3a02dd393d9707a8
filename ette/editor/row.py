from __future__ import annotations

from dataclasses import dataclass, field

from .syntax import Highlight


@dataclass(eq=False)
class Row:
    """A single line of the document.

    ``render`` is ``chars`` with tabs expanded; ``hl`` holds one highlight tag
    per rendered character. ``hl_open_comment`` records whether the row ended
    inside a multi-line comment the last time it was highlighted.
    """

    index: int
    chars: str = ""
    render: str = ""
    hl: list[Highlight] = field(default_factory=list)
    hl_open_comment: bool = False

    def __len__(self) -> int:
        return len(self.chars)

    def __repr__(self) -> str:
        return f"Row(index={self.index}, chars={self.chars!r})"

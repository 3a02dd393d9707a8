"""
Syntax highlighting for document rows.

Each row gets a ``render`` string (tabs expanded) and a parallel list of
:class:`Highlight` tags. Multi-line comment state flows from one row into the
next; when a row's ending state changes the rows below it are re-highlighted
through a work list until the state settles.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from .row import Row

logger = logging.getLogger(__name__)

TAB_STOP = 8
SEPARATORS = ",.()+-/*=~%[];"
DIGITS = "0123456789"

HIGHLIGHT_STRINGS = 1 << 0
HIGHLIGHT_NUMBERS = 1 << 1


class Highlight(IntEnum):
    NORMAL = 0
    NONPRINT = 1
    COMMENT = 2
    MLCOMMENT = 3
    KEYWORD1 = 4
    KEYWORD2 = 5
    STRING = 6
    NUMBER = 7
    MATCH = 8


@dataclass(frozen=True)
class SyntaxProfile:
    """Keywords and comment markers for one language.

    A keyword ending in ``|`` is highlighted as ``KEYWORD2`` (types),
    everything else as ``KEYWORD1``.
    """

    name: str
    filematch: tuple[str, ...]
    keywords: tuple[str, ...]
    singleline_comment_start: str = "//"
    multiline_comment_start: str = "/*"
    multiline_comment_end: str = "*/"
    flags: int = HIGHLIGHT_STRINGS | HIGHLIGHT_NUMBERS
    _table: tuple[tuple[str, Highlight], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        table = []
        for keyword in self.keywords:
            if keyword.endswith("|"):
                table.append((keyword[:-1], Highlight.KEYWORD2))
            else:
                table.append((keyword, Highlight.KEYWORD1))
        # Longest first so the greediest keyword wins.
        table.sort(key=lambda entry: len(entry[0]), reverse=True)
        object.__setattr__(self, "_table", tuple(table))

    @property
    def keyword_table(self) -> tuple[tuple[str, Highlight], ...]:
        return self._table


C_PROFILE = SyntaxProfile(
    name="c",
    filematch=(".c", ".h", ".cpp", ".hpp", ".cc"),
    keywords=(
        # C keywords
        "auto", "break", "case", "continue", "default", "do", "else", "enum",
        "extern", "for", "goto", "if", "register", "return", "sizeof", "static",
        "struct", "switch", "typedef", "union", "volatile", "while", "NULL",
        # C++ keywords
        "alignas", "alignof", "and", "and_eq", "asm", "bitand", "bitor", "class",
        "compl", "constexpr", "const_cast", "decltype", "delete", "dynamic_cast",
        "explicit", "export", "false", "friend", "inline", "mutable", "namespace",
        "new", "noexcept", "not", "not_eq", "nullptr", "operator", "or", "or_eq",
        "private", "protected", "public", "reinterpret_cast", "static_assert",
        "static_cast", "template", "this", "thread_local", "throw", "true", "try",
        "typeid", "typename", "virtual", "xor", "xor_eq",
        # C types
        "int|", "long|", "double|", "float|", "char|", "unsigned|", "signed|",
        "void|", "short|", "auto|", "const|", "bool|",
    ),
)

PYTHON_PROFILE = SyntaxProfile(
    name="python",
    filematch=(".py",),
    keywords=(
        "and", "as", "assert", "async", "await", "break", "class", "continue",
        "def", "del", "elif", "else", "except", "finally", "for", "from",
        "global", "if", "import", "in", "is", "lambda", "nonlocal", "not", "or",
        "pass", "raise", "return", "try", "while", "with", "yield",
        "None|", "True|", "False|", "self|", "int|", "str|", "bytes|", "float|",
        "bool|", "list|", "dict|", "tuple|", "set|",
    ),
    singleline_comment_start="#",
    multiline_comment_start="",
    multiline_comment_end="",
)

SYNTAX_DATABASE: tuple[SyntaxProfile, ...] = (C_PROFILE, PYTHON_PROFILE)


def is_separator(c: str) -> bool:
    return c == "" or c == "\0" or c.isspace() or c in SEPARATORS


def select_syntax(filename: Optional[str]) -> Optional[SyntaxProfile]:
    """Pick a profile for ``filename``; extensions must match at the end."""
    if not filename:
        return None
    for profile in SYNTAX_DATABASE:
        for pattern in profile.filematch:
            if pattern.startswith("."):
                if filename.endswith(pattern):
                    return profile
            elif pattern in filename:
                return profile
    return None


def render_chars(chars: str) -> str:
    out = []
    idx = 0
    for c in chars:
        if c == "\t":
            out.append(" ")
            idx += 1
            while (idx + 1) % TAB_STOP != 0:
                out.append(" ")
                idx += 1
        else:
            out.append(c)
            idx += 1
    return "".join(out)


def row_has_open_comment(row: "Row", profile: Optional[SyntaxProfile]) -> bool:
    """True when the row's last character is inside a multi-line comment
    that is not closed at the end of the row."""
    if profile is None or not profile.multiline_comment_end:
        return False
    if not row.hl or row.hl[-1] != Highlight.MLCOMMENT:
        return False
    end = profile.multiline_comment_end
    return len(row.render) < len(end) or not row.render.endswith(end)


def highlight_row(row: "Row", in_comment: bool, profile: Optional[SyntaxProfile]) -> bool:
    """Recompute ``row.hl`` starting in the given comment state.

    Returns whether the row ends inside an open multi-line comment.
    """
    render = row.render
    n = len(render)
    hl = [Highlight.NORMAL] * n
    row.hl = hl

    if profile is None or n == 0:
        return False

    scs = profile.singleline_comment_start
    mcs = profile.multiline_comment_start
    mce = profile.multiline_comment_end
    strings = profile.flags & HIGHLIGHT_STRINGS
    numbers = profile.flags & HIGHLIGHT_NUMBERS
    keywords = profile.keyword_table

    prev_sep = True
    in_string = ""
    i = 0
    while i < n:
        c = render[i]

        if scs and prev_sep and not in_comment and not in_string and render.startswith(scs, i):
            hl[i:] = [Highlight.COMMENT] * (n - i)
            break

        if in_comment:
            if mce and render.startswith(mce, i):
                hl[i:i + len(mce)] = [Highlight.MLCOMMENT] * len(mce)
                i += len(mce)
                in_comment = False
                prev_sep = True
            else:
                hl[i] = Highlight.MLCOMMENT
                i += 1
                prev_sep = False
            continue
        if mcs and not in_string and render.startswith(mcs, i):
            hl[i:i + len(mcs)] = [Highlight.MLCOMMENT] * len(mcs)
            i += len(mcs)
            in_comment = True
            prev_sep = False
            continue

        if strings:
            if in_string:
                hl[i] = Highlight.STRING
                if c == "\\" and i + 1 < n:
                    hl[i + 1] = Highlight.STRING
                    i += 2
                    prev_sep = False
                    continue
                if c == in_string:
                    in_string = ""
                i += 1
                continue
            if c == '"' or c == "'":
                in_string = c
                hl[i] = Highlight.STRING
                i += 1
                prev_sep = False
                continue

        if not c.isprintable():
            hl[i] = Highlight.NONPRINT
            i += 1
            prev_sep = False
            continue

        if numbers and (
            (c in DIGITS and (prev_sep or (i > 0 and hl[i - 1] == Highlight.NUMBER)))
            or (c == "." and i > 0 and hl[i - 1] == Highlight.NUMBER)
        ):
            hl[i] = Highlight.NUMBER
            i += 1
            prev_sep = False
            continue

        if prev_sep:
            matched = False
            for keyword, kind in keywords:
                end = i + len(keyword)
                if render.startswith(keyword, i) and is_separator(render[end:end + 1]):
                    hl[i:end] = [kind] * len(keyword)
                    i = end
                    matched = True
                    break
            if matched:
                prev_sep = False
                continue

        prev_sep = is_separator(c)
        i += 1

    return row_has_open_comment(row, profile)


def update_syntax(rows: Sequence["Row"], index: int, profile: Optional[SyntaxProfile]) -> int:
    """Re-highlight ``rows[index]`` and every following row whose starting
    comment state changed as a result.

    Returns the number of rows that were highlighted.
    """
    pending = deque([index])
    visited = 0
    while pending:
        i = pending.popleft()
        if not 0 <= i < len(rows):
            continue
        row = rows[i]
        in_comment = i > 0 and rows[i - 1].hl_open_comment
        open_comment = highlight_row(row, in_comment, profile)
        visited += 1
        if open_comment != row.hl_open_comment:
            row.hl_open_comment = open_comment
            if i + 1 < len(rows):
                pending.append(i + 1)
    if visited > 1:
        logger.debug("Highlight change at row %d cascaded through %d rows", index, visited)
    return visited


def update_row(rows: Sequence["Row"], index: int, profile: Optional[SyntaxProfile]) -> None:
    """Refresh the rendered text and highlighting of ``rows[index]``."""
    row = rows[index]
    row.render = render_chars(row.chars)
    update_syntax(rows, index, profile)


def highlight_all(rows: Sequence["Row"], profile: Optional[SyntaxProfile]) -> None:
    in_comment = False
    for row in rows:
        row.render = render_chars(row.chars)
        row.hl_open_comment = highlight_row(row, in_comment, profile)
        in_comment = row.hl_open_comment


def syntax_to_color(hl: int) -> int:
    """Map a highlight tag to an ANSI foreground color code."""
    if hl in (Highlight.COMMENT, Highlight.MLCOMMENT):
        return 36  # cyan
    if hl == Highlight.KEYWORD1:
        return 33  # yellow
    if hl == Highlight.KEYWORD2:
        return 32  # green
    if hl == Highlight.STRING:
        return 35  # magenta
    if hl == Highlight.NUMBER:
        return 31  # red
    if hl == Highlight.MATCH:
        return 34  # blue
    return 37  # white


def colorize_row(row: "Row") -> str:
    out = []
    current_color = None
    for c, hl in zip(row.render, row.hl):
        if hl == Highlight.NONPRINT:
            sym = chr(ord("@") + ord(c)) if ord(c) <= 26 else "?"
            out.append("\x1b[7m" + sym + "\x1b[0m")
        elif hl == Highlight.NORMAL:
            if current_color is not None:
                out.append("\x1b[39m")
                current_color = None
            out.append(c)
        else:
            color = syntax_to_color(hl)
            if color != current_color:
                out.append(f"\x1b[{color}m")
                current_color = color
            out.append(c)
    out.append("\x1b[39m")
    return "".join(out)

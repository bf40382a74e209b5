"""Editable single-line text buffer with cursor position tracking."""

from __future__ import annotations

from lash.tui.utils import first_grapheme_length, last_grapheme_length


class LineBuffer:
    """The in-progress command text and the cursor position within it.

    ``cursor`` is a string index with ``0 <= cursor <= len(text)`` after
    every operation. Movement and deletion step over whole grapheme
    clusters, so a combining sequence or emoji is never split.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._cursor = len(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._text)

    def insert(self, ch: str) -> None:
        """Insert *ch* at the cursor and advance past it."""
        self._text = self._text[: self._cursor] + ch + self._text[self._cursor :]
        self._cursor += len(ch)

    def delete_before(self) -> bool:
        """Delete the character left of the cursor. Returns whether anything changed."""
        if self._cursor == 0:
            return False
        width = last_grapheme_length(self._text[: self._cursor])
        self._text = self._text[: self._cursor - width] + self._text[self._cursor :]
        self._cursor -= width
        return True

    def delete_at(self) -> bool:
        """Delete the character under the cursor without moving it."""
        if self._cursor >= len(self._text):
            return False
        width = first_grapheme_length(self._text[self._cursor :])
        self._text = self._text[: self._cursor] + self._text[self._cursor + width :]
        return True

    def move_left(self) -> bool:
        if self._cursor == 0:
            return False
        self._cursor -= last_grapheme_length(self._text[: self._cursor])
        return True

    def move_right(self) -> bool:
        if self._cursor >= len(self._text):
            return False
        self._cursor += first_grapheme_length(self._text[self._cursor :])
        return True

    def replace_from(self, pos: int, text: str) -> None:
        """Replace everything from *pos* to the end with *text*; cursor to end."""
        pos = max(0, min(pos, len(self._text)))
        self._text = self._text[:pos] + text
        self._cursor = len(self._text)

    def set_text(self, text: str) -> None:
        """Replace buffer content and move cursor to end."""
        self._text = text
        self._cursor = len(text)

"""Differential single-line renderer.

Keeps track of what is currently on screen after the prompt and, given the
new ``(text, cursor)`` pair, emits the shortest sequence of writes and
relative cursor moves that makes the screen match. Positions are computed
from display columns (``visible_width``) of ``prompt + text`` and the
terminal width, so a line that wraps onto several rows keeps the cursor
aligned and is erased completely on redraw.
"""

from __future__ import annotations

from collections.abc import Sequence

from lash.tui.terminal import Terminal
from lash.tui.utils import graphemes, visible_width

_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"
_CURSOR_LEFT_FMT = "\x1b[{}D"
_CURSOR_RIGHT_FMT = "\x1b[{}C"
_ERASE_BELOW = "\x1b[J"
_NEWLINE = "\r\n"

# (row, column) relative to the row the prompt starts on
Position = tuple[int, int]


def _move(start: Position, end: Position) -> str:
    (from_row, from_col), (to_row, to_col) = start, end
    out = ""
    if to_row < from_row:
        out += _CURSOR_UP_FMT.format(from_row - to_row)
    elif to_row > from_row:
        out += _CURSOR_DOWN_FMT.format(to_row - from_row)
    if to_col < from_col:
        out += _CURSOR_LEFT_FMT.format(from_col - to_col)
    elif to_col > from_col:
        out += _CURSOR_RIGHT_FMT.format(to_col - from_col)
    return out


def common_prefix_length(a: str, b: str) -> int:
    """Length of the longest common prefix of *a* and *b*, on a grapheme boundary."""
    limit = min(len(a), len(b))
    n = 0
    while n < limit and a[n] == b[n]:
        n += 1
    if n == 0 or (a.isascii() and b.isascii()):
        return n

    boundary = 0
    for cluster in graphemes(b):
        if boundary + len(cluster) > n:
            break
        boundary += len(cluster)
    return boundary


class LineRenderer:
    """Renders one editable line after a prompt.

    The renderer assumes the terminal cursor is where it last left it; every
    public method leaves the terminal cursor on the cell of the logical
    cursor. When output ends exactly on the right margin a ``\\r\\n`` is
    written so the terminal cursor really is at the start of the next row
    rather than in the pending-wrap state.
    """

    def __init__(
        self,
        terminal: Terminal,
        prompt: str = "$ ",
        *,
        candidate_separator: str = "    ",
    ) -> None:
        self._terminal = terminal
        self.prompt = prompt
        self.candidate_separator = candidate_separator
        self._text = ""
        self._cursor = 0

    def _position(self, text: str, index: int) -> Position:
        width = visible_width(self.prompt) + visible_width(text[:index])
        return divmod(width, max(1, self._terminal.columns))

    def _ends_on_margin(self, text: str) -> bool:
        width = visible_width(self.prompt) + visible_width(text)
        return width > 0 and width % max(1, self._terminal.columns) == 0

    def _wrap(self, written: str, text: str) -> str:
        return _NEWLINE if written and self._ends_on_margin(text) else ""

    def begin(self) -> None:
        """Write the prompt for a fresh, empty line."""
        self._text = ""
        self._cursor = 0
        self._terminal.write(self.prompt + self._wrap(self.prompt, ""))

    def render(self, text: str, cursor: int, *, full: bool = False) -> None:
        """Bring the screen from the displayed state to ``(text, cursor)``.

        Only the part of the line after the first difference is rewritten.
        With *full* everything after the prompt is erased and drawn again.
        """
        old_text, old_cursor = self._text, self._cursor
        old_pos = self._position(old_text, old_cursor)
        target = self._position(text, cursor)

        if not full and text == old_text:
            if cursor != old_cursor:
                self._terminal.write(_move(old_pos, target))
                self._cursor = cursor
            return

        start = 0 if full else common_prefix_length(old_text, text)
        suffix = text[start:]
        out = [_move(old_pos, self._position(text, start))]
        if full:
            out.append(_ERASE_BELOW)
        out.append(suffix)
        out.append(self._wrap(suffix, text))
        if not full and visible_width(text) < visible_width(old_text):
            out.append(_ERASE_BELOW)
        out.append(_move(self._position(text, len(text)), target))

        self._terminal.write("".join(out))
        self._text = text
        self._cursor = cursor

    def show_candidates(self, candidates: Sequence[str]) -> None:
        """List *candidates* below the line, then redraw prompt and line."""
        text, cursor = self._text, self._cursor
        end = self._position(text, len(text))
        redraw = self.prompt + text
        self._terminal.write(
            _move(self._position(text, cursor), end)
            + (_NEWLINE if end[1] else "")
            + self.candidate_separator.join(candidates)
            + _NEWLINE
            + redraw
            + self._wrap(redraw, text)
            + _move(end, self._position(text, cursor))
        )

    def finish(self) -> None:
        """Move past the end of the line and start a new terminal line."""
        end = self._position(self._text, len(self._text))
        self._terminal.write(
            _move(self._position(self._text, self._cursor), end)
            + (_NEWLINE if end[1] or not self._ends_on_margin(self._text) else "")
        )
        self._text = ""
        self._cursor = 0

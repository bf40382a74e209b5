"""Line editor: the raw-key input loop that produces one finished command line.

``LineEditor.read_line`` takes the terminal into raw mode, draws the
prompt, and processes one key sequence at a time until Enter is pressed.
Each key is mapped to an editor action through the keybindings manager;
unbound printable input is inserted at the cursor, anything else is
ignored. The per-line state for history navigation (``HistoryCursor``) and
double-Tab detection (``CompletionState``) lives in explicit objects that
are recreated for every line.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from lash.tui.completion import CompletionKind, CompletionProvider, classify, word_to_complete
from lash.tui.keybindings import EditorKeybindingsConfig, EditorKeybindingsManager
from lash.tui.keys import is_printable
from lash.tui.line_buffer import LineBuffer
from lash.tui.renderer import LineRenderer
from lash.tui.terminal import Terminal

logger = logging.getLogger(__name__)


class EndOfInput(Exception):
    """The user pressed the end-of-input key (or stdin closed) mid-line."""


class TabPress(enum.Enum):
    FIRST_PRESS = "first"
    REPEAT_PRESS = "repeat"


@dataclass
class CompletionState:
    """Tracks whether the next Tab is a repeat of the previous event."""

    next_press: TabPress = TabPress.FIRST_PRESS

    def press(self) -> TabPress:
        """Record a Tab press and return which kind of press it was."""
        current = self.next_press
        self.next_press = TabPress.REPEAT_PRESS
        return current

    def reset(self) -> None:
        self.next_press = TabPress.FIRST_PRESS


@dataclass
class HistoryCursor:
    """Position within history while navigating, and the line it replaced.

    ``index`` is ``None`` when not navigating. ``backup`` is captured once
    when navigation starts and handed back when it ends.
    """

    index: int | None = None
    backup: str = ""

    @property
    def navigating(self) -> bool:
        return self.index is not None

    def previous(self, current_text: str, size: int) -> int:
        if self.index is None:
            self.backup = current_text
            self.index = size - 1
        elif self.index > 0:
            self.index -= 1
        return self.index

    def next(self, size: int) -> int | None:
        """Advance toward newer entries; ``None`` means navigation ended."""
        if self.index is None:
            return None
        if self.index < size - 1:
            self.index += 1
            return self.index
        self.index = None
        return None

    def finish(self) -> str:
        backup = self.backup
        self.index = None
        self.backup = ""
        return backup


class LineEditor:
    """Interactive single-line editor with completion and history recall."""

    def __init__(
        self,
        terminal: Terminal,
        completer: CompletionProvider,
        history: Sequence[str],
        *,
        prompt: str = "$ ",
        keybindings: EditorKeybindingsConfig | EditorKeybindingsManager | None = None,
        bell: bool = True,
        candidate_separator: str = "    ",
    ) -> None:
        self._terminal = terminal
        self._completer = completer
        self._history = history
        self._bell = bell
        if isinstance(keybindings, EditorKeybindingsManager):
            self._keybindings = keybindings
        else:
            self._keybindings = EditorKeybindingsManager(keybindings)
        self._renderer = LineRenderer(
            terminal, prompt, candidate_separator=candidate_separator
        )
        self._buffer = LineBuffer()
        self._history_cursor = HistoryCursor()
        self._completion = CompletionState()

    # -- read-only state ------------------------------------------------------

    @property
    def buffer(self) -> LineBuffer:
        return self._buffer

    @property
    def history_cursor(self) -> HistoryCursor:
        return self._history_cursor

    @property
    def completion_state(self) -> CompletionState:
        return self._completion

    # -- public API -------------------------------------------------------------

    def begin(self) -> None:
        """Start a fresh editing session and draw the prompt."""
        self._buffer = LineBuffer()
        self._history_cursor = HistoryCursor()
        self._completion = CompletionState()
        self._renderer.begin()

    def read_line(self) -> str:
        """Edit one line in raw mode and return it once Enter is pressed.

        Raises :class:`EndOfInput` when the end-of-input key is pressed or
        stdin is exhausted.
        """
        self._terminal.start()
        try:
            self.begin()
            while True:
                try:
                    data = self._terminal.read_key()
                except EOFError as exc:
                    self._renderer.finish()
                    raise EndOfInput("stdin closed") from exc
                line = self.handle_key(data)
                if line is not None:
                    return line
        finally:
            self._terminal.stop()

    def handle_key(self, data: str) -> str | None:
        """Process one key sequence. Returns the finished line on submit."""
        action = self._keybindings.resolve(data)
        if action != "complete":
            self._completion.reset()

        if action == "submit":
            return self._submit()

        if action == "deleteCharBackward":
            if self._buffer.delete_before():
                self._render()
            return None

        if action == "deleteCharForward":
            if self._buffer.delete_at():
                self._render()
            return None

        if action == "complete":
            self._complete()
            return None

        if action == "historyPrevious":
            self._history_previous()
            return None

        if action == "historyNext":
            self._history_next()
            return None

        if action == "cursorLeft":
            if self._buffer.move_left():
                self._render()
            return None

        if action == "cursorRight":
            if self._buffer.move_right():
                self._render()
            return None

        if action is None and is_printable(data):
            self._buffer.insert(data)
            self._render()
            return None

        if action == "endOfInput":
            self._renderer.finish()
            raise EndOfInput("end-of-input key pressed")

        logger.debug("ignoring unbound input %r", data)
        return None

    # -- handlers ---------------------------------------------------------------

    def _render(self, *, full: bool = False) -> None:
        self._renderer.render(self._buffer.text, self._buffer.cursor, full=full)

    def _alert(self) -> None:
        if self._bell:
            self._terminal.bell()

    def _submit(self) -> str:
        line = self._buffer.text
        self._renderer.finish()
        self._history_cursor = HistoryCursor()
        self._completion = CompletionState()
        return line

    def _complete(self) -> None:
        start, word = word_to_complete(self._buffer.text)
        candidates = self._completer.complete(word)
        press = self._completion.press()
        kind = classify(candidates)
        logger.debug("completion of %r: %s (%s)", word, kind.value, press.value)

        if press is TabPress.REPEAT_PRESS and kind is CompletionKind.AMBIGUOUS:
            self._renderer.show_candidates(candidates)
        elif kind is CompletionKind.UNIQUE:
            self._buffer.replace_from(start, candidates[0])
            self._render()
        else:
            self._alert()

    def _history_previous(self) -> None:
        size = len(self._history)
        if size == 0:
            return
        index = self._history_cursor.previous(self._buffer.text, size)
        self._buffer.set_text(self._history[index])
        self._render(full=True)

    def _history_next(self) -> None:
        if not self._history_cursor.navigating:
            return
        index = self._history_cursor.next(len(self._history))
        if index is None:
            self._buffer.set_text(self._history_cursor.finish())
        else:
            self._buffer.set_text(self._history[index])
        self._render(full=True)

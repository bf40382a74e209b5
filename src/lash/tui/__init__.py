"""lash.tui: raw-terminal line editor with completion and history recall."""

from lash.tui.completion import CompletionKind, CompletionProvider, classify, word_to_complete
from lash.tui.editor import CompletionState, EndOfInput, HistoryCursor, LineEditor, TabPress
from lash.tui.keybindings import (
    DEFAULT_EDITOR_KEYBINDINGS,
    EditorAction,
    EditorKeybindingsConfig,
    EditorKeybindingsManager,
)
from lash.tui.keys import KeyId, is_printable, matches_key, parse_key
from lash.tui.line_buffer import LineBuffer
from lash.tui.renderer import LineRenderer
from lash.tui.stdin_buffer import StdinBuffer
from lash.tui.terminal import ProcessTerminal, Terminal
from lash.tui.utils import visible_width

__all__ = [
    "DEFAULT_EDITOR_KEYBINDINGS",
    "CompletionKind",
    "CompletionProvider",
    "CompletionState",
    "EditorAction",
    "EditorKeybindingsConfig",
    "EditorKeybindingsManager",
    "EndOfInput",
    "HistoryCursor",
    "KeyId",
    "LineBuffer",
    "LineEditor",
    "LineRenderer",
    "ProcessTerminal",
    "StdinBuffer",
    "TabPress",
    "Terminal",
    "classify",
    "is_printable",
    "matches_key",
    "parse_key",
    "visible_width",
    "word_to_complete",
]

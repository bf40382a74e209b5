"""lash.shell: built-in commands, history persistence and the lash CLI."""

from lash.shell.builtins import BUILTIN_NAMES, BUILTINS, ShellContext, ShellExit, list_directory
from lash.shell.history import (
    HistoryEntry,
    HistoryError,
    HistoryStore,
    HistoryWriteError,
    InvalidHistoryFormat,
    InvalidHistoryRange,
)
from lash.shell.redirection import RedirectionDirective, RedirectMode, parse_redirection, tokenize
from lash.shell.runner import CommandRunner
from lash.shell.settings import Settings, load_settings

__all__ = [
    "BUILTINS",
    "BUILTIN_NAMES",
    "CommandRunner",
    "HistoryEntry",
    "HistoryError",
    "HistoryStore",
    "HistoryWriteError",
    "InvalidHistoryFormat",
    "InvalidHistoryRange",
    "RedirectMode",
    "RedirectionDirective",
    "Settings",
    "ShellContext",
    "ShellExit",
    "list_directory",
    "load_settings",
    "parse_redirection",
    "tokenize",
]

"""Completion provider for command names and current-directory entries."""

from __future__ import annotations

import enum
import logging
import os
from collections.abc import Callable, Iterable

from lash.tui.utils import is_whitespace_char

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."


class CompletionKind(enum.Enum):
    """How many candidates a completion query produced."""

    NONE = "none"
    UNIQUE = "unique"
    AMBIGUOUS = "ambiguous"


def classify(candidates: list[str]) -> CompletionKind:
    if not candidates:
        return CompletionKind.NONE
    if len(candidates) == 1:
        return CompletionKind.UNIQUE
    return CompletionKind.AMBIGUOUS


def word_to_complete(text: str) -> tuple[int, str]:
    """Return ``(start, word)`` for the text after the last whitespace.

    When *text* contains no whitespace the whole text is the word and
    ``start`` is 0.
    """
    for i in range(len(text) - 1, -1, -1):
        if is_whitespace_char(text[i]):
            return i + 1, text[i + 1 :]
    return 0, text


def _unique_sorted(names: Iterable[str]) -> list[str]:
    return sorted(set(names))


class CompletionProvider:
    """Two-source completion: known commands first, then directory entries.

    Both sources are returned sorted alphabetically and de-duplicated, so
    the listing shown on a double Tab does not depend on the order the
    command table or the directory listing happens to produce.

    Parameters
    ----------
    commands:
        The fixed set of command names.
    list_directory:
        Directory-listing primitive: path -> entry names. May raise
        :class:`OSError`; hidden entries are filtered here regardless.
    cwd:
        Callable returning the directory to list, evaluated per query so
        ``cd`` is picked up.
    """

    def __init__(
        self,
        commands: Iterable[str],
        list_directory: Callable[[str], Iterable[str]],
        cwd: Callable[[], str] = os.getcwd,
    ) -> None:
        self._commands = _unique_sorted(commands)
        self._list_directory = list_directory
        self._cwd = cwd

    def complete(self, prefix: str) -> list[str]:
        """Return the ordered candidates whose leading characters equal *prefix*."""
        matches = [cmd for cmd in self._commands if cmd.startswith(prefix)]
        if matches:
            return matches

        try:
            directory = self._cwd()
            entries = self._list_directory(directory)
            return _unique_sorted(
                name
                for name in entries
                if not name.startswith(HIDDEN_PREFIX) and name.startswith(prefix)
            )
        except OSError as exc:
            logger.debug("directory not accessible for completion: %s", exc)
            return []

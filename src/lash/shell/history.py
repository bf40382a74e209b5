"""Persistent command history backed by an append-only text file.

One accepted line per file line, UTF-8, newline-terminated. The file is read
once at startup and appended to on every accepted submission; the in-memory
sequence is what the editor navigates.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import overload

logger = logging.getLogger(__name__)


class HistoryError(Exception):
    """Base class for history failures reported to the user."""


class InvalidHistoryRange(HistoryError):
    """Requested entry count is below 1 or above the number of entries."""

    def __init__(self, requested: int, size: int) -> None:
        super().__init__(f"invalid range {requested} (1-{size})")
        self.requested = requested
        self.size = size


class InvalidHistoryFormat(HistoryError):
    """Requested entry count is not a whole number."""

    def __init__(self, value: str) -> None:
        super().__init__(f"{value}: numeric argument required")
        self.value = value


class HistoryWriteError(HistoryError):
    """The durable log could not be appended to."""


@dataclass(frozen=True)
class HistoryEntry:
    number: int  # 1-based position in the whole history
    line: str


class HistoryStore(Sequence[str]):
    """Ordered, append-only list of accepted lines with file persistence."""

    def __init__(self, path: str | os.PathLike[str] | None) -> None:
        self._path = Path(path) if path is not None else None
        self._entries: list[str] = []

    # --- Sequence protocol ---

    def __len__(self) -> int:
        return len(self._entries)

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[str]: ...

    def __getitem__(self, index: int | slice) -> str | Sequence[str]:
        return self._entries[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    # --- Persistence ---

    def load(self) -> None:
        """Replace in-memory history with the contents of the log file.

        Blank lines are skipped. A missing or unreadable file yields an
        empty history.
        """
        self._entries = []
        if self._path is None:
            return
        try:
            with open(self._path, encoding="utf-8", errors="replace") as f:
                for raw in f:
                    line = raw.rstrip("\r\n")
                    if line:
                        self._entries.append(line)
        except FileNotFoundError:
            logger.debug("no history file at %s", self._path)
        except OSError as exc:
            logger.warning("cannot read history file %s: %s", self._path, exc)
        else:
            logger.debug("loaded %d history entries from %s", len(self._entries), self._path)

    def append(self, line: str) -> None:
        """Record *line* in memory and in the log file.

        The in-memory append always happens; a failed file write is raised
        afterwards as :class:`HistoryWriteError`.
        """
        self._entries.append(line)
        if self._path is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
                f.flush()
        except OSError as exc:
            raise HistoryWriteError(f"cannot write history file {self._path}: {exc}") from exc

    # --- Queries ---

    def slice(self, n: int | str | None = None) -> list[HistoryEntry]:
        """Return the last *n* entries with their 1-based positions.

        *n* may be given as the raw command argument. ``None`` returns every
        entry.
        """
        size = len(self._entries)
        if n is None:
            count = size
        else:
            if isinstance(n, str):
                try:
                    count = int(n.strip())
                except ValueError:
                    raise InvalidHistoryFormat(n) from None
            else:
                count = n
            if count < 1 or count > size:
                raise InvalidHistoryRange(count, size)

        start = size - count
        return [
            HistoryEntry(number=i + 1, line=self._entries[i])
            for i in range(start, size)
        ]

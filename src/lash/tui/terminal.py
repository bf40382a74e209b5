"""Terminal abstraction for raw-mode stdin/stdout interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that switches the controlling terminal into raw mode for the
duration of one edited line and reads one framed key sequence at a time.
"""

from __future__ import annotations

import codecs
import collections
import logging
import os
import select
import sys
import termios
import tty
from typing import Protocol, TextIO

from lash.tui.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

_BELL = "\x07"


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations used by the line editor."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def read_key(self) -> str: ...

    def write(self, data: str) -> None: ...

    def bell(self) -> None: ...

    @property
    def columns(self) -> int: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal implementation backed by stdin/stdout file descriptors.

    Raw mode is entered with :func:`tty.setraw` in :meth:`start` and the
    saved attributes are restored in :meth:`stop`. Because raw mode also
    disables output post-processing, callers must write ``\\r\\n`` rather
    than ``\\n`` while the terminal is started.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        *,
        escape_timeout: float = 0.01,
    ) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._original_termios: list | None = None
        self._keys: collections.deque[str] = collections.deque()
        self._stdin_buffer = StdinBuffer(timeout=escape_timeout)
        self._stdin_buffer.on_data(self._queue_key)
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._write_log_path: str = os.environ.get("LASH_TUI_WRITE_LOG", "")

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Save the terminal attributes and enable raw mode."""
        fd = self._stdin.fileno()
        self._original_termios = termios.tcgetattr(fd)
        tty.setraw(fd)
        logger.debug("raw mode enabled on fd %d", fd)

    def stop(self) -> None:
        """Restore the terminal attributes saved by :meth:`start`.

        Keys already read but not yet consumed stay queued for the next line.
        """
        if self._original_termios is not None:
            termios.tcsetattr(
                self._stdin.fileno(), termios.TCSADRAIN, self._original_termios
            )
            self._original_termios = None
            logger.debug("terminal attributes restored")

    # -- input ----------------------------------------------------------------

    def read_key(self) -> str:
        """Block until one complete key sequence is available and return it.

        Raises :class:`EOFError` when stdin reaches end of file.
        """
        fd = self._stdin.fileno()
        while not self._keys:
            if self._stdin_buffer.pending:
                ready, _, _ = select.select([fd], [], [], self._stdin_buffer.timeout)
                if not ready:
                    self._keys.extend(self._stdin_buffer.flush())
                    continue

            raw = os.read(fd, 4096)
            if not raw:
                self._keys.extend(self._stdin_buffer.flush())
                if self._keys:
                    break
                raise EOFError("end of input")

            self._stdin_buffer.process(self._decoder.decode(raw))

        return self._keys.popleft()

    def _queue_key(self, data: str) -> None:
        self._keys.append(data)

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write data to stdout and optionally to the write log."""
        self._raw_write(data)

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError:
                logger.debug("cannot append to write log %s", self._write_log_path)

    def bell(self) -> None:
        self._raw_write(_BELL)

    def _raw_write(self, data: str) -> None:
        """Write directly to stdout, bypassing buffering."""
        try:
            self._stdout.write(data)
            self._stdout.flush()
        except OSError:
            logger.debug("write to terminal failed", exc_info=True)

"""Command dispatch: one finished line in, builtin output and a status out."""

from __future__ import annotations

import io
import logging
from typing import TextIO

from lash.shell.builtins import BUILTINS, ShellContext
from lash.shell.history import HistoryStore, HistoryWriteError
from lash.shell.redirection import (
    RedirectionDirective,
    parse_redirection,
    tokenize,
    write_output,
)

logger = logging.getLogger(__name__)

STATUS_USAGE = 2
STATUS_NOT_FOUND = 127


class CommandRunner:
    """Executes submitted lines against the builtin command table.

    ``ShellExit`` raised by ``exit`` propagates to the caller.
    """

    def __init__(self, history: HistoryStore, stdout: TextIO, stderr: TextIO) -> None:
        self.history = history
        self.stdout = stdout
        self.stderr = stderr
        self.last_status = 0

    def execute(self, line: str) -> int:
        """Run *line* and return its exit status (0 for a blank line)."""
        line = line.strip()
        if not line:
            return self.last_status

        try:
            self.history.append(line)
        except HistoryWriteError as exc:
            logger.error("%s", exc)
            self.stderr.write(f"lash: {exc}\n")

        self.last_status = self._dispatch(line)
        return self.last_status

    def _dispatch(self, line: str) -> int:
        try:
            argv, directive = parse_redirection(tokenize(line))
        except ValueError as exc:
            self.stderr.write(f"lash: {exc}\n")
            return STATUS_USAGE

        if not argv:
            return 0

        name, args = argv[0], argv[1:]
        builtin = BUILTINS.get(name)
        if builtin is None:
            self.stderr.write(f"{name}: command not found\n")
            return STATUS_NOT_FOUND

        if directive is None:
            return builtin(args, ShellContext(self.stdout, self.stderr, self.history))

        captured = io.StringIO()
        try:
            status = builtin(args, ShellContext(captured, self.stderr, self.history))
        finally:
            self._write_redirected(directive, captured.getvalue())
        return status

    def _write_redirected(self, directive: RedirectionDirective, text: str) -> None:
        try:
            write_output(directive, text)
        except OSError as exc:
            logger.error("redirection to %s failed: %s", directive.target, exc)
            self.stderr.write(f"lash: {directive.target}: {exc.strerror or exc}\n")

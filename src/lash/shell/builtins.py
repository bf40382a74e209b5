"""Built-in commands: echo, pwd, cd, ls, cat, type, history, exit."""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from lash.shell.history import HistoryStore, InvalidHistoryFormat, InvalidHistoryRange


class ShellExit(Exception):
    """Raised by ``exit`` to end the session with *code*."""

    def __init__(self, code: int = 0) -> None:
        super().__init__(code)
        self.code = code


@dataclass
class ShellContext:
    """Streams and state a builtin may use."""

    stdout: TextIO
    stderr: TextIO
    history: HistoryStore


Builtin = Callable[[list[str], ShellContext], int]


def list_directory(path: str | os.PathLike[str]) -> list[str]:
    """Return the non-hidden entry names of *path*, sorted.

    Raises :class:`OSError` if the directory cannot be read.
    """
    with os.scandir(path) as entries:
        return sorted(entry.name for entry in entries if not entry.name.startswith("."))


def _expand_home(path: str) -> str:
    if path == "~" or path.startswith("~/"):
        return str(Path.home()) + path[1:]
    return path


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_echo(argv: list[str], ctx: ShellContext) -> int:
    ctx.stdout.write(" ".join(argv) + "\n")
    return 0


def cmd_pwd(argv: list[str], ctx: ShellContext) -> int:
    try:
        cwd = os.getcwd()
    except OSError as exc:
        ctx.stderr.write(f"pwd: {exc.strerror or exc}\n")
        return 1
    ctx.stdout.write(cwd + "\n")
    return 0


def cmd_cd(argv: list[str], ctx: ShellContext) -> int:
    target = argv[0] if argv else "~"
    try:
        os.chdir(_expand_home(target))
    except FileNotFoundError:
        ctx.stderr.write(f"cd: {target}: No such file or directory\n")
        return 1
    except NotADirectoryError:
        ctx.stderr.write(f"cd: {target}: Not a directory\n")
        return 1
    except PermissionError:
        ctx.stderr.write(f"cd: {target}: Permission denied\n")
        return 1
    except OSError as exc:
        ctx.stderr.write(f"cd: {target}: {exc.strerror or exc}\n")
        return 1
    return 0


def cmd_ls(argv: list[str], ctx: ShellContext) -> int:
    target = argv[0] if argv else "."
    try:
        names = list_directory(_expand_home(target))
    except FileNotFoundError:
        ctx.stderr.write(f"ls: {target}: No such file or directory\n")
        return 1
    except NotADirectoryError:
        ctx.stdout.write(target + "\n")
        return 0
    except PermissionError:
        ctx.stderr.write(f"ls: {target}: Permission denied\n")
        return 1
    except OSError as exc:
        ctx.stderr.write(f"ls: {target}: {exc.strerror or exc}\n")
        return 1
    for name in names:
        ctx.stdout.write(name + "\n")
    return 0


def cmd_cat(argv: list[str], ctx: ShellContext) -> int:
    status = 0
    for name in argv:
        try:
            ctx.stdout.write(Path(_expand_home(name)).read_text(encoding="utf-8", errors="replace"))
        except FileNotFoundError:
            ctx.stderr.write(f"cat: {name}: No such file or directory\n")
            status = 1
        except IsADirectoryError:
            ctx.stderr.write(f"cat: {name}: Is a directory\n")
            status = 1
        except PermissionError:
            ctx.stderr.write(f"cat: {name}: Permission denied\n")
            status = 1
        except OSError as exc:
            ctx.stderr.write(f"cat: {name}: {exc.strerror or exc}\n")
            status = 1
    return status


def cmd_type(argv: list[str], ctx: ShellContext) -> int:
    status = 0
    for name in argv:
        if name in BUILTINS:
            ctx.stdout.write(f"{name} is a shell builtin\n")
            continue
        path = shutil.which(name)
        if path:
            ctx.stdout.write(f"{name} is {path}\n")
        else:
            ctx.stderr.write(f"{name}: not found\n")
            status = 1
    return status


def cmd_history(argv: list[str], ctx: ShellContext) -> int:
    try:
        entries = ctx.history.slice(argv[0] if argv else None)
    except InvalidHistoryFormat as exc:
        ctx.stderr.write(f"history: {exc.value}: numeric argument required\n")
        return 1
    except InvalidHistoryRange as exc:
        ctx.stderr.write(f"history: invalid range (1-{exc.size})\n")
        return 1
    for entry in entries:
        ctx.stdout.write(f"{entry.number}. {entry.line}\n")
    return 0


def cmd_exit(argv: list[str], ctx: ShellContext) -> int:
    if not argv:
        raise ShellExit(0)
    try:
        code = int(argv[0])
    except ValueError:
        ctx.stderr.write(f"exit: {argv[0]}: numeric argument required\n")
        raise ShellExit(2) from None
    raise ShellExit(code & 0xFF)


BUILTINS: dict[str, Builtin] = {
    "history": cmd_history,
    "cat": cmd_cat,
    "ls": cmd_ls,
    "echo": cmd_echo,
    "type": cmd_type,
    "exit": cmd_exit,
    "pwd": cmd_pwd,
    "cd": cmd_cd,
}

BUILTIN_NAMES: tuple[str, ...] = tuple(BUILTINS)

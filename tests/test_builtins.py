"""Tests for lash.shell.builtins."""

from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from lash.shell.builtins import (
    BUILTIN_NAMES,
    BUILTINS,
    ShellContext,
    ShellExit,
    cmd_cat,
    cmd_cd,
    cmd_echo,
    cmd_exit,
    cmd_history,
    cmd_ls,
    cmd_pwd,
    cmd_type,
    list_directory,
)
from lash.shell.history import HistoryStore


def make_ctx(history: list[str] | None = None) -> ShellContext:
    store = HistoryStore(None)
    for line in history or []:
        store.append(line)
    return ShellContext(io.StringIO(), io.StringIO(), store)


def out(ctx: ShellContext) -> str:
    return ctx.stdout.getvalue()  # type: ignore[attr-defined]


def err(ctx: ShellContext) -> str:
    return ctx.stderr.getvalue()  # type: ignore[attr-defined]


class TestBuiltinTable:
    def test_command_set(self) -> None:
        assert set(BUILTIN_NAMES) == {"echo", "pwd", "cd", "ls", "cat", "type", "history", "exit"}
        assert tuple(BUILTINS) == BUILTIN_NAMES


class TestListDirectory:
    def test_sorted_without_hidden(self, tmp_path: Path) -> None:
        for name in ("b.txt", "a.txt", ".hidden"):
            (tmp_path / name).write_text("", encoding="utf-8")
        (tmp_path / "src").mkdir()
        assert list_directory(tmp_path) == ["a.txt", "b.txt", "src"]

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            list_directory(tmp_path / "missing")


class TestEcho:
    def test_joins_arguments(self) -> None:
        ctx = make_ctx()
        assert cmd_echo(["hello", "world"], ctx) == 0
        assert out(ctx) == "hello world\n"

    def test_no_arguments(self) -> None:
        ctx = make_ctx()
        cmd_echo([], ctx)
        assert out(ctx) == "\n"


class TestPwdAndCd:
    def test_pwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        ctx = make_ctx()
        assert cmd_pwd([], ctx) == 0
        assert out(ctx) == os.getcwd() + "\n"

    def test_cd_relative(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "sub").mkdir()
        monkeypatch.chdir(tmp_path)
        assert cmd_cd(["sub"], make_ctx()) == 0
        assert Path.cwd() == (tmp_path / "sub").resolve()

    def test_cd_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.chdir("/")
        assert cmd_cd([], make_ctx()) == 0
        assert Path.cwd() == tmp_path.resolve()

    def test_cd_tilde_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "projects").mkdir()
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.chdir("/")
        assert cmd_cd(["~/projects"], make_ctx()) == 0
        assert Path.cwd() == (tmp_path / "projects").resolve()

    def test_cd_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        ctx = make_ctx()
        assert cmd_cd(["nowhere"], ctx) == 1
        assert err(ctx) == "cd: nowhere: No such file or directory\n"
        assert Path.cwd() == tmp_path.resolve()

    def test_cd_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "f").write_text("", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        ctx = make_ctx()
        assert cmd_cd(["f"], ctx) == 1
        assert err(ctx) == "cd: f: Not a directory\n"


class TestLs:
    def test_current_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("b", "a", ".git"):
            (tmp_path / name).write_text("", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        ctx = make_ctx()
        assert cmd_ls([], ctx) == 0
        assert out(ctx) == "a\nb\n"

    def test_explicit_path(self, tmp_path: Path) -> None:
        (tmp_path / "x").write_text("", encoding="utf-8")
        ctx = make_ctx()
        cmd_ls([str(tmp_path)], ctx)
        assert out(ctx) == "x\n"

    def test_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        ctx = make_ctx()
        assert cmd_ls(["missing"], ctx) == 1
        assert err(ctx) == "ls: missing: No such file or directory\n"

    def test_file_argument_prints_name(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "notes.txt").write_text("", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        ctx = make_ctx()
        assert cmd_ls(["notes.txt"], ctx) == 0
        assert out(ctx) == "notes.txt\n"


class TestCat:
    def test_concatenates(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "a").write_text("one\n", encoding="utf-8")
        (tmp_path / "b").write_text("two\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        ctx = make_ctx()
        assert cmd_cat(["a", "b"], ctx) == 0
        assert out(ctx) == "one\ntwo\n"

    def test_missing_file_continues(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "b").write_text("two\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        ctx = make_ctx()
        assert cmd_cat(["a", "b"], ctx) == 1
        assert out(ctx) == "two\n"
        assert err(ctx) == "cat: a: No such file or directory\n"

    def test_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "d").mkdir()
        monkeypatch.chdir(tmp_path)
        ctx = make_ctx()
        assert cmd_cat(["d"], ctx) == 1
        assert err(ctx) == "cat: d: Is a directory\n"


class TestType:
    def test_builtin(self) -> None:
        ctx = make_ctx()
        assert cmd_type(["echo"], ctx) == 0
        assert out(ctx) == "echo is a shell builtin\n"

    def test_found_on_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        tool = tmp_path / "mytool"
        tool.write_text("#!/bin/sh\n", encoding="utf-8")
        tool.chmod(0o755)
        monkeypatch.setenv("PATH", str(tmp_path))
        ctx = make_ctx()
        assert cmd_type(["mytool"], ctx) == 0
        assert out(ctx) == f"mytool is {tool}\n"

    def test_not_found(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PATH", str(tmp_path))
        ctx = make_ctx()
        assert cmd_type(["nosuchcmd"], ctx) == 1
        assert err(ctx) == "nosuchcmd: not found\n"


class TestHistoryBuiltin:
    def test_last_two(self) -> None:
        ctx = make_ctx(["pwd", "echo hi", "ls"])
        assert cmd_history(["2"], ctx) == 0
        assert out(ctx) == "2. echo hi\n3. ls\n"

    def test_all(self) -> None:
        ctx = make_ctx(["pwd", "ls"])
        cmd_history([], ctx)
        assert out(ctx) == "1. pwd\n2. ls\n"

    @pytest.mark.parametrize("arg", ["0", "4"])
    def test_invalid_range(self, arg: str) -> None:
        ctx = make_ctx(["pwd", "echo hi", "ls"])
        assert cmd_history([arg], ctx) == 1
        assert err(ctx) == "history: invalid range (1-3)\n"
        assert out(ctx) == ""

    def test_non_numeric(self) -> None:
        ctx = make_ctx(["pwd"])
        assert cmd_history(["abc"], ctx) == 1
        assert err(ctx) == "history: abc: numeric argument required\n"


class TestExit:
    def test_default_zero(self) -> None:
        with pytest.raises(ShellExit) as exc_info:
            cmd_exit([], make_ctx())
        assert exc_info.value.code == 0

    def test_explicit_code(self) -> None:
        with pytest.raises(ShellExit) as exc_info:
            cmd_exit(["3"], make_ctx())
        assert exc_info.value.code == 3

    def test_code_wraps(self) -> None:
        with pytest.raises(ShellExit) as exc_info:
            cmd_exit(["257"], make_ctx())
        assert exc_info.value.code == 1

    def test_non_numeric(self) -> None:
        ctx = make_ctx()
        with pytest.raises(ShellExit) as exc_info:
            cmd_exit(["soon"], ctx)
        assert exc_info.value.code == 2
        assert err(ctx) == "exit: soon: numeric argument required\n"


class TestOtherFilesystemErrors:
    """Errors without a dedicated message are reported with their strerror."""

    LONG_NAME = "a" * 300

    def test_cd_name_too_long(self) -> None:
        ctx = make_ctx()
        assert cmd_cd([self.LONG_NAME], ctx) == 1
        assert err(ctx) == f"cd: {self.LONG_NAME}: File name too long\n"

    def test_ls_name_too_long(self) -> None:
        ctx = make_ctx()
        assert cmd_ls([self.LONG_NAME], ctx) == 1
        assert err(ctx) == f"ls: {self.LONG_NAME}: File name too long\n"

    def test_cat_name_too_long_continues(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "b").write_text("two\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        ctx = make_ctx()
        assert cmd_cat([self.LONG_NAME, "b"], ctx) == 1
        assert err(ctx) == f"cat: {self.LONG_NAME}: File name too long\n"
        assert out(ctx) == "two\n"

    def test_pwd_in_removed_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        gone = tmp_path / "gone"
        gone.mkdir()
        monkeypatch.chdir(gone)
        gone.rmdir()
        ctx = make_ctx()
        assert cmd_pwd([], ctx) == 1
        assert err(ctx) == "pwd: No such file or directory\n"

"""Tests for lash.shell.runner.CommandRunner."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from lash.shell.builtins import ShellExit
from lash.shell.history import HistoryStore
from lash.shell.runner import STATUS_NOT_FOUND, STATUS_USAGE, CommandRunner


def make_runner(history: list[str] | None = None, path: Path | None = None) -> CommandRunner:
    store = HistoryStore(path)
    for line in history or []:
        store.append(line)
    return CommandRunner(store, io.StringIO(), io.StringIO())


def out(runner: CommandRunner) -> str:
    return runner.stdout.getvalue()  # type: ignore[attr-defined]


def err(runner: CommandRunner) -> str:
    return runner.stderr.getvalue()  # type: ignore[attr-defined]


class TestCommandRunnerDispatch:
    def test_builtin_output(self) -> None:
        runner = make_runner()
        assert runner.execute("echo hi") == 0
        assert out(runner) == "hi\n"

    def test_quoted_arguments(self) -> None:
        runner = make_runner()
        runner.execute("echo 'a   b' c")
        assert out(runner) == "a   b c\n"

    def test_unknown_command(self) -> None:
        runner = make_runner()
        assert runner.execute("frobnicate now") == STATUS_NOT_FOUND
        assert err(runner) == "frobnicate: command not found\n"
        assert runner.last_status == STATUS_NOT_FOUND

    def test_parse_error(self) -> None:
        runner = make_runner()
        assert runner.execute("echo 'open") == STATUS_USAGE
        assert err(runner).startswith("lash: ")
        assert out(runner) == ""

    def test_exit_propagates(self) -> None:
        runner = make_runner()
        with pytest.raises(ShellExit) as exc_info:
            runner.execute("exit 5")
        assert exc_info.value.code == 5

    def test_only_redirection_does_nothing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        runner = make_runner()
        assert runner.execute("> out.txt") == 0
        assert out(runner) == ""


class TestCommandRunnerHistory:
    def test_lines_recorded_stripped(self) -> None:
        runner = make_runner()
        runner.execute("  pwd  ")
        assert list(runner.history) == ["pwd"]

    def test_blank_line_ignored(self) -> None:
        runner = make_runner()
        runner.execute("nope")
        assert runner.execute("   ") == STATUS_NOT_FOUND
        assert list(runner.history) == ["nope"]

    def test_unknown_commands_are_recorded(self) -> None:
        runner = make_runner()
        runner.execute("nope")
        assert list(runner.history) == ["nope"]

    def test_history_includes_itself(self) -> None:
        runner = make_runner(["pwd", "echo hi"])
        assert runner.execute("history 2") == 0
        assert out(runner) == "2. echo hi\n3. history 2\n"

    def test_history_range_error(self) -> None:
        runner = make_runner(["pwd"])
        assert runner.execute("history 9") == 1
        assert err(runner) == "history: invalid range (1-2)\n"

    def test_history_write_failure_reported(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        runner = make_runner(path=blocker / "history.txt")
        assert runner.execute("echo still runs") == 0
        assert out(runner) == "still runs\n"
        assert err(runner).startswith("lash: cannot write history file")
        assert list(runner.history) == ["echo still runs"]


class TestCommandRunnerRedirection:
    def test_overwrite(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        runner = make_runner()
        runner.execute("echo first > out.txt")
        runner.execute("echo second > out.txt")
        assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "second\n"
        assert out(runner) == ""

    def test_append(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        runner = make_runner()
        runner.execute("echo one >> log.txt")
        runner.execute("echo two 1>> log.txt")
        assert (tmp_path / "log.txt").read_text(encoding="utf-8") == "one\ntwo\n"

    def test_stderr_not_redirected(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        runner = make_runner()
        assert runner.execute("cat missing 1> out.txt") == 1
        assert (tmp_path / "out.txt").read_text(encoding="utf-8") == ""
        assert err(runner) == "cat: missing: No such file or directory\n"

    def test_history_output_redirected(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        runner = make_runner(["pwd"])
        runner.execute("history > h.txt")
        assert (tmp_path / "h.txt").read_text(encoding="utf-8") == "1. pwd\n2. history > h.txt\n"

    def test_unwritable_target(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        runner = make_runner()
        assert runner.execute("echo hi > nodir/out.txt") == 0
        assert err(runner) == "lash: nodir/out.txt: No such file or directory\n"

    def test_missing_target(self) -> None:
        runner = make_runner()
        assert runner.execute("echo hi >") == STATUS_USAGE
        assert "syntax error" in err(runner)

    def test_exit_with_redirection_still_writes(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        runner = make_runner()
        with pytest.raises(ShellExit):
            runner.execute("exit > out.txt")
        assert (tmp_path / "out.txt").read_text(encoding="utf-8") == ""


class TestCommandRunnerFilesystemErrors:
    @pytest.mark.parametrize("command", ["cd", "ls", "cat"])
    def test_error_is_reported_not_raised(self, command: str) -> None:
        runner = make_runner()
        long_name = "a" * 300
        assert runner.execute(f"{command} {long_name}") == 1
        assert err(runner) == f"{command}: {long_name}: File name too long\n"
        assert runner.execute("echo still here") == 0
        assert out(runner) == "still here\n"

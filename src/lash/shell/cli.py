"""CLI entry point for lash. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

import click

from lash.shell.builtins import BUILTIN_NAMES, ShellExit, list_directory
from lash.shell.history import HistoryStore
from lash.shell.runner import CommandRunner
from lash.shell.settings import Settings, apply_overrides, get_config_dir, load_settings
from lash.tui.completion import CompletionProvider
from lash.tui.editor import EndOfInput, LineEditor
from lash.tui.terminal import ProcessTerminal

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Exit status when the session is aborted with the end-of-input key
STATUS_ABORTED = 1


def configure_logging(level: str, log_file: str | None) -> None:
    """Send logs to *log_file*, or only warnings and worse to stderr.

    The editor owns the terminal while a line is being typed, so verbose
    logging to stderr would corrupt the display.
    """
    numeric = getattr(logging, level.upper())
    if log_file:
        logging.basicConfig(level=numeric, format=LOG_FORMAT, filename=log_file)
    else:
        logging.basicConfig(level=max(numeric, logging.WARNING), format=LOG_FORMAT)


def run_interactive(runner: CommandRunner, history: HistoryStore, settings: Settings) -> int:
    """Prompt, edit and dispatch lines until ``exit`` or end of input."""
    completer = CompletionProvider(BUILTIN_NAMES, list_directory)
    editor = LineEditor(
        ProcessTerminal(),
        completer,
        history,
        prompt=settings.prompt,
        keybindings=settings.keybindings,
        bell=settings.bell,
        candidate_separator=settings.candidate_separator,
    )
    while True:
        try:
            line = editor.read_line()
        except EndOfInput:
            logger.info("session aborted by end of input")
            return STATUS_ABORTED
        try:
            runner.execute(line)
        except ShellExit as exc:
            return exc.code


def run_script(runner: CommandRunner, stream: TextIO) -> int:
    """Dispatch every line of *stream* without the editor."""
    for line in stream:
        try:
            runner.execute(line.rstrip("\n"))
        except ShellExit as exc:
            return exc.code
    return runner.last_status


@click.command()
@click.version_option(package_name="lash-shell", prog_name="lash")
@click.option("-c", "--command", "command", default=None, help="Run one command line and exit")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Settings directory (default: $LASH_CONFIG_DIR or ~/.lash)",
)
@click.option("--history-file", type=click.Path(dir_okay=False), default=None, help="History file path")
@click.option("--prompt", default=None, help="Prompt string")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default=None,
    help="Logging level",
)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write logs to this file")
@click.option("--no-bell", is_flag=True, default=False, help="Do not ring the bell on failed completion")
def main(command, config_dir, history_file, prompt, log_level, log_file, no_bell):
    """Interactive shell with line editing, tab completion and history."""
    config_dir = config_dir or get_config_dir()
    settings = apply_overrides(
        load_settings(config_dir),
        {
            "history_file": history_file,
            "prompt": prompt,
            "log_level": log_level,
            "log_file": log_file,
            "bell": False if no_bell else None,
        },
    )
    configure_logging(settings.log_level, settings.log_file)

    history = HistoryStore(settings.resolve_history_file(config_dir))
    history.load()
    runner = CommandRunner(history, sys.stdout, sys.stderr)

    if command is not None:
        try:
            sys.exit(runner.execute(command))
        except ShellExit as exc:
            sys.exit(exc.code)

    if not sys.stdin.isatty():
        sys.exit(run_script(runner, sys.stdin))

    sys.exit(run_interactive(runner, history, settings))


if __name__ == "__main__":
    main()

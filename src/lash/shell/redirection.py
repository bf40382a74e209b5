"""Command-line tokenizing and stdout redirection (``>``, ``>>``, ``1>``, ``1>>``)."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path

OVERWRITE_OPERATORS = frozenset({">", "1>"})
APPEND_OPERATORS = frozenset({">>", "1>>"})
REDIRECT_OPERATORS = OVERWRITE_OPERATORS | APPEND_OPERATORS

_DOUBLE_QUOTE_ESCAPES = frozenset({"\\", '"', "$", "`", "\n"})


class RedirectMode(enum.Enum):
    OVERWRITE = "w"
    APPEND = "a"


@dataclass(frozen=True)
class RedirectionDirective:
    target: Path
    mode: RedirectMode


class Token(str):
    """A word produced by :func:`tokenize`; ``operator`` marks unquoted ``>`` forms."""

    operator: bool = False


def _operator(text: str) -> Token:
    token = Token(text)
    token.operator = True
    return token


def tokenize(line: str) -> list[Token]:  # noqa: C901
    """Split *line* into words, honouring quotes and backslash escapes.

    Unquoted redirection operators become their own tokens even without
    surrounding whitespace (``echo hi>out`` -> ``echo``, ``hi``, ``>``,
    ``out``). A ``1`` written directly before ``>`` is part of the operator.
    Raises :class:`ValueError` for an unclosed quote.
    """
    tokens: list[Token] = []
    buf: list[str] = []
    quoted = False  # current word contains quoted text
    i = 0
    in_single = False
    in_double = False
    escape = False

    def flush_buf() -> None:
        nonlocal quoted
        if buf or quoted:
            tokens.append(Token("".join(buf)))
            buf.clear()
        quoted = False

    while i < len(line):
        c = line[i]

        if escape:
            buf.append(c)
            escape = False
            i += 1
            continue

        if in_single:
            if c == "'":
                in_single = False
            else:
                buf.append(c)
            i += 1
            continue

        if in_double:
            if c == '"':
                in_double = False
            elif c == "\\" and i + 1 < len(line) and line[i + 1] in _DOUBLE_QUOTE_ESCAPES:
                buf.append(line[i + 1])
                i += 1
            else:
                buf.append(c)
            i += 1
            continue

        if c == "\\":
            escape = True
            quoted = True
            i += 1
            continue

        if c.isspace():
            flush_buf()
            i += 1
            continue

        if c == "'":
            in_single = True
            quoted = True
            i += 1
            continue

        if c == '"':
            in_double = True
            quoted = True
            i += 1
            continue

        if c == ">":
            fd_prefix = "1" if buf == ["1"] and not quoted else ""
            if fd_prefix:
                buf.clear()
            else:
                flush_buf()
            op = ">>" if i + 1 < len(line) and line[i + 1] == ">" else ">"
            tokens.append(_operator(fd_prefix + op))
            i += len(op)
            continue

        buf.append(c)
        i += 1

    if in_single or in_double:
        raise ValueError("unexpected end of line while looking for matching quote")

    if escape:
        buf.append("\\")

    flush_buf()
    return tokens


def parse_redirection(
    tokens: list[Token],
) -> tuple[list[str], RedirectionDirective | None]:
    """Separate stdout redirections from the argument vector.

    The last redirection on the line wins. Raises :class:`ValueError` when an
    operator has no target.
    """
    argv: list[str] = []
    directive: RedirectionDirective | None = None

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.operator and token in REDIRECT_OPERATORS:
            if i + 1 >= len(tokens) or tokens[i + 1].operator:
                raise ValueError(f"syntax error near unexpected token `{token}'")
            mode = RedirectMode.APPEND if token in APPEND_OPERATORS else RedirectMode.OVERWRITE
            directive = RedirectionDirective(target=Path(str(tokens[i + 1])), mode=mode)
            i += 2
            continue
        argv.append(str(token))
        i += 1

    return argv, directive


def write_output(directive: RedirectionDirective, text: str) -> None:
    """Write *text* verbatim to the directive's target in its mode."""
    with open(directive.target, directive.mode.value, encoding="utf-8") as f:
        f.write(text)

"""StdinBuffer buffers input and emits complete sequences.

A single ``read`` from a raw terminal can hold several keypresses (fast
typing, pasting) or only part of an escape sequence (the rest arrives in
the next read). Without framing, a partial ``ESC [ A`` would be seen as an
Escape keypress followed by the characters ``[`` and ``A``.
"""

from __future__ import annotations

import re
from typing import Callable, Literal

ESC = "\x1b"

SequenceStatus = Literal["complete", "incomplete", "not-escape"]

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def _is_complete_sequence(data: str) -> SequenceStatus:
    """Check if a string is a complete escape sequence or needs more data."""
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI sequences: ESC [
    if after_esc.startswith("["):
        if after_esc.startswith("[M"):
            return "complete" if len(data) >= 6 else "incomplete"
        return _is_complete_csi_sequence(data)

    # OSC sequences: ESC ]
    if after_esc.startswith("]"):
        if data.endswith(f"{ESC}\\") or data.endswith("\x07"):
            return "complete"
        return "incomplete"

    # SS3 sequences: ESC O
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # Meta key sequences: ESC followed by a single character
    return "complete"


def _is_complete_csi_sequence(data: str) -> SequenceStatus:
    if len(data) < 3:
        return "incomplete"

    payload = data[2:]
    final = ord(payload[-1])

    if 0x40 <= final <= 0x7E:
        if payload.startswith("<"):
            return "complete" if _SGR_MOUSE_RE.match(payload) else "incomplete"
        return "complete"

    return "incomplete"


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split accumulated buffer into complete sequences.

    Returns (sequences, remainder) where remainder is an escape sequence
    still waiting for more bytes.
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        seq_end = 1
        while seq_end <= len(remaining):
            if _is_complete_sequence(remaining[:seq_end]) == "complete":
                break
            seq_end += 1
        else:
            return sequences, remaining

        sequences.append(remaining[:seq_end])
        pos += seq_end

    return sequences, ""


class StdinBuffer:
    """Buffers stdin input and emits complete sequences.

    Handles partial escape sequences that arrive across multiple chunks.
    The owner is responsible for calling :meth:`flush` once *timeout*
    seconds pass without new data while :attr:`pending` is true.
    """

    def __init__(self, *, timeout: float = 0.01) -> None:
        self._buffer: str = ""
        self.timeout: float = timeout
        self._on_data: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        """Set callback for complete sequences."""
        self._on_data = callback

    def _emit_data(self, data: str) -> None:
        if self._on_data:
            self._on_data(data)

    @property
    def pending(self) -> bool:
        """Whether an incomplete sequence is waiting for more bytes."""
        return bool(self._buffer)

    def process(self, data: str) -> None:
        """Feed input data into the buffer."""
        if not data:
            return

        self._buffer += data
        sequences, self._buffer = _extract_complete_sequences(self._buffer)
        for sequence in sequences:
            self._emit_data(sequence)

    def flush(self) -> list[str]:
        """Give up waiting and return whatever is buffered as one sequence."""
        if not self._buffer:
            return []

        sequences = [self._buffer]
        self._buffer = ""
        return sequences

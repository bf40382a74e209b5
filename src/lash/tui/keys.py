"""Keyboard input decoding for the line editor.

Turns one complete raw terminal input sequence (as framed by
:class:`~lash.tui.stdin_buffer.StdinBuffer`) into a key identifier such as
``"up"``, ``"ctrl+d"`` or ``"a"``, and matches raw input against key ids
written in the same format in keybinding configuration.
"""

from __future__ import annotations

from lash.tui.utils import has_control_chars

KeyId = str


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

_KEY_ALIASES: dict[str, str] = {
    "esc": "escape",
    "return": "enter",
    "del": "delete",
    "bs": "backspace",
    "pageup": "pageUp",
    "pagedown": "pageDown",
}

# Legacy escape sequences -> key names (xterm, vt100 application mode, linux console)
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
}

LEGACY_SHIFT_SEQUENCES: dict[str, str] = {
    "\x1b[1;2A": "up",
    "\x1b[1;2B": "down",
    "\x1b[1;2C": "right",
    "\x1b[1;2D": "left",
    "\x1b[3;2~": "delete",
    "\x1b[Z": "tab",
}

LEGACY_ALT_SEQUENCES: dict[str, str] = {
    "\x1b[1;3A": "up",
    "\x1b[1;3B": "down",
    "\x1b[1;3C": "right",
    "\x1b[1;3D": "left",
    "\x1b[3;3~": "delete",
}

LEGACY_CTRL_SEQUENCES: dict[str, str] = {
    "\x1b[1;5A": "up",
    "\x1b[1;5B": "down",
    "\x1b[1;5C": "right",
    "\x1b[1;5D": "left",
    "\x1b[3;5~": "delete",
}


# ---------------------------------------------------------------------------
# Key ID normalisation
# ---------------------------------------------------------------------------


def parse_key_id(key_id: str) -> tuple[int, str] | None:
    """Split a key identifier like ``"ctrl+shift+a"`` into ``(modifiers, key)``.

    ``modifiers`` is a bitmask (shift=1, alt=2, ctrl=4). Returns ``None``
    for an empty identifier or one that names only modifiers.
    """
    if not key_id:
        return None

    # "+" on its own, or as the final part ("ctrl++"), is the plus key
    if key_id == "+":
        return 0, "+"
    trailing_plus = key_id.endswith("++")
    parts = key_id[:-2].split("+") if trailing_plus else key_id.split("+")

    modifier = 0
    key = "+" if trailing_plus else ""
    for part in parts:
        lower = part.lower()
        if lower in MODIFIERS:
            modifier |= MODIFIERS[lower]
        elif part:
            key = part

    if not key:
        return None

    if len(key) > 1:
        lower = key.lower()
        key = _KEY_ALIASES.get(lower, lower)
    return modifier, key


def format_key_id(modifiers: int, key: str) -> KeyId:
    """Build the canonical key id (``ctrl+`` then ``shift+`` then ``alt+``)."""
    prefix = ""
    if modifiers & MODIFIERS["ctrl"]:
        prefix += "ctrl+"
    if modifiers & MODIFIERS["shift"]:
        prefix += "shift+"
    if modifiers & MODIFIERS["alt"]:
        prefix += "alt+"
    return prefix + key


def _normalize_key_id(key_id: str) -> KeyId | None:
    parsed = parse_key_id(key_id)
    if parsed is None:
        return None
    return format_key_id(*parsed)


# ---------------------------------------------------------------------------
# parse_key — determine what key was pressed from raw input
# ---------------------------------------------------------------------------


def parse_key(data: str) -> KeyId | None:  # noqa: C901
    """Parse raw terminal input and return the key identifier, or ``None``.

    The returned string uses the same format as ``matches_key`` expects:
    e.g. ``"a"``, ``"ctrl+a"``, ``"alt+b"``, ``"delete"``.
    """
    if not data:
        return None

    for seq_dict, mod_prefix in (
        (LEGACY_CTRL_SEQUENCES, "ctrl+"),
        (LEGACY_SHIFT_SEQUENCES, "shift+"),
        (LEGACY_ALT_SEQUENCES, "alt+"),
        (LEGACY_KEY_SEQUENCES, ""),
    ):
        if data in seq_dict:
            return mod_prefix + seq_dict[data]

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return "escape"
    if data == "\r" or data == "\n" or data == "\r\n":
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data == "\x7f" or data == "\x08":
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        if ch == "\r" or ch == "\n":
            return "alt+enter"
        if ch == "\x7f" or ch == "\x08":
            return "alt+backspace"
        if 1 <= ord(ch) <= 26:
            return "ctrl+alt+" + chr(ord(ch) + ord("a") - 1)
        if ch.isprintable():
            return "alt+" + ch

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return data

    return None


def matches_key(data: str, key_id: str) -> bool:
    """Return ``True`` if *data* (raw terminal input) matches the named *key_id*."""
    wanted = _normalize_key_id(key_id)
    if wanted is None:
        return False
    return parse_key(data) == wanted


def is_printable(data: str) -> bool:
    """Return ``True`` if *data* is text to insert rather than a control key."""
    return bool(data) and not has_control_chars(data)

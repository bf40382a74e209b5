"""Terminal text utilities: display width and grapheme segmentation.

The renderer works in terminal columns while the line buffer works in
string indices; the helpers here convert between the two.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Grapheme segmentation
# ---------------------------------------------------------------------------


def graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters."""
    return list(grapheme.graphemes(text))


def last_grapheme_length(text: str) -> int:
    """Length in code points of the last grapheme of *text* (0 if empty)."""
    if not text:
        return 0
    if text.isascii():
        return 1
    clusters = graphemes(text)
    return len(clusters[-1]) if clusters else 1


def first_grapheme_length(text: str) -> int:
    """Length in code points of the first grapheme of *text* (0 if empty)."""
    if not text:
        return 0
    if text.isascii():
        return 1
    clusters = graphemes(text)
    return len(clusters[0]) if clusters else 1


# ---------------------------------------------------------------------------
# Width measurement
# ---------------------------------------------------------------------------

# SGR / cursor CSI sequences, so coloured prompts measure correctly
_STRIP_RE = re.compile(r"\x1b\[[0-9;]*[mGKHJ]")

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    if ord(g[0]) >= 0x1F000:
        return 2

    category = unicodedata.category(g[0])
    if category.startswith("M") or category == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Calculate the number of terminal columns *text* occupies.

    ANSI SGR sequences are ignored. Printable ASCII takes a fast path;
    everything else is measured per grapheme cluster and cached.
    """
    if not text:
        return 0

    stripped = _STRIP_RE.sub("", text)
    if not stripped:
        return 0

    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


# ---------------------------------------------------------------------------
# Character classification
# ---------------------------------------------------------------------------


def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is a whitespace character."""
    return char in (" ", "\t", "\n", "\r", "\f", "\v")


def has_control_chars(data: str) -> bool:
    """Return ``True`` if *data* contains C0/C1 control characters or DEL."""
    return any(
        ord(ch) < 32 or ord(ch) == 0x7F or (0x80 <= ord(ch) <= 0x9F)
        for ch in data
    )

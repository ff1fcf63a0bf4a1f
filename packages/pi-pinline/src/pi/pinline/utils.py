"""Terminal text utilities: ANSI stripping and display-width measurement.

The input row is laid out in terminal columns, not code points, so the
cursor column and the visible prompt length are measured here.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# CSI sequences (SGR colors, cursor moves, erases) and OSC 8 hyperlinks
_STRIP_RE = re.compile(
    r"\x1b\[[0-9;?]*[A-Za-z~]"
    r"|\x1b\]8;;[^\x07]*\x07"
)

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def strip_ansi(text: str) -> str:
    """Remove escape sequences from *text*."""
    return _STRIP_RE.sub("", text)


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Control characters and combining marks are zero width; emoji clusters
    (VS16, ZWJ, skin tones, regional indicators) are two columns; anything
    else is delegated to wcwidth.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000 or 0x2600 <= ord(first) <= 0x27BF:
        return 2

    cat = unicodedata.category(first)
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(first), 0)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    Escape sequences are ignored. Printable ASCII takes the fast path;
    other strings are measured per grapheme cluster and cached.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


def take_columns(text: str, max_cols: int) -> str:
    """Return the longest prefix of plain *text* that fits in *max_cols*."""
    if max_cols <= 0:
        return ""
    if visible_width(text) <= max_cols:
        return text

    width = 0
    parts: list[str] = []
    for g in grapheme.graphemes(text):
        w = _grapheme_width(g)
        if width + w > max_cols:
            break
        parts.append(g)
        width += w
    return "".join(parts)

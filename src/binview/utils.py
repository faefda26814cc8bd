"""Display-width helpers for text that carries ANSI escape sequences.

Widths are measured per grapheme cluster with ``wcwidth`` after CSI
sequences are stripped, so a status message can be cut to the terminal
width without splitting a wide character or an escape sequence.
"""

from __future__ import annotations

import functools
import re

import grapheme
import wcwidth as _wcwidth

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

# emoji presentation selector and zero width joiner
_EMOJI_MARKERS = ("\ufe0f", "\u200d")


def cluster_width(cluster: str) -> int:
    """Columns taken by one grapheme cluster (0 for controls and lone marks)."""
    if not cluster:
        return 0
    if any(marker in cluster for marker in _EMOJI_MARKERS):
        return 2
    return max(_wcwidth.wcwidth(cluster[0]), 0)


def strip_ansi(text: str) -> str:
    """Remove CSI escape sequences from *text*."""
    return _ANSI_RE.sub("", text)


@functools.lru_cache(maxsize=512)
def _plain_width(text: str) -> int:
    if text.isascii() and text.isprintable():
        return len(text)
    return sum(cluster_width(g) for g in grapheme.graphemes(text))


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*, ignoring ANSI codes."""
    return _plain_width(strip_ansi(text)) if text else 0


def truncate_to_width(text: str, max_width: int, ellipsis: str = "...") -> str:
    """Truncate *text* to fit within *max_width* visible columns.

    When the text is too wide it is cut at a grapheme boundary and
    *ellipsis* is appended (the ellipsis counts towards the width). Escape
    sequences before the cut are kept.
    """
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text

    room = max_width - visible_width(ellipsis)
    if room <= 0:
        return _take_columns(ellipsis, max_width)
    return _take_columns(text, room) + ellipsis


def _take_columns(text: str, max_cols: int) -> str:
    """Return the longest prefix of *text* that fits within *max_cols*."""
    kept: list[str] = []
    used = 0
    pos = 0
    # each escape sequence ends a run of plain text; the tail is the last run
    pieces = [(m.start(), m.end()) for m in _ANSI_RE.finditer(text)]
    pieces.append((len(text), len(text)))

    for start, end in pieces:
        for g in grapheme.graphemes(text[pos:start]):
            used += cluster_width(g)
            if used > max_cols:
                return "".join(kept)
            kept.append(g)
        kept.append(text[start:end])
        pos = end

    return "".join(kept)

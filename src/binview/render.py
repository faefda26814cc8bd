"""Rendering of one record as a colorized hex-dump row.

A row is laid out as::

    AAAAAAAA HH HH HH HH HH HH HH HH HH HH HH HH HH HH HH HH  text

The hex bytes alternate between two cell attributes every four bytes; the
text panel shows printable ASCII and well-formed UTF-8 sequences as glyphs
and every other byte as ``.``. The output is a pure function of its
arguments, which is what lets :class:`binview.line_cache.LineCache` skip
rows that did not change.
"""

from __future__ import annotations

from binview.config import Theme
from binview.source import RECORD_SIZE

RESET = "\x1b[0m"
ERASE_LINE = "\x1b[0m\x1b[0K"
ERASE_SCREEN_AFTER = "\x1b[0m\x1b[0J"

PLACEHOLDER = "."

NO_CURSOR = -1

_DEFAULT_THEME = Theme()


def utf8_sequence_length(record: bytes, i: int) -> int:
    """Return the length of the displayable UTF-8 sequence at ``record[i]``.

    Returns 0 when the byte does not start a printable sequence that lies
    wholly inside *record*.
    """
    lead = record[i]
    if 0x20 <= lead <= 0x7E:
        return 1
    if 0xC2 <= lead <= 0xDF:
        length = 2
    elif 0xE0 <= lead <= 0xEF:
        length = 3
    elif 0xF0 <= lead <= 0xF4:
        length = 4
    else:
        return 0

    if i + length > len(record):
        return 0
    for c in record[i + 1 : i + length]:
        if c < 0x80 or c > 0xBF:
            return 0

    # Overlong forms, surrogates and code points past U+10FFFF fail here
    try:
        glyph = record[i : i + length].decode("utf-8")
    except UnicodeDecodeError:
        return 0
    # C1 controls would be interpreted by the terminal
    if 0x80 <= ord(glyph) <= 0x9F:
        return 0
    return length


def render_line(
    address: int,
    cursor_column: int,
    record: bytes,
    theme: Theme | None = None,
) -> str:
    """Render *record* at *address* with the cursor on *cursor_column*.

    Pass :data:`NO_CURSOR` when the cursor is on another row.
    """
    if theme is None:
        theme = _DEFAULT_THEME

    out: list[str] = [f"{address:08X}"]

    for i, byte in enumerate(record):
        out.append(RESET + " " if i > 0 else " ")
        if i == cursor_column:
            out.append(theme.cursor)
        elif ((i >> 2) & 1) == 0:
            out.append(theme.cell1)
        else:
            out.append(theme.cell2)
        out.append(f"{byte:02X}")
    out.append(RESET + " ")
    out.append("   " * (RECORD_SIZE - len(record)))

    i = 0
    while i < len(record):
        length = utf8_sequence_length(record, i)
        if length == 0:
            out.append(theme.cursor if i == cursor_column else theme.cell1)
            out.append(PLACEHOLDER)
            i += 1
            continue

        if i <= cursor_column < i + length:
            out.append(theme.cursor)
        else:
            out.append(theme.cell1)
        out.append(record[i : i + length].decode("utf-8"))
        if length == 3:
            out.append(" ")
        elif length == 4:
            out.append("  ")
        i += length

    out.append(ERASE_LINE)
    return "".join(out)

"""Keyboard input parsing for the viewer.

Turns one complete raw input sequence (as produced by
:class:`binview.stdin_buffer.StdinBuffer`) into a short key identifier such
as ``"a"``, ``"ctrl+n"``, ``"down"`` or ``"pageUp"``.
"""

from __future__ import annotations


class Key:
    """Key identifiers returned by :func:`parse_key`."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    insert = "insert"
    delete = "delete"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


# ---------------------------------------------------------------------------
# Sequence tables
# ---------------------------------------------------------------------------

ESCAPE_SEQUENCES: dict[str, str] = {}

# Cursor keys: CSI in normal cursor mode, SS3 in application mode
for _final, _name in (
    ("A", Key.up),
    ("B", Key.down),
    ("C", Key.right),
    ("D", Key.left),
    ("H", Key.home),
    ("F", Key.end),
):
    ESCAPE_SEQUENCES["\x1b[" + _final] = _name
    ESCAPE_SEQUENCES["\x1bO" + _final] = _name

# Editing keypad: CSI <n> ~ (rxvt and the linux console use 7/8 and 1/4)
for _code, _name in (
    ("1", Key.home),
    ("2", Key.insert),
    ("3", Key.delete),
    ("4", Key.end),
    ("5", Key.page_up),
    ("6", Key.page_down),
    ("7", Key.home),
    ("8", Key.end),
):
    ESCAPE_SEQUENCES[f"\x1b[{_code}~"] = _name

del _final, _code, _name

_SINGLE_KEYS: dict[str, str] = {
    "\x1b": Key.escape,
    "\r": Key.enter,
    "\n": Key.enter,
    "\t": Key.tab,
    " ": Key.space,
    "\x7f": Key.backspace,
    "\x08": Key.backspace,
}


def parse_key(data: str) -> str | None:
    """Parse raw terminal input and return the key identifier, or ``None``."""
    if not data:
        return None

    name = ESCAPE_SEQUENCES.get(data) or _SINGLE_KEYS.get(data)
    if name is not None:
        return name

    if len(data) == 1:
        code = ord(data)
        if 0x01 <= code <= 0x1A:
            return Key.ctrl(chr(code + 0x60))
        return data if data.isprintable() else None

    # Meta: ESC followed by a printable character
    if len(data) == 2 and data[0] == "\x1b" and data[1].isprintable():
        return Key.alt(data[1])

    return None

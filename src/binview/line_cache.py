"""Per-row memo of the text last written to each visible row slot."""

from __future__ import annotations


class LineCache:
    """Differential row output: a row is rewritten only when its text changed.

    Slots are screen positions counted from the top of the viewport, not
    record indexes, so scrolling rewrites every row whose content moved.
    """

    def __init__(self) -> None:
        self._lines: dict[int, str] = {}
        self._full_redraw_count: int = 0

    @property
    def full_redraws(self) -> int:
        """Number of times the cache was cleared."""
        return self._full_redraw_count

    def should_write(self, slot: int, text: str) -> bool:
        """Return ``True`` (and remember *text*) if *slot* needs rewriting."""
        if self._lines.get(slot) == text:
            return False
        self._lines[slot] = text
        return True

    def clear(self) -> None:
        """Forget every slot so the next frame rewrites all rows."""
        self._lines.clear()
        self._full_redraw_count += 1

    def __len__(self) -> int:
        return len(self._lines)

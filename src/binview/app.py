"""The interactive viewer: render a frame, read a key, update, repeat.

Each frame is drawn in place. Rows whose text is unchanged since the last
frame are skipped (the line feed still moves past them), and after the key
is handled the terminal cursor is moved back up over the lines just printed
so the next frame overdraws the same region without clearing the screen.
"""

from __future__ import annotations

import logging
from typing import Sequence

from binview.config import Theme
from binview.keys import parse_key
from binview.line_cache import LineCache
from binview.navigation import Navigator, Outcome
from binview.render import ERASE_SCREEN_AFTER, NO_CURSOR, RESET, render_line
from binview.source import RECORD_SIZE, MemorySource, RecordSource
from binview.terminal import Terminal
from binview.utils import truncate_to_width

logger = logging.getLogger(__name__)

NEWLINE = "\r\n"


class Viewer:
    """Main loop over one dataset on one terminal."""

    def __init__(
        self,
        terminal: Terminal,
        records: Sequence[bytes],
        theme: Theme | None = None,
    ) -> None:
        self.terminal = terminal
        self.records = records
        self.theme = theme if theme is not None else Theme()
        self.navigator = Navigator(records)
        self.cache = LineCache()
        self._last_size: tuple[int, int] = (0, 0)

    def run(self) -> None:
        """Run until the user confirms quitting.

        The terminal is started here and always stopped, with the cursor
        shown again, however the loop ends.
        """
        self.terminal.start()
        try:
            self.terminal.hide_cursor()
            while True:
                line_feeds = self.draw_frame()
                token = parse_key(self.terminal.read_key())
                outcome = self.navigator.handle_key(token)
                if outcome is Outcome.EXIT:
                    self.terminal.write("\n")
                    return
                if outcome is Outcome.REFRESH:
                    self.cache.clear()
                self.terminal.write("\r")
                self.terminal.move_by(-line_feeds)
        finally:
            self.terminal.show_cursor()
            self.terminal.stop()

    def draw_frame(self) -> int:
        """Draw rows and status line; return the number of line feeds written."""
        columns, rows = self.terminal.size()
        if (columns, rows) != self._last_size:
            logger.debug("terminal size %dx%d", columns, rows)
            self.cache.clear()
            self._last_size = (columns, rows)
            self.terminal.hide_cursor()
        self.navigator.resize(rows - 1)

        out: list[str] = []
        window = MemorySource(self.records, self.navigator.start_row)
        line_feeds = self._draw_rows(window, out)

        out.append(NEWLINE)
        line_feeds += 1
        out.append(self._status_line(columns))
        out.append(ERASE_SCREEN_AFTER)

        self.terminal.write("".join(out))
        return line_feeds

    def _draw_rows(self, source: RecordSource, out: list[str]) -> int:
        line_feeds = 0
        home = source.home_address()
        cursor_slot = self.navigator.cursor_slot
        for slot in range(self.navigator.height):
            record = source.read()
            if record is None:
                break
            if slot > 0:
                out.append(NEWLINE)
                line_feeds += 1
            cursor_column = self.navigator.column if slot == cursor_slot else NO_CURSOR
            line = render_line((home + slot) * RECORD_SIZE, cursor_column, record, self.theme)
            if self.cache.should_write(slot, line):
                out.append(line)
        return line_feeds

    def _status_line(self, columns: int) -> str:
        nav = self.navigator
        if nav.message:
            message = truncate_to_width(nav.message, columns - 1, ellipsis="")
            nav.message = ""
            return self.theme.status + message + RESET
        return f"{self.theme.status}({nav.address:08X}):{nav.value:02X}{RESET}"

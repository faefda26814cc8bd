"""Cursor and viewport state, driven by key tokens.

The navigator is a two-state machine. In ``NORMAL`` mode key tokens are
looked up in :data:`KEY_ACTIONS` and applied to the cursor; the quit keys
switch to ``CONFIRM_QUIT``, where ``"y"`` ends the session and any other key
goes back to ``NORMAL``.

After every transition the column is clamped to the (possibly new) row and
only then is the viewport scrolled to keep the cursor row visible.
"""

from __future__ import annotations

import enum
import logging
from typing import Sequence

from binview.keys import Key
from binview.source import RECORD_SIZE

logger = logging.getLogger(__name__)

QUIT_PROMPT = "Quit Sure ? [y/n]"


class Mode(enum.Enum):
    NORMAL = "normal"
    CONFIRM_QUIT = "confirm-quit"


class Action(enum.Enum):
    DOWN = "down"
    UP = "up"
    LEFT = "left"
    RIGHT = "right"
    LINE_START = "line-start"
    LINE_END = "line-end"
    FIRST_ROW = "first-row"
    LAST_ROW = "last-row"
    PAGE_DOWN = "page-down"
    PAGE_UP = "page-up"
    REFRESH = "refresh"
    QUIT = "quit"


class Outcome(enum.Enum):
    """What the main loop should do after a key was handled."""

    CONTINUE = "continue"
    REFRESH = "refresh"
    EXIT = "exit"


KEY_ACTIONS: dict[str, Action] = {
    Key.down: Action.DOWN,
    Key.ctrl("n"): Action.DOWN,
    "j": Action.DOWN,
    Key.up: Action.UP,
    Key.ctrl("p"): Action.UP,
    "k": Action.UP,
    Key.left: Action.LEFT,
    Key.ctrl("b"): Action.LEFT,
    "h": Action.LEFT,
    Key.right: Action.RIGHT,
    Key.ctrl("f"): Action.RIGHT,
    "l": Action.RIGHT,
    "0": Action.LINE_START,
    "^": Action.LINE_START,
    Key.ctrl("a"): Action.LINE_START,
    Key.home: Action.LINE_START,
    "$": Action.LINE_END,
    Key.ctrl("e"): Action.LINE_END,
    Key.end: Action.LINE_END,
    "<": Action.FIRST_ROW,
    ">": Action.LAST_ROW,
    Key.page_down: Action.PAGE_DOWN,
    Key.page_up: Action.PAGE_UP,
    Key.ctrl("l"): Action.REFRESH,
    "q": Action.QUIT,
    Key.escape: Action.QUIT,
}


class Navigator:
    """Cursor ``(row, column)`` plus the viewport ``(start_row, height)``."""

    def __init__(self, records: Sequence[bytes], height: int = 1) -> None:
        if not records:
            raise ValueError("navigator needs at least one record")
        self._records = records
        self.row: int = 0
        self.column: int = 0
        self.start_row: int = 0
        self.height: int = max(1, height)
        self.mode: Mode = Mode.NORMAL
        # Shown once on the status line, then cleared by the viewer
        self.message: str = ""

    @property
    def last_row(self) -> int:
        return len(self._records) - 1

    @property
    def cursor_slot(self) -> int:
        """Screen slot of the cursor row within the viewport."""
        return self.row - self.start_row

    @property
    def address(self) -> int:
        """Absolute byte address under the cursor."""
        return self.row * RECORD_SIZE + self.column

    @property
    def value(self) -> int:
        """Byte value under the cursor."""
        return self._records[self.row][self.column]

    def resize(self, height: int) -> None:
        """Change the viewport height and scroll the cursor back into view."""
        self.height = max(1, height)
        self._scroll()

    def handle_key(self, token: str | None) -> Outcome:
        """Apply one key token and report what the main loop should do next."""
        if self.mode is Mode.CONFIRM_QUIT:
            self.mode = Mode.NORMAL
            if token == "y":
                return Outcome.EXIT
            return Outcome.CONTINUE

        action = KEY_ACTIONS.get(token) if token is not None else None
        outcome = Outcome.CONTINUE
        if action is Action.QUIT:
            self.mode = Mode.CONFIRM_QUIT
            self.message = QUIT_PROMPT
        elif action is Action.REFRESH:
            logger.debug("refresh requested")
            outcome = Outcome.REFRESH
        elif action is not None:
            self.apply(action)

        self._clamp_column()
        self._scroll()
        return outcome

    def apply(self, action: Action) -> None:
        """Move the cursor for a movement *action* (no clamping of the column)."""
        if action is Action.DOWN:
            self.row = min(self.row + 1, self.last_row)
        elif action is Action.UP:
            self.row = max(self.row - 1, 0)
        elif action is Action.LEFT:
            self.column = max(self.column - 1, 0)
        elif action is Action.RIGHT:
            self.column += 1
        elif action is Action.LINE_START:
            self.column = 0
        elif action is Action.LINE_END:
            self.column = len(self._records[self.row]) - 1
        elif action is Action.FIRST_ROW:
            self.row = 0
        elif action is Action.LAST_ROW:
            self.row = self.last_row
        elif action is Action.PAGE_DOWN:
            self.row = min(self.row + self.height, self.last_row)
        elif action is Action.PAGE_UP:
            self.row = max(self.row - self.height, 0)

    def _clamp_column(self) -> None:
        last_column = len(self._records[self.row]) - 1
        if self.column > last_column:
            self.column = last_column
        if self.column < 0:
            self.column = 0

    def _scroll(self) -> None:
        if self.row < self.start_row:
            self.start_row = self.row
        elif self.row >= self.start_row + self.height:
            self.start_row = self.row - self.height + 1

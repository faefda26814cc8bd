"""Terminal abstraction for raw-mode key input and ANSI output.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that reads keys from the controlling tty in raw mode and
writes the display to stderr, so the data to view can arrive on stdin.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import sys
import termios
import tty
from typing import Protocol, TextIO

from binview.errors import TerminalError
from binview.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
_CURSOR_UP_FMT = "\x1b[{}A"
_CURSOR_DOWN_FMT = "\x1b[{}B"


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def size(self) -> tuple[int, int]:
        """Return ``(columns, rows)``."""
        ...

    def read_key(self) -> str:
        """Block until one complete key sequence is available and return it."""
        ...

    def write(self, data: str) -> None: ...

    def move_by(self, lines: int) -> None: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by the controlling tty and ``sys.stderr``.

    Raw mode is managed via :mod:`tty` and :mod:`termios` on a file
    descriptor opened from *tty_path*. Escape sequences split across reads
    are reassembled by a :class:`StdinBuffer`; a sequence still incomplete
    after *key_timeout* seconds is delivered as-is.
    """

    def __init__(
        self,
        tty_path: str = "/dev/tty",
        output: TextIO | None = None,
        key_timeout: float = 0.01,
        write_log_path: str = "",
    ) -> None:
        self._tty_path = tty_path
        self._output = output if output is not None else sys.stderr
        self._key_timeout = key_timeout
        self._write_log_path = write_log_path
        self._fd: int | None = None
        self._original_termios: list | None = None
        self._buffer = StdinBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Open the tty and enable raw mode."""
        try:
            self._fd = os.open(self._tty_path, os.O_RDWR | os.O_NOCTTY)
            self._original_termios = termios.tcgetattr(self._fd)
            tty.setraw(self._fd)
        except (OSError, termios.error) as e:
            self._close_fd()
            raise TerminalError(f"{self._tty_path}: {e}") from e
        logger.debug("opened %s in raw mode", self._tty_path)

    def stop(self) -> None:
        """Restore terminal attributes and close the tty."""
        if self._fd is not None and self._original_termios is not None:
            try:
                termios.tcsetattr(self._fd, termios.TCSADRAIN, self._original_termios)
            except termios.error:
                logger.warning("could not restore terminal attributes", exc_info=True)
        self._original_termios = None
        self._buffer.clear()
        self._close_fd()

    def _close_fd(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    # -- size ---------------------------------------------------------------

    def size(self) -> tuple[int, int]:
        fd = self._fd if self._fd is not None else self._output.fileno()
        try:
            size = os.get_terminal_size(fd)
        except (ValueError, OSError) as e:
            raise TerminalError(f"cannot get terminal size: {e}") from e
        return size.columns, size.lines

    # -- key input ----------------------------------------------------------

    def read_key(self) -> str:
        if self._fd is None:
            raise TerminalError("terminal is not started")

        while True:
            key = self._buffer.pop()
            if key is not None:
                return key

            timeout = self._key_timeout if self._buffer.pending else None
            try:
                readable, _, _ = select.select([self._fd], [], [], timeout)
                if not readable:
                    self._buffer.flush()
                    continue
                raw = os.read(self._fd, 4096)
            except OSError as e:
                raise TerminalError(f"cannot read key: {e}") from e

            if not raw:
                raise TerminalError("cannot read key: end of file on terminal")
            self._buffer.process(self._decoder.decode(raw))

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write data to the output stream and optionally to the write log."""
        self._raw_write(data)

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError:
                logger.debug("write log %s failed", self._write_log_path, exc_info=True)

    def move_by(self, lines: int) -> None:
        """Move the cursor up (negative) or down (positive) by *lines*."""
        if lines < 0:
            self.write(_CURSOR_UP_FMT.format(-lines))
        elif lines > 0:
            self.write(_CURSOR_DOWN_FMT.format(lines))

    def hide_cursor(self) -> None:
        self.write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(SHOW_CURSOR)

    def _raw_write(self, data: str) -> None:
        try:
            self._output.write(data)
            self._output.flush()
        except OSError:
            logger.debug("terminal write failed", exc_info=True)

"""Tests for binview.app.Viewer -- the frame loop against a VirtualTerminal."""

from __future__ import annotations

import pytest

from binview.app import Viewer
from binview.config import Theme
from binview.errors import TerminalError
from binview.navigation import QUIT_PROMPT, Mode
from binview.render import ERASE_SCREEN_AFTER, NO_CURSOR, RESET, render_line
from binview.terminal import HIDE_CURSOR, SHOW_CURSOR
from binview.utils import strip_ansi

from .virtual_terminal import VirtualTerminal

STATUS = Theme().status


def records_of(count: int) -> list[bytes]:
    return [bytes([i]) * 16 for i in range(count)]


# ---------------------------------------------------------------------------
# End to end
# ---------------------------------------------------------------------------


class TestHelloWorld:
    def test_first_frame(self) -> None:
        term = VirtualTerminal(keys=["q", "y"])
        Viewer(term, [b"Hello World"]).run()

        first = term.frames[0]
        line = render_line(0, 0, b"Hello World")
        assert line in first
        assert line.startswith("00000000 " + Theme().cursor + "48")
        assert Theme().cursor + "H" in line
        assert f"{STATUS}(00000000):48{RESET}" in first
        assert first.endswith(ERASE_SCREEN_AFTER)

    def test_text_panel_is_left_aligned_after_padding(self) -> None:
        stripped = strip_ansi(render_line(0, 0, b"Hello World"))
        assert stripped.endswith("64" + " " + "   " * 5 + "Hello World")
        assert stripped.index("Hello World") == 57

    def test_quit_confirmed_with_y(self) -> None:
        term = VirtualTerminal(keys=["q", "y"])
        viewer = Viewer(term, [b"Hello World"])
        viewer.run()

        assert QUIT_PROMPT in term.frames[1]
        assert term.output.endswith("\n" + SHOW_CURSOR)
        assert term.stopped

    def test_unconfirmed_quit_keeps_position(self) -> None:
        term = VirtualTerminal(keys=["\x1b[C", "q", "n", "q", "y"])
        viewer = Viewer(term, [b"Hello World"])
        viewer.run()

        assert viewer.navigator.mode is Mode.NORMAL
        assert viewer.navigator.column == 1
        assert "(00000001):65" in term.frames[3]


# ---------------------------------------------------------------------------
# Differential output
# ---------------------------------------------------------------------------


class TestDiffOutput:
    def test_unchanged_rows_are_not_rewritten(self) -> None:
        records = records_of(3)
        term = VirtualTerminal(keys=["j", "q", "y"])
        Viewer(term, records).run()

        second = term.frames[1]
        assert render_line(0, NO_CURSOR, records[0]) in second
        assert render_line(16, 0, records[1]) in second
        assert render_line(32, NO_CURSOR, records[2]) not in second
        assert term.output.count(render_line(32, NO_CURSOR, records[2])) == 1

    def test_frame_moves_cursor_back_up(self) -> None:
        term = VirtualTerminal(keys=["j", "q", "y"])
        Viewer(term, records_of(3)).run()

        # three rows plus the status line: three line feeds
        assert term.frames[1].startswith("\r\x1b[3A")

    def test_key_only_frame_writes_status_line(self) -> None:
        term = VirtualTerminal(keys=["q", "y"])
        Viewer(term, records_of(3)).run()

        second = term.frames[1]
        assert "\x1b[0K" not in second.replace(ERASE_SCREEN_AFTER, "")
        assert second.count("\r\n") == 3

    def test_refresh_redraws_everything(self) -> None:
        records = records_of(3)
        term = VirtualTerminal(keys=["\x0c", "q", "y"])
        viewer = Viewer(term, records)
        viewer.run()

        second = term.frames[1]
        assert render_line(0, 0, records[0]) in second
        assert render_line(16, NO_CURSOR, records[1]) in second
        assert render_line(32, NO_CURSOR, records[2]) in second
        assert viewer.cache.full_redraws == 2

    def test_resize_redraws_and_hides_cursor(self) -> None:
        records = records_of(3)
        term = VirtualTerminal(keys=["k", "q", "y"], rows=24, columns=80)

        def shrink(reads: int) -> None:
            if reads == 0:
                term.columns = 60

        term.on_read_key = shrink
        viewer = Viewer(term, records)
        viewer.run()

        second = term.frames[1]
        assert HIDE_CURSOR in second
        assert render_line(32, NO_CURSOR, records[2]) in second
        assert viewer.cache.full_redraws == 2


# ---------------------------------------------------------------------------
# Viewport
# ---------------------------------------------------------------------------


class TestViewport:
    def test_only_visible_rows_are_drawn(self) -> None:
        records = records_of(100)
        term = VirtualTerminal(keys=["q", "y"], rows=11)
        Viewer(term, records).run()

        first = term.frames[0]
        assert render_line(9 * 16, NO_CURSOR, records[9]) in first
        assert render_line(10 * 16, NO_CURSOR, records[10]) not in first

    def test_last_row_scrolls_window(self) -> None:
        records = records_of(100)
        term = VirtualTerminal(keys=[">", "q", "y"], rows=11)
        viewer = Viewer(term, records)
        viewer.run()

        assert viewer.navigator.start_row == 90
        second = term.frames[1]
        assert render_line(0x630, 0, records[99]) in second
        assert render_line(0x5A0, NO_CURSOR, records[90]) in second
        assert "(00000630):63" in second

    def test_terminal_shrink_keeps_cursor_visible(self) -> None:
        records = records_of(100)
        term = VirtualTerminal(keys=["\x1b[6~", "\x1b[6~", "q", "y"], rows=21)

        def shrink(reads: int) -> None:
            if reads == 2:
                term.rows = 6

        term.on_read_key = shrink
        viewer = Viewer(term, records)
        viewer.run()

        nav = viewer.navigator
        assert nav.row == 40
        assert nav.start_row <= nav.row < nav.start_row + 5


# ---------------------------------------------------------------------------
# Status line
# ---------------------------------------------------------------------------


class TestStatusLine:
    def test_message_truncated_to_terminal_width(self) -> None:
        term = VirtualTerminal(keys=["q", "y"], columns=5)
        Viewer(term, [b"abc"]).run()

        assert f"{STATUS}Quit{RESET}" in term.frames[1]

    def test_message_is_transient(self) -> None:
        term = VirtualTerminal(keys=["q", "n", "q", "y"])
        Viewer(term, [b"abc"]).run()

        assert QUIT_PROMPT not in term.frames[2]
        assert "(00000000):61" in term.frames[2]


# ---------------------------------------------------------------------------
# Cleanup
# ---------------------------------------------------------------------------


class TestCleanup:
    def test_cursor_hidden_while_running(self) -> None:
        term = VirtualTerminal(keys=["q", "y"])
        Viewer(term, [b"abc"]).run()

        assert term.output.startswith(HIDE_CURSOR)
        assert term.started

    def test_terminal_restored_on_error(self) -> None:
        term = VirtualTerminal(keys=["j"])
        with pytest.raises(TerminalError):
            Viewer(term, records_of(3)).run()

        assert term.cursor_visible
        assert term.stopped
        assert term.output.endswith(SHOW_CURSOR)

    def test_viewers_do_not_share_cache(self) -> None:
        first = VirtualTerminal(keys=["q", "y"])
        second = VirtualTerminal(keys=["q", "y"])
        Viewer(first, [b"abc"]).run()
        Viewer(second, [b"abc"]).run()

        assert render_line(0, 0, b"abc") in second.frames[0]

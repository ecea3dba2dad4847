import curses
import io
import unittest
from contextlib import redirect_stderr
from unittest import mock

import di_cli
import di_terminal
from di_models import InputEvent
from di_output import FOOTER, Line
from di_terminal import PAD_X, PAD_Y, CursesScreen


def fake_curses(height=10, width=40):
    fake = mock.MagicMock()
    fake.error = curses.error
    fake.KEY_MOUSE = curses.KEY_MOUSE
    fake.KEY_RESIZE = curses.KEY_RESIZE
    fake.A_NORMAL = curses.A_NORMAL
    fake.A_BOLD = curses.A_BOLD
    fake.A_DIM = curses.A_DIM
    fake.has_colors.return_value = False
    fake.initscr.return_value.getmaxyx.return_value = (height, width)
    return fake


class TestCursesScreen(unittest.TestCase):
    def test_restores_terminal_when_draw_fails(self):
        fake = fake_curses()
        fake.initscr.return_value.erase.side_effect = curses.error("write failed")
        screen = CursesScreen()
        with mock.patch.object(di_terminal, "curses", fake):
            with self.assertRaises(curses.error):
                with screen:
                    screen.draw([Line("drastic-idle", "bold")])
        fake.noraw.assert_called_once_with()
        fake.echo.assert_called_once_with()
        fake.endwin.assert_called_once_with()
        fake.initscr.return_value.keypad.assert_called_with(False)
        self.assertIsNone(screen.stdscr)

    def test_restores_terminal_when_setup_fails(self):
        fake = fake_curses()
        fake.mousemask.side_effect = curses.error("no mouse")
        screen = CursesScreen()
        with mock.patch.object(di_terminal, "curses", fake):
            with self.assertRaises(curses.error):
                screen.__enter__()
        fake.raw.assert_called_once_with()
        fake.noraw.assert_called_once_with()
        fake.endwin.assert_called_once_with()
        self.assertIsNone(screen.stdscr)

    def test_endwin_runs_even_if_noraw_fails(self):
        fake = fake_curses()
        fake.noraw.side_effect = curses.error("noraw")
        with mock.patch.object(di_terminal, "curses", fake):
            with self.assertRaises(curses.error):
                with CursesScreen():
                    pass
        fake.endwin.assert_called_once_with()

    def test_hidden_cursor_is_optional(self):
        fake = fake_curses()
        fake.curs_set.side_effect = curses.error("no cursor")
        with mock.patch.object(di_terminal, "curses", fake):
            with CursesScreen() as screen:
                self.assertIsNotNone(screen.stdscr)
        fake.endwin.assert_called_once_with()

    def test_draw_clips_to_window(self):
        fake = fake_curses(height=5, width=20)
        stdscr = fake.initscr.return_value
        lines = [Line("title", "bold"), Line("")] + [Line("x" * 50)] * 8
        with mock.patch.object(di_terminal, "curses", fake):
            with CursesScreen() as screen:
                screen.draw(lines)
        usable = 20 - 2 * PAD_X
        self.assertEqual(
            stdscr.addnstr.call_args_list,
            [
                mock.call(PAD_Y, PAD_X, "title", usable, curses.A_BOLD),
                # Row 2 is the blank line and is skipped.
                mock.call(PAD_Y + 2, PAD_X, "x" * 50, usable, curses.A_NORMAL),
                mock.call(4, 0, FOOTER, 19),
            ],
        )
        stdscr.refresh.assert_called_once_with()

    def test_draw_too_narrow_writes_footer_only(self):
        fake = fake_curses(height=4, width=3)
        stdscr = fake.initscr.return_value
        with mock.patch.object(di_terminal, "curses", fake):
            with CursesScreen() as screen:
                screen.draw([Line("title", "bold")])
        stdscr.addnstr.assert_called_once_with(3, 0, FOOTER, 2)

    def test_poll_event_waits_tick_interval(self):
        fake = fake_curses()
        stdscr = fake.initscr.return_value
        stdscr.getch.return_value = ord("x")
        with mock.patch.object(di_terminal, "curses", fake):
            with CursesScreen() as screen:
                event = screen.poll_event(0.02)
        stdscr.timeout.assert_called_once_with(20)
        self.assertEqual(event, InputEvent("key", key="x"))

    def test_poll_event_drains_mouse(self):
        fake = fake_curses()
        fake.getmouse.side_effect = curses.error("no event")
        fake.initscr.return_value.getch.return_value = curses.KEY_MOUSE
        with mock.patch.object(di_terminal, "curses", fake):
            with CursesScreen() as screen:
                event = screen.poll_event(0.02)
        fake.getmouse.assert_called_once_with()
        self.assertEqual(event, InputEvent("mouse"))


class TestFatalTerminalError(unittest.TestCase):
    def test_cli_restores_terminal_and_exits_one(self):
        fake = fake_curses()
        fake.initscr.return_value.erase.side_effect = curses.error("write failed")
        stderr = io.StringIO()
        with mock.patch.object(di_terminal, "curses", fake), \
                mock.patch("di_daemon.setup_logging"), \
                mock.patch("di_daemon.probe_idle_source", return_value=None), \
                mock.patch("di_daemon.signal.signal"), \
                redirect_stderr(stderr):
            code = di_cli.main(["--no-window-close"])
        self.assertEqual(code, 1)
        fake.noraw.assert_called_once_with()
        fake.echo.assert_called_once_with()
        fake.endwin.assert_called_once_with()
        self.assertEqual(stderr.getvalue().strip(), "error: write failed")


if __name__ == "__main__":
    unittest.main()

#!/usr/bin/env python3
"""Curses screen: draws status lines and reports key/mouse input."""
from __future__ import annotations

import curses
from typing import Dict, Iterable, Optional

from di_models import InputEvent
from di_output import FOOTER, Line

CTRL_C = 3
PAD_X = 2
PAD_Y = 1

_COLOR_PAIRS = {
    "red": (1, curses.COLOR_RED),
    "yellow": (2, curses.COLOR_YELLOW),
    "green": (3, curses.COLOR_GREEN),
    "cyan": (4, curses.COLOR_CYAN),
}


class CursesScreen:
    """Full-screen status view; restores the terminal on exit."""

    def __init__(self):
        self.stdscr = None
        self.styles: Dict[str, int] = {}

    def __enter__(self) -> "CursesScreen":
        self.stdscr = curses.initscr()
        try:
            curses.noecho()
            # Raw mode delivers Control-C as a key instead of SIGINT.
            curses.raw()
            self.stdscr.keypad(True)
            try:
                curses.curs_set(0)
            except curses.error:
                pass
            curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
            self._init_styles()
        except Exception:
            self._restore()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._restore()

    def _restore(self) -> None:
        if self.stdscr is None:
            return
        try:
            self.stdscr.keypad(False)
            curses.noraw()
            curses.echo()
        finally:
            curses.endwin()
            self.stdscr = None

    def _init_styles(self) -> None:
        self.styles = {
            "normal": curses.A_NORMAL,
            "bold": curses.A_BOLD,
            "dim": curses.A_DIM,
        }
        if curses.has_colors():
            curses.start_color()
            try:
                curses.use_default_colors()
                background = -1
            except curses.error:
                background = curses.COLOR_BLACK
            for name, (pair, color) in _COLOR_PAIRS.items():
                curses.init_pair(pair, color, background)
                self.styles[name] = curses.color_pair(pair)
        else:
            self.styles["red"] = curses.A_BOLD | curses.A_REVERSE
            self.styles["yellow"] = curses.A_BOLD
            self.styles["green"] = curses.A_NORMAL
            self.styles["cyan"] = curses.A_UNDERLINE

    def draw(self, lines: Iterable[Line]) -> None:
        scr = self.stdscr
        scr.erase()
        height, width = scr.getmaxyx()
        usable = width - PAD_X * 2
        if usable > 0:
            for row, line in enumerate(lines):
                y = PAD_Y + row
                if y >= height - 1:
                    break
                if line.text:
                    attr = self.styles.get(line.style, curses.A_NORMAL)
                    scr.addnstr(y, PAD_X, line.text, usable, attr)
        if height > 0 and width > 1:
            scr.addnstr(height - 1, 0, FOOTER, width - 1)
        scr.refresh()

    def poll_event(self, timeout: float) -> Optional[InputEvent]:
        """Wait up to ``timeout`` seconds for a key press or mouse event."""
        self.stdscr.timeout(max(0, int(timeout * 1000)))
        ch = self.stdscr.getch()
        if ch == curses.KEY_MOUSE:
            try:
                curses.getmouse()
            except curses.error:
                pass
        return translate_key(ch)


def translate_key(ch: int) -> Optional[InputEvent]:
    if ch == -1 or ch == curses.KEY_RESIZE:
        return None
    if ch == curses.KEY_MOUSE:
        return InputEvent("mouse")
    if ch == CTRL_C:
        return InputEvent("key", key="ctrl+c", quit=True)
    if ch == ord("q"):
        return InputEvent("key", key="q", quit=True)
    if 0 <= ch < 256:
        return InputEvent("key", key=chr(ch))
    return InputEvent("key", key=f"#{ch}")

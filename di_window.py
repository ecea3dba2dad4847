#!/usr/bin/env python3
"""Foreground window lookup (best effort, X11 via xdotool)."""
from __future__ import annotations

import subprocess
from typing import Optional, Tuple


class WindowTracker:
    def current(self) -> Optional[str]:
        raise NotImplementedError

    def close_argv(self, window_id: str) -> Tuple[str, ...]:
        raise NotImplementedError


class NullWindowTracker(WindowTracker):
    """Never reports a window; phase 1 then closes nothing."""

    def current(self) -> Optional[str]:
        return None

    def close_argv(self, window_id: str) -> Tuple[str, ...]:
        return ()


class XdotoolWindowTracker(WindowTracker):
    def __init__(self, command: str = "xdotool", timeout: float = 2):
        self.command = command
        self.timeout = timeout

    def current(self) -> Optional[str]:
        return _run_xdotool([self.command, "getactivewindow"], self.timeout)

    def close_argv(self, window_id: str) -> Tuple[str, ...]:
        return (self.command, "windowclose", window_id)


def _run_xdotool(argv, timeout: float) -> Optional[str]:
    try:
        result = subprocess.run(
            argv,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError, UnicodeDecodeError):
        return None

    if result.returncode != 0:
        return None

    value = result.stdout.strip()
    return value if value else None

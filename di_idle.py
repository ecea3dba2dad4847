#!/usr/bin/env python3
"""System idle time (with graceful degradation to local input tracking)."""
from __future__ import annotations

import os
import subprocess
import sys
from typing import List, Optional

_IMPORT_ERROR: Optional[Exception] = None

try:
    import Quartz
except Exception as exc:  # pragma: no cover - non-macOS
    Quartz = None  # type: ignore
    _IMPORT_ERROR = exc


class IdleSource:
    name = "none"

    def query(self) -> Optional[float]:
        """Seconds since the last input event, or None if unavailable."""
        raise NotImplementedError


class QuartzIdleSource(IdleSource):
    name = "quartz"

    def query(self) -> Optional[float]:
        if Quartz is None:
            return None
        try:
            return float(
                Quartz.CGEventSourceSecondsSinceLastEventType(
                    Quartz.kCGEventSourceStateCombinedSessionState,
                    Quartz.kCGAnyInputEventType,
                )
            )
        except Exception:
            return None


class XprintidleIdleSource(IdleSource):
    name = "xprintidle"

    def __init__(self, command: str = "xprintidle", timeout: float = 2):
        self.command = command
        self.timeout = timeout

    def query(self) -> Optional[float]:
        try:
            result = subprocess.run(
                [self.command],
                check=False,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError, UnicodeDecodeError):
            return None

        if result.returncode != 0:
            return None
        try:
            millis = int(result.stdout.strip())
        except ValueError:
            return None
        return max(millis, 0) / 1000


def quartz_available() -> tuple[bool, Optional[str]]:
    if Quartz is None:
        if _IMPORT_ERROR:
            return False, str(_IMPORT_ERROR)
        return False, "PyObjC not installed"
    required = [
        "CGEventSourceSecondsSinceLastEventType",
        "kCGEventSourceStateCombinedSessionState",
        "kCGAnyInputEventType",
    ]
    missing = [name for name in required if not hasattr(Quartz, name)]
    if missing:
        return False, f"Quartz missing symbols: {', '.join(missing)}"
    return True, None


def candidate_sources() -> List[IdleSource]:
    sources: List[IdleSource] = []
    if sys.platform == "darwin" and quartz_available()[0]:
        sources.append(QuartzIdleSource())
    if os.environ.get("DISPLAY"):
        sources.append(XprintidleIdleSource())
    return sources


def probe_idle_source(candidates: Optional[List[IdleSource]] = None) -> Optional[IdleSource]:
    """Return the first source that answers a query, checked once at startup."""
    if candidates is None:
        candidates = candidate_sources()
    for source in candidates:
        if source.query() is not None:
            return source
    return None

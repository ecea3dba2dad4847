#!/usr/bin/env python3
"""Status view formatting (pure, no terminal access)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from di_config import Config
from di_models import PhaseSnapshot

TITLE = "drastic-idle"
FOOTER = "q/ctrl+c quit"

# Bar characters
BAR_FILLED = "█"
BAR_EMPTY = "░"

GAUGE_WIDTH = 30


@dataclass(frozen=True)
class Line:
    text: str
    style: str = "normal"


def format_duration(seconds: float) -> str:
    """Format seconds as 'm:ss.mmm' (e.g., '4:05.250')."""
    total_ms = max(0, int(seconds * 1000))
    ms = total_ms % 1000
    sec = (total_ms // 1000) % 60
    minutes = total_ms // 60_000
    return f"{minutes}:{sec:02d}.{ms:03d}"


def progress_bar(value: float, max_value: float, width: int = GAUGE_WIDTH) -> str:
    """Create a progress bar (e.g., '████████░░░░')."""
    if max_value <= 0:
        return BAR_EMPTY * width
    ratio = min(max(value / max_value, 0.0), 1.0)
    filled = int(ratio * width)
    empty = width - filled
    return BAR_FILLED * filled + BAR_EMPTY * empty


def phase_color(ratio: float) -> str:
    """Colour band for the fraction of a countdown still remaining."""
    if ratio <= 0.2:
        return "red"
    if ratio <= 0.5:
        return "yellow"
    return "green"


def phase2_label(config: Config) -> str:
    if config.phase2_action is None:
        return "exit"
    if config.phase2_action[-1] == "poweroff":
        return "power off"
    return " ".join(config.phase2_action)


def render(config: Config, snapshot: PhaseSnapshot, idle: float, now: float) -> List[Line]:
    lines = [
        Line(TITLE, "bold"),
        Line(""),
        Line(f"Idle {format_duration(idle)}"),
        Line(""),
    ]

    if snapshot.snooze_until is not None:
        rem = max(0.0, snapshot.snooze_until - now)
        lines.append(
            Line(f"Phase 1: close window ran (snoozed {format_duration(rem)})", "cyan")
        )
        lines.append(
            Line(f"Phase 2: starts in {format_duration(rem)} (after snooze)", "dim")
        )
    else:
        lines.extend(_phase1_lines(config, snapshot, idle))
        lines.extend(_phase2_lines(config, snapshot, now))

    lines.append(Line(""))
    source = "system" if snapshot.use_system_idle else "local input"
    lines.append(Line(f"Idle source: {source}", "dim"))
    lines.append(Line(f"Window: {snapshot.tracked_window or 'none'}", "dim"))
    return lines


def _phase1_lines(config: Config, snapshot: PhaseSnapshot, idle: float) -> List[Line]:
    threshold = config.phase1_threshold
    if snapshot.phase1_fired or idle >= threshold:
        return [Line("Phase 1: done", "cyan")]
    left = threshold - idle
    color = phase_color(left / threshold)
    return [
        Line(f"Phase 1: {format_duration(left)} until close window", color),
        Line(progress_bar(idle, threshold), color),
    ]


def _phase2_lines(config: Config, snapshot: PhaseSnapshot, now: float) -> List[Line]:
    if snapshot.phase2_start is None:
        return [Line("Phase 2: after Phase 1", "dim")]
    threshold = config.phase2_threshold
    elapsed = max(0.0, now - snapshot.phase2_start)
    rem = max(0.0, threshold - elapsed)
    color = phase_color(rem / threshold)
    return [
        Line(f"Phase 2: {format_duration(rem)} until {phase2_label(config)}", color),
        Line(progress_bar(elapsed, threshold), color),
    ]

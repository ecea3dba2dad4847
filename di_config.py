#!/usr/bin/env python3
"""Runtime configuration and command-line value parsing."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

DI_DIR = Path.home() / ".drastic-idle"
LOG_PATH = DI_DIR / "drastic-idle.log"

DEFAULT_PHASE1_SECONDS = 10
DEFAULT_PHASE2_SECONDS = 300
DEFAULT_AUTO_SNOOZE_SECONDS = 60
DEFAULT_PHASE1_CMD = ""
DEFAULT_PHASE2_CMD = "systemctl poweroff"
DEFAULT_TICK_MS = 20

Command = Tuple[str, ...]


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Config:
    """Thresholds and actions, fixed for the lifetime of the process."""
    phase1_threshold: float = DEFAULT_PHASE1_SECONDS
    phase2_threshold: float = DEFAULT_PHASE2_SECONDS
    snooze_duration: float = DEFAULT_AUTO_SNOOZE_SECONDS
    phase1_action: Optional[Command] = None
    phase2_action: Optional[Command] = tuple(DEFAULT_PHASE2_CMD.split())
    tick_interval: float = DEFAULT_TICK_MS / 1000

    def __post_init__(self) -> None:
        if self.phase1_threshold >= self.phase2_threshold:
            raise ConfigError("phase1 must be less than phase2")
        if self.snooze_duration < 0:
            raise ConfigError("auto-snooze must not be negative")
        if self.tick_interval <= 0:
            raise ConfigError("tick interval must be positive")

    @property
    def phase1_line(self) -> Optional[str]:
        """Phase-1 action as a single shell command line."""
        if not self.phase1_action:
            return None
        return " ".join(self.phase1_action)


def ensure_di_dir() -> None:
    """Ensure ~/.drastic-idle/ exists with correct permissions."""
    DI_DIR.mkdir(mode=0o700, exist_ok=True)


def parse_command_value(value: Optional[str]) -> Optional[Command]:
    """Split a command option; empty or 'none' disables the command."""
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == "none":
        return None
    parts = tuple(value.split())
    return parts or None


def positive_int(value: Optional[str], default: int) -> int:
    # Zero, negative or garbage keeps the default.
    if value is None:
        return default
    try:
        number = int(value.strip())
    except ValueError:
        return default
    return number if number > 0 else default


def non_negative_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        number = int(value.strip())
    except ValueError:
        return default
    return max(number, 0)


def build_config(
    phase1: Optional[str] = None,
    phase2: Optional[str] = None,
    auto_snooze: Optional[str] = None,
    phase1_cmd: Optional[str] = None,
    phase2_cmd: Optional[str] = None,
    tick_ms: Optional[str] = None,
) -> Config:
    """Build a validated Config from raw option strings."""
    return Config(
        phase1_threshold=positive_int(phase1, DEFAULT_PHASE1_SECONDS),
        phase2_threshold=positive_int(phase2, DEFAULT_PHASE2_SECONDS),
        snooze_duration=non_negative_int(auto_snooze, DEFAULT_AUTO_SNOOZE_SECONDS),
        phase1_action=parse_command_value(
            DEFAULT_PHASE1_CMD if phase1_cmd is None else phase1_cmd
        ),
        phase2_action=parse_command_value(
            DEFAULT_PHASE2_CMD if phase2_cmd is None else phase2_cmd
        ),
        tick_interval=positive_int(tick_ms, DEFAULT_TICK_MS) / 1000,
    )

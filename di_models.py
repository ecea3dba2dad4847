#!/usr/bin/env python3
"""Shared data models."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple, Union


class Phase(enum.IntEnum):
    ACTIVE = 0
    SNOOZED = 1
    PHASE2_COUNTDOWN = 2
    TERMINATED = 3


@dataclass
class PhaseState:
    last_input: float
    tracked_window: Optional[str] = None
    phase1_fired: bool = False
    snooze_until: Optional[float] = None
    phase2_start: Optional[float] = None


@dataclass(frozen=True)
class PhaseSnapshot:
    """Read-only copy of the machine state for display."""
    phase: Phase
    phase1_fired: bool
    snooze_until: Optional[float]
    phase2_start: Optional[float]
    last_input: float
    tracked_window: Optional[str]
    use_system_idle: bool


@dataclass(frozen=True)
class DetachedEffect:
    argv: Tuple[str, ...]
    label: str


@dataclass(frozen=True)
class AwaitedEffect:
    # None means the command is disabled and counts as immediate success.
    argv: Optional[Tuple[str, ...]]
    label: str


Effect = Union[DetachedEffect, AwaitedEffect]


@dataclass(frozen=True)
class TickOutcome:
    terminate: bool = False
    effects: Tuple[Effect, ...] = ()


@dataclass(frozen=True)
class InputEvent:
    kind: str
    key: Optional[str] = None
    quit: bool = False

#!/usr/bin/env python3
"""Idle-driven phase escalation (non-OS specific)."""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from di_config import Config
from di_models import (
    AwaitedEffect,
    DetachedEffect,
    Effect,
    Phase,
    PhaseSnapshot,
    PhaseState,
    TickOutcome,
)
from di_window import NullWindowTracker, WindowTracker

# System idle below this means the user is back, not a stale sample.
ACTIVITY_THRESHOLD = 2.0


class PhaseMachine:
    """Owns the PhaseState; the only code that changes it.

    Feed it one ``tick(idle, now)`` per loop iteration and one
    ``register_input(now)`` per local key or mouse event. Timestamps are
    monotonic seconds, so a run can be replayed without real time passing.
    """

    def __init__(
        self,
        config: Config,
        now: float,
        window_tracker: Optional[WindowTracker] = None,
        use_system_idle: bool = False,
    ):
        self.config = config
        self.window_tracker = window_tracker or NullWindowTracker()
        self.use_system_idle = use_system_idle
        self.terminated = False
        self.last_sample: Optional[Tuple[float, float]] = None
        self.state = PhaseState(
            last_input=now,
            tracked_window=self.window_tracker.current(),
        )

    @property
    def phase(self) -> Phase:
        if self.terminated:
            return Phase.TERMINATED
        if self.state.phase2_start is not None:
            return Phase.PHASE2_COUNTDOWN
        if self.state.snooze_until is not None:
            return Phase.SNOOZED
        return Phase.ACTIVE

    def snapshot(self) -> PhaseSnapshot:
        return PhaseSnapshot(
            phase=self.phase,
            phase1_fired=self.state.phase1_fired,
            snooze_until=self.state.snooze_until,
            phase2_start=self.state.phase2_start,
            last_input=self.state.last_input,
            tracked_window=self.state.tracked_window,
            use_system_idle=self.use_system_idle,
        )

    def idle_for(self, now: float, system_idle: Optional[float] = None) -> float:
        local = max(0.0, now - self.state.last_input)
        if not self.use_system_idle:
            return local
        if system_idle is not None:
            self.last_sample = (system_idle, now)
            return system_idle
        if self.last_sample is None:
            return local
        # A dropped poll ages the last good sample; local input still counts.
        sample, sampled_at = self.last_sample
        return min(sample + max(0.0, now - sampled_at), local)

    def register_input(self, now: float) -> None:
        if self.terminated:
            return
        self.state.last_input = now
        self._reset("input")

    def tick(self, idle: float, now: float) -> TickOutcome:
        if self.terminated:
            return TickOutcome(terminate=True)

        if self.use_system_idle and idle < ACTIVITY_THRESHOLD:
            self._reset("system idle")
            window = self.window_tracker.current()
            if window is not None:
                self.state.tracked_window = window

        state = self.state
        if state.snooze_until is not None:
            if now < state.snooze_until:
                return TickOutcome()
            state.snooze_until = None
            state.phase2_start = now
            logging.info("Snooze over, phase 2 countdown started")

        if state.phase2_start is not None:
            if now - state.phase2_start >= self.config.phase2_threshold:
                self.terminated = True
                logging.info("Phase 2 reached")
                return TickOutcome(
                    terminate=True,
                    effects=(AwaitedEffect(self.config.phase2_action, "phase 2 command"),),
                )

        if idle >= self.config.phase1_threshold and not state.phase1_fired:
            return TickOutcome(effects=self._fire_phase1(now))

        return TickOutcome()

    def _fire_phase1(self, now: float) -> Tuple[Effect, ...]:
        state = self.state
        state.phase1_fired = True
        if self.config.snooze_duration > 0:
            state.snooze_until = now + self.config.snooze_duration
        else:
            state.phase2_start = now
        logging.info(f"Phase 1 reached (window {state.tracked_window or 'none'})")

        effects: List[Effect] = []
        if state.tracked_window is not None:
            argv = self.window_tracker.close_argv(state.tracked_window)
            if argv:
                effects.append(DetachedEffect(argv, "window close"))
        line = self.config.phase1_line
        if line is not None:
            effects.append(DetachedEffect(("sh", "-c", line), "phase 1 command"))
        return tuple(effects)

    def _reset(self, reason: str) -> None:
        state = self.state
        if state.phase1_fired:
            logging.info(f"Activity ({reason}), escalation cancelled")
        state.phase1_fired = False
        state.snooze_until = None
        state.phase2_start = None

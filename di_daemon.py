#!/usr/bin/env python3
"""Tick loop tying idle sampling, phases, actions and the status view."""
from __future__ import annotations

import logging
import signal
import time
from pathlib import Path
from typing import Callable, Optional

from di_actions import ActionRunner
from di_config import LOG_PATH, Config, ensure_di_dir
from di_idle import IdleSource, probe_idle_source
from di_output import render
from di_phases import PhaseMachine
from di_terminal import CursesScreen
from di_window import NullWindowTracker, WindowTracker, XdotoolWindowTracker


class IdleDaemon:
    def __init__(
        self,
        config: Config,
        screen,
        idle_source: Optional[IdleSource] = None,
        window_tracker: Optional[WindowTracker] = None,
        runner: Optional[ActionRunner] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.running = True
        self.config = config
        self.screen = screen
        self.idle_source = idle_source
        self.runner = runner or ActionRunner()
        self.clock = clock
        self.machine = PhaseMachine(
            config,
            clock(),
            window_tracker=window_tracker,
            use_system_idle=idle_source is not None,
        )

    def run(self) -> int:
        signal.signal(signal.SIGTERM, self.handle_signal)
        signal.signal(signal.SIGHUP, self.handle_signal)

        if self.idle_source is None:
            logging.info("System idle time unavailable, using local input events")
        else:
            logging.info(f"Using {self.idle_source.name} idle time")
        logging.info(
            f"Started monitoring (phase1={self.config.phase1_threshold:g}s "
            f"phase2={self.config.phase2_threshold:g}s "
            f"snooze={self.config.snooze_duration:g}s)"
        )

        while self.running:
            if self.run_once():
                break
        logging.info("Stopped")
        return 0

    def run_once(self) -> bool:
        """One tick; returns True when the program should exit."""
        now = self.clock()
        sample = self.idle_source.query() if self.idle_source else None
        idle = self.machine.idle_for(now, sample)

        outcome = self.machine.tick(idle, now)
        self.runner.dispatch(outcome.effects)
        if outcome.terminate:
            return True

        self.screen.draw(render(self.config, self.machine.snapshot(), idle, now))

        event = self.screen.poll_event(self.config.tick_interval)
        if event is None:
            return False
        self.machine.register_input(self.clock())
        if event.quit:
            logging.info(f"Quit requested ({event.key})")
            return True
        return False

    def handle_signal(self, signum, _frame) -> None:
        logging.info(f"Received signal {signum}, shutting down")
        self.running = False


def setup_logging(log_path: Optional[Path] = None, verbose: bool = False) -> None:
    log_format = "[%(asctime)s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    if log_path is None:
        ensure_di_dir()
        log_path = LOG_PATH
    else:
        log_path.parent.mkdir(parents=True, exist_ok=True)

    # The terminal belongs to the status view, so log to a file only.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.FileHandler(str(log_path))],
    )


def main(
    config: Config,
    log_path: Optional[Path] = None,
    verbose: bool = False,
    close_windows: bool = True,
) -> int:
    setup_logging(log_path, verbose)
    idle_source = probe_idle_source()
    tracker = XdotoolWindowTracker() if close_windows else NullWindowTracker()
    with CursesScreen() as screen:
        daemon = IdleDaemon(config, screen, idle_source=idle_source, window_tracker=tracker)
        return daemon.run()

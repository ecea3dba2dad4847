#!/usr/bin/env python3
"""Execution of phase-triggered commands."""
from __future__ import annotations

import logging
import subprocess
from typing import Iterable, Optional

from di_models import AwaitedEffect, DetachedEffect, Effect

SPAWN_FAILED = 127


class ActionRunner:
    def dispatch(self, effects: Iterable[Effect]) -> Optional[int]:
        """Run effects in order; returns the awaited exit status, if any."""
        status: Optional[int] = None
        for effect in effects:
            if isinstance(effect, AwaitedEffect):
                status = self.run_awaited(effect)
            else:
                self.run_detached(effect)
        return status

    def run_detached(self, effect: DetachedEffect) -> None:
        if not effect.argv:
            return
        logging.debug(f"Spawning {effect.label}: {' '.join(effect.argv)}")
        try:
            subprocess.Popen(
                list(effect.argv),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            logging.debug(f"Could not spawn {effect.label}: {exc}")

    def run_awaited(self, effect: AwaitedEffect) -> int:
        if not effect.argv:
            logging.info(f"{effect.label}: no command configured")
            return 0
        logging.info(f"Running {effect.label}: {' '.join(effect.argv)}")
        try:
            result = subprocess.run(list(effect.argv), check=False)
        except OSError as exc:
            logging.warning(f"Could not run {effect.label}: {exc}")
            return SPAWN_FAILED
        if result.returncode != 0:
            logging.warning(f"{effect.label} exited with status {result.returncode}")
        return result.returncode

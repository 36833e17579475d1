"""Phase state machine driving one spine-seed generation run.

``spine -> ejection -> room_growth -> complete``. Each :meth:`step` performs
one unit of work in the current phase (one spine step, one spine tile
examined for ejection, one growth tick), which makes the run debuggable one
frame at a time. :meth:`run_to_completion` executes the whole batch and
freezes the state.
"""
from __future__ import annotations

import logging
import random
from typing import Optional

from .config import DungeonSettings
from .ejection import SeedEjector
from .rooms import RoomGrowthEngine
from .spine import SpineGrowthEngine
from .state import SpineSeedState

log = logging.getLogger(__name__)

SPINE = "spine"
EJECTION = "ejection"
ROOM_GROWTH = "room_growth"
COMPLETE = "complete"
PHASES = (SPINE, EJECTION, ROOM_GROWTH, COMPLETE)


def resolve_seed(settings: DungeonSettings, seed: Optional[int] = None) -> int:
    # 0 is a valid deterministic seed; None means pick one
    if seed is None:
        seed = settings.seed
    if seed is None:
        seed = random.randint(1, 1_000_000)
    return int(seed)


class SpineSeedGenerator:
    def __init__(self, settings: Optional[DungeonSettings] = None, seed: Optional[int] = None):
        self.settings = settings or DungeonSettings()
        self.seed = resolve_seed(self.settings, seed)
        self.state = SpineSeedState(self.settings.grid_width, self.settings.grid_height, self.seed)
        self._spine = SpineGrowthEngine(self.state, self.settings)
        self._ejector: Optional[SeedEjector] = None
        self._growth: Optional[RoomGrowthEngine] = None
        self._spine.start()

    @property
    def phase(self) -> str:
        return self.state.phase

    @property
    def is_complete(self) -> bool:
        return self.state.phase == COMPLETE

    def _advance(self, phase: str) -> None:
        log.debug("generator seed=%s entering phase %s", self.seed, phase)
        self.state.phase = phase

    def step(self) -> bool:
        """Do one unit of work. Returns False once the run is complete."""
        phase = self.state.phase
        if phase == SPINE:
            if not self._spine.step():
                self._spine.finish()
                self._ejector = SeedEjector(self.state, self.settings)
                self._advance(EJECTION)
            return True
        if phase == EJECTION:
            if not self._ejector.step():
                self._growth = RoomGrowthEngine(self.state, self.settings)
                self._advance(ROOM_GROWTH)
            return True
        if phase == ROOM_GROWTH:
            if not self._growth.step():
                self._growth.finish()
                self._advance(COMPLETE)
                return False
            return True
        return False

    def run_steps(self, count: int) -> int:
        """Run up to ``count`` steps; returns how many were executed."""
        done = 0
        while done < count and not self.is_complete:
            self.step()
            done += 1
        return done

    def run_phase_to_completion(self) -> str:
        """Finish the current phase and return the phase now active."""
        start = self.state.phase
        while self.state.phase == start and not self.is_complete:
            self.step()
        return self.state.phase

    def run_to_completion(self) -> SpineSeedState:
        if self.state.frozen:
            return self.state
        while not self.is_complete:
            self.step()
        self.state.freeze()
        return self.state


__all__ = ["SpineSeedGenerator", "resolve_seed", "PHASES", "SPINE", "EJECTION", "ROOM_GROWTH", "COMPLETE"]

"""Pipeline orchestration for dungeon generation.

``generate`` is the pure entry point: settings + seed in, ``DungeonData`` out.
The :class:`Dungeon` wrapper used by the HTTP layer and the CLI runs the same
phases with lightweight per-phase timing and attaches the analysis result.
"""
from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from flask import current_app, has_app_context

from ..logging_utils import get_logger
from .analysis import DungeonAnalysisResult, analyze
from .assembler import assemble_spine
from .config import DungeonSettings
from .generator import EJECTION, ROOM_GROWTH, SpineSeedGenerator, resolve_seed
from .metrics import collect_metrics, init_metrics
from .models import DungeonData

log = get_logger("delve.dungeon")


def generate(settings: Optional[DungeonSettings] = None, seed: Optional[int] = None) -> DungeonData:
    """Run every phase and assemble; identical (settings, seed) give identical output."""
    settings = settings or DungeonSettings()
    generator = SpineSeedGenerator(settings, seed)
    state = generator.run_to_completion()
    return assemble_spine(state, settings)


@dataclass
class Dungeon:
    settings: DungeonSettings = field(default_factory=DungeonSettings)
    seed: Optional[int] = None
    enable_metrics: bool = True

    def __post_init__(self):
        self.seed = resolve_seed(self.settings, self.seed)
        # Environment override support (tests set env vars rather than passing params)
        if "DUNGEON_ENABLE_GENERATION_METRICS" in os.environ:
            val = os.environ.get("DUNGEON_ENABLE_GENERATION_METRICS", "").lower()
            self.enable_metrics = val not in {"0", "false", "no", ""}
        # Flask app config overrides (highest precedence)
        if has_app_context() and "DUNGEON_ENABLE_GENERATION_METRICS" in current_app.config:
            self.enable_metrics = bool(current_app.config.get("DUNGEON_ENABLE_GENERATION_METRICS"))
        self.metrics: Dict[str, Any] = init_metrics() if self.enable_metrics else {}
        self._run_pipeline()

    @property
    def width(self) -> int:
        return self.data.grid_width

    @property
    def height(self) -> int:
        return self.data.grid_height

    @property
    def rooms(self):
        return self.data.rooms

    def _run_pipeline(self):
        """Execute ordered generation phases with per-phase timing.

        When metrics are enabled, ``phase_ms`` maps phase name -> duration (ms)
        and the summary counters are filled from the finished run.
        """
        phase_times: Dict[str, int] = {}

        def _phase(label, fn, *a, **k):
            if not self.enable_metrics:
                return fn(*a, **k)
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            return r

        start = time.perf_counter()
        generator = SpineSeedGenerator(self.settings, self.seed)
        _phase("spine", generator.run_phase_to_completion)
        if generator.phase == EJECTION:
            _phase("ejection", generator.run_phase_to_completion)
        if generator.phase == ROOM_GROWTH:
            _phase("room_growth", generator.run_phase_to_completion)
        self.state = generator.run_to_completion()
        self.data: DungeonData = _phase("assemble", assemble_spine, self.state, self.settings)
        self.analysis: DungeonAnalysisResult = _phase("analyze", analyze, self.data)
        runtime_ms = int((time.perf_counter() - start) * 1000)

        if self.enable_metrics:
            collect_metrics(self.metrics, self.state, self.data, self.analysis)
            self.metrics["runtime_ms"] = runtime_ms
            self.metrics["phase_ms"] = phase_times
        log.info(
            event="dungeon_generated",
            seed=self.seed,
            size=f"{self.data.grid_width}x{self.data.grid_height}",
            rooms=len(self.data.rooms),
            unreachable=len(self.analysis.unreachable_rooms),
            runtime_ms=runtime_ms,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "dungeon": self.data.to_dict(),
            "analysis": self.analysis.to_dict(),
            "metrics": self.metrics,
        }


__all__ = ["Dungeon", "generate"]

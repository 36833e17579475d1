"""Mutable working state for one spine-seed generation run.

A :class:`SpineSeedState` is created by the generator, mutated by each phase
engine, and frozen once the run completes. Nothing here is module-level, so
independent runs can proceed side by side.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Optional, Set, Tuple

from .cells import Coord
from .errors import StateFrozenError
from .rng import RandomSource


class SeedOutcome(Enum):
    ALIVE = "alive"
    DEAD = "dead"
    ABSORBED_AS_WALL = "wall"


class _Freezable:
    _frozen = False

    def __setattr__(self, name, value):
        if self._frozen:
            raise StateFrozenError(f"{type(self).__name__}.{name} is read-only after generation completed")
        super().__setattr__(name, value)

    def _freeze(self):
        object.__setattr__(self, "_frozen", True)


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width - 1

    @property
    def bottom(self) -> int:
        return self.y + self.height - 1

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> Coord:
        return (self.x + self.width // 2, self.y + self.height // 2)

    def contains(self, pos: Coord) -> bool:
        return self.x <= pos[0] <= self.right and self.y <= pos[1] <= self.bottom

    def expanded(self, margin: int) -> "Rect":
        return Rect(self.x - margin, self.y - margin, self.width + 2 * margin, self.height + 2 * margin)

    def cells(self):
        for ix in range(self.x, self.x + self.width):
            for iy in range(self.y, self.y + self.height):
                yield ix, iy

    def to_dict(self):
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass
class SpineTile(_Freezable):
    x: int
    y: int
    direction: str
    is_fork_point: bool = False
    branch_id: int = 0
    order: int = 0

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)


@dataclass
class RoomSeed(_Freezable):
    id: str
    origin: Coord
    source: Coord
    direction: str
    target_width: int
    target_height: int
    bounds: Rect
    outcome: SeedOutcome = SeedOutcome.ALIVE
    cull_reason: Optional[str] = None
    birth_order: int = 0
    tier: int = 0
    partner_index: Optional[int] = None
    strict_partner: bool = False
    config_id: Optional[str] = None
    tags: Tuple[str, ...] = ()
    complete: bool = False
    blocked: Set[str] = field(default_factory=set)

    @property
    def is_alive(self) -> bool:
        return self.outcome is SeedOutcome.ALIVE

    @property
    def is_dead(self) -> bool:
        return self.outcome is SeedOutcome.DEAD

    @property
    def is_wall_seed(self) -> bool:
        return self.outcome is SeedOutcome.ABSORBED_AS_WALL

    def kill(self, reason: str) -> None:
        self.outcome = SeedOutcome.DEAD
        self.cull_reason = reason
        self.complete = True

    def absorb_as_wall(self) -> None:
        self.outcome = SeedOutcome.ABSORBED_AS_WALL
        self.complete = True


class SpineSeedState(_Freezable):
    def __init__(self, width: int, height: int, seed: int):
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self.seed = seed
        self.rng = RandomSource(seed)
        self.spine: List[SpineTile] = []
        self.spine_index: Dict[Coord, int] = {}
        # Footprint of the (possibly wide) spine; edges are wall-tagged, never floor
        self.spine_floor: Set[Coord] = set()
        self.spine_edges: Set[Coord] = set()
        self.seeds: List[RoomSeed] = []
        self.forks_used = 0
        self.phase = "spine"
        self.steps = 0

    def in_bounds(self, pos: Coord) -> bool:
        return 0 <= pos[0] < self.width and 0 <= pos[1] < self.height

    def add_spine_tile(self, pos: Coord, direction: str, branch_id: int) -> SpineTile:
        tile = SpineTile(pos[0], pos[1], direction, branch_id=branch_id, order=len(self.spine))
        self.spine_index[pos] = len(self.spine)
        self.spine.append(tile)
        return tile

    def alive_seeds(self) -> List[RoomSeed]:
        return [s for s in self.seeds if s.is_alive]

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Make the state read-only; called once the run completes."""
        for tile in self.spine:
            tile._freeze()
        for seed in self.seeds:
            seed.blocked = frozenset(seed.blocked)
            seed._freeze()
        self.spine = tuple(self.spine)
        self.seeds = tuple(self.seeds)
        self.spine_index = MappingProxyType(dict(self.spine_index))
        self.spine_floor = frozenset(self.spine_floor)
        self.spine_edges = frozenset(self.spine_edges)
        self._freeze()


__all__ = ["SeedOutcome", "Rect", "SpineTile", "RoomSeed", "SpineSeedState"]

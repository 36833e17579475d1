"""Room growth: expand every live seed into a bounded rectangle.

All growing rooms advance once per tick in a freshly shuffled order, so
birth order carries no advantage. An edge that collides once stays blocked.
Strict-symmetry partners grow in lockstep with mirrored directions.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .cells import EAST, NORTH, SOUTH, WEST, opposite
from .state import Rect, RoomSeed, SpineSeedState

log = logging.getLogger(__name__)

EDGES = (NORTH, EAST, SOUTH, WEST)


def grown(rect: Rect, edge: str) -> Rect:
    if edge == NORTH:
        return Rect(rect.x, rect.y - 1, rect.width, rect.height + 1)
    if edge == SOUTH:
        return Rect(rect.x, rect.y, rect.width, rect.height + 1)
    if edge == WEST:
        return Rect(rect.x - 1, rect.y, rect.width + 1, rect.height)
    return Rect(rect.x, rect.y, rect.width + 1, rect.height)


def strip(rect: Rect, edge: str):
    """Cells added when ``rect`` grows one tile past ``edge``."""
    if edge == NORTH:
        return [(x, rect.y - 1) for x in range(rect.x, rect.right + 1)]
    if edge == SOUTH:
        return [(x, rect.bottom + 1) for x in range(rect.x, rect.right + 1)]
    if edge == WEST:
        return [(rect.x - 1, y) for y in range(rect.y, rect.bottom + 1)]
    return [(rect.right + 1, y) for y in range(rect.y, rect.bottom + 1)]


def _overlaps(a: Rect, b: Rect) -> bool:
    return not (a.right < b.x or b.right < a.x or a.bottom < b.y or b.bottom < a.y)


def mirrored_edge(edge: str, ejection_direction: str) -> str:
    """Edge a mirrored partner grows when its twin grows ``edge``."""
    axis_horizontal = ejection_direction in (EAST, WEST)
    if (edge in (EAST, WEST)) == axis_horizontal:
        return opposite(edge)
    return edge


class RoomGrowthEngine:
    def __init__(self, state: SpineSeedState, settings):
        self.state = state
        self.settings = settings
        self.rng = state.rng
        self.budget = state.width * state.height + 1
        self.ticks = 0
        self.rooms: List[RoomSeed] = state.alive_seeds()
        self._by_birth: Dict[int, RoomSeed] = {s.birth_order: s for s in state.seeds}

    def _wants(self, seed: RoomSeed, edge: str) -> bool:
        if edge in seed.blocked:
            return False
        if edge in (EAST, WEST):
            return seed.bounds.width < seed.target_width
        return seed.bounds.height < seed.target_height

    def _candidates(self, seed: RoomSeed) -> List[str]:
        return [edge for edge in EDGES if self._wants(seed, edge)]

    def _fits(self, seed: RoomSeed, edge: str) -> bool:
        state = self.state
        block_on_spine = self.settings.spine.spine_acts_as_wall
        cells = strip(seed.bounds, edge)
        for pos in cells:
            if not state.in_bounds(pos):
                return False
            if block_on_spine and (pos in state.spine_floor or pos in state.spine_edges):
                return False
        for other in self.rooms:
            if other is seed:
                continue
            buffer = other.bounds.expanded(1)
            if any(buffer.contains(pos) for pos in cells):
                return False
        return True

    def _partner(self, seed: RoomSeed) -> Optional[RoomSeed]:
        if not seed.strict_partner or seed.partner_index is None:
            return None
        partner = self._by_birth.get(seed.partner_index)
        if partner is None or not partner.is_alive or partner.complete:
            return None
        return partner

    def step(self) -> bool:
        """Run one growth tick. Returns False once every room has stopped."""
        active = [s for s in self.rooms if not s.complete]
        if not active or self.ticks >= self.budget:
            for seed in active:
                seed.complete = True
            return False
        self.ticks += 1
        order = list(active)
        self.rng.shuffle(order)
        handled = set()
        for seed in order:
            if seed.complete or seed.birth_order in handled:
                continue
            partner = self._partner(seed)
            if partner is not None:
                handled.add(partner.birth_order)
                self._grow_pair(seed, partner)
            else:
                self._grow_single(seed)
            handled.add(seed.birth_order)
        return any(not s.complete for s in self.rooms)

    def _grow_single(self, seed: RoomSeed) -> None:
        candidates = self._candidates(seed)
        if not candidates:
            seed.complete = True
            return
        edge = self.rng.choice(candidates)
        if self._fits(seed, edge):
            seed.bounds = grown(seed.bounds, edge)
        else:
            seed.blocked.add(edge)

    def _grow_pair(self, seed: RoomSeed, partner: RoomSeed) -> None:
        candidates = [
            edge
            for edge in self._candidates(seed)
            if self._wants(partner, mirrored_edge(edge, seed.direction))
        ]
        if not candidates:
            seed.complete = True
            partner.complete = True
            return
        edge = self.rng.choice(candidates)
        twin = mirrored_edge(edge, seed.direction)
        new_seed, new_partner = grown(seed.bounds, edge), grown(partner.bounds, twin)
        # the two new strips are only checked against current bounds, so recheck the pair
        apart = not _overlaps(new_seed.expanded(1), new_partner)
        if apart and self._fits(seed, edge) and self._fits(partner, twin):
            seed.bounds = new_seed
            partner.bounds = new_partner
        else:
            seed.blocked.add(edge)
            partner.blocked.add(twin)

    def finish(self) -> None:
        log.debug(
            "room growth complete after %d ticks: %d rooms", self.ticks, len(self.rooms)
        )


__all__ = ["RoomGrowthEngine", "grown", "strip", "mirrored_edge"]

"""Spine growth: the branching corridor skeleton rooms attach to.

Growth is head based. Every step advances each live head by exactly one tile
or retires it, so a run never exceeds the grid-area step budget. Organic
heads pick continue / turn / branch by weight; waypoint heads (used by the S,
U and F overrides) walk fixed legs and stop when a leg is blocked.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .cells import NORTH, EAST, SOUTH, WEST, Coord, neighbors4, rotate_left, rotate_right, step
from .state import SpineSeedState

log = logging.getLogger(__name__)

CONTINUE_WEIGHT = 1.0
TURN_BASE = 0.5
BRANCH_BASE = 0.15


@dataclass
class _Head:
    pos: Coord
    direction: str
    branch_id: int
    waypoints: List[Coord] = field(default_factory=list)
    is_trunk: bool = False


class SpineGrowthEngine:
    def __init__(self, state: SpineSeedState, settings):
        self.state = state
        self.settings = settings
        self.rng = state.rng
        self.heads: List[_Head] = []
        self.budget = state.width * state.height
        self._next_branch = 1
        self.started = False

    # -- setup -----------------------------------------------------------------
    def start(self) -> None:
        """Place the first spine tile and the initial head(s)."""
        state = self.state
        w, h = state.width, state.height
        start_x = w // 2
        start_y = max(0, h - 2)
        waypoints: List[Coord] = []
        is_trunk = False
        override = str(self.settings.turn_override).upper()
        if override == "F" and self.settings.spine.max_forks > 0:
            trunk = int(h * (0.2 + self.rng.next() * 0.2))
            waypoints.append((start_x, max(0, start_y - trunk)))
            is_trunk = True
        elif override in ("S", "U"):
            go_left = self.rng.next() < 0.5
            start_x = int(w * (0.25 if go_left else 0.75))
            cross_x = int(w * (0.75 if go_left else 0.25))
            cross_y = int(h * (0.2 + self.rng.next() * 0.6))
            final_y = 2 if override == "S" else h - 2
            waypoints = [(start_x, cross_y), (cross_x, cross_y), (cross_x, min(max(0, final_y), h - 1))]
        start_x = min(max(0, start_x), w - 1)
        state.add_spine_tile((start_x, start_y), NORTH, branch_id=0)
        self.heads.append(_Head((start_x, start_y), NORTH, 0, waypoints, is_trunk))
        self.started = True

    # -- validation ----------------------------------------------------------
    def _valid_organic(self, pos: Coord, head_pos: Coord) -> bool:
        state = self.state
        if not state.in_bounds(pos) or pos in state.spine_index:
            return False
        # never run alongside existing spine, only touch the tile we grew from
        return all(n == head_pos or n not in state.spine_index for n in neighbors4(pos))

    def _valid_waypoint(self, pos: Coord) -> bool:
        return self.state.in_bounds(pos) and pos not in self.state.spine_index

    # -- growth ----------------------------------------------------------------
    def step(self) -> bool:
        """Advance every live head once. Returns False when growth has ended."""
        if not self.started:
            self.start()
        if not self.heads or self.state.steps >= self.budget:
            self.heads = []
            return False
        survivors: List[_Head] = []
        spawned: List[_Head] = []
        for head in list(self.heads):
            if self.state.steps >= self.budget:
                break
            self.state.steps += 1
            if head.waypoints:
                alive = self._grow_waypoint(head, spawned)
            else:
                alive = self._grow_organic(head, spawned)
            if alive:
                survivors.append(head)
        self.heads = survivors + spawned
        return bool(self.heads) and self.state.steps < self.budget

    def _place(self, head: _Head, pos: Coord, direction: str) -> None:
        self.state.add_spine_tile(pos, direction, head.branch_id)
        head.pos = pos
        head.direction = direction

    def _new_branch_id(self) -> int:
        branch = self._next_branch
        self._next_branch += 1
        return branch

    def _grow_waypoint(self, head: _Head, spawned: List[_Head]) -> bool:
        while head.waypoints and head.pos == head.waypoints[0]:
            head.waypoints.pop(0)
        if not head.waypoints:
            if head.is_trunk:
                self._spawn_fork_heads(head, spawned)
            return False
        tx, ty = head.waypoints[0]
        x, y = head.pos
        if tx != x:
            direction = EAST if tx > x else WEST
        else:
            direction = NORTH if ty < y else SOUTH
        nxt = step(head.pos, direction)
        if not self._valid_waypoint(nxt):
            return False
        self._place(head, nxt, direction)
        return True

    def _spawn_fork_heads(self, trunk: _Head, spawned: List[_Head]) -> None:
        state = self.state
        roll = self.rng.next()
        if roll < 0.3:
            pattern = "AB"
        elif roll < 0.6:
            pattern = "AC"
        elif roll < 0.9:
            pattern = "BC"
        else:
            pattern = "ABC"
        remaining = self.settings.spine.max_forks - state.forks_used
        pattern = pattern[: max(1, remaining) + 1]
        x, y = trunk.pos
        for label in pattern:
            if label == "A":
                head = _Head(trunk.pos, NORTH, self._new_branch_id(), [(x, 0)])
            elif label == "B":
                target_x = int(state.width * (0.2 + self.rng.next() * 0.1))
                head = _Head(trunk.pos, WEST, self._new_branch_id(), [(target_x, y), (target_x, 0)])
            else:
                target_x = int(state.width * (0.7 + self.rng.next() * 0.1))
                head = _Head(trunk.pos, EAST, self._new_branch_id(), [(target_x, y), (target_x, 0)])
            spawned.append(head)
        state.spine[state.spine_index[trunk.pos]].is_fork_point = True
        state.forks_used += len(pattern) - 1
        log.debug("spine fork pattern %s at %s", pattern, trunk.pos)

    def _grow_organic(self, head: _Head, spawned: List[_Head]) -> bool:
        settings = self.settings
        forward = step(head.pos, head.direction)
        forward_ok = self._valid_organic(forward, head.pos)
        sides = (rotate_left(head.direction), rotate_right(head.direction))
        options = []
        if forward_ok:
            options.append((("continue", head.direction), CONTINUE_WEIGHT))
        if not settings.force_straight or not forward_ok:
            turn_weight = TURN_BASE / (1 + max(0, settings.turn_penalty))
            for side in sides:
                if self._valid_organic(step(head.pos, side), head.pos):
                    options.append((("turn", side), turn_weight))
        if forward_ok and self.state.forks_used < settings.spine.max_forks:
            branch_weight = BRANCH_BASE / (1 + max(0, settings.branch_penalty))
            for side in sides:
                if self._valid_organic(step(head.pos, side), head.pos):
                    options.append((("branch", side), branch_weight))
        if not options:
            return False
        action, direction = self.rng.weighted_choice(options)
        if action == "branch":
            self._branch(head, direction, spawned)
        else:
            self._place(head, step(head.pos, direction), direction)
        return True

    def _branch(self, head: _Head, side: str, spawned: List[_Head]) -> None:
        state = self.state
        fork_pos = head.pos
        state.spine[state.spine_index[fork_pos]].is_fork_point = True
        state.forks_used += 1
        branch = _Head(fork_pos, side, self._new_branch_id())
        self._place(head, step(fork_pos, head.direction), head.direction)
        self._place(branch, step(fork_pos, side), side)
        spawned.append(branch)

    # -- footprint -------------------------------------------------------------
    def finish(self) -> None:
        """Stamp the spine footprint (floor plus wall-tagged edges)."""
        apply_footprint(self.state, self.settings.spine.spine_width)
        log.debug(
            "spine complete: %d tiles, %d forks", len(self.state.spine), self.state.forks_used
        )


def apply_footprint(state: SpineSeedState, spine_width: Optional[int]) -> None:
    """Recompute ``spine_floor`` / ``spine_edges`` from the current spine tiles.

    A width of ``2r + 1`` stamps ``r`` tiles either side, perpendicular to each
    tile's heading; the outermost offset is wall-tagged and floor always wins.
    """
    radius = max(0, (int(spine_width or 1) - 1) // 2)
    floor = set()
    edges = set()
    for tile in state.spine:
        floor.add(tile.pos)
        if radius == 0:
            continue
        across = rotate_right(tile.direction)
        for offset in range(-radius, radius + 1):
            if offset == 0:
                continue
            pos = step(tile.pos, across, offset)
            if not state.in_bounds(pos):
                continue
            if abs(offset) == radius:
                edges.add(pos)
            else:
                floor.add(pos)
    state.spine_floor = floor
    state.spine_edges = edges - floor


__all__ = ["SpineGrowthEngine", "apply_footprint", "TURN_BASE", "BRANCH_BASE"]

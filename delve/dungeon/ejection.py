"""Seed ejection along the grown spine.

Walks the spine in growth order with an interval countdown. Each event ejects
``ejection_count`` tiers of seeds perpendicular to the spine tile's heading;
tiers stack outward. Under strict symmetry a tier is mirrored across the spine
with identical distance and size. Landing rules decide each seed's outcome:

* dud roll (non-mandatory configs only) -> DEAD ("dud")
* wall-tagged spine edge -> ABSORBED_AS_WALL
* spine floor (when the spine acts as wall), another room, or its
  one-tile buffer -> DEAD ("collision")
* manual ``type: wall`` -> ABSORBED_AS_WALL
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .cells import Coord, opposite, rotate_left, rotate_right, step
from .manual_seeds import ManualSeedConfig, expand_repeats, virtual_config
from .spine import apply_footprint
from .state import Rect, RoomSeed, SpineSeedState, SpineTile

log = logging.getLogger(__name__)

MIN_TIER_GAP = 2


class SeedEjector:
    def __init__(self, state: SpineSeedState, settings):
        self.state = state
        self.settings = settings
        self.rng = state.rng
        self.ejection = settings.ejection
        self.limit = max(0, int(settings.seed_count))
        self.queue: List[ManualSeedConfig] = expand_repeats(settings.manual_seed_queue or [])
        self.virtual = virtual_config(settings)
        self.cursor = 0
        self.last_ejecting = -1
        self.countdown = self._roll_interval()
        self.done = False

    def _roll_interval(self) -> int:
        return self.rng.next_int(self.ejection.min_interval, self.ejection.max_interval)

    @property
    def remaining(self) -> int:
        return self.limit - len(self.state.seeds)

    def step(self) -> bool:
        """Process one spine tile. Returns False once ejection has finished."""
        if self.done:
            return False
        if self.remaining <= 0 or self.cursor >= len(self.state.spine):
            self.finish()
            return False
        tile = self.state.spine[self.cursor]
        self.cursor += 1
        self.countdown -= 1
        if self.countdown <= 0:
            if self._eject_event(tile):
                self.last_ejecting = tile.order
            self.countdown = self._roll_interval()
        return True

    def finish(self) -> None:
        """Trim the unused spine tail once the seed limit has been reached."""
        if self.done:
            return
        self.done = True
        state = self.state
        if self.remaining <= 0 and 0 <= self.last_ejecting < len(state.spine) - 1:
            trimmed = len(state.spine) - self.last_ejecting - 1
            # growth order guarantees every prefix of the spine is connected
            del state.spine[self.last_ejecting + 1:]
            state.spine_index = {tile.pos: tile.order for tile in state.spine}
            apply_footprint(state, self.settings.spine.spine_width)
            log.debug("trimmed %d unused spine tiles", trimmed)
        log.debug("ejection complete: %d seeds", len(state.seeds))

    # -- events ----------------------------------------------------------------
    def _next_config(self) -> ManualSeedConfig:
        if self.queue:
            return self.queue.pop(0)
        return self.virtual

    def _resolve_sides(self, tile: SpineTile, config: ManualSeedConfig) -> List[str]:
        left, right = rotate_left(tile.direction), rotate_right(tile.direction)
        side = config.side or self.ejection.ejection_side
        if side == "left":
            return [left]
        if side == "right":
            return [right]
        if side == "both":
            return [left, right]
        return [self.rng.choice((left, right))]

    def _strict_for_tier(self, tier: int) -> bool:
        flags = (
            self.settings.symmetry_strict_primary,
            self.settings.symmetry_strict_secondary,
            self.settings.symmetry_strict_tertiary,
        )
        return bool(flags[min(tier, len(flags) - 1)])

    def _eject_event(self, tile: SpineTile) -> bool:
        config = self._next_config()
        sides = self._resolve_sides(tile, config)
        mirror_roll = self.rng.chance(self.settings.symmetry / 100.0)
        tiers = max(1, int(self.ejection.ejection_count))
        offsets = {side: 0 for side in sides}
        ejected = False
        for tier in range(tiers):
            mirrored = mirror_roll and config.allow_mirror and self._strict_for_tier(tier)
            for side in sides[:1] if mirrored else sides:
                needed = 2 if mirrored else 1
                if self.remaining < needed:
                    return ejected
                distance = self._roll_range(config.distance, self.virtual.distance)
                if tier:
                    distance = max(MIN_TIER_GAP, distance)
                offsets[side] += distance
                width = self._roll_range(config.width, self.virtual.width)
                height = self._roll_range(config.height, self.virtual.height)
                first = self._emit(tile, side, offsets[side], width, height, tier, config, mirrored)
                if mirrored:
                    twin = opposite(side)
                    second = self._emit(tile, twin, offsets[side], width, height, tier, config, True)
                    # the twin side now holds a seed at this distance too
                    if twin in offsets:
                        offsets[twin] = max(offsets[twin], offsets[side])
                    if first is not None and second is not None:
                        first.partner_index = second.birth_order
                        second.partner_index = first.birth_order
                    ejected = ejected or second is not None
                ejected = ejected or first is not None
            if tier + 1 < tiers and self.queue:
                config = self._next_config()
        return ejected

    def _roll_range(self, value, fallback) -> int:
        return (value or fallback).roll(self.rng)

    def _emit(
        self,
        tile: SpineTile,
        side: str,
        distance: int,
        width: int,
        height: int,
        tier: int,
        config: ManualSeedConfig,
        mirrored: bool,
    ) -> Optional[RoomSeed]:
        state = self.state
        origin = step(tile.pos, side, distance)
        if not state.in_bounds(origin):
            return None
        birth = len(state.seeds)
        seed = RoomSeed(
            id=self._seed_id(config, birth),
            origin=origin,
            source=tile.pos,
            direction=side,
            target_width=max(1, width),
            target_height=max(1, height),
            bounds=Rect(origin[0], origin[1], 1, 1),
            birth_order=birth,
            tier=tier,
            strict_partner=mirrored,
            config_id=config.id,
            tags=config.tags,
        )
        outcome, reason = self._landing(origin, config)
        if outcome == "dead":
            seed.kill(reason)
        elif outcome == "wall":
            seed.absorb_as_wall()
        state.seeds.append(seed)
        return seed

    def _seed_id(self, config: ManualSeedConfig, birth: int) -> str:
        if config.id and all(s.id != config.id for s in self.state.seeds):
            return config.id
        return f"room-{birth}"

    def _landing(self, origin: Coord, config: ManualSeedConfig) -> Tuple[str, Optional[str]]:
        state = self.state
        if not config.mandatory and self.rng.chance(self.ejection.dud_chance):
            return "dead", "dud"
        if origin in state.spine_edges:
            return "wall", None
        if origin in state.spine_floor and self.settings.spine.spine_acts_as_wall:
            return "dead", "collision"
        for other in state.seeds:
            if other.is_alive and other.bounds.expanded(1).contains(origin):
                return "dead", "collision"
        if config.type == "wall":
            return "wall", None
        return "alive", None


__all__ = ["SeedEjector"]

"""Object placement: stairs, doors and traps.

Decoration draws from a stream derived from the run seed rather than the
generation stream, so assembling the same state twice places the same
objects.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .cells import Coord, neighbors4
from .models import DungeonObject
from .rng import RandomSource

log = logging.getLogger(__name__)

TRAP_CHANCE = 0.10
TRAP_MIN_LENGTH = 3

# d100 roll thresholds, checked in order
DOOR_TABLE = (
    (5, "secret"),
    (15, "archway"),
    (45, "door"),
    (80, "locked"),
    (90, "portcullis"),
    (100, "barred"),
)


def roll_door_type(rng: RandomSource) -> str:
    roll = rng.next_int(1, 100)
    for threshold, door_type in DOOR_TABLE:
        if roll <= threshold:
            return door_type
    return DOOR_TABLE[-1][1]


def _rotation(door: Coord, room_cells: Sequence[Coord]) -> int:
    """0 for doors in a north/south wall, 90 for east/west walls."""
    x, y = door
    for cx, cy in room_cells:
        if cx == x and abs(cy - y) == 1:
            return 0
    return 90


def place_doors(
    tributaries: Mapping[str, Tuple[str, Sequence[Coord]]],
    room_rects: Mapping[str, object],
    rng: RandomSource,
) -> Dict[Coord, Tuple[str, int]]:
    """Door at each tributary's first tile outside its room.

    ``tributaries`` maps corridor id -> (room id, tiles ordered from the room
    outward). Doors touching another door are downgraded to archways.
    """
    doors: Dict[Coord, Tuple[str, int]] = {}
    for corridor_id in sorted(tributaries):
        room_id, tiles = tributaries[corridor_id]
        if not tiles:
            continue
        rect = room_rects[room_id]
        first = tiles[0]
        touching = [c for c in neighbors4(first) if rect.contains(c)]
        if not touching:
            continue
        doors[first] = (roll_door_type(rng), _rotation(first, touching))
    for pos in sorted(doors):
        if any(n in doors for n in neighbors4(pos)):
            doors[pos] = ("archway", doors[pos][1])
    return doors


def place_traps(
    tributaries: Mapping[str, Tuple[str, Sequence[Coord]]],
    doors: Mapping[Coord, object],
    rng: RandomSource,
) -> List[Coord]:
    traps = []
    for corridor_id in sorted(tributaries):
        _, tiles = tributaries[corridor_id]
        if len(tiles) < TRAP_MIN_LENGTH:
            continue
        middle = tiles[len(tiles) // 2]
        if middle in doors:
            continue
        if rng.chance(TRAP_CHANCE):
            traps.append(middle)
    return traps


def build_objects(
    entrance: Coord,
    exit_pos: Optional[Coord],
    doors: Mapping[Coord, Tuple[str, int]],
    traps: Sequence[Coord],
) -> Tuple[DungeonObject, ...]:
    objects = [DungeonObject("stairs_up-0", "stairs_up", entrance[0], entrance[1])]
    if exit_pos is not None:
        objects.append(DungeonObject("stairs_down-0", "stairs_down", exit_pos[0], exit_pos[1]))
    for i, pos in enumerate(sorted(doors)):
        door_type, rotation = doors[pos]
        objects.append(DungeonObject(f"door-{i}", "door", pos[0], pos[1], rotation, door_type))
    for i, pos in enumerate(sorted(traps)):
        objects.append(DungeonObject(f"trap-{i}", "trap", pos[0], pos[1]))
    log.debug("placed %d doors, %d traps", len(doors), len(traps))
    return tuple(objects)


__all__ = ["DOOR_TABLE", "roll_door_type", "place_doors", "place_traps", "build_objects"]

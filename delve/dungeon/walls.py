"""Floor / wall rasterization.

Pure set arithmetic over ``(x, y)`` tuples: the result never depends on the
order floor tiles are visited in.
"""
from typing import FrozenSet, Iterable, Tuple

from .cells import Coord, neighbors8
from .state import Rect

# walls just outside the grid are still recorded so edge rooms get a full ring
RELAXED_BOUND = 2


def build_floor_set(rooms: Iterable[Rect], corridor_tiles: Iterable[Coord]) -> FrozenSet[Coord]:
    floor = set()
    for rect in rooms:
        floor.update(rect.cells())
    floor.update(corridor_tiles)
    return frozenset(floor)


def find_wall_positions(floor_set: Iterable[Coord], width: int, height: int) -> FrozenSet[Coord]:
    floor = floor_set if isinstance(floor_set, (set, frozenset)) else set(floor_set)
    walls = set()
    for pos in floor:
        for nx, ny in neighbors8(pos):
            if (nx, ny) in floor:
                continue
            if -RELAXED_BOUND <= nx < width + RELAXED_BOUND and -RELAXED_BOUND <= ny < height + RELAXED_BOUND:
                walls.add((nx, ny))
    return frozenset(walls)


def calculate_walls(
    rooms: Iterable[Rect], corridor_tiles: Iterable[Coord], width: int, height: int
) -> Tuple[FrozenSet[Coord], FrozenSet[Coord]]:
    """Return ``(floor_set, wall_set)``."""
    floor = build_floor_set(rooms, corridor_tiles)
    return floor, find_wall_positions(floor, width, height)


__all__ = ["build_floor_set", "find_wall_positions", "calculate_walls", "RELAXED_BOUND"]

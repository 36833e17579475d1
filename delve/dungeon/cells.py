from typing import Tuple

Coord = Tuple[int, int]

NORTH = "north"
EAST = "east"
SOUTH = "south"
WEST = "west"

# y grows downward, so north is -y
DIR_VECTORS = {
    NORTH: (0, -1),
    EAST: (1, 0),
    SOUTH: (0, 1),
    WEST: (-1, 0),
}
CARDINALS = (NORTH, EAST, SOUTH, WEST)

_LEFT = {NORTH: WEST, WEST: SOUTH, SOUTH: EAST, EAST: NORTH}
_RIGHT = {NORTH: EAST, EAST: SOUTH, SOUTH: WEST, WEST: NORTH}
_OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}


def rotate_left(direction: str) -> str:
    return _LEFT[direction]


def rotate_right(direction: str) -> str:
    return _RIGHT[direction]


def opposite(direction: str) -> str:
    return _OPPOSITE[direction]


def step(pos: Coord, direction: str, distance: int = 1) -> Coord:
    dx, dy = DIR_VECTORS[direction]
    return (pos[0] + dx * distance, pos[1] + dy * distance)


def neighbors4(pos: Coord):
    x, y = pos
    for direction in CARDINALS:
        dx, dy = DIR_VECTORS[direction]
        yield (x + dx, y + dy)


def neighbors8(pos: Coord):
    x, y = pos
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            if dx or dy:
                yield (x + dx, y + dy)


# Tile type codes for the assembled grid
DEAD = "."
LIVE = "R"  # room floor
ACTIVE = "T"  # spine / tributary corridor floor
WALL = "W"
DOOR = "D"

TILE_NAMES = {
    DEAD: "dead",
    LIVE: "live",
    ACTIVE: "active",
    WALL: "wall",
    DOOR: "door",
}

WALKABLE = frozenset({LIVE, ACTIVE, DOOR})

__all__ = ["DEAD", "LIVE", "ACTIVE", "WALL", "DOOR", "TILE_NAMES", "WALKABLE"]

"""Immutable output records produced by the assembler.

``DungeonData`` is the only thing renderers and the HTTP layer see; it is
never mutated after construction.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from .cells import Coord
from .classify import RoomClassification
from .state import Rect
from .tiles import DEAD, TILE_NAMES


def _key(pos: Coord) -> str:
    return f"{pos[0]},{pos[1]}"


@dataclass(frozen=True)
class Tile:
    """Read-only view of one assembled grid cell."""

    x: int
    y: int
    type: str
    owner: Optional[str] = None
    is_entrance: bool = False
    is_exit: bool = False

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)

    @property
    def name(self) -> str:
        return TILE_NAMES[self.type]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "type": self.name,
            "code": self.type,
            "owner": self.owner,
            "isEntrance": self.is_entrance,
            "isExit": self.is_exit,
        }


@dataclass(frozen=True)
class Exit:
    id: str
    x: int
    y: int
    direction: str
    room_id: str
    connected_room_id: Optional[str] = None
    corridor_id: Optional[str] = None

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "direction": self.direction,
            "roomId": self.room_id,
            "connectedRoomId": self.connected_room_id,
            "corridorId": self.corridor_id,
        }


@dataclass(frozen=True)
class Room:
    id: str
    rect: Rect
    exits: Tuple[Exit, ...]
    type: str
    classification: RoomClassification
    birth_order: int = 0
    tags: Tuple[str, ...] = ()

    @property
    def center(self) -> Coord:
        return self.rect.center

    def cells(self):
        return self.rect.cells()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "rect": self.rect.to_dict(),
            "exits": [e.to_dict() for e in self.exits],
            "type": self.type,
            "classification": self.classification.label,
            "size": self.classification.size,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class DungeonObject:
    id: str
    type: str
    x: int
    y: int
    rotation: int = 0
    variant: Optional[str] = None

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        out = {"id": self.id, "type": self.type, "x": self.x, "y": self.y, "rotation": self.rotation}
        if self.variant is not None:
            out["variant"] = self.variant
        return out


@dataclass(frozen=True)
class DungeonData:
    grid_width: int
    grid_height: int
    seed: int
    rooms: Tuple[Room, ...]
    grid: Tuple[Tuple[str, ...], ...]  # column-major: grid[x][y]
    owners: Mapping[Coord, str]
    floor_tiles: FrozenSet[Coord]
    wall_tiles: FrozenSet[Coord]
    spine: Tuple[Tuple[int, int, bool], ...]
    corridors: Mapping[str, Tuple[Coord, ...]]
    heat_scores: Mapping[Coord, int]
    objects: Tuple[DungeonObject, ...]
    entrance: Coord
    exit: Optional[Coord] = None
    room_index: Mapping[str, Room] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.room_index is None:
            object.__setattr__(self, "room_index", {room.id: room for room in self.rooms})

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.grid_width and 0 <= y < self.grid_height

    def tile(self, x: int, y: int) -> Tile:
        tile_type = self.grid[x][y] if self.in_bounds(x, y) else DEAD
        return Tile(
            x=x,
            y=y,
            type=tile_type,
            owner=self.owners.get((x, y)),
            is_entrance=(x, y) == self.entrance,
            is_exit=(x, y) == self.exit,
        )

    def room(self, room_id: str) -> Optional[Room]:
        return self.room_index.get(room_id)

    def rows(self):
        """Row strings (y major) for printing."""
        return [
            "".join(self.grid[x][y] for x in range(self.grid_width))
            for y in range(self.grid_height)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gridWidth": self.grid_width,
            "gridHeight": self.grid_height,
            "seed": self.seed,
            "rooms": [room.to_dict() for room in self.rooms],
            "tiles": self.rows(),
            "spine": [{"x": x, "y": y, "isForkPoint": fork} for x, y, fork in self.spine],
            "corridors": {cid: [list(p) for p in tiles] for cid, tiles in sorted(self.corridors.items())},
            "heatScores": {_key(pos): score for pos, score in sorted(self.heat_scores.items())},
            "objects": [obj.to_dict() for obj in self.objects],
            "entrance": list(self.entrance),
            "exit": list(self.exit) if self.exit else None,
        }


__all__ = ["Tile", "Exit", "Room", "DungeonObject", "DungeonData"]

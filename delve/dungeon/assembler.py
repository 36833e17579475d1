"""Turn a completed :class:`SpineSeedState` into immutable ``DungeonData``.

Assembly is deterministic: it reads the frozen state, scores wall candidates,
routes one tributary corridor per room to the corridor network over that heat
map, rasterizes floor and walls, resolves exits, places objects and classifies
rooms. Structural invariants are checked before anything is
returned; a violation raises :class:`DungeonInvariantError`.
"""
from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from .analysis import furthest_room, room_cost, shortest_paths
from .cells import CARDINALS, EAST, NORTH, SOUTH, WEST, Coord, step
from .classify import classify_room, pick_role
from .corridors import route_tributaries
from .errors import DungeonInvariantError
from .features import build_objects, place_doors, place_traps
from .heatmap import calculate_heat
from .models import DungeonData, Exit, Room
from .rng import RandomSource, derive_seed
from .state import RoomSeed, SpineSeedState
from .tiles import ACTIVE, DEAD, DOOR, LIVE, WALL
from .walls import calculate_walls

log = logging.getLogger(__name__)

SPINE_ID = "spine"


def corridor_id(room_id: str) -> str:
    return f"corridor-{room_id}"


def _ring_sides(seed: RoomSeed) -> Dict[str, List[Coord]]:
    r = seed.bounds
    return {
        NORTH: [(x, r.y - 1) for x in range(r.x, r.right + 1)],
        EAST: [(r.right + 1, y) for y in range(r.y, r.bottom + 1)],
        SOUTH: [(x, r.bottom + 1) for x in range(r.x, r.right + 1)],
        WEST: [(r.x - 1, y) for y in range(r.y, r.bottom + 1)],
    }


def _resolve_exits(
    seed: RoomSeed, floor: Set[Coord], owners: Mapping[Coord, str], room_ids: Set[str]
) -> Tuple[Exit, ...]:
    exits: List[Exit] = []
    sides = _ring_sides(seed)
    for direction in CARDINALS:
        run: List[Coord] = []
        for pos in sides[direction] + [None]:
            if pos is not None and pos in floor:
                run.append(pos)
                continue
            if run:
                exits.append(_make_exit(seed, direction, run[len(run) // 2], owners, room_ids, len(exits)))
                run = []
    return tuple(exits)


def _make_exit(seed, direction, pos, owners, room_ids, index) -> Exit:
    owner = owners.get(pos)
    connected = None
    corridor = None
    if owner in room_ids and owner != seed.id:
        connected = owner
    else:
        corridor = owner
        # shared wall: the room on the far side of the opening
        beyond = owners.get(step(pos, direction))
        if beyond in room_ids and beyond != seed.id:
            connected = beyond
    return Exit(
        id=f"{seed.id}-exit-{index}",
        x=pos[0],
        y=pos[1],
        direction=direction,
        room_id=seed.id,
        connected_room_id=connected,
        corridor_id=corridor,
    )


def _check_rooms(seeds: Sequence[RoomSeed], width: int, height: int) -> None:
    for seed in seeds:
        rect = seed.bounds
        if rect.width <= 0 or rect.height <= 0:
            raise DungeonInvariantError(f"room {seed.id} has zero area")
        if rect.x < 0 or rect.y < 0 or rect.right >= width or rect.bottom >= height:
            raise DungeonInvariantError(f"room {seed.id} lies outside the grid")


def _nearest_room(seeds: Sequence[RoomSeed], costs: Mapping[str, float]) -> Optional[str]:
    best = None
    best_cost = math.inf
    for seed in seeds:
        if costs[seed.id] < best_cost:
            best, best_cost = seed.id, costs[seed.id]
    return best


def assemble_spine(state: SpineSeedState, settings) -> DungeonData:
    width, height = state.width, state.height
    if (width, height) != (max(1, int(settings.grid_width)), max(1, int(settings.grid_height))):
        raise DungeonInvariantError("state dimensions do not match the settings it is assembled with")
    seeds = [s for s in state.seeds if s.is_alive]
    _check_rooms(seeds, width, height)
    room_ids = {s.id for s in seeds}

    owners: Dict[Coord, str] = {}
    for seed in seeds:
        for cell in seed.bounds.cells():
            if cell in owners:
                raise DungeonInvariantError(f"rooms {owners[cell]} and {seed.id} overlap at {cell}")
            owners[cell] = seed.id
    spine_order = [tile.pos for tile in state.spine]
    spine_order += sorted(set(state.spine_floor) - set(spine_order))
    for pos in spine_order:
        owners.setdefault(pos, SPINE_ID)

    rects = {s.id: s.bounds for s in seeds}
    room_heat = calculate_heat([(s.id, s.bounds) for s in seeds], set(state.spine_floor), ())
    routes = route_tributaries(
        [(s.id, s.bounds, s.source) for s in seeds], state.spine_floor, room_heat, width, height
    )
    tributaries: Dict[str, Tuple[str, Tuple[Coord, ...]]] = {}
    for seed in seeds:
        cid = corridor_id(seed.id)
        tiles = tuple(p for p in routes[seed.id] if p not in owners)
        for pos in tiles:
            owners[pos] = cid
        tributaries[cid] = (seed.id, tiles)

    corridor_tiles = set(state.spine_floor)
    for _, tiles in tributaries.values():
        corridor_tiles.update(tiles)
    floor, walls = calculate_walls([s.bounds for s in seeds], corridor_tiles, width, height)
    if floor & walls:
        raise DungeonInvariantError("floor and wall sets overlap")
    if set(owners) != set(floor):
        raise DungeonInvariantError("floor tiles without a unique owner")

    heat = calculate_heat(rects.items(), set(state.spine_floor), walls, floor=floor)

    decor = RandomSource(derive_seed(state.seed, "decorate"))
    doors = place_doors(tributaries, rects, decor)
    traps = place_traps(tributaries, doors, decor)

    entrance = spine_order[0]
    door_types = {pos: door_type for pos, (door_type, _) in doors.items()}
    cost, _ = shortest_paths(floor, owners, room_ids, entrance, door_types)
    costs = {s.id: room_cost(s.bounds, cost) for s in seeds}
    exit_room = furthest_room(seeds, costs)
    # entrance and exit stay distinct whenever there is more than one room
    entrance_room = _nearest_room([s for s in seeds if s.id != exit_room] or seeds, costs)
    starter_room = seeds[0].id if seeds else None
    exit_pos = rects[exit_room].center if exit_room else None
    objects = build_objects(entrance, exit_pos, doors, traps)

    rooms = []
    for seed in seeds:
        role = pick_role(
            "entrance" if seed.id == entrance_room else None,
            "exit" if seed.id == exit_room else None,
            "starter" if seed.id == starter_room else None,
        )
        rooms.append(
            Room(
                id=seed.id,
                rect=seed.bounds,
                exits=_resolve_exits(seed, floor, owners, room_ids),
                type="start" if role == "entrance" else "normal",
                classification=classify_room(seed.bounds, role),
                birth_order=seed.birth_order,
                tags=seed.tags,
            )
        )

    columns = [[DEAD] * height for _ in range(width)]
    for x, y in walls:
        if 0 <= x < width and 0 <= y < height:
            columns[x][y] = WALL
    for (x, y), owner in owners.items():
        columns[x][y] = LIVE if owner in room_ids else ACTIVE
    for x, y in doors:
        columns[x][y] = DOOR

    corridors = {SPINE_ID: tuple(p for p in spine_order if owners.get(p) == SPINE_ID)}
    for cid, (_, tiles) in tributaries.items():
        if tiles:
            corridors[cid] = tiles

    log.debug("assembled %d rooms, %d floor tiles, %d walls", len(rooms), len(floor), len(walls))
    return DungeonData(
        grid_width=width,
        grid_height=height,
        seed=state.seed,
        rooms=tuple(rooms),
        grid=tuple(tuple(col) for col in columns),
        owners=MappingProxyType(owners),
        floor_tiles=floor,
        wall_tiles=walls,
        spine=tuple((t.x, t.y, t.is_fork_point) for t in state.spine),
        corridors=MappingProxyType(corridors),
        heat_scores=MappingProxyType(heat),
        objects=objects,
        entrance=entrance,
        exit=exit_pos,
    )


__all__ = ["assemble_spine", "SPINE_ID", "corridor_id"]

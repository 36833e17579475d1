"""Post-hoc graph analysis over assembled dungeon data.

Movement cost is Dijkstra over floor tiles from the entrance: one per step,
a surcharge when stepping into a different room, and extra for doors that
slow the party down. Everything here is a pure function of ``DungeonData``.
"""
from __future__ import annotations

import heapq
import math
from collections import deque
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from .cells import Coord, neighbors4
from .models import DungeonData, Room

STEP_COST = 1
ROOM_ENTRY_COST = 5
DOOR_COSTS = {
    "locked": 10,
    "portcullis": 10,
    "barred": 10,
    "secret": 20,
}


def shortest_paths(
    floor: Iterable[Coord],
    owners: Mapping[Coord, str],
    room_ids: Set[str],
    start: Coord,
    door_types: Optional[Mapping[Coord, str]] = None,
) -> Tuple[Dict[Coord, int], Dict[Coord, Coord]]:
    """Return ``(cost, previous)`` maps for every floor tile reachable from ``start``."""
    floor = floor if isinstance(floor, (set, frozenset)) else set(floor)
    door_types = door_types or {}
    if start not in floor:
        return {}, {}
    cost: Dict[Coord, int] = {start: 0}
    previous: Dict[Coord, Coord] = {}
    heap = [(0, start)]
    while heap:
        current_cost, pos = heapq.heappop(heap)
        if current_cost > cost.get(pos, math.inf):
            continue
        here = owners.get(pos)
        for nxt in neighbors4(pos):
            if nxt not in floor:
                continue
            step_cost = STEP_COST
            there = owners.get(nxt)
            if there in room_ids and there != here:
                step_cost += ROOM_ENTRY_COST
            step_cost += DOOR_COSTS.get(door_types.get(nxt), 0)
            new_cost = current_cost + step_cost
            if new_cost < cost.get(nxt, math.inf):
                cost[nxt] = new_cost
                previous[nxt] = pos
                heapq.heappush(heap, (new_cost, nxt))
    return cost, previous


def room_cost(room: Room, cost: Mapping[Coord, int]) -> float:
    """Cost at the room centre, falling back to its cheapest reachable tile."""
    center = room.center
    if center in cost:
        return cost[center]
    values = [cost[c] for c in room.cells() if c in cost]
    return min(values) if values else math.inf


def room_target(room: Room, cost: Mapping[Coord, int]) -> Optional[Coord]:
    if room.center in cost:
        return room.center
    reachable = sorted((cost[c], c) for c in room.cells() if c in cost)
    return reachable[0][1] if reachable else None


def flood_walkable(floor: Iterable[Coord], start: Coord) -> FrozenSet[Coord]:
    floor = floor if isinstance(floor, (set, frozenset)) else set(floor)
    if start not in floor:
        return frozenset()
    seen = {start}
    queue = deque([start])
    while queue:
        pos = queue.popleft()
        for nxt in neighbors4(pos):
            if nxt in floor and nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return frozenset(seen)


def furthest_room(rooms: Iterable[Room], costs: Mapping[str, float]) -> Optional[str]:
    """Highest finite cost; ties go to the earliest-born room."""
    best = None
    best_cost = -1.0
    for room in rooms:
        value = costs.get(room.id, math.inf)
        if math.isinf(value):
            continue
        if value > best_cost:
            best, best_cost = room.id, value
    return best


def door_key(pos: Coord) -> str:
    return f"door-{pos[0]}-{pos[1]}"


@dataclass(frozen=True)
class DungeonAnalysisResult:
    room_costs: Mapping[str, float]
    walkable_tiles: FrozenSet[Coord]
    room_traversals: Mapping[str, int]
    door_traversals: Mapping[str, int]
    room_graph: Mapping[str, Tuple[str, ...]]
    furthest_room_id: Optional[str]
    unreachable_rooms: Tuple[str, ...]

    def to_dict(self):
        return {
            "roomCosts": {
                rid: (None if math.isinf(c) else c) for rid, c in self.room_costs.items()
            },
            "walkableTiles": [list(p) for p in sorted(self.walkable_tiles)],
            "roomTraversals": dict(self.room_traversals),
            "doorTraversals": dict(self.door_traversals),
            "roomGraph": {node: list(adj) for node, adj in sorted(self.room_graph.items())},
            "furthestRoomId": self.furthest_room_id,
            "unreachableRooms": list(self.unreachable_rooms),
        }


def _room_graph(data: DungeonData) -> Dict[str, Tuple[str, ...]]:
    """Undirected adjacency between rooms and the corridors touching them."""
    edges: Dict[str, Set[str]] = {}
    for room in data.rooms:
        edges.setdefault(room.id, set())
        for cell in room.cells():
            for nxt in neighbors4(cell):
                other = data.owners.get(nxt)
                if other is None or other == room.id:
                    continue
                edges[room.id].add(other)
                edges.setdefault(other, set()).add(room.id)
    return {node: tuple(sorted(adj)) for node, adj in edges.items()}


def _path(previous: Mapping[Coord, Coord], target: Coord) -> List[Coord]:
    path = [target]
    while path[-1] in previous:
        path.append(previous[path[-1]])
    path.reverse()
    return path


def analyze(data: DungeonData) -> DungeonAnalysisResult:
    room_ids = {room.id for room in data.rooms}
    door_types = {obj.pos: obj.variant for obj in data.objects if obj.type == "door"}
    cost, previous = shortest_paths(data.floor_tiles, data.owners, room_ids, data.entrance, door_types)

    room_costs = {room.id: room_cost(room, cost) for room in data.rooms}
    room_traversals = {room.id: 0 for room in data.rooms}
    door_traversals = {door_key(pos): 0 for pos in sorted(door_types)}
    for room in data.rooms:
        target = room_target(room, cost)
        if target is None:
            continue
        passed_rooms = set()
        for pos in _path(previous, target)[1:-1]:
            owner = data.owners.get(pos)
            if owner in room_ids and owner != room.id:
                passed_rooms.add(owner)
            if pos in door_types:
                door_traversals[door_key(pos)] += 1
        for rid in passed_rooms:
            room_traversals[rid] += 1

    unreachable = tuple(room.id for room in data.rooms if math.isinf(room_costs[room.id]))
    return DungeonAnalysisResult(
        room_costs=room_costs,
        walkable_tiles=flood_walkable(data.floor_tiles, data.entrance),
        room_traversals=room_traversals,
        door_traversals=door_traversals,
        room_graph=_room_graph(data),
        furthest_room_id=furthest_room(data.rooms, room_costs),
        unreachable_rooms=unreachable,
    )


__all__ = [
    "STEP_COST",
    "ROOM_ENTRY_COST",
    "DOOR_COSTS",
    "DungeonAnalysisResult",
    "shortest_paths",
    "room_cost",
    "flood_walkable",
    "furthest_room",
    "analyze",
]

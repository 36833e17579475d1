"""Tributary routing: connect each room to the corridor network.

A room leaves through the cheapest tile on its ring, scored by the wall heat
map plus a small pull toward the spine tile it was ejected from. From there a
uniform-cost search walks to the nearest network tile (spine floor or an
earlier tributary). Open ground costs ``COST_VOID``, ring and wall candidates
cost ``COST_HEAT_BASE`` plus their heat, and other rooms' interiors carry
``ROOM_INTERIOR_PENALTY`` so corridors go around rooms instead of through
them. Routes that reach the network join it, so later rooms may branch off
earlier tributaries.
"""
from __future__ import annotations

import heapq
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set

from .cells import Coord, neighbors4
from .state import Rect

log = logging.getLogger(__name__)

COST_VOID = 10
COST_NETWORK = 1
COST_HEAT_BASE = 30
ROOM_INTERIOR_PENALTY = 500
# ring tiles at or above this heat are never used as a room exit
EXIT_HEAT_LIMIT = 100
ATTRACTOR_WEIGHT = 0.2


def _ring_sides(rect: Rect) -> List[Coord]:
    sides = [(x, rect.y - 1) for x in range(rect.x, rect.right + 1)]
    sides += [(x, rect.bottom + 1) for x in range(rect.x, rect.right + 1)]
    sides += [(rect.x - 1, y) for y in range(rect.y, rect.bottom + 1)]
    sides += [(rect.right + 1, y) for y in range(rect.y, rect.bottom + 1)]
    return sides


def best_room_exit(
    rect: Rect,
    attractor: Coord,
    heat: Mapping[Coord, int],
    blocked: Set[Coord],
    network: Set[Coord],
    width: int,
    height: int,
) -> Optional[Coord]:
    """Cheapest ring tile to leave ``rect`` from, or None if every side is unusable.

    A ring tile already on the network wins outright; ties are broken by
    position so the choice never depends on set ordering.
    """
    best = None
    best_key = None
    for pos in _ring_sides(rect):
        x, y = pos
        if not (0 <= x < width and 0 <= y < height) or pos in blocked:
            continue
        if pos in network:
            key = (0, float("-inf"), pos)
        else:
            score = heat.get(pos, 0)
            if score >= EXIT_HEAT_LIMIT:
                continue
            distance = abs(x - attractor[0]) + abs(y - attractor[1])
            key = (1, score + distance * ATTRACTOR_WEIGHT, pos)
        if best_key is None or key < best_key:
            best, best_key = pos, key
    return best


def step_cost(pos: Coord, heat: Mapping[Coord, int], blocked: Set[Coord], network: Set[Coord]) -> int:
    if pos in network:
        return COST_NETWORK
    if pos in blocked:
        return COST_VOID + ROOM_INTERIOR_PENALTY
    if pos in heat:
        return max(1, COST_HEAT_BASE + heat[pos])
    return COST_VOID


def find_path_to_network(
    start: Coord,
    network: Set[Coord],
    heat: Mapping[Coord, int],
    blocked: Set[Coord],
    width: int,
    height: int,
) -> List[Coord]:
    """Cheapest path from ``start`` to any network tile, network tile excluded.

    Returns an empty list when the network is unreachable or ``start`` is
    already on it.
    """
    if start in network or not network:
        return []
    cost: Dict[Coord, int] = {start: 0}
    previous: Dict[Coord, Coord] = {}
    frontier = [(0, start)]
    while frontier:
        current_cost, pos = heapq.heappop(frontier)
        if current_cost > cost[pos]:
            continue
        if pos in network:
            path = []
            node = previous[pos]
            while node != start:
                path.append(node)
                node = previous[node]
            path.append(start)
            path.reverse()
            return path
        for nxt in neighbors4(pos):
            if not (0 <= nxt[0] < width and 0 <= nxt[1] < height):
                continue
            new_cost = current_cost + step_cost(nxt, heat, blocked, network)
            # ties resolve on the coordinate, keeping routes deterministic
            if new_cost < cost.get(nxt, new_cost + 1):
                cost[nxt] = new_cost
                previous[nxt] = pos
                heapq.heappush(frontier, (new_cost, nxt))
    return []


def route_tributaries(
    rooms: Iterable[tuple],
    spine_floor: Iterable[Coord],
    heat: Mapping[Coord, int],
    width: int,
    height: int,
) -> Dict[str, List[Coord]]:
    """Route one tributary per room, in the given order.

    ``rooms`` yields ``(room_id, rect, attractor)``. Returned paths are
    ordered from the room exit outward and contain no room or network tiles.
    """
    rooms = list(rooms)
    blocked: Set[Coord] = set()
    for _, rect, _ in rooms:
        blocked.update(rect.cells())
    network = set(spine_floor) - blocked
    routes: Dict[str, List[Coord]] = {}
    for room_id, rect, attractor in rooms:
        start = best_room_exit(rect, attractor, heat, blocked, network, width, height)
        if start is None:
            log.debug("room %s has no usable exit", room_id)
            routes[room_id] = []
            continue
        path = find_path_to_network(start, network, heat, blocked, width, height)
        tiles = [p for p in path if p not in blocked and p not in network]
        network.update(tiles)
        routes[room_id] = tiles
    return routes


__all__ = [
    "best_room_exit",
    "find_path_to_network",
    "route_tributaries",
    "step_cost",
    "COST_VOID",
    "COST_NETWORK",
    "COST_HEAT_BASE",
    "ROOM_INTERIOR_PENALTY",
    "EXIT_HEAT_LIMIT",
]

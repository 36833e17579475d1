"""Wall-candidate heat scoring.

Negative is good, positive is bad. Walls shared by two rooms score best,
corners and tiles that would cut into a neighbouring room score worst, and
anything hugging the spine is mildly penalised. Every wall tile and every
room ring tile that is not floor receives exactly one score.
"""
from typing import Dict, Iterable, Set, Tuple

from .cells import Coord, neighbors4
from .state import Rect

SIDE_CENTER = -10
SIDE_EDGE = -5
SHARED_BONUS = -20
SPINE_ADJACENT = 50
SPINE_NEAR = 25
CORNER = 500
ABUTS_ROOM = 500
SPINE_WALL = 50


def _ring(rect: Rect):
    """Yield ``(pos, is_corner, side_index, side_length)`` around ``rect``."""
    left, right = rect.x - 1, rect.right + 1
    top, bottom = rect.y - 1, rect.bottom + 1
    for x in (left, right):
        for y in (top, bottom):
            yield (x, y), True, 0, 0
    for i, x in enumerate(range(rect.x, rect.right + 1)):
        yield (x, top), False, i, rect.width
        yield (x, bottom), False, i, rect.width
    for i, y in enumerate(range(rect.y, rect.bottom + 1)):
        yield (left, y), False, i, rect.height
        yield (right, y), False, i, rect.height


def _side_score(index: int, length: int) -> int:
    if length >= 3 and index == length // 2:
        return SIDE_CENTER
    if index == 0 or index == length - 1:
        return SIDE_EDGE
    return 0


def _spine_score(pos: Coord, spine_floor: Set[Coord]) -> int:
    if any(n in spine_floor for n in neighbors4(pos)):
        return SPINE_ADJACENT
    x, y = pos
    for dx in range(-2, 3):
        for dy in range(-2, 3):
            if (x + dx, y + dy) in spine_floor:
                return SPINE_NEAR
    return 0


def calculate_heat(
    rooms: Iterable[Tuple[str, Rect]],
    spine_floor: Set[Coord],
    wall_set: Iterable[Coord],
    floor: Iterable[Coord] = (),
) -> Dict[Coord, int]:
    """Score every wall candidate; tiles in ``floor`` are never scored.

    Assembly scores twice: once before tributaries are routed (so the router
    can read the ring costs) and once on the final walls, passing the finished
    floor set so corridor and spine tiles drop out.
    """
    rooms = list(rooms)
    floor = set(floor)
    owner_of = {}
    for room_id, rect in rooms:
        for cell in rect.cells():
            owner_of[cell] = room_id

    scores: Dict[Coord, int] = {}
    side_claims: Dict[Coord, int] = {}
    for room_id, rect in rooms:
        for pos, is_corner, index, length in _ring(rect):
            if pos in floor:
                continue
            other = owner_of.get(pos)
            if is_corner:
                value = CORNER
            elif other is not None and other != room_id:
                value = ABUTS_ROOM
            else:
                value = _side_score(index, length) + _spine_score(pos, spine_floor)
                side_claims[pos] = side_claims.get(pos, 0) + 1
            scores[pos] = scores.get(pos, 0) + value

    for pos, claims in side_claims.items():
        if claims >= 2:
            scores[pos] += SHARED_BONUS

    for pos in wall_set:
        if pos in scores or pos in floor:
            continue
        scores[pos] = SPINE_WALL if any(n in spine_floor for n in neighbors4(pos)) else 0
    return scores


__all__ = [
    "calculate_heat",
    "SIDE_CENTER",
    "SIDE_EDGE",
    "SHARED_BONUS",
    "SPINE_ADJACENT",
    "SPINE_NEAR",
    "CORNER",
    "ABUTS_ROOM",
    "SPINE_WALL",
]

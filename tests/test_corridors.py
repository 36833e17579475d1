from __future__ import annotations

import pytest

from delve.dungeon import generate
from delve.dungeon.corridors import (
    COST_HEAT_BASE,
    COST_NETWORK,
    COST_VOID,
    ROOM_INTERIOR_PENALTY,
    best_room_exit,
    find_path_to_network,
    route_tributaries,
    step_cost,
)
from delve.dungeon.state import Rect

from tests.dungeon_test_utils import manhattan, room_tiles

ROOM = Rect(5, 5, 3, 3)


def test_exit_pulled_toward_source():
    assert best_room_exit(ROOM, (6, 20), {}, set(), set(), 20, 30) == (6, 8)
    assert best_room_exit(ROOM, (20, 6), {}, set(), set(), 30, 20) == (8, 6)


def test_exit_prefers_cool_ring_tile():
    heat = {(6, 4): -10}
    assert best_room_exit(ROOM, (6, 20), heat, set(), set(), 20, 30) == (6, 4)


def test_hot_ring_tile_never_an_exit():
    heat = {(6, 8): 100}
    # (5, 8) and (7, 8) tie; the lower coordinate wins
    assert best_room_exit(ROOM, (6, 20), heat, set(), set(), 20, 30) == (5, 8)


def test_network_ring_tile_wins_outright():
    heat = {(6, 8): -500}
    assert best_room_exit(ROOM, (6, 20), heat, set(), {(8, 6)}, 20, 30) == (8, 6)


def test_exit_skips_blocked_and_off_grid_tiles():
    corner_room = Rect(0, 0, 2, 2)
    blocked = {(2, 0), (2, 1)}
    assert best_room_exit(corner_room, (0, 10), {}, blocked, set(), 10, 10) == (0, 2)
    hemmed = blocked | {(0, 2), (1, 2)}
    assert best_room_exit(corner_room, (0, 10), {}, hemmed, set(), 10, 10) is None


def test_step_costs():
    heat = {(1, 1): 5, (2, 2): -80}
    assert step_cost((0, 0), heat, set(), {(0, 0)}) == COST_NETWORK
    assert step_cost((3, 3), heat, {(3, 3)}, set()) == COST_VOID + ROOM_INTERIOR_PENALTY
    assert step_cost((1, 1), heat, set(), set()) == COST_HEAT_BASE + 5
    assert step_cost((2, 2), heat, set(), set()) == 1
    assert step_cost((4, 4), heat, set(), set()) == COST_VOID


def test_path_detours_around_rooms():
    network = {(0, y) for y in range(10)}
    blocked = set(Rect(2, 3, 3, 5).cells())
    path = find_path_to_network((6, 5), network, {}, blocked, 10, 10)
    assert path[0] == (6, 5)
    assert path[-1][0] == 1
    assert len(path) == 9
    assert not (set(path) & blocked)
    for a, b in zip(path, path[1:]):
        assert manhattan(a, b) == 1


def test_path_trivial_cases():
    assert find_path_to_network((1, 1), {(1, 1)}, {}, set(), 5, 5) == []
    assert find_path_to_network((1, 1), set(), {}, set(), 5, 5) == []


def test_later_rooms_branch_off_earlier_tributaries():
    spine = {(x, 10) for x in range(20)}
    routes = route_tributaries(
        [("a", Rect(5, 2, 3, 3), (6, 10)), ("b", Rect(2, 5, 2, 2), (2, 10))],
        spine,
        {(4, 5): -50},
        20,
        20,
    )
    assert routes["a"] == [(6, 5), (6, 6), (6, 7), (6, 8), (6, 9)]
    assert routes["b"] == [(4, 5), (5, 5)]


def test_room_on_the_spine_needs_no_tributary():
    spine = {(x, 10) for x in range(20)}
    assert route_tributaries([("c", Rect(2, 8, 2, 2), (2, 10))], spine, {}, 20, 20) == {"c": []}


@pytest.mark.parametrize("seed", [1, 2, 3, 7, 42])
def test_generated_tributaries_avoid_rooms(seed):
    data = generate(None, seed)
    rooms = room_tiles(data)
    for cid, tiles in data.corridors.items():
        if not cid.startswith("corridor-"):
            continue
        assert not (set(tiles) & rooms), cid

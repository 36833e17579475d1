import pytest

from delve.dungeon import DungeonSettings
from delve.dungeon.cells import EAST, NORTH, SOUTH, WEST
from delve.dungeon.rooms import RoomGrowthEngine, grown, mirrored_edge, strip
from delve.dungeon.state import Rect, RoomSeed, SpineSeedState


def _seed(birth, origin, target=(4, 4), direction=WEST):
    return RoomSeed(
        id=f"room-{birth}",
        origin=origin,
        source=origin,
        direction=direction,
        target_width=target[0],
        target_height=target[1],
        bounds=Rect(origin[0], origin[1], 1, 1),
        birth_order=birth,
    )


@pytest.mark.parametrize(
    "edge,expected",
    [
        (NORTH, Rect(5, 4, 2, 3)),
        (SOUTH, Rect(5, 5, 2, 3)),
        (WEST, Rect(4, 5, 3, 2)),
        (EAST, Rect(5, 5, 3, 2)),
    ],
)
def test_grown_rect(edge, expected):
    assert grown(Rect(5, 5, 2, 2), edge) == expected


def test_strip_cells():
    r = Rect(5, 5, 2, 2)
    assert strip(r, NORTH) == [(5, 4), (6, 4)]
    assert strip(r, EAST) == [(7, 5), (7, 6)]
    assert strip(r, SOUTH) == [(5, 7), (6, 7)]
    assert strip(r, WEST) == [(4, 5), (4, 6)]


def test_mirrored_edge_flips_only_the_ejection_axis():
    assert mirrored_edge(EAST, WEST) == WEST
    assert mirrored_edge(WEST, EAST) == EAST
    assert mirrored_edge(NORTH, WEST) == NORTH
    assert mirrored_edge(NORTH, NORTH) == SOUTH
    assert mirrored_edge(EAST, SOUTH) == EAST


def test_lone_room_reaches_target():
    state = SpineSeedState(20, 20, 3)
    state.seeds.append(_seed(0, (10, 10), target=(5, 3)))
    engine = RoomGrowthEngine(state, DungeonSettings())
    while engine.step():
        pass
    room = state.seeds[0]
    assert (room.bounds.width, room.bounds.height) == (5, 3)
    assert room.complete


def test_grid_edge_blocks_growth():
    state = SpineSeedState(20, 20, 3)
    state.seeds.append(_seed(0, (0, 0), target=(4, 4)))
    engine = RoomGrowthEngine(state, DungeonSettings())
    while engine.step():
        pass
    room = state.seeds[0]
    assert room.bounds == Rect(0, 0, 4, 4)


def test_neighbours_keep_a_gap():
    state = SpineSeedState(30, 10, 9)
    state.seeds.append(_seed(0, (10, 5), target=(8, 1)))
    state.seeds.append(_seed(1, (14, 5), target=(8, 1)))
    engine = RoomGrowthEngine(state, DungeonSettings())
    while engine.step():
        pass
    a, b = state.seeds[0].bounds, state.seeds[1].bounds
    assert a.right + 1 < b.x
    # neither room crossed into the other's side
    assert a.right < 13 and b.x > 11


def test_spine_blocks_growth_when_it_acts_as_wall():
    state = SpineSeedState(20, 20, 4)
    state.spine_floor = {(x, y) for x in (8, 12) for y in range(20)}
    state.seeds.append(_seed(0, (10, 10), target=(6, 1), direction=WEST))
    engine = RoomGrowthEngine(state, DungeonSettings())
    while engine.step():
        pass
    assert state.seeds[0].bounds == Rect(9, 10, 3, 1)


def test_dead_seeds_do_not_grow():
    state = SpineSeedState(20, 20, 4)
    seed = _seed(0, (10, 10))
    seed.kill("collision")
    state.seeds.append(seed)
    engine = RoomGrowthEngine(state, DungeonSettings())
    assert engine.step() is False
    assert seed.bounds.area == 1

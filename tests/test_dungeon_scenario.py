"""Hand-traced generation on a straight trunk.

Fixed intervals and distances make the layout fully predictable, so these
tests pin exact coordinates rather than statistical properties.
"""

from __future__ import annotations

from delve.dungeon import ACTIVE, LIVE, SpineSeedGenerator, analyze, assemble_spine, generate

from tests.dungeon_test_utils import bfs_reachable

SEED = 1234


def test_straight_trunk_ejects_two_rooms_west(scenario_settings):
    state = SpineSeedGenerator(scenario_settings, SEED).run_to_completion()
    # spine is trimmed right after the last ejecting tile
    assert [t.pos for t in state.spine] == [(16, y) for y in range(30, 24, -1)]
    assert [s.id for s in state.seeds] == ["room-0", "room-1"]
    first, second = state.seeds
    assert first.origin == (13, 28) and first.source == (16, 28)
    assert second.origin == (13, 25) and second.source == (16, 25)
    assert first.direction == second.direction == "west"
    assert all(s.is_alive for s in state.seeds)


def test_rooms_reach_target_size(scenario_settings):
    data = generate(scenario_settings, SEED)
    assert len(data.rooms) == 2
    for room in data.rooms:
        assert (room.rect.width, room.rect.height) == (3, 3)
        assert room.classification.size == "medium"
        assert room.exits, f"{room.id} has no exits"


def test_roles_and_stairs(scenario_settings):
    data = generate(scenario_settings, SEED)
    analysis = analyze(data)
    rooms = {r.id: r for r in data.rooms}
    exit_id = analysis.furthest_room_id
    (entrance_id,) = set(rooms) - {exit_id}
    # door surcharges decide which room is furthest, not just distance
    assert analysis.room_costs[exit_id] >= analysis.room_costs[entrance_id]
    assert rooms[exit_id].classification.label == "exit"
    assert rooms[entrance_id].classification.label == "entrance"
    assert rooms[entrance_id].type == "start"
    assert data.entrance == (16, 30)
    assert data.exit == rooms[exit_id].center
    kinds = {o.type: o.pos for o in data.objects}
    assert kinds["stairs_up"] == data.entrance
    assert kinds["stairs_down"] == data.exit


def test_grid_codes(scenario_settings):
    data = generate(scenario_settings, SEED)
    assert data.grid[16][30] == ACTIVE
    for room in data.rooms:
        for x, y in room.cells():
            assert data.grid[x][y] == LIVE
    entrance_tile = data.tile(*data.entrance)
    assert entrance_tile.is_entrance and entrance_tile.owner == "spine"
    assert data.tile(-1, 0).type == "."


def test_tile_dict_uses_readable_names(scenario_settings):
    data = generate(scenario_settings, SEED)
    spine_start = data.tile(16, 30).to_dict()
    assert spine_start["type"] == "active" and spine_start["code"] == ACTIVE
    room = data.rooms[0]
    assert data.tile(room.rect.x, room.rect.y).to_dict()["type"] == "live"
    assert data.tile(-1, 0).to_dict()["type"] == "dead"
    assert room.to_dict()["tags"] == []


def test_everything_reachable(scenario_settings):
    data = generate(scenario_settings, SEED)
    analysis = analyze(data)
    assert analysis.unreachable_rooms == ()
    assert analysis.furthest_room_id in ("room-0", "room-1")
    reach = bfs_reachable(data)
    for room in data.rooms:
        assert set(room.cells()) <= reach


def test_reassembling_frozen_state_is_identical(scenario_settings):
    state = SpineSeedGenerator(scenario_settings, SEED).run_to_completion()
    a = assemble_spine(state, scenario_settings)
    b = assemble_spine(state, scenario_settings)
    assert a.to_dict() == b.to_dict()

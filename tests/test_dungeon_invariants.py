"""Structural invariants of assembled dungeons.

Invariants covered:
1. Floor and wall sets never intersect; every floor tile has exactly one owner.
2. Rooms stay inside the grid and never overlap or touch.
3. Every room tile is reachable from the entrance (analysis and raw grid BFS agree).
4. Exits lie on the ring around their room and on floor tiles.
5. max_forks=0 produces no fork points.
"""

from __future__ import annotations

import pytest

from delve.dungeon import DungeonSettings, SpineSettings, analyze, generate
from delve.dungeon.config import EjectionSettings
from delve.dungeon.tiles import WALL

from tests.dungeon_test_utils import bfs_reachable, rects_touch, room_tiles

SEEDS = [1, 2, 3, 7, 42]

CONFIGS = {
    "default": lambda: DungeonSettings(),
    "small": lambda: DungeonSettings(grid_width=32, grid_height=32, seed_count=6),
    "wide_spine": lambda: DungeonSettings(grid_width=48, grid_height=48, spine=SpineSettings(spine_width=3)),
    "spine_not_wall": lambda: DungeonSettings(
        grid_width=48, grid_height=48, spine=SpineSettings(spine_width=5, spine_acts_as_wall=False)
    ),
    "forked": lambda: DungeonSettings(turn_override="F", spine=SpineSettings(max_forks=3)),
    "mirrored": lambda: DungeonSettings(
        symmetry=100, symmetry_strict_primary=True, ejection=EjectionSettings(ejection_count=2)
    ),
}


def _cases():
    for name in CONFIGS:
        for seed in SEEDS:
            yield pytest.param(name, seed, id=f"{name}-{seed}")


@pytest.mark.parametrize("config_name,seed", list(_cases()))
def test_floor_wall_disjoint_and_owned(config_name, seed):
    data = generate(CONFIGS[config_name](), seed)
    assert not (data.floor_tiles & data.wall_tiles)
    assert set(data.owners) == set(data.floor_tiles)
    for x, y in data.wall_tiles:
        if data.in_bounds(x, y):
            assert data.grid[x][y] == WALL


@pytest.mark.parametrize("config_name,seed", list(_cases()))
def test_rooms_inside_grid_and_separated(config_name, seed):
    data = generate(CONFIGS[config_name](), seed)
    rooms = list(data.rooms)
    for room in rooms:
        r = room.rect
        assert r.width > 0 and r.height > 0
        assert 0 <= r.x and 0 <= r.y and r.right < data.grid_width and r.bottom < data.grid_height
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            assert not rects_touch(a.rect, b.rect, margin=1), f"{a.id} touches {b.id}"


@pytest.mark.parametrize("config_name,seed", list(_cases()))
def test_every_room_reachable(config_name, seed):
    data = generate(CONFIGS[config_name](), seed)
    analysis = analyze(data)
    tiles = room_tiles(data)
    assert tiles <= analysis.walkable_tiles
    assert tiles <= bfs_reachable(data)
    assert analysis.unreachable_rooms == ()


@pytest.mark.parametrize("seed", SEEDS)
def test_exits_on_room_ring(seed):
    data = generate(DungeonSettings(), seed)
    for room in data.rooms:
        ring = room.rect.expanded(1)
        for ex in room.exits:
            assert ring.contains(ex.pos) and not room.rect.contains(ex.pos)
            assert ex.pos in data.floor_tiles
            assert ex.room_id == room.id


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("override", ["N", "F", "S", "U"])
def test_max_forks_zero_means_no_forks(seed, override):
    settings = DungeonSettings(turn_override=override, spine=SpineSettings(max_forks=0))
    data = generate(settings, seed)
    assert not any(fork for _, _, fork in data.spine)


@pytest.mark.parametrize("seed", SEEDS)
def test_corridor_tiles_are_owned_floor(seed):
    data = generate(DungeonSettings(), seed)
    for cid, tiles in data.corridors.items():
        for pos in tiles:
            assert data.owners[pos] == cid

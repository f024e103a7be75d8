import pytest

from delve.dungeon import DungeonConfig
from delve.dungeon.rng import SeededRNG
from delve.dungeon.rooms import Rect, Room, bsp_partition, rooms_from_leaves
from tests.dungeon_test_utils import SAMPLE_SEEDS


def _overlap(a, b):
    return a.x < b.x + b.w and b.x < a.x + a.w and a.y < b.y + b.h and b.y < a.y + a.h


@pytest.mark.structure
@pytest.mark.parametrize("seed", SAMPLE_SEEDS)
def test_leaves_tile_the_usable_area(seed):
    cfg = DungeonConfig(width=50, height=50)
    leaves = bsp_partition(cfg, SeededRNG(seed))
    assert leaves
    usable = (cfg.width - 2) * (cfg.height - 2)
    assert sum(l.w * l.h for l in leaves) == usable
    for i, a in enumerate(leaves):
        assert a.x >= 1 and a.y >= 1
        assert a.x + a.w <= cfg.width - 1 and a.y + a.h <= cfg.height - 1
        for b in leaves[i + 1:]:
            assert not _overlap(a, b)


@pytest.mark.structure
@pytest.mark.parametrize("seed", SAMPLE_SEEDS)
def test_rooms_fit_inside_distinct_leaves(seed):
    cfg = DungeonConfig(width=50, height=50)
    rng = SeededRNG(seed)
    leaves = bsp_partition(cfg, rng)
    rooms = rooms_from_leaves(leaves, cfg, rng)
    assert 1 <= len(rooms) <= cfg.max_rooms
    for room in rooms:
        assert room.w >= cfg.min_room_width and room.h >= cfg.min_room_height
        homes = [l for l in leaves if l.x < room.x and l.y < room.y
                 and room.x + room.w < l.x + l.w and room.y + room.h < l.y + l.h]
        assert len(homes) == 1, f"room {room.index} not padded inside exactly one leaf"
    assert [r.index for r in rooms] == list(range(len(rooms)))


def test_partition_is_deterministic():
    cfg = DungeonConfig()
    assert bsp_partition(cfg, SeededRNG(4242)) == bsp_partition(cfg, SeededRNG(4242))


def test_small_leaves_are_skipped():
    cfg = DungeonConfig()
    leaves = [Rect(1, 1, 5, 20), Rect(6, 1, 20, 5)]
    assert rooms_from_leaves(leaves, cfg, SeededRNG(3)) == []


def test_max_rooms_caps_pool():
    cfg = DungeonConfig(max_rooms=2)
    leaves = [Rect(1 + 12 * i, 1, 12, 12) for i in range(4)]
    rooms = rooms_from_leaves(leaves, cfg, SeededRNG(9))
    assert len(rooms) == 2


def test_room_geometry_helpers():
    r = Room(2, 3, 5, 4)
    assert r.center == (4, 5)
    assert r.center_f == (4.5, 5.0)
    assert r.area == 20
    assert r.contains(2, 3) and r.contains(6, 6)
    assert not r.contains(7, 3)
    assert len(list(r.cells())) == 20

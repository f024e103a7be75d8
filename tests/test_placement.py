import math

import pytest

from delve.dungeon.doors import create_door
from delve.dungeon.placement import place_chests, place_creatures
from delve.dungeon.tiles import WEST
from delve.models import Chest
from tests.dungeon_test_utils import SAMPLE_SEEDS, blank_dungeon, carve_rooms


def test_largest_room_gets_the_only_chest():
    d = blank_dungeon(30, 14)
    rooms = carve_rooms(d, [(2, 2, 4, 4), (10, 2, 8, 8), (20, 2, 5, 5)])
    assert place_chests(d) == 1
    (chest,) = d.chests
    assert chest.room is rooms[1]
    assert rooms[1].x + 1 <= chest.x <= rooms[1].x + rooms[1].w - 2
    assert rooms[1].y + 1 <= chest.y <= rooms[1].y + rooms[1].h - 2
    assert d.grid.floor_data(chest.x, chest.y).item is chest
    assert d.metrics["chests_in_rooms"] == 1


def test_all_locked_room_ranks_first():
    d = blank_dungeon(30, 14)
    rooms = carve_rooms(d, [(2, 2, 4, 4), (10, 2, 8, 8), (20, 2, 5, 5)])
    create_door(d, 6, 3, WEST, rooms[0], locked=True)
    place_chests(d)
    assert d.chests[0].room is rooms[0]


def test_creatures_split_between_rooms():
    d = blank_dungeon(30, 14)
    rooms = carve_rooms(d, [(2, 2, 5, 5), (14, 2, 5, 5)])
    # ceil(2 * 1.5) = 3 creatures; two per room allowed, room order first
    assert place_creatures(d) == 3
    per_room = [sum(1 for c in d.creatures if c.room is r) for r in rooms]
    assert per_room == [2, 1]
    for c in d.creatures:
        assert d.grid.floor_data(c.x, c.y).creature is c
        assert c.room.contains(c.x, c.y)


def test_leftover_creatures_go_to_corridors():
    d = blank_dungeon(30, 14)
    carve_rooms(d, [(2, 2, 3, 3)])
    # A 1-tile-interior room still has 9 floor tiles; shrink it by filling them
    for x in range(2, 5):
        for y in range(2, 5):
            if (x, y) != (3, 3):
                d.grid.floor_data(x, y).item = Chest(x, y, "common", False)
    for x in range(6, 12):
        d.grid.carve(x, 8)
    assert place_creatures(d) == 2
    corridor = [c for c in d.creatures if c.room is None]
    assert len(corridor) == 1
    assert d.grid.room_index_at(corridor[0].x, corridor[0].y) == -1


def test_empty_level_places_nothing():
    d = blank_dungeon(20, 20)
    assert place_chests(d) == 0
    assert place_creatures(d) == 0


@pytest.mark.structure
@pytest.mark.parametrize("seed", SAMPLE_SEEDS)
def test_generated_entity_budgets(seed, fresh_dungeon):
    d = fresh_dungeon(seed)
    n = len(d.rooms)
    m = d.metrics
    assert m["chests_in_rooms"] <= max(1, n // 3)
    assert m["creatures_placed"] <= math.ceil(n * 1.5)
    assert len(d.creatures) == m["creatures_placed"] + m["variety_creatures"]
    positions = [(c.x, c.y) for c in d.creatures]
    assert len(positions) == len(set(positions))
    for chest in d.chests:
        if chest.room is not None:
            assert chest.room.contains(chest.x, chest.y)

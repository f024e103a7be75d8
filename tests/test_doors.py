import pytest

from delve.dungeon.doors import (
    DoorCandidate,
    check_door_position,
    create_door,
    find_doors_for_room,
    group_adjacent,
    is_all_locked,
    is_near_room_corner,
    select_best,
)
from delve.dungeon.rooms import Room
from delve.dungeon.tiles import CARDINALS, DOOR, EAST, NORTH, WEST
from tests.dungeon_test_utils import SAMPLE_SEEDS, blank_dungeon, carve_rooms


def _cand(x, y, locked=False, trapped=False, interest=0.0):
    return DoorCandidate(x, y, NORTH, Room(0, 0, 4, 4, index=0), locked, trapped, interest)


def test_candidate_score_weights():
    assert _cand(0, 0, locked=True).score == 2
    assert _cand(0, 0, trapped=True).score == 3
    assert _cand(0, 0, locked=True, trapped=True, interest=0.5).score == 5.5


def test_group_adjacent_includes_diagonals():
    cands = [_cand(5, 5), _cand(6, 6), _cand(10, 10), _cand(5, 6)]
    groups = group_adjacent(cands)
    assert [len(g) for g in groups] == [3, 1]
    assert groups[1][0].x == 10


def test_select_best_first_max_wins():
    a, b, c = _cand(1, 1, interest=0.4), _cand(1, 2, locked=True), _cand(2, 2, locked=True)
    assert select_best([a, b, c]) is b


def test_near_corner_by_facing():
    room = Room(5, 5, 6, 6)
    assert is_near_room_corner(6, 4, room, NORTH)
    assert not is_near_room_corner(8, 4, room, NORTH)
    assert is_near_room_corner(4, 9, room, EAST)
    assert not is_near_room_corner(4, 7, room, EAST)


def test_check_door_position_at_corridor_mouth():
    d = blank_dungeon(20, 16)
    (room,) = carve_rooms(d, [(5, 5, 6, 6)])
    for x in (4, 3, 2):
        d.grid.carve(x, 7)
    assert check_door_position(d, 4, 7) == (EAST, room)
    # Deeper inside the corridor there is no room neighbor
    assert check_door_position(d, 3, 7) is None


def test_check_door_position_rejects_corner_and_dead_end():
    d = blank_dungeon(20, 16)
    carve_rooms(d, [(5, 5, 6, 6)])
    d.grid.carve(4, 6)
    d.grid.carve(3, 6)
    assert check_door_position(d, 4, 6) is None  # one tile from the corner
    d.grid.carve(4, 8)
    assert check_door_position(d, 4, 8) is None  # nothing behind it


def test_all_locked_needs_at_least_one_door():
    d = blank_dungeon(20, 16)
    (room,) = carve_rooms(d, [(5, 5, 6, 6)])
    assert not is_all_locked(d, room)
    first = create_door(d, 4, 7, EAST, room, locked=True)
    assert is_all_locked(d, room)
    create_door(d, 8, 11, NORTH, room, locked=False)
    assert not is_all_locked(d, room)
    first.unlock()
    assert [door.locked for door in find_doors_for_room(d, room)] == [False, False]


def test_trapped_door_carries_trap():
    d = blank_dungeon(20, 16)
    (room,) = carve_rooms(d, [(5, 5, 6, 6)])
    door = create_door(d, 4, 7, EAST, room, trapped=True)
    assert door.trap is not None
    assert 1 <= door.trap.difficulty <= 10
    assert door.key_id == "door_4_7"


@pytest.mark.structure
@pytest.mark.parametrize("seed", SAMPLE_SEEDS)
def test_generated_doors_face_their_room(seed, fresh_dungeon):
    d = fresh_dungeon(seed)
    grid = d.grid
    offsets = {facing: (dx, dy) for dx, dy, facing in CARDINALS}
    for door in d.doors:
        tile = grid.get(door.x, door.y)
        assert tile.kind == DOOR and tile.data is door
        assert grid.room_index_at(door.x, door.y) == -1, "door inside a room rectangle"
        dx, dy = offsets[door.facing]
        assert grid.room_index_at(door.x + dx, door.y + dy) == door.room.index
        assert not is_near_room_corner(door.x, door.y, door.room, door.facing)
    m = d.metrics
    assert m["doors_created"] == len(d.doors)
    assert m["doors_locked"] == sum(1 for door in d.doors if door.locked)
    assert m["doors_trapped"] == sum(1 for door in d.doors if door.trapped)
    assert all(door.trap is not None for door in d.doors if door.trapped)


def test_door_facing_west_side():
    d = blank_dungeon(20, 16)
    (room,) = carve_rooms(d, [(3, 5, 6, 6)])
    for x in (9, 10, 11):
        d.grid.carve(x, 8)
    assert check_door_position(d, 9, 8) == (WEST, room)

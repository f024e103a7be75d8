import pytest

from delve.dungeon.features import (
    HORIZONTAL,
    VERTICAL,
    add_alcove,
    add_corridor_variety,
    add_decoration,
    add_rest_area,
    corridor_orientation,
    is_long_straight_corridor,
)
from delve.dungeon.tiles import FLOOR
from tests.dungeon_test_utils import blank_dungeon


def _straight_corridor(seed=1):
    d = blank_dungeon(30, 20, seed=seed)
    for x in range(3, 15):
        d.grid.carve(x, 10)
    return d


def test_long_run_detection():
    d = _straight_corridor()
    assert is_long_straight_corridor(d, 5, 10)
    assert corridor_orientation(d, 5, 10) == HORIZONTAL
    assert not is_long_straight_corridor(d, 5, 11)


def test_short_run_is_not_long():
    d = blank_dungeon(30, 20)
    for y in range(5, 9):
        d.grid.carve(10, y)
    assert not is_long_straight_corridor(d, 10, 6)
    assert corridor_orientation(d, 10, 6) == VERTICAL


def test_alcove_opens_one_side():
    d = _straight_corridor()
    add_alcove(d, 8, 10, HORIZONTAL)
    opened = [y for y in (9, 11) if d.grid.is_floor(8, y)]
    assert len(opened) == 1
    assert d.metrics["alcoves"] == 1


def test_rest_area_is_three_by_three():
    d = _straight_corridor()
    add_rest_area(d, 8, 10)
    for x in (7, 8, 9):
        for y in (9, 10, 11):
            assert d.grid.is_floor(x, y)
    assert d.metrics["rest_areas"] == 1


def test_decoration_marks_floor():
    d = _straight_corridor()
    add_decoration(d, 8, 10)
    data = d.grid.floor_data(8, 10)
    assert data.pillar or data.debris or data.trap is not None
    assert d.grid.is_floor(8, 10)
    assert d.metrics["decorations"] == 1


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_variety_never_removes_floor(seed):
    d = _straight_corridor(seed)
    before = d.grid.count(FLOOR)
    add_corridor_variety(d)
    assert d.grid.count(FLOOR) >= before
    for x in range(3, 15):
        assert d.grid.is_floor(x, 10)
    for c in d.creatures:
        assert d.grid.floor_data(c.x, c.y).creature is c

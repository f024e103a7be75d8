"""Dungeon generation invariant tests.

Invariants covered:
1. Rooms stay inside the border and never overlap; border tiles stay solid.
2. Every room is reachable from room 0 with locks ignored.
3. Key ids are unique and match the locked doors and chests one-to-one
   (unplaced keys are accounted for in the report instead).
4. Every placed door key is reachable from the player start with its own door shut.
5. Entity registries agree with the grid.
"""

from __future__ import annotations

import pytest

from delve.dungeon.debug_checks import analyze, issue_counts
from tests.dungeon_test_utils import SAMPLE_SEEDS


@pytest.mark.structure
@pytest.mark.parametrize("seed", SAMPLE_SEEDS)
def test_no_invariant_violations(seed, fresh_dungeon):
    d = fresh_dungeon(seed)
    counts = issue_counts(analyze(d))
    assert all(v == 0 for v in counts.values()), f"seed {seed}: {counts}"


@pytest.mark.structure
@pytest.mark.parametrize("size", [(40, 40), (80, 60)])
def test_invariants_hold_on_other_sizes(size, fresh_dungeon):
    w, h = size
    for seed in range(100, 106):
        d = fresh_dungeon(seed, width=w, height=h)
        counts = issue_counts(analyze(d))
        assert all(v == 0 for v in counts.values()), f"seed {seed} size {size}: {counts}"


def test_analyze_flags_unreachable_room():
    from delve.dungeon.corridors import connect_rooms
    from tests.dungeon_test_utils import blank_dungeon, carve_rooms

    d = blank_dungeon(30, 12)
    carve_rooms(d, [(2, 2, 4, 4), (12, 2, 4, 4), (22, 2, 4, 4)])
    connect_rooms(d)
    assert analyze(d)["unreachable_rooms"] == []
    # Fresh level with the same rooms but no corridors
    d2 = blank_dungeon(30, 12)
    carve_rooms(d2, [(2, 2, 4, 4), (12, 2, 4, 4), (22, 2, 4, 4)])
    assert analyze(d2)["unreachable_rooms"] == [1, 2]


def test_analyze_flags_missing_key():
    from delve.dungeon.doors import create_door
    from delve.dungeon.tiles import WEST
    from tests.dungeon_test_utils import blank_dungeon, carve_rooms

    d = blank_dungeon(20, 10)
    (room,) = carve_rooms(d, [(2, 2, 4, 4)])
    create_door(d, 6, 3, WEST, room, locked=True)
    assert analyze(d)["missing_keys"] == ["door_6_3"]

"""Invariant analysis over a generated dungeon.

`analyze` never mutates the dungeon; it returns lists of offending items per
check so callers can report counts or dump details. An empty list means the
check passed.
"""
from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any, Dict, List

from delve.models import Chest

from .connectivity import reachable_without, structurally_connected_rooms
from .tiles import DOOR

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline import Dungeon


def _rooms_outside_border(dungeon: "Dungeon") -> List[int]:
    grid = dungeon.grid
    bad = []
    for room in dungeon.rooms:
        corners = ((room.x, room.y), (room.x + room.w - 1, room.y + room.h - 1))
        if not all(grid.is_valid_position(x, y) for x, y in corners):
            bad.append(room.index)
    return bad


def _overlapping_rooms(dungeon: "Dungeon") -> List[List[int]]:
    pairs = []
    rooms = dungeon.rooms
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            if a.x < b.x + b.w and b.x < a.x + a.w and a.y < b.y + b.h and b.y < a.y + a.h:
                pairs.append([a.index, b.index])
    return pairs


def _border_breaches(dungeon: "Dungeon") -> List[List[int]]:
    grid = dungeon.grid
    out = []
    for x in range(grid.width):
        for y in range(grid.height):
            if not grid.is_valid_position(x, y) and not grid.get(x, y).is_solid:
                out.append([x, y])
    return out


def _locked_key_ids(dungeon: "Dungeon") -> List[str]:
    grid = dungeon.grid
    ids = []
    for x, y in grid.valid_positions():
        tile = grid.get(x, y)
        if tile.kind == DOOR and tile.data.locked:
            ids.append(tile.data.key_id)
        elif tile.is_floor and isinstance(tile.data.item, Chest) and tile.data.item.locked:
            ids.append(tile.data.item.key_id)
    return ids


def _registry_mismatches(dungeon: "Dungeon") -> List[Dict[str, Any]]:
    grid = dungeon.grid
    out = []
    for c in dungeon.creatures:
        data = grid.floor_data(c.x, c.y)
        if data is None or data.creature is not c:
            out.append({"what": "creature", "x": c.x, "y": c.y})
    for c in dungeon.chests:
        data = grid.floor_data(c.x, c.y)
        if data is None or data.item is not c:
            out.append({"what": "chest", "x": c.x, "y": c.y})
    return out


def _unsolvable_doors(dungeon: "Dungeon") -> List[str]:
    """Door keys the player cannot walk to from the start while that door stays shut."""
    if dungeon.player_start is None:
        return []
    keys = {k.key_id: k for k in dungeon.keys}
    bad = []
    for door in dungeon.doors:
        key = keys.get(door.key_id) if door.locked else None
        if key is None or key.position is None:
            continue
        if tuple(key.position) not in reachable_without(dungeon, dungeon.player_start, door):
            bad.append(door.key_id)
    return bad


def analyze(dungeon: "Dungeon") -> Dict[str, Any]:
    connected = structurally_connected_rooms(dungeon)
    key_ids = [k.key_id for k in dungeon.keys]
    locked_ids = set(_locked_key_ids(dungeon))
    unplaced_ids = {u.key_id for u in dungeon.report.unplaced_keys}
    return {
        "unreachable_rooms": [r.index for r in dungeon.rooms if r.index not in connected],
        "rooms_outside_border": _rooms_outside_border(dungeon),
        "overlapping_rooms": _overlapping_rooms(dungeon),
        "border_breaches": _border_breaches(dungeon),
        "duplicate_key_ids": sorted(k for k, n in Counter(key_ids).items() if n > 1),
        "missing_keys": sorted(locked_ids - set(key_ids) - unplaced_ids),
        "orphan_keys": sorted(set(key_ids) - locked_ids),
        "registry_mismatches": _registry_mismatches(dungeon),
        "unsolvable_doors": _unsolvable_doors(dungeon),
        "unplaced_keys": sorted(unplaced_ids),
    }


def issue_counts(result: Dict[str, Any]) -> Dict[str, int]:
    """Counts for every check that signals a defect (unplaced keys are degraded, not broken)."""
    return {k: len(v) for k, v in result.items() if k != "unplaced_keys"}


__all__ = ["analyze", "issue_counts"]

"""Start room and exit stairs selection.

Start room: largest room near the middle of the map, heavily discounted when
every door into it is locked. Stairs room: far from the start, mild bonus for
size. Ties keep the earlier room.
"""
from __future__ import annotations

import math
from collections import deque
from typing import TYPE_CHECKING, Optional

from delve.models import Chest

from .cells import Coord2D, Tile
from .doors import is_all_locked
from .rooms import Room

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline import Dungeon

LOCKED_START_PENALTY = 0.2
CENTER_WEIGHT = 0.5
STAIRS_AREA_WEIGHT = 0.1


def _distance(a, b) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def start_room_score(dungeon: "Dungeon", room: Room) -> float:
    middle = (dungeon.grid.width / 2, dungeon.grid.height / 2)
    score = float(room.area)
    if is_all_locked(dungeon, room):
        score *= LOCKED_START_PENALTY
    return score - CENTER_WEIGHT * _distance(middle, room.center_f)


def find_best_start_room(dungeon: "Dungeon") -> Optional[Room]:
    best, best_score = None, -math.inf
    for room in dungeon.rooms:
        score = start_room_score(dungeon, room)
        if score > best_score:
            best, best_score = room, score
    return best


def find_best_stairs_room(dungeon: "Dungeon", start: Room) -> Optional[Room]:
    best, best_score = None, -math.inf
    for room in dungeon.rooms:
        score = _distance(start.center_f, room.center_f) + STAIRS_AREA_WEIGHT * room.area
        if score > best_score:
            best, best_score = room, score
    return best


def _nearest_free_floor(dungeon: "Dungeon", room: Room, origin: Coord2D) -> Optional[Coord2D]:
    """BFS inside `room` from origin for a floor tile holding nothing."""
    grid = dungeon.grid
    seen = {origin}
    q = deque([origin])
    while q:
        x, y = q.popleft()
        if (x, y) != origin:
            data = grid.floor_data(x, y)
            if data is not None and data.is_free:
                return x, y
        for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
            nx, ny = x + dx, y + dy
            if (nx, ny) in seen or not room.contains(nx, ny):
                continue
            seen.add((nx, ny))
            q.append((nx, ny))
    return None


def _relocate_contents(dungeon: "Dungeon", room: Room, pos: Coord2D) -> None:
    """Move whatever stands on `pos` so the stairs tile does not orphan it."""
    data = dungeon.grid.floor_data(*pos)
    if data is None or data.is_free:
        return
    target = _nearest_free_floor(dungeon, room, pos)
    if target is None:
        dungeon.report.warn("stairs_contents_lost", x=pos[0], y=pos[1])
        return
    dest = dungeon.grid.floor_data(*target)
    if data.item is not None:
        item, data.item = data.item, None
        if isinstance(item, Chest):
            item.x, item.y = target
        dest.item = item
        dungeon.report.relocated.append({"what": type(item).__name__.lower(), "from": pos, "to": target})
    if data.creature is not None:
        creature, data.creature = data.creature, None
        creature.x, creature.y = target
        dest.creature = creature
        dungeon.report.relocated.append({"what": "creature", "from": pos, "to": target})
    for key in dungeon.keys:
        if key.position == pos:
            key.position = target


def place_player_and_stairs(dungeon: "Dungeon"):
    """Set `player_start` and carve the down stairs. No-op on an empty level."""
    start = find_best_start_room(dungeon)
    if start is None:
        dungeon.player_start = None
        dungeon.stairs = None
        return None, None
    dungeon.player_start = start.center
    stairs_room = find_best_stairs_room(dungeon, start)
    pos = stairs_room.center
    _relocate_contents(dungeon, stairs_room, pos)
    dungeon.grid.set(pos[0], pos[1], Tile.stairs("down"))
    dungeon.stairs = pos
    return start, stairs_room


__all__ = [
    "start_room_score",
    "find_best_start_room",
    "find_best_stairs_room",
    "place_player_and_stairs",
]

"""Chest and creature placement.

Chests go to the most valuable rooms first (all-locked rooms, then larger
rooms). Creatures are budgeted per room with the remainder spread over
corridor tiles. Entity stats come from the roll services; this module only
decides *where* things stand.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, List, Optional

from delve.loot.generator import make_chest, roll_room_chest_quality
from delve.models import Chest
from delve.services.spawn_service import CORRIDOR, LOCKED_ROOM, OPEN_ROOM, spawn_creature

from .cells import Coord2D
from .doors import is_all_locked
from .rooms import Room

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline import Dungeon

CHEST_ATTEMPTS = 5
ROOM_CREATURE_SHARE = 0.7


def place_chest_in_room(dungeon: "Dungeon", room: Room) -> Optional[Chest]:
    """Drop one treasure chest on a free interior tile of `room` (edges excluded)."""
    grid = dungeon.grid
    rng = dungeon.rng
    min_x, max_x = room.x + 1, room.x + room.w - 2
    min_y, max_y = room.y + 1, room.y + room.h - 2
    if max_x < min_x or max_y < min_y:
        return None
    for _ in range(CHEST_ATTEMPTS):
        x = math.floor(min_x + rng.random() * (max_x - min_x + 1))
        y = math.floor(min_y + rng.random() * (max_y - min_y + 1))
        data = grid.floor_data(x, y)
        if data is None or data.item is not None:
            continue
        quality = roll_room_chest_quality(rng, is_all_locked(dungeon, room))
        chest = make_chest(rng, x, y, quality=quality, room=room)
        data.item = chest
        dungeon.chests.append(chest)
        return chest
    return None


def place_chests(dungeon: "Dungeon") -> int:
    rooms = dungeon.rooms
    if not rooms:
        return 0
    target = max(1, len(rooms) // 3)
    locked = {room.index: is_all_locked(dungeon, room) for room in rooms}
    # Stable: all-locked rooms first, then larger rooms, ties keep room order
    ranked = sorted(rooms, key=lambda r: (not locked[r.index], -r.area))
    placed = 0
    for room in ranked[:target]:
        if place_chest_in_room(dungeon, room) is not None:
            placed += 1
        else:
            dungeon.report.warn("chest_not_placed", room=room.index)
    dungeon.metrics['chests_in_rooms'] = placed
    return placed


def _free_floor_tiles(dungeon: "Dungeon") -> List[Coord2D]:
    grid = dungeon.grid
    return [(x, y) for x, y in grid.valid_positions() if grid.is_floor(x, y) and grid.floor_data(x, y).item is None]


def place_creature_at(dungeon: "Dungeon", x: int, y: int, room: Optional[Room]) -> None:
    if room is None:
        context = CORRIDOR
    else:
        context = LOCKED_ROOM if is_all_locked(dungeon, room) else OPEN_ROOM
    creature = spawn_creature(dungeon.rng, x, y, context, room=room)
    dungeon.grid.floor_data(x, y).creature = creature
    dungeon.creatures.append(creature)


def place_creatures(dungeon: "Dungeon") -> int:
    """Place ceil(1.5 * rooms) creatures: 70% spread over rooms, the rest in corridors."""
    rooms = dungeon.rooms
    grid = dungeon.grid
    rng = dungeon.rng
    if not rooms:
        return 0
    total = math.ceil(len(rooms) * 1.5)
    tiles = [t for t in _free_floor_tiles(dungeon) if grid.floor_data(*t).creature is None]
    rng.shuffle(tiles)
    per_room = math.ceil(total * ROOM_CREATURE_SHARE / len(rooms))
    placed = 0
    for room in rooms:
        for _ in range(per_room):
            if placed >= total:
                break
            in_room = [t for t in tiles if room.contains(*t)]
            if not in_room:
                break
            tile = in_room[math.floor(rng.random() * len(in_room))]
            tiles.remove(tile)
            place_creature_at(dungeon, tile[0], tile[1], room)
            placed += 1
    while placed < total and tiles:
        corridor_tiles = [t for t in tiles if grid.room_index_at(*t) < 0]
        if not corridor_tiles:
            break
        tile = corridor_tiles[math.floor(rng.random() * len(corridor_tiles))]
        tiles.remove(tile)
        place_creature_at(dungeon, tile[0], tile[1], None)
        placed += 1
    dungeon.metrics['creatures_placed'] = placed
    return placed


__all__ = [
    "place_chest_in_room",
    "place_chests",
    "place_creature_at",
    "place_creatures",
]

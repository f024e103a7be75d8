"""Key synthesis and accessibility-constrained key placement.

Every locked door and every locked chest gets exactly one key whose `key_id`
names it (`door_{x}_{y}` / `chest_{x}_{y}`). Where the key may rest:

Door keys
    Rooms reachable from the door's room over the accessibility graph with
    that door excluded, minus the door's room itself. On top of that, every
    holder (creature, chest or floor tile) must be reachable from the start
    room with that door shut, whichever strategy picks it.
Chest keys
    Any room except the chest's own (weaker guarantee, chests never gate
    movement).

An empty candidate set falls back to the start room; for chest keys only
when the start room is not the chest's room. Placement then tries, first
success wins:

  1. a keyless creature standing in a candidate room;
  2. a keyless unlocked chest in a candidate room;
  3. a free floor tile in a candidate room that has no floor key yet;
  4. constrained fallback: floor in any other room without a key, then any
     other room without a floor key, then any keyless creature, then any
     keyless unlocked chest.

Steps 1-3 prefer rooms that hold no key at all (soft one-key-per-room rule).
Exhausting every option is a degraded outcome: the key is recorded in the
generation report and generation carries on. A door key is never sealed
behind its own lock to avoid that outcome.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, List, Optional, Set, Tuple, Union

from delve.models import CHEST_KEY, DOOR_KEY, Chest, Creature, Key

from .cells import Coord2D, DoorData
from .connectivity import build_accessibility_graph, find_accessible_rooms, reachable_without
from .rooms import Room
from .stairs import find_best_start_room
from .tiles import DOOR

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline import Dungeon

FLOOR_ATTEMPTS = 10

LockedObject = Union[DoorData, Chest]
# Tiles a key may rest on; None means unrestricted
Reach = Optional[Set[Coord2D]]


def collect_locked_objects(dungeon: "Dungeon") -> Tuple[List[DoorData], List[Chest]]:
    """Locked doors and locked chests in grid scan order (x outer, y inner)."""
    grid = dungeon.grid
    doors: List[DoorData] = []
    chests: List[Chest] = []
    for x, y in grid.valid_positions():
        tile = grid.get(x, y)
        if tile.kind == DOOR and tile.data.locked:
            doors.append(tile.data)
        elif tile.is_floor and isinstance(tile.data.item, Chest) and tile.data.item.locked:
            chests.append(tile.data.item)
    return doors, chests


def _room_at(dungeon: "Dungeon", x: int, y: int) -> Optional[Room]:
    idx = dungeon.grid.room_index_at(x, y)
    return dungeon.rooms[idx] if idx >= 0 else None


def rooms_with_keys(dungeon: "Dungeon") -> Set[int]:
    return {k.room.index for k in dungeon.keys if k.room is not None}


def room_has_floor_key(dungeon: "Dungeon", room: Room) -> bool:
    return any(k.holder == "floor" and k.room is room for k in dungeon.keys)


def door_key_candidates(dungeon: "Dungeon", door: DoorData) -> Set[int]:
    own = door.room.index
    graph = build_accessibility_graph(dungeon, exclude=[door])
    rooms = find_accessible_rooms(own, graph)
    rooms.discard(own)
    if not rooms:
        start = find_best_start_room(dungeon)
        if start is not None:
            rooms.add(start.index)
    return rooms


def door_key_reach(dungeon: "Dungeon", door: DoorData) -> Reach:
    """Tiles walkable from the start room's center with `door` shut."""
    start = find_best_start_room(dungeon)
    if start is None:
        return None
    return reachable_without(dungeon, start.center, door)


def chest_key_candidates(dungeon: "Dungeon", chest_room: Room) -> Set[int]:
    rooms = {r.index for r in dungeon.rooms if r is not chest_room}
    if not rooms:
        start = find_best_start_room(dungeon)
        if start is not None and start is not chest_room:
            rooms.add(start.index)
    return rooms


def _within(reach: Reach, x: int, y: int) -> bool:
    return reach is None or (x, y) in reach


def _room_within(reach: Reach, room: Room) -> bool:
    # Room interiors are solid floor rectangles, so the center stands for every tile
    return _within(reach, *room.center)


# ---------------------------------------------------------------------------
# Holders
# ---------------------------------------------------------------------------

def _give_to_creature(dungeon: "Dungeon", key: Key, creature: Creature, strategy: str) -> bool:
    creature.add_loot(key)
    key.rest_at("creature", (creature.x, creature.y), _room_at(dungeon, creature.x, creature.y), strategy)
    dungeon.keys.append(key)
    return True


def _put_in_chest(dungeon: "Dungeon", key: Key, chest: Chest, strategy: str) -> bool:
    chest.add_loot(key)
    key.rest_at("chest", (chest.x, chest.y), _room_at(dungeon, chest.x, chest.y), strategy)
    dungeon.keys.append(key)
    return True


def _drop_in_room(dungeon: "Dungeon", key: Key, room: Room, strategy: str) -> bool:
    """Up to FLOOR_ATTEMPTS random interior tiles; first free floor tile wins."""
    grid = dungeon.grid
    rng = dungeon.rng
    for _ in range(FLOOR_ATTEMPTS):
        x = math.floor(room.x + 1 + rng.random() * (room.w - 2))
        y = math.floor(room.y + 1 + rng.random() * (room.h - 2))
        data = grid.floor_data(x, y)
        if data is not None and data.is_free:
            data.item = key
            key.rest_at("floor", (x, y), room, strategy)
            dungeon.keys.append(key)
            return True
    return False


def _creature_room_index(dungeon: "Dungeon", c: Union[Creature, Chest]) -> int:
    return dungeon.grid.room_index_at(c.x, c.y)


def _keyless_creatures(dungeon: "Dungeon", reach: Reach) -> List[Creature]:
    return [c for c in dungeon.creatures if not c.has_key() and _within(reach, c.x, c.y)]


def _open_chests(dungeon: "Dungeon", reach: Reach) -> List[Chest]:
    return [c for c in dungeon.chests if not c.locked and not c.has_key() and _within(reach, c.x, c.y)]


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------

def place_key_in_accessible_location(dungeon: "Dungeon", key: Key, target_room: Optional[Room],
                                     candidates: Set[int], reach: Reach = None) -> bool:
    if target_room is None:
        return place_key_randomly(dungeon, key, reach)
    rng = dungeon.rng
    keyed = rooms_with_keys(dungeon)
    ordered = sorted(candidates)
    keyless = [i for i in ordered if i not in keyed]
    allowed = set(keyless) if keyless else set(ordered)

    creatures = [c for c in _keyless_creatures(dungeon, reach) if _creature_room_index(dungeon, c) in allowed]
    if creatures:
        return _give_to_creature(dungeon, key, rng.choice(creatures), "creature")

    chests = [c for c in _open_chests(dungeon, reach) if _creature_room_index(dungeon, c) in allowed]
    if chests:
        return _put_in_chest(dungeon, key, rng.choice(chests), "chest")

    room_list = [dungeon.rooms[i] for i in (keyless or ordered) if _room_within(reach, dungeon.rooms[i])]
    rng.shuffle(room_list)
    for room in room_list:
        if room_has_floor_key(dungeon, room):
            continue
        if _drop_in_room(dungeon, key, room, "floor"):
            return True

    return place_key_constrained_randomly(dungeon, key, target_room.index, reach)


def place_key_constrained_randomly(dungeon: "Dungeon", key: Key, avoid_index: int, reach: Reach = None) -> bool:
    rng = dungeon.rng
    keyed = rooms_with_keys(dungeon)
    others = [r for r in dungeon.rooms if r.index != avoid_index and _room_within(reach, r)]

    keyless_rooms = [r for r in others if r.index not in keyed]
    rng.shuffle(keyless_rooms)
    for room in keyless_rooms:
        if _drop_in_room(dungeon, key, room, "fallback_floor"):
            return True

    other_rooms = list(others)
    rng.shuffle(other_rooms)
    for room in other_rooms:
        if room_has_floor_key(dungeon, room):
            continue
        if _drop_in_room(dungeon, key, room, "fallback_floor"):
            return True

    creatures = _keyless_creatures(dungeon, reach)
    if creatures:
        return _give_to_creature(dungeon, key, rng.choice(creatures), "fallback_creature")

    chests = _open_chests(dungeon, reach)
    if chests:
        return _put_in_chest(dungeon, key, rng.choice(chests), "fallback_chest")
    return False


def place_key_randomly(dungeon: "Dungeon", key: Key, reach: Reach = None) -> bool:
    """For locks outside any room (corridor alcove chests): anywhere that can hold a key."""
    rng = dungeon.rng
    creatures = _keyless_creatures(dungeon, reach)
    if creatures:
        return _give_to_creature(dungeon, key, rng.choice(creatures), "random_creature")
    chests = _open_chests(dungeon, reach)
    if chests:
        return _put_in_chest(dungeon, key, rng.choice(chests), "random_chest")
    grid = dungeon.grid
    free = [(x, y) for x, y in grid.valid_positions()
            if grid.is_floor(x, y) and grid.floor_data(x, y).is_free and _within(reach, x, y)]
    if free:
        x, y = rng.choice(free)
        grid.floor_data(x, y).item = key
        key.rest_at("floor", (x, y), _room_at(dungeon, x, y), "random_floor")
        dungeon.keys.append(key)
        return True
    return False


def place_keys(dungeon: "Dungeon") -> int:
    """Create and place one key per locked door, then per locked chest."""
    doors, chests = collect_locked_objects(dungeon)
    placed = 0
    for door in doors:
        key = Key(DOOR_KEY, key_id=door.key_id)
        candidates = door_key_candidates(dungeon, door) if door.room is not None else set()
        reach = door_key_reach(dungeon, door)
        if place_key_in_accessible_location(dungeon, key, door.room, candidates, reach):
            placed += 1
        else:
            dungeon.report.key_unplaced(key, door.room)
    for chest in chests:
        key = Key(CHEST_KEY, key_id=chest.key_id)
        room = _room_at(dungeon, chest.x, chest.y)
        candidates = chest_key_candidates(dungeon, room) if room is not None else set()
        if place_key_in_accessible_location(dungeon, key, room, candidates):
            placed += 1
        else:
            dungeon.report.key_unplaced(key, room)
    dungeon.metrics['keys_placed'] = placed
    dungeon.metrics['keys_unplaced'] = len(dungeon.report.unplaced_keys)
    return placed


__all__ = [
    "collect_locked_objects",
    "rooms_with_keys",
    "room_has_floor_key",
    "door_key_candidates",
    "door_key_reach",
    "chest_key_candidates",
    "place_key_in_accessible_location",
    "place_key_constrained_randomly",
    "place_key_randomly",
    "place_keys",
]

"""Door placement at room/corridor junctions.

A corridor floor tile becomes a door candidate when it is the corridor's
first tile outside a room:

  * exactly one of its N/E/S/W neighbors is room floor (the entrance side);
  * the tile on the opposite side is corridor floor, so the door sits at the
    mouth of the corridor rather than deeper inside it;
  * it is not within one tile of the room's corner along the entrance wall.

Every candidate rolls its attributes up front (locked, trapped, interest, in
that order). Candidates touching each other (including diagonally) are then
grouped: a lone candidate is skipped 20% of the time, a cluster keeps only its
most interesting member (score = 2*locked + 3*trapped + interest). Doors face
their room: `facing` is the direction from the door toward the room floor.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from delve.services.trap_service import roll_trap

from .cells import DoorData, Tile
from .rooms import Room
from .tiles import CARDINALS, DOOR, EAST, NORTH, SOUTH, WEST

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline import Dungeon

LOCK_CHANCE = 0.3
TRAP_CHANCE = 0.1
LONE_SKIP_CHANCE = 0.2
CORNER_DISTANCE = 1


@dataclass
class DoorCandidate:
    x: int
    y: int
    facing: str
    room: Room
    locked: bool
    trapped: bool
    interest: float

    @property
    def score(self) -> float:
        return 2 * int(self.locked) + 3 * int(self.trapped) + self.interest


def is_near_room_corner(x: int, y: int, room: Room, facing: str) -> bool:
    if facing in (NORTH, SOUTH):
        return x <= room.x + CORNER_DISTANCE or x >= room.x + room.w - 1 - CORNER_DISTANCE
    if facing in (EAST, WEST):
        return y <= room.y + CORNER_DISTANCE or y >= room.y + room.h - 1 - CORNER_DISTANCE
    return False


def check_door_position(dungeon: "Dungeon", x: int, y: int) -> Optional[Tuple[str, Room]]:
    """Return (facing, room) when (x, y) is a valid door spot, else None."""
    grid = dungeon.grid
    entrances = [(dx, dy, facing) for dx, dy, facing in CARDINALS if grid.is_room_floor(x + dx, y + dy)]
    if len(entrances) != 1:
        return None
    dx, dy, facing = entrances[0]
    room = dungeon.rooms[grid.room_ids[x + dx][y + dy]]
    if not grid.is_corridor_floor(x - dx, y - dy):
        return None
    if is_near_room_corner(x, y, room, facing):
        return None
    return facing, room


def find_door_candidates(dungeon: "Dungeon") -> List[DoorCandidate]:
    grid = dungeon.grid
    rng = dungeon.rng
    candidates: List[DoorCandidate] = []
    for x, y in grid.valid_positions():
        if not grid.is_corridor_floor(x, y):
            continue
        if not grid.floor_data(x, y).is_free:
            continue  # something from the variety pass already stands here
        found = check_door_position(dungeon, x, y)
        if found is None:
            continue
        facing, room = found
        locked = rng.chance(LOCK_CHANCE)
        trapped = rng.chance(TRAP_CHANCE)
        interest = rng.random()
        candidates.append(DoorCandidate(x, y, facing, room, locked, trapped, interest))
    return candidates


def group_adjacent(candidates: List[DoorCandidate]) -> List[List[DoorCandidate]]:
    """Greedy clustering: each unassigned candidate seeds a group of its unassigned neighbors."""
    groups: List[List[DoorCandidate]] = []
    assigned = set()
    for i, seed in enumerate(candidates):
        if i in assigned:
            continue
        group = [seed]
        assigned.add(i)
        for j, other in enumerate(candidates):
            if j in assigned:
                continue
            if abs(seed.x - other.x) <= 1 and abs(seed.y - other.y) <= 1:
                group.append(other)
                assigned.add(j)
        groups.append(group)
    return groups


def select_best(group: List[DoorCandidate]) -> DoorCandidate:
    best, best_score = group[0], -1.0
    for cand in group:
        if cand.score > best_score:
            best, best_score = cand, cand.score
    return best


def create_door(dungeon: "Dungeon", x: int, y: int, facing: str, room: Optional[Room],
                locked: bool = False, trapped: bool = False) -> DoorData:
    door = DoorData(x=x, y=y, facing=facing, room=room, locked=locked, trapped=trapped)
    if trapped:
        door.trap = roll_trap(dungeon.rng)
    dungeon.grid.set(x, y, Tile.door(door))
    dungeon.doors.append(door)
    return door


def place_doors(dungeon: "Dungeon") -> List[DoorData]:
    metrics = dungeon.metrics
    dungeon.doors = []
    candidates = find_door_candidates(dungeon)
    metrics['door_candidates'] = len(candidates)
    for group in group_adjacent(candidates):
        if len(group) == 1:
            if dungeon.rng.chance(LONE_SKIP_CHANCE):
                metrics['doors_skipped'] += 1
                continue
            chosen = group[0]
        else:
            chosen = select_best(group)
            metrics['door_clusters_reduced'] += 1
        create_door(dungeon, chosen.x, chosen.y, chosen.facing, chosen.room, chosen.locked, chosen.trapped)
    metrics['doors_created'] = len(dungeon.doors)
    metrics['doors_locked'] = sum(1 for d in dungeon.doors if d.locked)
    metrics['doors_trapped'] = sum(1 for d in dungeon.doors if d.trapped)
    return dungeon.doors


def find_doors_for_room(dungeon: "Dungeon", room: Room) -> List[DoorData]:
    """Doors on the one-tile ring around `room` that belong to it."""
    grid = dungeon.grid
    ring = []
    for x in range(room.x, room.x + room.w):
        ring.append((x, room.y - 1))
        ring.append((x, room.y + room.h))
    for y in range(room.y, room.y + room.h):
        ring.append((room.x - 1, y))
        ring.append((room.x + room.w, y))
    doors = []
    for x, y in ring:
        if not grid.is_valid_position(x, y):
            continue
        tile = grid.get(x, y)
        if tile.kind == DOOR and tile.data.room is room:
            doors.append(tile.data)
    return doors


def is_all_locked(dungeon: "Dungeon", room: Room) -> bool:
    doors = find_doors_for_room(dungeon, room)
    return bool(doors) and all(d.locked for d in doors)


__all__ = [
    "DoorCandidate",
    "is_near_room_corner",
    "check_door_position",
    "find_door_candidates",
    "group_adjacent",
    "select_best",
    "create_door",
    "place_doors",
    "find_doors_for_room",
    "is_all_locked",
]

"""Corridor routing between rooms.

Connection order is a greedy spanning pass over room pairs sorted by the
Manhattan distance of their centers: starting from room 0, repeatedly take
the closest pair with exactly one connected endpoint and carve it. A few
extra corridors between already-connected rooms then add loops.

Each corridor is an L-shaped carve between two door positions that sit on the
rooms' edge tiles:
  * up to three attempts, each picking door positions with an escalating
    strategy (aligned wall, other wall pair, wall center);
  * per attempt, horizontal-then-vertical is tried before
    vertical-then-horizontal; an orientation is rejected when either leg
    would run alongside a room wall or existing corridor;
  * an accepted orientation splices onto existing floor on its first leg
    when it can, then continues with a fresh L toward the target;
  * when every attempt is rejected a plain L is carved without checks, so
    routing never fails.

Carving walks `while cur != end`; the end tile is room floor already.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Set, Tuple

from .cells import Coord2D
from .rooms import Room

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline import Dungeon

MAX_ATTEMPTS = 3
SPANNING = "spanning"
LOOP = "loop"


@dataclass(eq=False)
class Corridor:
    start: Coord2D
    end: Coord2D
    room_a: Room
    room_b: Room
    kind: str = SPANNING
    strategy: str = ""
    path: List[Coord2D] = field(default_factory=list)

    def to_dict(self):
        return {
            "start": list(self.start),
            "end": list(self.end),
            "rooms": [self.room_a.index, self.room_b.index],
            "kind": self.kind,
            "strategy": self.strategy,
            "length": len(self.path),
        }


# ---------------------------------------------------------------------------
# Door positions
# ---------------------------------------------------------------------------

def find_door_position(dungeon: "Dungeon", room: Room, other: Room, attempt: int = 0) -> Coord2D:
    """Edge tile of `room` facing `other` for the given attempt number."""
    rng = dungeon.rng
    (ax, ay), (bx, by) = room.center, other.center
    east = bx > ax
    south = by > ay
    east_x = room.x + room.w - 1 if east else room.x
    south_y = room.y + room.h - 1 if south else room.y
    if attempt == 0:
        if abs(bx - ax) > abs(by - ay):
            return east_x, math.floor(room.y + 1 + rng.random() * (room.h - 2))
        return math.floor(room.x + 1 + rng.random() * (room.w - 2)), south_y
    if attempt == 1:
        if abs(bx - ax) <= abs(by - ay):
            return east_x, math.floor(room.y + room.h * 0.75)
        return math.floor(room.x + room.w * 0.25), south_y
    if rng.random() > 0.5:
        return east_x, room.y + room.h // 2
    return room.x + room.w // 2, south_y


# ---------------------------------------------------------------------------
# Heuristics
# ---------------------------------------------------------------------------

def find_merge_point(dungeon: "Dungeon", x1: int, y1: int, x2: int, y2: int) -> Optional[Coord2D]:
    """First interior tile of a straight run where an existing corridor can be joined.

    A tile qualifies when a side neighbor is corridor floor or the tile itself
    is already floor. Runs of span <= 2 never merge.
    """
    grid = dungeon.grid
    if not grid.is_valid_position(x1, y1) or not grid.is_valid_position(x2, y2):
        return None
    if y1 == y2:
        lo, hi = min(x1, x2), max(x1, x2)
        if hi - lo <= 2:
            return None
        for x in range(lo + 1, hi):
            if grid.is_corridor_floor(x, y1 - 1) or grid.is_corridor_floor(x, y1 + 1) or grid.is_floor(x, y1):
                return x, y1
    elif x1 == x2:
        lo, hi = min(y1, y2), max(y1, y2)
        if hi - lo <= 2:
            return None
        for y in range(lo + 1, hi):
            if grid.is_corridor_floor(x1 - 1, y) or grid.is_corridor_floor(x1 + 1, y) or grid.is_floor(x1, y):
                return x1, y
    return None


def runs_alongside(dungeon: "Dungeon", x1: int, y1: int, x2: int, y2: int) -> bool:
    """True when a straight run would hug a room wall or parallel an existing corridor.

    Room check: the run sits exactly one tile outside a room edge and overlaps
    the room's interior span. Corridor check: two of the three tiles starting
    at any point one tile off the run are corridor floor.
    """
    grid = dungeon.grid
    if y1 == y2:
        lo, hi = min(x1, x2), max(x1, x2)
        if hi - lo <= 1:
            return False
        for room in dungeon.rooms:
            if (y1 == room.y - 1 or y1 == room.y + room.h) and not (lo + 1 >= room.x + room.w or hi - 1 <= room.x):
                return True
        for x in range(lo, hi + 1):
            for side in (y1 - 1, y1 + 1):
                if grid.is_corridor_floor(x, side):
                    parallel = sum(1 for dx in range(3) if x + dx <= hi and grid.is_corridor_floor(x + dx, side))
                    if parallel >= 2:
                        return True
    elif x1 == x2:
        lo, hi = min(y1, y2), max(y1, y2)
        if hi - lo <= 1:
            return False
        for room in dungeon.rooms:
            if (x1 == room.x - 1 or x1 == room.x + room.w) and not (lo + 1 >= room.y + room.h or hi - 1 <= room.y):
                return True
        for y in range(lo, hi + 1):
            for side in (x1 - 1, x1 + 1):
                if grid.is_corridor_floor(side, y):
                    parallel = sum(1 for dy in range(3) if y + dy <= hi and grid.is_corridor_floor(side, y + dy))
                    if parallel >= 2:
                        return True
    return False


# ---------------------------------------------------------------------------
# Carving
# ---------------------------------------------------------------------------

def _carve_run(dungeon: "Dungeon", corridor: Corridor, x1: int, y1: int, x2: int, y2: int) -> None:
    """Carve a straight run from (x1, y1) toward (x2, y2), excluding the end tile."""
    grid = dungeon.grid
    if y1 == y2:
        step = 1 if x1 < x2 else -1
        x = x1
        while x != x2:
            grid.carve(x, y1)
            corridor.path.append((x, y1))
            x += step
    else:
        step = 1 if y1 < y2 else -1
        y = y1
        while y != y2:
            grid.carve(x1, y)
            corridor.path.append((x1, y))
            y += step


def _carve_l(dungeon: "Dungeon", corridor: Corridor, sx: int, sy: int, ex: int, ey: int, horizontal_first: bool) -> None:
    if horizontal_first:
        _carve_run(dungeon, corridor, sx, sy, ex, sy)
        _carve_run(dungeon, corridor, ex, sy, ex, ey)
    else:
        _carve_run(dungeon, corridor, sx, sy, sx, ey)
        _carve_run(dungeon, corridor, sx, ey, ex, ey)


def _legs(sx: int, sy: int, ex: int, ey: int, horizontal_first: bool) -> Tuple[Tuple[int, int, int, int], Tuple[int, int, int, int]]:
    if horizontal_first:
        return (sx, sy, ex, sy), (ex, sy, ex, ey)
    return (sx, sy, sx, ey), (sx, ey, ex, ey)


def attempt_path(dungeon: "Dungeon", corridor: Corridor, horizontal_first: bool) -> bool:
    """Carve one L orientation if neither leg runs alongside anything."""
    (sx, sy), (ex, ey) = corridor.start, corridor.end
    first, second = _legs(sx, sy, ex, ey, horizontal_first)
    if runs_alongside(dungeon, *first) or runs_alongside(dungeon, *second):
        return False
    merge = find_merge_point(dungeon, *first)
    if merge is not None:
        mx, my = merge
        _carve_run(dungeon, corridor, sx, sy, mx, my)
        _carve_l(dungeon, corridor, mx, my, ex, ey, dungeon.rng.random() > 0.5)
        corridor.strategy = "merge"
        return True
    _carve_l(dungeon, corridor, sx, sy, ex, ey, horizontal_first)
    corridor.strategy = "hv" if horizontal_first else "vh"
    return True


def create_corridor(dungeon: "Dungeon", room_a: Room, room_b: Room, kind: str = SPANNING) -> Optional[Corridor]:
    grid = dungeon.grid
    for attempt in range(MAX_ATTEMPTS):
        door_a = find_door_position(dungeon, room_a, room_b, attempt)
        door_b = find_door_position(dungeon, room_b, room_a, attempt)
        if not grid.is_valid_position(*door_a) or not grid.is_valid_position(*door_b):
            continue
        corridor = Corridor(door_a, door_b, room_a, room_b, kind=kind)
        if attempt_path(dungeon, corridor, True) or attempt_path(dungeon, corridor, False):
            return corridor
    door_a = find_door_position(dungeon, room_a, room_b, 0)
    door_b = find_door_position(dungeon, room_b, room_a, 0)
    if not grid.is_valid_position(*door_a) or not grid.is_valid_position(*door_b):
        return None
    corridor = Corridor(door_a, door_b, room_a, room_b, kind=kind, strategy="direct")
    _carve_l(dungeon, corridor, door_a[0], door_a[1], door_b[0], door_b[1], True)
    dungeon.metrics['corridor_fallbacks'] += 1
    return corridor


# ---------------------------------------------------------------------------
# Connection order
# ---------------------------------------------------------------------------

def sorted_room_pairs(rooms: List[Room]) -> List[Tuple[Room, Room, int]]:
    pairs = []
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            (ax, ay), (bx, by) = a.center, b.center
            pairs.append((a, b, abs(ax - bx) + abs(ay - by)))
    pairs.sort(key=lambda p: p[2])
    return pairs


def connect_rooms(dungeon: "Dungeon") -> List[Corridor]:
    """Spanning pass plus loop corridors; fills dungeon.corridors."""
    rooms = dungeon.rooms
    corridors: List[Corridor] = []
    dungeon.corridors = corridors
    for room in rooms:
        room.connected = False
    if not rooms:
        return corridors
    rooms[0].connected = True
    pairs = sorted_room_pairs(rooms)
    linked: Set[Tuple[int, int]] = set()
    connected_count = 1
    while connected_count < len(rooms) and pairs:
        for i, (a, b, _d) in enumerate(pairs):
            if a.connected == b.connected:
                continue
            src, dst = (a, b) if a.connected else (b, a)
            corridor = create_corridor(dungeon, src, dst, SPANNING)
            if corridor is not None:
                corridors.append(corridor)
                linked.add((min(a.index, b.index), max(a.index, b.index)))
                dst.connected = True
                connected_count += 1
            del pairs[i]
            break
        else:
            break
    # Loop edges: the attempt budget rounds to 1 for small levels and only
    # pairs left over from the spanning pass are eligible.
    budget = max(1, len(rooms) // 10)
    extra = 0
    for a, b, _d in pairs:
        if extra >= budget:
            break
        if not (a.connected and b.connected):
            continue
        if (min(a.index, b.index), max(a.index, b.index)) in linked:
            continue
        corridor = create_corridor(dungeon, a, b, LOOP)
        if corridor is not None:
            corridors.append(corridor)
            linked.add((min(a.index, b.index), max(a.index, b.index)))
            extra += 1
    dungeon.metrics['corridors_spanning'] = sum(1 for c in corridors if c.kind == SPANNING)
    dungeon.metrics['corridors_loop'] = extra
    return corridors


__all__ = [
    "Corridor",
    "SPANNING",
    "LOOP",
    "find_door_position",
    "find_merge_point",
    "runs_alongside",
    "attempt_path",
    "create_corridor",
    "sorted_room_pairs",
    "connect_rooms",
]

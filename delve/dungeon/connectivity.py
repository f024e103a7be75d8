"""Reachability utilities.

Two views of the same level:
  * the accessibility graph - rooms linked only through *unlocked* doors,
    used to decide where a key can rest without being sealed behind its lock;
  * the structural flood - every non-solid tile, locks ignored, used to check
    that routing and door placement left the level in one piece.

The accessibility graph is built fresh for every query context because
"accessible" depends on which doors are being treated as impassable.
"""
from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Set

from .cells import Coord2D
from .tiles import CARDINALS

if TYPE_CHECKING:  # pragma: no cover
    from .cells import DoorData
    from .pipeline import Dungeon

AccessibilityGraph = Dict[int, Set[int]]


def build_accessibility_graph(dungeon: "Dungeon", exclude: Optional[Iterable["DoorData"]] = None) -> AccessibilityGraph:
    """Room index -> neighbor room indices through unlocked doors.

    For each unlocked door not in `exclude`, every cardinal neighbor that is
    floor inside a room other than the door's own room links the two rooms
    (both directions). Doors without a room contribute nothing.
    """
    grid = dungeon.grid
    skip = {id(d) for d in exclude} if exclude else set()
    graph: AccessibilityGraph = {room.index: set() for room in dungeon.rooms}
    for door in dungeon.doors:
        if door.locked or id(door) in skip or door.room is None:
            continue
        own = door.room.index
        for dx, dy, _facing in CARDINALS:
            nx, ny = door.x + dx, door.y + dy
            if not grid.is_floor(nx, ny):
                continue
            other = grid.room_index_at(nx, ny)
            if other < 0 or other == own:
                continue
            graph[own].add(other)
            graph[other].add(own)
    return graph


def find_accessible_rooms(start: int, graph: AccessibilityGraph) -> Set[int]:
    """BFS over the accessibility graph; `start` is always part of the result."""
    visited = {start}
    q = deque([start])
    while q:
        current = q.popleft()
        for nxt in graph.get(current, ()):
            if nxt not in visited:
                visited.add(nxt)
                q.append(nxt)
    return visited


def flood_passable(dungeon: "Dungeon", start: Coord2D, blocked: Optional[Set[Coord2D]] = None) -> Set[Coord2D]:
    """Every tile reachable from `start` over non-solid tiles, doors treated as open.

    Tiles in `blocked` count as walls.
    """
    grid = dungeon.grid
    blocked = blocked or set()
    if not grid.in_bounds(*start) or grid.get(*start).is_solid or start in blocked:
        return set()
    visited = {start}
    q = deque([start])
    while q:
        cx, cy = q.popleft()
        for dx, dy, _facing in CARDINALS:
            nx, ny = cx + dx, cy + dy
            if (nx, ny) in visited or (nx, ny) in blocked or not grid.in_bounds(nx, ny):
                continue
            if grid.get(nx, ny).is_solid:
                continue
            visited.add((nx, ny))
            q.append((nx, ny))
    return visited


def reachable_without(dungeon: "Dungeon", start: Coord2D, door: "DoorData") -> Set[Coord2D]:
    """Tiles reachable from `start` while `door` stays shut; every other door counts as open."""
    return flood_passable(dungeon, start, blocked={(door.x, door.y)})


def structurally_connected_rooms(dungeon: "Dungeon") -> Set[int]:
    """Indices of rooms reachable from room 0 ignoring locks."""
    if not dungeon.rooms:
        return set()
    reached = flood_passable(dungeon, dungeon.rooms[0].center)
    return {room.index for room in dungeon.rooms if room.center in reached}


__all__ = [
    "AccessibilityGraph",
    "build_accessibility_graph",
    "find_accessible_rooms",
    "flood_passable",
    "reachable_without",
    "structurally_connected_rooms",
]

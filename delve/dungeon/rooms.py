"""Room records and BSP room placement.

The usable area (grid minus border) is split recursively into leaves; each
retained leaf gets one room centered inside it. Rooms inherit disjointness
from the partition tree, so no overlap test is ever run.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, NamedTuple, Tuple

from .config import DungeonConfig
from .rng import SeededRNG

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline import Dungeon

LEAF_PADDING = 1


@dataclass(eq=False)
class Room:
    x: int
    y: int
    w: int
    h: int
    index: int = -1
    connected: bool = False

    def cells(self):
        for ix in range(self.x, self.x + self.w):
            for iy in range(self.y, self.y + self.h):
                yield ix, iy

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.w and self.y <= y < self.y + self.h

    @property
    def center(self) -> Tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    @property
    def center_f(self) -> Tuple[float, float]:
        return (self.x + self.w / 2, self.y + self.h / 2)

    @property
    def area(self) -> int:
        return self.w * self.h

    def to_dict(self):
        return {"index": self.index, "x": self.x, "y": self.y, "w": self.w, "h": self.h}


class Rect(NamedTuple):
    x: int; y: int; w: int; h: int


def bsp_partition(config: DungeonConfig, rng: SeededRNG) -> List[Rect]:
    """Split the usable area into leaves (depth-first, first child before second)."""
    b = config.border_size
    root = Rect(b, b, config.width - 2 * b, config.height - 2 * b)
    leaves: List[Rect] = []
    _split(root, 0, config, rng, leaves)
    return leaves


def _split(r: Rect, depth: int, config: DungeonConfig, rng: SeededRNG, leaves: List[Rect]) -> None:
    min_w, min_h = config.min_room_width, config.min_room_height
    if depth >= config.max_bsp_depth or r.w <= min_w * 2 or r.h <= min_h * 2:
        leaves.append(r)
        return
    # The roll is always drawn, even when the aspect ratio overrides it
    split_h = rng.random() > 0.5
    if r.w > r.h * 1.25:
        split_h = False
    elif r.h > r.w * 1.25:
        split_h = True
    if split_h:
        lo, hi = r.y + min_h, r.y + r.h - min_h
        if hi - lo < 1:
            leaves.append(r)
            return
        cut = math.floor(lo + rng.random() * (hi - lo))
        first = Rect(r.x, r.y, r.w, cut - r.y)
        second = Rect(r.x, cut, r.w, r.y + r.h - cut)
    else:
        lo, hi = r.x + min_w, r.x + r.w - min_w
        if hi - lo < 1:
            leaves.append(r)
            return
        cut = math.floor(lo + rng.random() * (hi - lo))
        first = Rect(r.x, r.y, cut - r.x, r.h)
        second = Rect(cut, r.y, r.x + r.w - cut, r.h)
    _split(first, depth + 1, config, rng, leaves)
    _split(second, depth + 1, config, rng, leaves)


def _room_span(rng: SeededRNG, leaf_extent: int, lo: int, hi: int) -> int:
    # Drawn from the top 30% of the usable span, clamped to the global limits
    usable = min(leaf_extent - 2 * LEAF_PADDING, hi)
    return max(lo, math.floor(usable * 0.7) + math.floor(rng.random() * (usable * 0.3)))


def rooms_from_leaves(leaves: List[Rect], config: DungeonConfig, rng: SeededRNG) -> List[Room]:
    pool = rng.shuffle(list(leaves))[: config.max_rooms]
    min_span_w = 2 * LEAF_PADDING + config.min_room_width - 1
    min_span_h = 2 * LEAF_PADDING + config.min_room_height - 1
    rooms: List[Room] = []
    for leaf in pool:
        if leaf.w <= min_span_w or leaf.h <= min_span_h:
            continue
        w = _room_span(rng, leaf.w, config.min_room_width, config.max_room_width)
        h = _room_span(rng, leaf.h, config.min_room_height, config.max_room_height)
        x = leaf.x + (leaf.w - w) // 2
        y = leaf.y + (leaf.h - h) // 2
        rooms.append(Room(x, y, w, h, index=len(rooms)))
    return rooms


def place_rooms(dungeon: "Dungeon") -> List[Room]:
    """Partition, pick rooms and carve them into the dungeon grid."""
    leaves = bsp_partition(dungeon.config, dungeon.rng)
    rooms = rooms_from_leaves(leaves, dungeon.config, dungeon.rng)
    grid = dungeon.grid
    for room in rooms:
        for ix, iy in room.cells():
            grid.carve(ix, iy)
            grid.room_ids[ix][iy] = room.index
    dungeon.rooms = rooms
    dungeon.metrics['bsp_leaves'] = len(leaves)
    dungeon.metrics['rooms'] = len(rooms)
    return rooms


__all__ = ["Room", "Rect", "bsp_partition", "rooms_from_leaves", "place_rooms"]

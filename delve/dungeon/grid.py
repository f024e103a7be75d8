"""Tile buffer with border convention and bounds predicates.

Two predicates guard every tile access:
  * `in_bounds` - inside the raw width x height buffer.
  * `is_valid_position` - inside the buffer *and* outside the border margin.
Generation stages only ever touch valid positions, which is how the border
stays solid without any post-pass.

`room_ids` mirrors the buffer and holds the index of the room whose rectangle
covers a cell (-1 otherwise) so room membership is O(1).
"""
from __future__ import annotations

from typing import Iterator, List, Optional

from .cells import Coord2D, FloorData, Grid2D, Tile
from .config import DungeonConfigError


class GridModel:
    def __init__(self, width: int, height: int, border_size: int = 1):
        if width <= 0 or height <= 0:
            raise DungeonConfigError(f"dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.border_size = border_size
        self.tiles: Grid2D = []
        self.room_ids: List[List[int]] = []
        self.fill_walls()

    def fill_walls(self) -> None:
        """Reset every cell: margin cells become border, the rest wall."""
        self.tiles = [
            [Tile.wall() if self.is_valid_position(x, y) else Tile.border() for y in range(self.height)]
            for x in range(self.width)
        ]
        self.room_ids = [[-1 for _ in range(self.height)] for _ in range(self.width)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_valid_position(self, x: int, y: int) -> bool:
        b = self.border_size
        return b <= x < self.width - b and b <= y < self.height - b

    def get(self, x: int, y: int) -> Tile:
        return self.tiles[x][y]

    def set(self, x: int, y: int, tile: Tile) -> None:
        self.tiles[x][y] = tile

    def is_floor(self, x: int, y: int) -> bool:
        return self.is_valid_position(x, y) and self.tiles[x][y].is_floor

    def kind(self, x: int, y: int) -> Optional[str]:
        if not self.in_bounds(x, y):
            return None
        return self.tiles[x][y].kind

    def carve(self, x: int, y: int) -> bool:
        """Turn a valid non-floor cell into bare floor. Returns True if it changed."""
        if not self.is_valid_position(x, y):
            return False
        if self.tiles[x][y].is_floor:
            return False
        self.tiles[x][y] = Tile.floor()
        return True

    def floor_data(self, x: int, y: int) -> Optional[FloorData]:
        if not self.is_valid_position(x, y):
            return None
        tile = self.tiles[x][y]
        return tile.data if tile.is_floor else None

    def room_index_at(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return -1
        return self.room_ids[x][y]

    def is_room_floor(self, x: int, y: int) -> bool:
        return self.is_floor(x, y) and self.room_ids[x][y] >= 0

    def is_corridor_floor(self, x: int, y: int) -> bool:
        """Floor outside every room rectangle."""
        return self.is_floor(x, y) and self.room_ids[x][y] < 0

    def valid_positions(self) -> Iterator[Coord2D]:
        """Column-major scan (x outer, y inner) over the carveable interior."""
        b = self.border_size
        for x in range(b, self.width - b):
            for y in range(b, self.height - b):
                yield x, y

    def count(self, kind: str) -> int:
        return sum(1 for col in self.tiles for t in col if t.kind == kind)


__all__ = ["GridModel"]

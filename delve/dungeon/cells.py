"""Grid cell representation.

A Tile is a kind tag plus a payload chosen by that tag: floors carry what is
standing on them, doors carry their lock state and owning room, stairs carry
their direction. Walls and border cells carry nothing.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

from delve.models import Chest, Creature, Item, Trap

from .tiles import BORDER, DOOR, FLOOR, SOLID_KINDS, STAIRS, WALL

if TYPE_CHECKING:  # pragma: no cover
    from .rooms import Room


@dataclass
class FloorData:
    item: Optional[Union[Chest, Item]] = None
    creature: Optional[Creature] = None
    debris: bool = False
    pillar: bool = False
    trap: Optional[Trap] = None

    @property
    def is_free(self) -> bool:
        return self.item is None and self.creature is None


@dataclass(eq=False)
class DoorData:
    x: int
    y: int
    facing: str
    room: Optional["Room"]
    locked: bool = False
    trapped: bool = False
    trap: Optional[Trap] = None

    @property
    def key_id(self) -> str:
        return f"door_{self.x}_{self.y}"

    def lock(self) -> None:
        self.locked = True

    def unlock(self) -> None:
        self.locked = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "facing": self.facing,
            "room": self.room.index if self.room is not None else None,
            "locked": self.locked,
            "trapped": self.trapped,
            "trap": self.trap.to_dict() if self.trap else None,
        }


@dataclass
class StairsData:
    direction: str = "down"
    next_level: Optional[int] = None


Payload = Union[FloorData, DoorData, StairsData, None]


class Tile:
    """Lightweight container for a dungeon grid cell."""
    __slots__ = ("kind", "data")

    def __init__(self, kind: str, data: Payload = None):
        self.kind = kind
        self.data = data

    @classmethod
    def wall(cls) -> "Tile":
        return cls(WALL)

    @classmethod
    def border(cls) -> "Tile":
        return cls(BORDER)

    @classmethod
    def floor(cls) -> "Tile":
        return cls(FLOOR, FloorData())

    @classmethod
    def door(cls, data: DoorData) -> "Tile":
        return cls(DOOR, data)

    @classmethod
    def stairs(cls, direction: str = "down") -> "Tile":
        return cls(STAIRS, StairsData(direction))

    @property
    def is_floor(self) -> bool:
        return self.kind == FLOOR

    @property
    def is_solid(self) -> bool:
        return self.kind in SOLID_KINDS

    @property
    def passable(self) -> bool:
        """Walkable ignoring locks (structural connectivity treats every door as open)."""
        return not self.is_solid

    def to_dict(self):
        d: Dict[str, Any] = {"kind": self.kind}
        if isinstance(self.data, DoorData):
            d["door"] = self.data.to_dict()
        elif isinstance(self.data, StairsData):
            d["stairs"] = {"direction": self.data.direction}
        elif isinstance(self.data, FloorData):
            if self.data.pillar:
                d["pillar"] = True
            if self.data.debris:
                d["debris"] = True
            if self.data.trap:
                d["trap"] = self.data.trap.to_dict()
        return d

    def __repr__(self):
        return f"Tile({self.kind!r})"


Grid2D = List[List[Tile]]
Coord2D = Tuple[int, int]

__all__ = ["Tile", "FloorData", "DoorData", "StairsData", "Grid2D", "Coord2D"]

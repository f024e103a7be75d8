"""Plain entity records placed by the generator.

Entities carry state only. Every random decision about them (quality, stats,
loot, trap type) lives in the roll functions of `delve.loot.generator`,
`delve.services.spawn_service` and `delve.services.trap_service`, which take
the RNG explicitly and hand back finished values.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from delve.dungeon.rooms import Room

DOOR_KEY = "doorKey"
CHEST_KEY = "chestKey"
KEY_TYPES = (DOOR_KEY, CHEST_KEY)


@dataclass
class Item:
    type: str
    amount: Optional[int] = None

    @property
    def is_key(self) -> bool:
        return self.type in KEY_TYPES

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"type": self.type}
        if self.amount is not None:
            d["amount"] = self.amount
        return d


@dataclass
class Key(Item):
    """Item opening exactly one door or chest, matched through `key_id`.

    The holder fields describe where the key came to rest: `holder` is one of
    'creature', 'chest' or 'floor'; `strategy` names the placement rule that
    succeeded (used by invariant checks and diagnostics).
    """

    key_id: str = ""
    holder: Optional[str] = None
    position: Optional[Tuple[int, int]] = None
    room: Optional["Room"] = None
    strategy: Optional[str] = None

    def rest_at(self, holder: str, position: Tuple[int, int], room: Optional["Room"], strategy: str) -> None:
        self.holder = holder
        self.position = position
        self.room = room
        self.strategy = strategy

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d.update({
            "key_id": self.key_id,
            "holder": self.holder,
            "position": list(self.position) if self.position else None,
            "room": self.room.index if self.room is not None else None,
            "strategy": self.strategy,
        })
        return d


@dataclass
class Trap:
    type: str
    difficulty: int
    damage: int
    effect: str = "none"
    duration: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "difficulty": self.difficulty,
            "damage": self.damage,
            "effect": self.effect,
            "duration": self.duration,
        }


@dataclass(eq=False)
class Chest:
    x: int
    y: int
    quality: str
    locked: bool
    room: Optional["Room"] = None
    loot: List[Item] = field(default_factory=list)
    chest_type: str = "treasure"
    key_id: str = ""

    def __post_init__(self):
        # Fixed at creation so a relocated chest still matches its key
        if not self.key_id:
            self.key_id = f"chest_{self.x}_{self.y}"

    def has_key(self) -> bool:
        return any(i.is_key for i in self.loot)

    def add_loot(self, item: Item) -> None:
        self.loot.append(item)

    def unlock(self) -> None:
        self.locked = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "quality": self.quality,
            "locked": self.locked,
            "type": self.chest_type,
            "key_id": self.key_id,
            "room": self.room.index if self.room is not None else None,
            "loot": [i.to_dict() for i in self.loot],
        }


@dataclass(eq=False)
class Creature:
    x: int
    y: int
    type: str
    health: int
    damage: int
    armor: int
    level: int
    asleep: bool = False
    room: Optional["Room"] = None
    loot: List[Item] = field(default_factory=list)
    max_health: int = 0
    hostile: bool = True

    def __post_init__(self):
        if not self.max_health:
            self.max_health = self.health

    def has_key(self) -> bool:
        return any(i.is_key for i in self.loot)

    def add_loot(self, item: Item) -> None:
        self.loot.append(item)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "type": self.type,
            "health": self.health,
            "max_health": self.max_health,
            "damage": self.damage,
            "armor": self.armor,
            "level": self.level,
            "asleep": self.asleep,
            "room": self.room.index if self.room is not None else None,
            "loot": [i.to_dict() for i in self.loot],
        }


__all__ = ["Item", "Key", "Trap", "Chest", "Creature", "DOOR_KEY", "CHEST_KEY", "KEY_TYPES"]

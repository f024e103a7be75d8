"""Loot generation utilities.

Rolls chest quality, lock state and contents. Every function takes the
generator's `SeededRNG` explicitly and draws in a documented order, so the
chest sequence for a seed never changes when unrelated code moves around.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, List, Optional

from delve.models import Chest, Item

if TYPE_CHECKING:  # pragma: no cover
    from delve.dungeon.rng import SeededRNG

QUALITIES = ["common", "uncommon", "rare", "epic", "legendary"]

# Upper bound (exclusive of the +1) on how many items each quality holds
LOOT_COUNT_BY_QUALITY = {
    'common': 2,
    'uncommon': 4,
    'rare': 6,
    'epic': 8,
    'legendary': 10,
}

BASE_ITEM_TYPES = ["weapon", "armor", "potion", "scroll", "gold"]

ALWAYS_LOCKED = {"epic", "legendary"}


def roll_quality(rng: SeededRNG) -> str:
    roll = rng.random()
    if roll < 0.5:
        return "common"
    if roll < 0.7:
        return "uncommon"
    if roll < 0.85:
        return "rare"
    if roll < 0.95:
        return "epic"
    return "legendary"


def roll_room_chest_quality(rng: SeededRNG, locked_room: bool) -> str:
    """Quality for a chest placed inside a room.

    All-locked rooms run a chain of independent checks biased toward the
    better tiers before falling back to the generic roll; open rooms are
    mostly common.
    """
    if locked_room:
        if rng.random() < 0.2:
            return "rare"
        if rng.random() < 0.1:
            return "epic"
        if rng.random() < 0.05:
            return "legendary"
        return roll_quality(rng)
    if rng.random() < 0.75:
        return "common"
    return roll_quality(rng)


def roll_locked(rng: SeededRNG, quality: str) -> bool:
    if quality in ALWAYS_LOCKED:
        return True
    return rng.random() < 0.3


def roll_gold(rng: SeededRNG, modifier: Optional[int] = None) -> Item:
    if modifier is None:
        modifier = 10
    return Item("gold", amount=math.floor(rng.random() * modifier) + 1)


def roll_item(rng: SeededRNG) -> Item:
    item_type = rng.choice(BASE_ITEM_TYPES)
    if item_type == "gold":
        return roll_gold(rng)
    return Item(item_type)


def roll_chest_loot(rng: SeededRNG, quality: str) -> List[Item]:
    upper = LOOT_COUNT_BY_QUALITY.get(quality, 2)
    count = math.floor(rng.random() * upper) + 1
    return [roll_item(rng) for _ in range(count)]


def make_chest(rng: SeededRNG, x: int, y: int, quality: Optional[str] = None,
               locked: Optional[bool] = None, room=None) -> Chest:
    """Roll whatever is left open (quality, then lock, then loot) and build a Chest."""
    if quality is None:
        quality = roll_quality(rng)
    if locked is None:
        locked = roll_locked(rng, quality)
    loot = roll_chest_loot(rng, quality)
    return Chest(x=x, y=y, quality=quality, locked=locked, room=room, loot=loot)


__all__ = [
    "QUALITIES",
    "roll_quality",
    "roll_room_chest_quality",
    "roll_locked",
    "roll_gold",
    "roll_item",
    "roll_chest_loot",
    "make_chest",
]

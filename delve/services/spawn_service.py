"""Creature spawn selection & stat rolls.

Picks a creature type for a placement context (corridor, open room,
all-locked room), rolls its health and loot, and builds the Creature record.

This is intentionally stateless: callers pass the dungeon RNG and receive a
finished entity, so the type tables can be unit-tested against a scripted RNG.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, List, NamedTuple, Optional, Tuple

from delve.loot.generator import roll_gold
from delve.models import Creature, Item

if TYPE_CHECKING:  # pragma: no cover
    from delve.dungeon.rng import SeededRNG

CORRIDOR = "corridor"
OPEN_ROOM = "room"
LOCKED_ROOM = "locked_room"


class CreatureStats(NamedTuple):
    health_spread: int
    health_base: int
    damage: int
    armor: int
    level: int


# health = floor(random()*spread) + base
CREATURE_STATS: Dict[str, CreatureStats] = {
    "spider": CreatureStats(8, 3, 3, 2, 1),
    "goblin": CreatureStats(10, 5, 4, 3, 1),
    "skeleton": CreatureStats(10, 10, 6, 4, 2),
    "zombie": CreatureStats(10, 15, 5, 6, 2),
    "orc": CreatureStats(10, 20, 8, 5, 3),
    "troll": CreatureStats(10, 30, 10, 8, 4),
    "whelp": CreatureStats(15, 35, 12, 10, 5),
    "demon": CreatureStats(20, 45, 15, 12, 6),
    "lich": CreatureStats(25, 60, 20, 15, 7),
}

# (threshold, type) ladders; first threshold above the roll wins
_CORRIDOR_TABLE: List[Tuple[float, str]] = [
    (0.35, "spider"),
    (0.6, "goblin"),
    (0.9, "skeleton"),
    (1.0, "zombie"),
]
_OPEN_ROOM_TABLE: List[Tuple[float, str]] = [
    (0.3, "goblin"),
    (0.6, "skeleton"),
    (0.8, "zombie"),
    (0.95, "orc"),
    (1.0, "troll"),
]
_LOCKED_ROOM_TABLE: List[Tuple[float, str]] = [
    (0.05, "goblin"),
    (0.2, "skeleton"),
    (0.5, "orc"),
    (0.7, "troll"),
    (0.9, "demon"),
]
_LOCKED_ROOM_APEX = ["whelp", "lich"]


def _from_table(roll: float, table: List[Tuple[float, str]]) -> Optional[str]:
    for threshold, name in table:
        if roll < threshold:
            return name
    return None


def roll_creature_type(rng: SeededRNG, context: str) -> str:
    roll = rng.random()
    if context == CORRIDOR:
        return _from_table(roll, _CORRIDOR_TABLE) or "zombie"
    if context == LOCKED_ROOM:
        picked = _from_table(roll, _LOCKED_ROOM_TABLE)
        if picked is None:
            picked = rng.choice(_LOCKED_ROOM_APEX)
        return picked
    return _from_table(roll, _OPEN_ROOM_TABLE) or "troll"


def roll_health(rng: SeededRNG, creature_type: str) -> int:
    stats = CREATURE_STATS.get(creature_type)
    if stats is None:
        return 10
    return math.floor(rng.random() * stats.health_spread) + stats.health_base


def _gold(rng: SeededRNG, base: int, factor: float) -> Item:
    return roll_gold(rng, math.floor(base * factor))


def roll_creature_loot(rng: SeededRNG, creature_type: str, level: int) -> List[Item]:
    """Per-type drop table with level-scaled gold.

    The gold roll for the conditional types is drawn up front; types that
    always carry gold draw their multiplier jitter inline.
    """
    base = level * 10
    gold_roll = rng.random()
    loot: List[Item] = []

    def maybe(p: float, name: str) -> None:
        if rng.random() < p:
            loot.append(Item(name))

    if creature_type == "spider":
        if gold_roll < 0.3:
            loot.append(_gold(rng, base, 0.5))
        maybe(0.4, "spider_venom")
    elif creature_type == "goblin":
        loot.append(_gold(rng, base, 0.8 + rng.random() * 0.4))
        maybe(0.3, "dagger")
        maybe(0.2, "leather_scrap")
    elif creature_type == "skeleton":
        if gold_roll < 0.4:
            loot.append(_gold(rng, base, 1.2))
        maybe(0.4, "bone")
        maybe(0.3, "rusty_sword")
        maybe(0.1, "shield")
    elif creature_type == "zombie":
        if gold_roll < 0.5:
            loot.append(_gold(rng, base, 1.5))
        maybe(0.4, "rotten_flesh")
        maybe(0.2, "leather_armor")
    elif creature_type == "orc":
        loot.append(_gold(rng, base, 1.5 + rng.random()))
        maybe(0.4, "battle_axe")
        maybe(0.3, "iron_armor")
        maybe(0.1, "health_potion")
    elif creature_type == "troll":
        loot.append(_gold(rng, base, 2 + rng.random()))
        maybe(0.5, "troll_hide")
        maybe(0.3, "club")
        maybe(0.2, "strength_potion")
    elif creature_type == "whelp":
        loot.append(_gold(rng, base, 2.5 + rng.random()))
        maybe(0.6, "dragon_scale")
        maybe(0.2, "fire_essence")
    elif creature_type == "demon":
        loot.append(_gold(rng, base, 3 + rng.random()))
        maybe(0.5, "demon_heart")
        maybe(0.3, "hellfire_essence")
        maybe(0.1, "demonic_weapon")
    elif creature_type == "lich":
        loot.append(_gold(rng, base, 4 + rng.random()))
        maybe(0.7, "soul_gem")
        maybe(0.4, "spellbook")
        maybe(0.2, "staff_of_power")
        maybe(0.1, "phylactery_shard")
    return loot


def spawn_creature(rng: SeededRNG, x: int, y: int, context: str, room=None) -> Creature:
    """Roll type, health, sleep state and loot (in that order) and build the Creature."""
    creature_type = roll_creature_type(rng, context)
    health = roll_health(rng, creature_type)
    asleep = rng.random() < 0.1
    stats = CREATURE_STATS.get(creature_type, CreatureStats(0, 10, 0, 0, 1))
    loot = roll_creature_loot(rng, creature_type, stats.level)
    return Creature(
        x=x,
        y=y,
        type=creature_type,
        health=health,
        damage=stats.damage,
        armor=stats.armor,
        level=stats.level,
        asleep=asleep,
        room=room,
        loot=loot,
    )


__all__ = [
    "CORRIDOR",
    "OPEN_ROOM",
    "LOCKED_ROOM",
    "CREATURE_STATS",
    "roll_creature_type",
    "roll_health",
    "roll_creature_loot",
    "spawn_creature",
]

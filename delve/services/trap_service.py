"""Trap rolls for trapped doors and corridor decorations."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional

from delve.models import Trap

if TYPE_CHECKING:  # pragma: no cover
    from delve.dungeon.rng import SeededRNG

TRAP_TYPES = ["arrow", "spike", "fire", "poison", "pitfall", "frost", "arcane"]

# Cheap floor traps dropped by the corridor decoration pass
DECORATION_TRAP_TYPES = ["spike", "poison", "magic"]


def roll_trap(rng: SeededRNG, difficulty: Optional[int] = None) -> Trap:
    """Difficulty (1-10) drives base damage; the type then adjusts damage and picks an effect."""
    if not difficulty:
        difficulty = math.floor(rng.random() * 10) + 1
    damage = 5 + math.floor(difficulty * 1.5)
    trap_type = rng.choice(TRAP_TYPES)
    effect, duration = "none", 0
    if trap_type == "arrow":
        if rng.random() > 0.7:
            effect, duration = "bleeding", difficulty // 3 + 1
    elif trap_type == "spike":
        damage += 3
    elif trap_type == "fire":
        effect, duration = "burning", difficulty // 2 + 1
    elif trap_type == "poison":
        damage = math.floor(damage * 0.7)
        effect, duration = "poisoned", difficulty
    elif trap_type == "pitfall":
        effect, duration = "immobilized", difficulty // 3 + 1
    elif trap_type == "frost":
        effect, duration = "slowed", difficulty // 2 + 2
    elif trap_type == "arcane":
        effect, duration = "confused", difficulty // 3 + 1
    return Trap(type=trap_type, difficulty=difficulty, damage=damage, effect=effect, duration=duration)


def roll_decoration_trap(rng: SeededRNG) -> Trap:
    """Lightweight floor trap: only the type is rolled, difficulty stays at 1."""
    trap_type = rng.choice(DECORATION_TRAP_TYPES)
    return Trap(type=trap_type, difficulty=1, damage=6)


__all__ = ["TRAP_TYPES", "DECORATION_TRAP_TYPES", "roll_trap", "roll_decoration_trap"]

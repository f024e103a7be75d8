from .entities import CHEST_KEY, DOOR_KEY, KEY_TYPES, Chest, Creature, Item, Key, Trap  # noqa: F401

__all__ = ["Item", "Key", "Trap", "Chest", "Creature", "DOOR_KEY", "CHEST_KEY", "KEY_TYPES"]

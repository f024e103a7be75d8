"""Public dungeon package interface."""

from .config import DungeonConfig, DungeonConfigError  # noqa: F401
from .debug_checks import analyze  # noqa: F401
from .pipeline import Dungeon, Stage, generate_dungeon  # noqa: F401
from .render import render_ascii  # noqa: F401
from .tiles import BORDER, DOOR, FLOOR, STAIRS, WALL  # noqa: F401

__all__ = [
    "Dungeon",
    "DungeonConfig",
    "DungeonConfigError",
    "Stage",
    "generate_dungeon",
    "render_ascii",
    "analyze",
    "WALL",
    "FLOOR",
    "DOOR",
    "STAIRS",
    "BORDER",
]

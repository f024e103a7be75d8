"""Corridor variety pass (alcoves, rest areas, decorations).

Runs after routing and before doors. Long straight corridor runs get
occasional side features so the level does not read as a set of ruler lines.
Structural connectivity is never reduced: every feature only adds floor or
decorates existing floor (pillars are floor-standing decorations).
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from delve.loot.generator import make_chest
from delve.services.spawn_service import CORRIDOR, spawn_creature
from delve.services.trap_service import roll_decoration_trap

from .tiles import WALL

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline import Dungeon

MIN_RUN = 6
FEATURE_STRIDE = 3
HORIZONTAL = "horizontal"
VERTICAL = "vertical"


def _run_length(dungeon: "Dungeon", x: int, y: int, dx: int, dy: int) -> int:
    """Corridor tiles starting at (x, y) and stepping by (dx, dy), start included."""
    grid = dungeon.grid
    n = 0
    while grid.is_corridor_floor(x + dx * n, y + dy * n):
        n += 1
    return n


def _run_lengths(dungeon: "Dungeon", x: int, y: int):
    horizontal = _run_length(dungeon, x, y, 1, 0) + _run_length(dungeon, x - 1, y, -1, 0)
    vertical = _run_length(dungeon, x, y, 0, 1) + _run_length(dungeon, x, y - 1, 0, -1)
    return horizontal, vertical


def is_long_straight_corridor(dungeon: "Dungeon", x: int, y: int) -> bool:
    if not dungeon.grid.is_corridor_floor(x, y):
        return False
    horizontal, vertical = _run_lengths(dungeon, x, y)
    return horizontal >= MIN_RUN or vertical >= MIN_RUN


def corridor_orientation(dungeon: "Dungeon", x: int, y: int) -> Optional[str]:
    horizontal, vertical = _run_lengths(dungeon, x, y)
    if horizontal > vertical:
        return HORIZONTAL
    if vertical > horizontal:
        return VERTICAL
    return None


def _place_corridor_creature(dungeon: "Dungeon", x: int, y: int) -> None:
    data = dungeon.grid.floor_data(x, y)
    if data is None or not data.is_free:
        return
    creature = spawn_creature(dungeon.rng, x, y, CORRIDOR)
    data.creature = creature
    dungeon.creatures.append(creature)
    dungeon.metrics['variety_creatures'] += 1


def add_alcove(dungeon: "Dungeon", x: int, y: int, orientation: str) -> None:
    grid = dungeon.grid
    first_side = dungeon.rng.chance(0.5)
    if orientation == HORIZONTAL:
        ax, ay = (x, y - 1) if first_side else (x, y + 1)
    else:
        ax, ay = (x - 1, y) if first_side else (x + 1, y)
    if not grid.is_valid_position(ax, ay) or grid.get(ax, ay).kind != WALL:
        return
    grid.carve(ax, ay)
    dungeon.metrics['alcoves'] += 1
    if dungeon.rng.chance(0.3):
        roll = dungeon.rng.random()
        if roll < 0.3:
            chest = make_chest(dungeon.rng, ax, ay, quality="common")
            grid.floor_data(ax, ay).item = chest
            dungeon.chests.append(chest)
        elif roll < 0.6:
            _place_corridor_creature(dungeon, ax, ay)


def add_rest_area(dungeon: "Dungeon", x: int, y: int) -> None:
    grid = dungeon.grid
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            nx, ny = x + dx, y + dy
            if grid.is_valid_position(nx, ny) and grid.get(nx, ny).kind == WALL:
                grid.carve(nx, ny)
    dungeon.metrics['rest_areas'] += 1
    if dungeon.rng.chance(0.3):
        _place_corridor_creature(dungeon, x, y)


def add_decoration(dungeon: "Dungeon", x: int, y: int) -> None:
    data = dungeon.grid.floor_data(x, y)
    roll = dungeon.rng.random()
    if data is None:
        return
    if roll < 0.3:
        data.pillar = True
    elif roll < 0.6:
        data.debris = True
    else:
        data.trap = roll_decoration_trap(dungeon.rng)
    dungeon.metrics['decorations'] += 1


def _decorate_run(dungeon: "Dungeon", x: int, y: int, orientation: str) -> None:
    dx, dy = (1, 0) if orientation == HORIZONTAL else (0, 1)
    length = _run_length(dungeon, x, y, dx, dy)
    rng = dungeon.rng
    for i in range(2, length - 2, FEATURE_STRIDE):
        if not rng.chance(0.4):
            continue
        px, py = x + dx * i, y + dy * i
        feature = rng.random()
        if feature < 0.4:
            add_alcove(dungeon, px, py, orientation)
        elif feature < 0.7:
            add_rest_area(dungeon, px, py)
        else:
            add_decoration(dungeon, px, py)


def add_corridor_variety(dungeon: "Dungeon") -> None:
    """Scan every tile; long straight runs get features with 50% probability."""
    grid = dungeon.grid
    for x in range(grid.width):
        for y in range(grid.height):
            if not is_long_straight_corridor(dungeon, x, y) or not dungeon.rng.chance(0.5):
                continue
            orientation = corridor_orientation(dungeon, x, y)
            if orientation is not None:
                _decorate_run(dungeon, x, y, orientation)


__all__ = [
    "is_long_straight_corridor",
    "corridor_orientation",
    "add_alcove",
    "add_rest_area",
    "add_decoration",
    "add_corridor_variety",
]

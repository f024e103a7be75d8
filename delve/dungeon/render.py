"""ASCII rendering for diagnostics and the CLI.

Row-major output (y outer) over the column-major grid. Overlays in priority
order: player start `@`, creature `c`, key `k`, chest `$` (`&` when locked),
locked door `L`, trapped floor `^`, pillar `O`. Everything else comes from
TILE_CHARS.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from delve.models import Chest

from .tiles import DOOR, TILE_CHARS

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline import Dungeon

LEGEND: Dict[str, str] = {
    "#": "wall",
    ".": "floor",
    "+": "door",
    "L": "locked door",
    ">": "stairs",
    "@": "player start",
    "c": "creature",
    "k": "key",
    "$": "chest",
    "&": "locked chest",
    "^": "trap",
    "O": "pillar",
}


def tile_char(dungeon: "Dungeon", x: int, y: int) -> str:
    if dungeon.player_start == (x, y):
        return "@"
    tile = dungeon.grid.get(x, y)
    if tile.kind == DOOR:
        return "L" if tile.data.locked else "+"
    if not tile.is_floor:
        return TILE_CHARS[tile.kind]
    data = tile.data
    if data.creature is not None:
        return "c"
    if isinstance(data.item, Chest):
        return "&" if data.item.locked else "$"
    if data.item is not None and data.item.is_key:
        return "k"
    if data.trap is not None:
        return "^"
    if data.pillar:
        return "O"
    return TILE_CHARS[tile.kind]


def render_rows(dungeon: "Dungeon") -> List[str]:
    grid = dungeon.grid
    return ["".join(tile_char(dungeon, x, y) for x in range(grid.width)) for y in range(grid.height)]


def render_ascii(dungeon: "Dungeon") -> str:
    return "\n".join(render_rows(dungeon))


__all__ = ["LEGEND", "tile_char", "render_rows", "render_ascii"]

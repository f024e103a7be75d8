# Tile kind constants centralized for modular imports
WALL = "wall"
FLOOR = "floor"
DOOR = "door"
STAIRS = "stairs"
BORDER = "border"  # outer margin; solid and never carved

SOLID_KINDS = frozenset({WALL, BORDER})

NORTH = "north"
EAST = "east"
SOUTH = "south"
WEST = "west"

# Scan order matters for door facing resolution: N, E, S, W
CARDINALS = (
    (0, -1, NORTH),
    (1, 0, EAST),
    (0, 1, SOUTH),
    (-1, 0, WEST),
)

OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}

# ASCII debug rendering
TILE_CHARS = {
    WALL: "#",
    BORDER: "#",
    FLOOR: ".",
    DOOR: "+",
    STAIRS: ">",
}

__all__ = [
    "WALL",
    "FLOOR",
    "DOOR",
    "STAIRS",
    "BORDER",
    "SOLID_KINDS",
    "NORTH",
    "EAST",
    "SOUTH",
    "WEST",
    "CARDINALS",
    "OPPOSITE",
    "TILE_CHARS",
]

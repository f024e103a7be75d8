"""Pipeline orchestration for dungeon generation.

Provides the public Dungeon aggregate. Every stage is a plain function that
takes the aggregate and mutates the grid and entity registries; this module
only fixes their order, times them and reports the outcome.
"""
from __future__ import annotations

import random
import time
from enum import Enum
from typing import Any, Dict, List, Optional

from delve.logging_utils import get_logger
from delve.models import Chest, Creature, Key

from .cells import Coord2D, DoorData
from .config import DungeonConfig
from .connectivity import AccessibilityGraph, build_accessibility_graph
from .corridors import Corridor, connect_rooms
from .doors import place_doors
from .features import add_corridor_variety
from .grid import GridModel
from .keys import place_keys
from .metrics import init_metrics
from .placement import place_chests, place_creatures
from .report import GenerationReport
from .rng import SeededRNG
from .rooms import Room, place_rooms
from .stairs import place_player_and_stairs

log = get_logger("delve.dungeon")

SEED_RANGE = (1, 1_000_000)


class Stage(str, Enum):
    IDLE = "idle"
    PARTITIONING = "partitioning"
    ROUTING = "routing"
    VARIETY_PASS = "variety_pass"
    DOOR_PLACEMENT = "door_placement"
    ACCESSIBILITY_BUILD = "accessibility_build"
    CHESTS = "chests"
    CREATURES = "creatures"
    KEYS = "keys"
    PLAYER_STAIRS_PLACEMENT = "player_stairs_placement"
    DONE = "done"


class Dungeon:
    """One generated level plus the registries collaborators read.

    Construct with a DungeonConfig (or keyword overrides for one) and call
    `generate()`. Calling it again with a new seed starts over from a grid
    of walls and empty registries.
    """

    def __init__(self, config: Optional[DungeonConfig] = None, **overrides):
        if config is None:
            config = DungeonConfig(**overrides)
        elif overrides:
            raise TypeError("pass either a config or keyword overrides, not both")
        self.config = config.validate()
        self.grid = GridModel(config.width, config.height, config.border_size)
        self.rng = SeededRNG(config.seed or 0)
        self.seed: Optional[int] = None
        self.stage = Stage.IDLE
        self._reset()

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def _reset(self) -> None:
        self.rooms: List[Room] = []
        self.corridors: List[Corridor] = []
        self.doors: List[DoorData] = []
        self.chests: List[Chest] = []
        self.creatures: List[Creature] = []
        self.keys: List[Key] = []
        self.accessibility: AccessibilityGraph = {}
        self.player_start: Optional[Coord2D] = None
        self.stairs: Optional[Coord2D] = None
        self.metrics: Dict[str, Any] = init_metrics()
        self.report = GenerationReport()
        self.grid.fill_walls()
        self.stage = Stage.IDLE

    def _diag(self, **fields) -> None:
        if self.config.verbose:
            log.info(**fields)
        else:
            log.debug(**fields)

    def generate(self, seed: Optional[int] = None) -> int:
        """Run every stage in order and return the seed used.

        Seed precedence: the argument, then `config.seed`, then a random seed.
        0 is a valid deterministic seed.
        """
        if seed is None:
            seed = self.config.seed
        if seed is None:
            seed = random.randint(*SEED_RANGE)
        self.seed = seed
        self._reset()
        self.rng.reseed(seed)

        start = time.perf_counter()
        phase_times: Dict[str, int] = {}

        def _phase(stage: Stage, fn, *a, **k):
            self.stage = stage
            ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
            phase_times[stage.value] = int((pe - ps) * 1000)
            self._diag(event="stage_done", stage=stage.value, ms=phase_times[stage.value])
            return r

        _phase(Stage.PARTITIONING, place_rooms, self)
        _phase(Stage.ROUTING, connect_rooms, self)
        _phase(Stage.VARIETY_PASS, add_corridor_variety, self)
        _phase(Stage.DOOR_PLACEMENT, place_doors, self)
        self.accessibility = _phase(Stage.ACCESSIBILITY_BUILD, build_accessibility_graph, self)
        _phase(Stage.CHESTS, place_chests, self)
        _phase(Stage.CREATURES, place_creatures, self)
        _phase(Stage.KEYS, place_keys, self)
        _phase(Stage.PLAYER_STAIRS_PLACEMENT, place_player_and_stairs, self)
        self.stage = Stage.DONE

        self.metrics['runtime_ms'] = int((time.perf_counter() - start) * 1000)
        self.metrics['phase_ms'] = phase_times
        log.info(
            event="dungeon_generated",
            seed=seed,
            rooms=len(self.rooms),
            corridors=len(self.corridors),
            doors=len(self.doors),
            chests=len(self.chests),
            creatures=len(self.creatures),
            keys=len(self.keys),
            runtime_ms=self.metrics['runtime_ms'],
        )
        return seed

    def room_at(self, x: int, y: int) -> Optional[Room]:
        idx = self.grid.room_index_at(x, y)
        return self.rooms[idx] if idx >= 0 else None

    def to_dict(self) -> Dict[str, Any]:
        """Summary view of the generated level (no tile dump)."""
        return {
            "seed": self.seed,
            "width": self.width,
            "height": self.height,
            "rooms": [r.to_dict() for r in self.rooms],
            "corridors": [c.to_dict() for c in self.corridors],
            "doors": [d.to_dict() for d in self.doors],
            "chests": [c.to_dict() for c in self.chests],
            "creatures": [c.to_dict() for c in self.creatures],
            "keys": [k.to_dict() for k in self.keys],
            "player_start": list(self.player_start) if self.player_start else None,
            "stairs": list(self.stairs) if self.stairs else None,
            "metrics": self.metrics,
            "report": self.report.to_dict(),
        }


def generate_dungeon(seed: Optional[int] = None, config: Optional[DungeonConfig] = None, **overrides) -> Dungeon:
    """Build and generate in one call."""
    dungeon = Dungeon(config, **overrides)
    dungeon.generate(seed)
    return dungeon


__all__ = ["Stage", "Dungeon", "generate_dungeon"]

import os
from dataclasses import dataclass
from typing import Optional


class DungeonConfigError(ValueError):
    """Raised for construction parameters that can never yield a dungeon."""


@dataclass
class DungeonConfig:
    width: int = 50
    height: int = 50
    seed: Optional[int] = None
    border_size: int = 1
    max_bsp_depth: int = 4
    min_room_width: int = 4
    min_room_height: int = 4
    max_room_width: int = 15
    max_room_height: int = 12
    max_rooms: int = 15
    verbose: bool = False

    def validate(self) -> "DungeonConfig":
        if self.width <= 0 or self.height <= 0:
            raise DungeonConfigError(f"dimensions must be positive, got {self.width}x{self.height}")
        if self.border_size < 0:
            raise DungeonConfigError(f"border_size must be >= 0, got {self.border_size}")
        if self.width - 2 * self.border_size <= 0 or self.height - 2 * self.border_size <= 0:
            raise DungeonConfigError("border leaves no interior to generate into")
        if self.min_room_width <= 0 or self.min_room_height <= 0:
            raise DungeonConfigError("minimum room size must be positive")
        if self.max_rooms < 0:
            raise DungeonConfigError("max_rooms must be >= 0")
        return self

    @classmethod
    def from_env(cls, **overrides) -> "DungeonConfig":
        """Build a config from DELVE_* environment variables.

        Explicit keyword overrides win over the environment. A `.env` file is
        already loaded by the package import, so values from it show up here.
        """
        env_map = {
            "DELVE_WIDTH": ("width", int),
            "DELVE_HEIGHT": ("height", int),
            "DELVE_SEED": ("seed", int),
            "DELVE_MAX_ROOMS": ("max_rooms", int),
            "DELVE_VERBOSE": ("verbose", _parse_bool),
        }
        values = {}
        for env_key, (attr, parse) in env_map.items():
            raw = os.environ.get(env_key)
            if raw is None or raw.strip() == "":
                continue
            try:
                values[attr] = parse(raw.strip())
            except ValueError as exc:
                raise DungeonConfigError(f"{env_key}={raw!r} is not valid: {exc}") from exc
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values).validate()


def _parse_bool(raw: str) -> bool:
    return raw.lower() not in {"0", "false", "no", "off"}


__all__ = ["DungeonConfig", "DungeonConfigError"]

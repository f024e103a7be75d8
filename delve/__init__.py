"""
project: Delve
module: __init__.py
License: MIT

Procedural dungeon level generator.

Configuration can be supplied through environment variables (see
`delve.dungeon.config.DungeonConfig.from_env`). A local `.env` file is loaded
on import so development overrides do not need to be exported in the shell.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()

__all__ = ["__version__"]

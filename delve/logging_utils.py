"""Structured key=value logging for the generator.

Each call emits one line: `level=... ts=... logger=...` followed by the caller's
fields, or the same record as compact JSON when DELVE_LOG_JSON is truthy.
Fields whose value is None are dropped. Errors go to stderr, everything else
to stdout.

Usage:
    from delve.logging_utils import get_logger
    log = get_logger("delve.dungeon")
    log.info(event="dungeon_generated", seed=12345, rooms=9)
"""

from __future__ import annotations

import json
import os
import sys
import time
from typing import Any, Dict

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("DELVE_LOG_LEVEL", "info").lower(), 20)
JSON_MODE = os.getenv("DELVE_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def set_level(level: str) -> None:
    """Change the global threshold at runtime (CLI --log-level, tests)."""
    global CURRENT_LEVEL
    if level not in LEVELS:
        raise ValueError(f"unknown log level: {level!r}")
    CURRENT_LEVEL = LEVELS[level]


def _record(level: str, name: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    rec: Dict[str, Any] = {"level": level, "ts": int(time.time()), "logger": name}
    for k, v in fields.items():
        if v is not None and k not in ("level", "ts"):
            rec[k] = v
    return rec


def _render(rec: Dict[str, Any]) -> str:
    if JSON_MODE:
        return json.dumps(rec, separators=(",", ":"), default=str)
    return " ".join(f"{k}={v if isinstance(v, (int, float)) else str(v).replace(' ', '_')}" for k, v in rec.items())


class _Logger:
    def __init__(self, name: str):
        self.name = name

    def enabled(self, level: str) -> bool:
        return LEVELS[level] >= CURRENT_LEVEL

    def _emit(self, level: str, fields: Dict[str, Any]) -> None:
        if not self.enabled(level):
            return
        name = fields.pop("logger", self.name)
        stream = sys.stderr if level == "error" else sys.stdout
        print(_render(_record(level, name, fields)), file=stream)

    def debug(self, **fields):
        self._emit("debug", fields)

    def info(self, **fields):
        self._emit("info", fields)

    def warn(self, **fields):
        self._emit("warn", fields)

    def error(self, **fields):
        self._emit("error", fields)


_LOGGER_CACHE: Dict[str, _Logger] = {}


def get_logger(name: str = "delve") -> _Logger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]

"""Degraded-outcome record for one generation run.

Nothing the generator fails to place is raised; it ends up here instead and
is logged at warn. Callers (CLI, diagnostics script, tests) inspect the lists
after `generate()` returns.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from delve.logging_utils import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from delve.models import Key
    from .rooms import Room

log = get_logger("delve.dungeon")


@dataclass
class UnplacedKey:
    key_id: str
    key_type: str
    room: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {"key_id": self.key_id, "key_type": self.key_type, "room": self.room}


@dataclass
class GenerationReport:
    unplaced_keys: List[UnplacedKey] = field(default_factory=list)
    relocated: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not (self.unplaced_keys or self.warnings)

    def warn(self, event: str, **fields) -> None:
        self.warnings.append({"event": event, **fields})
        log.warn(event=event, **fields)

    def key_unplaced(self, key: "Key", room: Optional["Room"]) -> None:
        entry = UnplacedKey(key.key_id, key.type, room.index if room is not None else None)
        self.unplaced_keys.append(entry)
        log.warn(event="key_unplaced", key_id=entry.key_id, key_type=entry.key_type, room=entry.room)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unplaced_keys": [k.to_dict() for k in self.unplaced_keys],
            "relocated": [{"what": r["what"], "from": list(r["from"]), "to": list(r["to"])} for r in self.relocated],
            "warnings": list(self.warnings),
        }


__all__ = ["UnplacedKey", "GenerationReport"]

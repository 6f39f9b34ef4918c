from __future__ import annotations

import logging
import time
from collections.abc import MutableMapping
from dataclasses import asdict, dataclass
from typing import Any

from cosirob.constants import POSITIONS_STORAGE_KEY

logger = logging.getLogger(__name__)


@dataclass
class NamedPosition:
    id: str
    name: str
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def new(cls, name: str = "", x: float = 0.0, y: float = 0.0, z: float = 0.0) -> "NamedPosition":
        return cls(id=str(int(time.time() * 1000)), name=name, x=x, y=y, z=z)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NamedPosition":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            z=float(data.get("z", 0.0)),
        )


def default_positions() -> list[NamedPosition]:
    return [
        NamedPosition(id="home", name="Home", x=0, y=0, z=0),
        NamedPosition(id="pick", name="Pick", x=120, y=45, z=-10),
    ]


class PositionStore:
    """Named waypoints kept as a list of dicts under one key of a key-value store."""

    def __init__(self, storage: MutableMapping[str, Any], key: str = POSITIONS_STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key

    def all(self) -> list[NamedPosition]:
        raw = self.storage.get(self.key)
        if raw is None:
            return default_positions()
        try:
            return [NamedPosition.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Stored positions unreadable, using defaults: %s", e)
            return default_positions()

    def get(self, position_id: str) -> NamedPosition | None:
        return next((p for p in self.all() if p.id == position_id), None)

    def upsert(self, position: NamedPosition) -> list[NamedPosition]:
        items = self.all()
        for i, existing in enumerate(items):
            if existing.id == position.id:
                items[i] = position
                break
        else:
            items.append(position)
        self._save(items)
        return items

    def delete(self, position_id: str) -> list[NamedPosition]:
        items = [p for p in self.all() if p.id != position_id]
        self._save(items)
        return items

    def _save(self, items: list[NamedPosition]) -> None:
        self.storage[self.key] = [asdict(p) for p in items]

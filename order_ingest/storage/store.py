from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from ..models.mall import MallEntry
from ..models.order import Order
from ..services.categories import DEFAULT_CATEGORIES

"""JSON blob store with the dashboard's named slots (malls / orders / categories).

The whole store is one JSON document. Writes go to a temp file in the same
directory and are moved into place with os.replace so a crash never leaves a
half-written store.
"""

__all__ = [
    "SLOTS",
    "StoreError",
    "JsonBlobStore",
]

SLOTS = ("malls", "orders", "categories")


class StoreError(Exception):
    """Raised when the store document cannot be read/written or a slot is unknown."""


class JsonBlobStore:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _default(self, slot: str) -> Any:
        if slot == "categories":
            return list(DEFAULT_CATEGORIES)
        return []

    def _check_slot(self, slot: str) -> None:
        if slot not in SLOTS:
            raise StoreError(f"unknown slot: {slot!r} (expected one of {', '.join(SLOTS)})")

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"cannot read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"store {self.path} is not a JSON object")
        return data

    def get(self, slot: str) -> Any:
        self._check_slot(slot)
        data = self._read()
        return data[slot] if slot in data else self._default(slot)

    def set(self, slot: str, value: Any) -> None:
        self._check_slot(slot)
        data = self._read()
        data[slot] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".store-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            Path(tmp).unlink(missing_ok=True)
            raise StoreError(f"cannot write store {self.path}: {e}") from e

    # typed helpers
    def load_malls(self) -> list[MallEntry]:
        return [MallEntry.from_dict(m) for m in self.get("malls") if isinstance(m, dict)]

    def save_malls(self, malls: list[MallEntry]) -> None:
        self.set("malls", [m.to_dict() for m in malls])

    def load_orders(self) -> list[Order]:
        return [Order.from_dict(o) for o in self.get("orders") if isinstance(o, dict)]

    def save_orders(self, orders: list[Order]) -> None:
        self.set("orders", [o.to_dict() for o in orders])

    def load_categories(self) -> list[str]:
        return [str(c) for c in self.get("categories")]

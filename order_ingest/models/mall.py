from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""MallEntry model: one shop in the user-maintained mall registry."""

__all__ = [
    "MallEntry",
    "MALL_COLORS",
]

# Display palette assigned round-robin on registration
MALL_COLORS = (
    "#3B82F6", "#10B981", "#F59E0B", "#EF4444",
    "#8B5CF6", "#EC4899", "#06B6D4", "#84CC16",
)


@dataclass(frozen=True)
class MallEntry:
    """Registry entry. ``name`` is the matching key for the mall resolver."""
    id: str
    name: str
    categories: tuple[str, ...] = ()  # モール固有カテゴリ (空ならグローバル)
    color: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "categories": list(self.categories),
            "color": self.color,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> MallEntry:
        cats = data.get("categories") or []
        return MallEntry(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            categories=tuple(str(c) for c in cats),
            color=str(data.get("color") or ""),
        )

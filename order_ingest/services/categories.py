from __future__ import annotations

from collections.abc import Sequence

from ..models.mall import MallEntry
from ..models.order import Order

"""Category lists: global defaults and mall-scoped overrides."""

__all__ = [
    "DEFAULT_CATEGORIES",
    "effective_categories",
    "uncategorized_items",
]

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "상의", "하의", "아우터", "신발", "가방", "액세서리", "뷰티", "식품", "가전", "기타",
)


def effective_categories(
    mall_id: str,
    registry: Sequence[MallEntry],
    global_categories: Sequence[str] = DEFAULT_CATEGORIES,
) -> list[str]:
    """The mall's own categories when it has any, otherwise the global list."""
    for mall in registry:
        if mall.id == mall_id and mall.categories:
            return list(mall.categories)
    return list(global_categories)


def uncategorized_items(
    order: Order,
    registry: Sequence[MallEntry],
    global_categories: Sequence[str] = DEFAULT_CATEGORIES,
) -> list[str]:
    """Non-empty item categories outside the order's effective category list."""
    allowed = set(effective_categories(order.mall_id, registry, global_categories))
    return [i.category for i in order.items if i.category and i.category not in allowed]

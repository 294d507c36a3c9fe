from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

"""Order / LineItem domain models for the order ingestion engine.

Orders are produced by the builders in services.builders and are never mutated
afterwards; the merger derives id-stamped copies with dataclasses.replace().

The persisted representation (to_dict / from_dict) keeps the camelCase keys used
by the dashboard's "orders" slot so existing stores stay readable.
"""

__all__ = [
    "LineItem",
    "Order",
]


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class LineItem:
    """One product line within an order."""
    product_name: str  # 必須 (空の行はビルダー側で除外済み)
    qty: int = 1
    amount: int = 0  # 0 は grouped 形式で注文単位金額のみ有効な場合
    category: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "productName": self.product_name,
            "qty": self.qty,
            "amount": self.amount,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> LineItem:
        return LineItem(
            product_name=str(data.get("productName") or ""),
            qty=_as_int(data.get("qty"), 1),
            amount=_as_int(data.get("amount")),
            category=str(data.get("category") or ""),
        )


@dataclass(frozen=True)
class Order:
    """Normalized order record.

    Identity for de-duplication is (date, order_no); see ``key``.
    """
    date: str  # YYYY-MM-DD
    order_no: str  # 空欄時は "R<行番号>" を合成
    items: tuple[LineItem, ...]
    mall_id: str = ""  # 未登録モールは空
    mall_name: str = ""  # 元の自由記述名 (未解決でも保持)
    note: str = ""
    total_amount: int = 0
    total_qty: int = 0
    id: str = field(default="", compare=False)  # merger が採番

    @property
    def key(self) -> tuple[str, str]:
        return (self.date, self.order_no)

    @property
    def items_qty(self) -> int:
        return sum(item.qty for item in self.items)

    @property
    def items_amount(self) -> int:
        return sum(item.amount for item in self.items)

    @property
    def is_order_level_amount(self) -> bool:
        """True when only the order-level payment is meaningful.

        This is the grouped-layout shape: several items, each reporting zero.
        """
        return len(self.items) > 1 and all(item.amount == 0 for item in self.items)

    def with_id(self, order_id: str) -> Order:
        return replace(self, id=order_id)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "date": self.date,
            "orderNo": self.order_no,
            "mallId": self.mall_id,
            "mallName": self.mall_name,
            "note": self.note,
            "totalAmount": self.total_amount,
            "totalQty": self.total_qty,
            "items": [item.to_dict() for item in self.items],
        }
        if self.id:
            data["id"] = self.id
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Order:
        items = tuple(LineItem.from_dict(i) for i in data.get("items") or [] if isinstance(i, dict))
        return Order(
            date=str(data.get("date") or ""),
            order_no=str(data.get("orderNo") or ""),
            items=items,
            mall_id=str(data.get("mallId") or ""),
            mall_name=str(data.get("mallName") or ""),
            note=str(data.get("note") or ""),
            total_amount=_as_int(data.get("totalAmount")),
            total_qty=_as_int(data.get("totalQty")),
            id=str(data.get("id") or ""),
        )

from __future__ import annotations

import dataclasses

import pytest

from order_ingest.models.mall import MallEntry
from order_ingest.models.order import LineItem, Order


def _order(**kw) -> Order:
    base = dict(
        date="2024-01-01",
        order_no="A1",
        items=(LineItem("티셔츠", qty=2, amount=0, category="상의"), LineItem("모자", qty=1, amount=0)),
        mall_id="m1",
        mall_name="쿠팡",
        note="",
        total_amount=30000,
        total_qty=3,
    )
    base.update(kw)
    return Order(**base)


def test_order_is_frozen():
    order = _order()
    with pytest.raises(dataclasses.FrozenInstanceError):
        order.total_qty = 5  # type: ignore[misc]


def test_key_and_totals():
    order = _order()
    assert order.key == ("2024-01-01", "A1")
    assert order.items_qty == 3
    assert order.items_amount == 0
    assert order.is_order_level_amount


def test_to_dict_uses_camel_case():
    data = _order(id="x1").to_dict()
    assert data["orderNo"] == "A1"
    assert data["mallId"] == "m1"
    assert data["totalAmount"] == 30000
    assert data["items"][0] == {"category": "상의", "productName": "티셔츠", "qty": 2, "amount": 0}
    assert data["id"] == "x1"
    assert "id" not in _order().to_dict()


def test_from_dict_round_trip_and_lenient_fields():
    order = _order(id="x1")
    assert Order.from_dict(order.to_dict()) == order
    loose = Order.from_dict({
        "date": "2024-02-02", "orderNo": "9", "totalQty": "4", "totalAmount": None,
        "items": [{"productName": "A", "qty": "x"}, "junk"], "extra": True,
    })
    assert loose.total_qty == 4
    assert loose.total_amount == 0
    assert loose.items == (LineItem("A", qty=1),)


def test_with_id_returns_copy():
    order = _order()
    stamped = order.with_id("abc")
    assert stamped.id == "abc"
    assert order.id == ""


def test_mall_entry_dict_conversion():
    mall = MallEntry(id="m1", name="쿠팡", categories=("상의",), color="#3B82F6")
    assert MallEntry.from_dict(mall.to_dict()) == mall
    assert MallEntry.from_dict({"id": 5, "name": "x"}) == MallEntry(id="5", name="x")

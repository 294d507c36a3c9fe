from __future__ import annotations

import json
from pathlib import Path

import pytest

from order_ingest.models.mall import MallEntry
from order_ingest.models.order import LineItem, Order
from order_ingest.services.categories import DEFAULT_CATEGORIES
from order_ingest.storage.store import JsonBlobStore, StoreError


def test_missing_store_returns_slot_defaults(tmp_path: Path):
    store = JsonBlobStore(tmp_path / "store.json")
    assert store.get("malls") == []
    assert store.get("orders") == []
    assert store.get("categories") == list(DEFAULT_CATEGORIES)


def test_set_then_get_keeps_other_slots(tmp_path: Path):
    store = JsonBlobStore(tmp_path / "nested" / "store.json")
    store.set("categories", ["a"])
    store.set("malls", [{"id": "m1", "name": "쿠팡"}])
    assert store.get("categories") == ["a"]
    raw = json.loads((tmp_path / "nested" / "store.json").read_text(encoding="utf-8"))
    assert set(raw) == {"categories", "malls"}
    assert raw["malls"][0]["name"] == "쿠팡"
    # no temp files left behind
    assert [p.name for p in (tmp_path / "nested").iterdir()] == ["store.json"]


def test_unknown_slot_is_rejected(tmp_path: Path):
    store = JsonBlobStore(tmp_path / "store.json")
    with pytest.raises(StoreError):
        store.get("customers")
    with pytest.raises(StoreError):
        store.set("customers", [])


@pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
def test_invalid_document_raises(tmp_path: Path, content: str):
    path = tmp_path / "store.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StoreError):
        JsonBlobStore(path).get("orders")


def test_typed_helpers(tmp_path: Path):
    store = JsonBlobStore(tmp_path / "store.json")
    order = Order(date="2024-01-01", order_no="1", items=(LineItem("A", amount=100),), total_amount=100, total_qty=1, id="o1")
    store.save_orders([order])
    store.save_malls([MallEntry(id="m1", name="쿠팡")])
    loaded = store.load_orders()
    assert loaded == [order]
    assert loaded[0].id == "o1"
    assert store.load_malls() == [MallEntry(id="m1", name="쿠팡")]
    assert store.load_categories() == list(DEFAULT_CATEGORIES)

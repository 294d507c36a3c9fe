from __future__ import annotations

import logging

import pytest

from order_ingest.models.ingest_result import SheetLayout
from order_ingest.models.order import LineItem, Order
from order_ingest.services.ingest import NO_DATA_MESSAGE, ingest_grid, post_process


def test_grouped_sheet(grouped_rows, registry, today):
    result = ingest_grid(grouped_rows, registry, sheet_name="주문내역", today=today)

    assert result.layout is SheetLayout.GROUPED
    assert [o.order_no for o in result.orders] == ["A100", "A101"]

    first, second = result.orders
    assert first.total_amount == 30000
    assert first.total_qty == 3
    assert first.mall_id == "m1"
    assert first.note == "선물"
    assert [i.amount for i in first.items] == [0, 0]
    assert second.date == "2024-01-02"
    assert second.items == (LineItem(product_name="운동화", qty=1, amount=59000, category="신발"),)


def test_diagnostics_order(grouped_rows, registry, today):
    result = ingest_grid(grouped_rows, registry, sheet_name="주문내역", today=today)
    assert len(result.warnings) == 3
    assert result.warnings[0] == 'Parsing sheet "주문내역" (3 rows)'
    assert "새로운몰" in result.warnings[1]
    assert "grouped" in result.warnings[2]


def test_unknown_mall_single_aggregate_warning(registry, today):
    grid = [
        ["날짜", "주문번호", "상품명", "쇼핑몰"],
        ["2024-01-01", "1", "A", "새로운몰"],
        ["2024-01-02", "2", "B", "새로운몰"],
    ]
    result = ingest_grid(grid, registry, today=today)
    mentions = [w for w in result.warnings if "새로운몰" in w]
    assert len(mentions) == 1
    assert result.unknown_malls == ["새로운몰"]
    assert all(o.mall_id == "" and o.mall_name == "새로운몰" for o in result.orders)


def test_flat_sheet(flat_rows, registry, today):
    result = ingest_grid(flat_rows, registry, today=today)
    assert result.layout is SheetLayout.FLAT
    assert len(result.warnings) == 2
    assert "flat" in result.warnings[-1]
    r9, r10 = result.orders
    assert (r9.total_amount, r9.total_qty, r9.mall_id) == (1200, 2, "m1")
    assert r9.mall_name == "쿠팡 로켓배송"
    assert (r10.total_amount, r10.total_qty, r10.mall_name) == (900, 3, "")


@pytest.mark.parametrize("grid", [[], [["날짜", "상품명"]]])
def test_empty_sheet_returns_no_orders_and_one_message(grid, registry):
    result = ingest_grid(grid, registry)
    assert result.orders == []
    assert result.warnings == [NO_DATA_MESSAGE]
    assert result.layout is None


def test_sheet_without_product_column(registry, today):
    grid = [["날짜", "주문번호"], ["2024-01-01", "1"]]
    result = ingest_grid(grid, registry, today=today)
    assert result.orders == []
    assert result.layout is SheetLayout.FLAT


def test_custom_candidates(registry, today):
    grid = [["Bestelldatum", "Artikel"], ["2024-01-01", "A"]]
    candidates = {"date": ("bestelldatum",), "product": ("artikel",)}
    result = ingest_grid(grid, registry, candidates=candidates, today=today)
    assert result.orders[0].date == "2024-01-01"
    assert result.orders[0].order_no == "R2"


def test_registry_is_not_mutated(grouped_rows, registry, today):
    before = list(registry)
    ingest_grid(grouped_rows, registry, today=today)
    assert registry == before


def test_irregular_cells_never_raise(registry, today):
    grid = [
        ["날짜", "주문번호", "상품명", "수량", "결제금액"],
        [object(), None, "A", "many", "₩abc"],
        [float("nan"), 3.5, "B", -2, None],
        ["2024-99-99"],
    ]
    result = ingest_grid(grid, registry, today=today)
    assert result.orders
    assert all(o.items for o in result.orders)


def test_diagnostics_are_logged(grouped_rows, registry, today, caplog, monkeypatch):
    # setup_logging() は propagate を切るので caplog 用に戻す
    monkeypatch.setattr(logging.getLogger("order_ingest"), "propagate", True)
    with caplog.at_level(logging.INFO, logger="order_ingest"):
        ingest_grid(grouped_rows, registry, sheet_name="S", today=today)
    messages = [r.getMessage() for r in caplog.records]
    assert any("Parsing sheet" in m for m in messages)
    assert any(r.levelno == logging.WARNING and "새로운몰" in r.getMessage() for r in caplog.records)


def test_post_process_fills_missing_total_qty():
    order = Order(
        date="2024-01-01",
        order_no="1",
        items=(LineItem("A", qty=2), LineItem("B", qty=3)),
        total_qty=0,
    )
    kept = Order(date="2024-01-01", order_no="2", items=(LineItem("A", qty=2),), total_qty=7)
    fixed = post_process([order, kept])
    assert fixed[0].total_qty == 5
    assert fixed[1].total_qty == 7
    assert order.total_qty == 0

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, replace
from datetime import date
from functools import reduce
from typing import Any

from ..excel.cells import cell_text, is_blank, parse_amount, parse_date
from ..excel.headers import ColumnMap
from ..models.ingest_result import SheetLayout
from ..models.order import LineItem, Order
from ..models.row_data import RowData
from .mall_resolver import MallResolver

"""Order builders, one per sheet layout.

Both builders share one contract::

    (data_rows, column_map, resolver, today=None) -> list[Order]

``data_rows`` are the grid rows after the header; the first one is sheet row 2.
Rows whose product cell is blank carry no item and are dropped by both builders.

Grouped layout
    A row with a date or an order number starts a new order; following rows with
    neither are continuation items of that order. The payment cell of the
    starting row is the order total. When an order ends up with several items,
    the first item's amount is zeroed so the payment is not counted twice.

Flat layout
    Every row is one item of the order identified by (date, order number).
    Each row's payment is that item's amount and the order total is their sum.
"""

__all__ = [
    "OrderBuilder",
    "extract_rows",
    "build_grouped_orders",
    "build_flat_orders",
    "BUILDERS",
]

logger = logging.getLogger(__name__)

OrderBuilder = Callable[..., list[Order]]


def extract_rows(data_rows: Sequence[Sequence[Any]], column_map: ColumnMap) -> Iterator[RowData]:
    """Project raw rows onto the resolved roles (missing cells -> None)."""
    for offset, row in enumerate(data_rows):
        values = {role: (row[idx] if idx < len(row) else None) for role, idx in column_map.items()}
        yield RowData(row_number=offset + 2, values=values)


@dataclass(frozen=True)
class _Draft:
    """Order under construction. Never leaves this module."""
    date: str
    order_no: str
    mall_id: str
    mall_name: str
    note: str
    payment: int
    reported_qty: int
    items: tuple[LineItem, ...] = ()

    def add(self, item: LineItem) -> _Draft:
        return replace(self, items=self.items + (item,))


def _start_draft(row: RowData, resolver: MallResolver, today: date | None) -> _Draft:
    mall = resolver.resolve(cell_text(row.get("mall")))
    return _Draft(
        date=parse_date(row.get("date"), today),
        order_no=cell_text(row.get("orderNo")) or f"R{row.row_number}",
        mall_id=mall.id,
        mall_name=mall.resolved_name,
        note=cell_text(row.get("note")),
        payment=parse_amount(row.get("payment")),
        reported_qty=parse_amount(row.get("totalQty")),
    )


def _item(row: RowData, amount: int) -> LineItem:
    return LineItem(
        product_name=cell_text(row.get("product")),
        qty=parse_amount(row.get("qty")) or 1,
        amount=amount,
        category=cell_text(row.get("category")),
    )


# -- grouped ---------------------------------------------------------------

@dataclass(frozen=True)
class _GroupedState:
    done: tuple[Order, ...] = ()
    current: _Draft | None = None


def _finish_grouped(draft: _Draft) -> Order:
    items = draft.items
    if len(items) > 1:
        # payment は注文全体のもの: 先頭明細へ二重計上しない
        items = (replace(items[0], amount=0),) + items[1:]
    return Order(
        date=draft.date,
        order_no=draft.order_no,
        items=items,
        mall_id=draft.mall_id,
        mall_name=draft.mall_name,
        note=draft.note,
        total_amount=draft.payment,
        # 総数量欄が無ければ明細数量の合計 (先頭行の数量ではない)
        total_qty=draft.reported_qty or sum(i.qty for i in items),
    )


def build_grouped_orders(
    data_rows: Sequence[Sequence[Any]],
    column_map: ColumnMap,
    resolver: MallResolver,
    today: date | None = None,
) -> list[Order]:
    def step(state: _GroupedState, row: RowData) -> _GroupedState:
        if is_blank(row.get("product")):
            return state
        starts_order = not is_blank(row.get("date")) or not is_blank(row.get("orderNo"))
        if starts_order:
            done = state.done if state.current is None else state.done + (_finish_grouped(state.current),)
            draft = _start_draft(row, resolver, today)
            return _GroupedState(done=done, current=draft.add(_item(row, draft.payment)))
        if state.current is None:
            logger.debug("row %d: continuation row before any order, dropped", row.row_number)
            return state
        return replace(state, current=state.current.add(_item(row, 0)))

    final = reduce(step, extract_rows(data_rows, column_map), _GroupedState())
    if final.current is None:
        return list(final.done)
    return list(final.done) + [_finish_grouped(final.current)]


# -- flat ------------------------------------------------------------------

def _finish_flat(draft: _Draft) -> Order:
    return Order(
        date=draft.date,
        order_no=draft.order_no,
        items=draft.items,
        mall_id=draft.mall_id,
        mall_name=draft.mall_name,
        note=draft.note,
        total_amount=sum(i.amount for i in draft.items),
        total_qty=sum(i.qty for i in draft.items),
    )


def build_flat_orders(
    data_rows: Sequence[Sequence[Any]],
    column_map: ColumnMap,
    resolver: MallResolver,
    today: date | None = None,
) -> list[Order]:
    drafts: dict[tuple[str, str], _Draft] = {}
    for row in extract_rows(data_rows, column_map):
        if is_blank(row.get("product")):
            continue
        key = (parse_date(row.get("date"), today), cell_text(row.get("orderNo")) or f"R{row.row_number}")
        draft = drafts.get(key)
        if draft is None:
            draft = _start_draft(row, resolver, today)
        else:
            # 後続行のモール名も未登録チェックの対象
            resolver.resolve(cell_text(row.get("mall")))
        drafts[key] = draft.add(_item(row, parse_amount(row.get("payment"))))
    return [_finish_flat(d) for d in drafts.values()]


BUILDERS: dict[SheetLayout, OrderBuilder] = {
    SheetLayout.GROUPED: build_grouped_orders,
    SheetLayout.FLAT: build_flat_orders,
}

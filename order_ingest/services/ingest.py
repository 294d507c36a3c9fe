from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace
from datetime import date
from typing import Any

from ..excel.headers import resolve_columns
from ..excel.layout import classify_layout
from ..models.ingest_result import IngestResult
from ..models.mall import MallEntry
from ..models.order import Order
from .builders import BUILDERS
from .mall_resolver import MallResolver

"""Ingestion engine entry point: (grid, mall registry) -> (orders, warnings).

Pipeline:
1. header row -> column map (excel.headers)
2. column map + sample rows -> layout (excel.layout)
3. layout-specific builder (services.builders) with a fresh MallResolver
4. post-processing: fill missing total quantities
5. diagnostics: progress line, unknown-mall warning, layout confirmation

Synchronous and side-effect free apart from logging: the registry is read only
and each call gets its own resolver. Malformed input never raises.
"""

__all__ = [
    "NO_DATA_MESSAGE",
    "ingest_grid",
    "post_process",
]

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data rows found."


def post_process(orders: Sequence[Order]) -> list[Order]:
    """Recompute unset/zero total quantities from the items."""
    fixed: list[Order] = []
    for order in orders:
        if not order.total_qty:
            order = replace(order, total_qty=order.items_qty)
        fixed.append(order)
    return fixed


def _unknown_malls_message(names: Sequence[str]) -> str:
    return (
        f"Unregistered malls: {', '.join(names)} - "
        "register them in the mall list first or link them after import."
    )


def ingest_grid(
    grid: Sequence[Sequence[Any]],
    registry: Sequence[MallEntry],
    *,
    sheet_name: str = "Sheet1",
    candidates: Mapping[str, Sequence[str]] | None = None,
    today: date | None = None,
) -> IngestResult:
    """Build normalized orders from one decoded sheet.

    Args:
        grid: rows x cells, row 0 is the header
        registry: current mall registry (not modified)
        sheet_name: used in diagnostics only
        candidates: header candidate table (default: excel.headers defaults)
        today: fallback date for blank/unparseable date cells (default: date.today())

    Returns:
        IngestResult with orders in sheet order and advisory warnings
    """
    if len(grid) < 2:
        logger.warning("sheet=%s has no data rows", sheet_name)
        return IngestResult(sheet_name=sheet_name, layout=None, warnings=[NO_DATA_MESSAGE])

    warnings: list[str] = []
    progress = f'Parsing sheet "{sheet_name}" ({len(grid) - 1} rows)'
    warnings.append(progress)
    logger.info(progress)

    column_map = resolve_columns(grid[0], candidates)
    logger.debug("sheet=%s column_map=%s", sheet_name, column_map)
    if "product" not in column_map:
        logger.warning("sheet=%s: no product column found, every row will be skipped", sheet_name)

    layout = classify_layout(grid, column_map)
    resolver = MallResolver(registry)
    orders = post_process(BUILDERS[layout](grid[1:], column_map, resolver, today))

    order_level = sum(1 for o in orders if o.is_order_level_amount)
    if order_level:
        logger.info("sheet=%s: %d orders carry only an order-level amount", sheet_name, order_level)

    unknown = resolver.unknown_names
    if unknown:
        message = _unknown_malls_message(unknown)
        warnings.append(message)
        logger.warning(message)

    done = f"Parsed with the {layout.label} layout."
    warnings.append(done)
    logger.info("%s orders=%d", done, len(orders))

    return IngestResult(
        sheet_name=sheet_name,
        layout=layout,
        orders=orders,
        warnings=warnings,
        unknown_malls=unknown,
    )

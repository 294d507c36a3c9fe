from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.ingest_result import SheetLayout
from .cells import is_blank
from .headers import ColumnMap

"""Format classifier: grouped (continuation rows) vs flat layout.

Heuristic: the sheet is GROUPED when any sampled row has a blank date and a
non-blank product. The first data row is skipped as a baseline, and only rows
before grid index ``SCAN_LIMIT`` are sampled. One blank date in a flat export is
enough to misclassify it; nothing downstream corrects that.
"""

__all__ = [
    "SCAN_LIMIT",
    "classify_layout",
]

SCAN_LIMIT = 30


def _cell(row: Sequence[Any], idx: int | None) -> Any:
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def classify_layout(grid: Sequence[Sequence[Any]], column_map: ColumnMap) -> SheetLayout:
    date_idx = column_map.get("date")
    if date_idx is None:
        return SheetLayout.FLAT
    product_idx = column_map.get("product")
    # grid[0] = header, grid[1] = 1 行目データ (baseline)
    for row in grid[2:min(len(grid), SCAN_LIMIT)]:
        if is_blank(_cell(row, date_idx)) and not is_blank(_cell(row, product_idx)):
            return SheetLayout.GROUPED
    return SheetLayout.FLAT

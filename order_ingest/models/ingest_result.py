from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .order import Order

"""Result models for one ingestion call and one merge.

SheetLayout is the two-variant classification result:

- GROUPED: continuation rows (blank date / order number) carry extra items of
  the order started above them
- FLAT: every row identifies its own order and item
"""

__all__ = [
    "SheetLayout",
    "IngestResult",
    "MergeResult",
]


class SheetLayout(Enum):
    GROUPED = "grouped"
    FLAT = "flat"

    @property
    def label(self) -> str:
        return "grouped (continuation rows)" if self is SheetLayout.GROUPED else "flat (one row per item)"


@dataclass(frozen=True)
class IngestResult:
    """Output of ``ingest_grid``.

    ``warnings`` is advisory text for an operator; never branch on its content.
    """
    sheet_name: str
    layout: SheetLayout | None  # None: データ行なし
    orders: list[Order] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    unknown_malls: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MergeResult:
    accepted: list[Order]  # 新規 (id 採番済み)
    skipped_count: int  # 既存キーと重複して除外した件数

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""RowData model for the order ingestion engine.

RowData is one data row of the raw grid projected onto the canonical field roles
(date, orderNo, product, ...). Roles the header resolver could not find are simply
absent from ``values``.
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """Single data row after column resolution.

    ``row_number`` is the 1-based sheet row (the header is row 1, so the first
    data row is 2). It is what synthesized order numbers ("R<row>") refer to.
    """
    row_number: int
    values: dict[str, Any]  # role -> raw cell value

    def get(self, role: str) -> Any:
        """Raw value for ``role``; "" when the role is unavailable for this sheet."""
        value = self.values.get(role, "")
        return "" if value is None else value

from __future__ import annotations

import math
import numbers
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

import pandas as pd
from openpyxl.utils.datetime import from_excel

"""Cell normalizer: raw spreadsheet cells -> canonical dates / amounts / text.

All functions here are lenient: they never raise on malformed input.
- parse_date  -> "YYYY-MM-DD" (fallback: today)
- parse_amount -> non-negative int (fallback: 0)
- normalize_text -> whitespace-free lowercase key (header / mall matching only)
"""

__all__ = [
    "is_blank",
    "cell_text",
    "parse_date",
    "parse_amount",
    "normalize_text",
    "today_iso",
]

DATE_PATTERN = re.compile(r"(\d{4})[.\-/](\d{1,2})[.\-/](\d{1,2})")
# 桁区切り・通貨記号・空白を除去
_AMOUNT_NOISE = re.compile(r"[,\s₩$€£¥원]")
_WHITESPACE = re.compile(r"\s")


def today_iso(today: date | None = None) -> str:
    return (today or date.today()).isoformat()


def is_blank(value: Any) -> bool:
    """None, NaN/NaT, or whitespace-only text. Numeric zero is NOT blank."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if value is pd.NaT:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def cell_text(value: Any) -> str:
    """Display text of a cell, stripped. Whole floats lose their ".0" (pandas reads 1 as 1.0)."""
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _serial_to_iso(serial: float) -> str | None:
    try:
        decoded = from_excel(serial)
    except (ValueError, OverflowError, TypeError):
        return None
    if decoded is None:
        return None
    return decoded.date().isoformat() if isinstance(decoded, datetime) else None


def parse_date(value: Any, today: date | None = None) -> str:
    """Return ``value`` as an ISO date string, or today's date when unparseable.

    Accepted inputs:
        - spreadsheet serial day numbers (1900 date system)
        - datetime / date / pandas Timestamp cells
        - text containing YYYY<sep>M<sep>D with <sep> one of ". - /"
    """
    if is_blank(value):
        return today_iso(today)
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if _is_number(value):
        decoded = _serial_to_iso(value)
        if decoded:
            return decoded
    m = DATE_PATTERN.search(str(value).strip())
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3))).isoformat()
        except ValueError:
            pass  # 2024-13-45 など実在しない日付
    return today_iso(today)


def parse_amount(value: Any) -> int:
    """Coerce a currency / quantity cell to a non-negative integer (0 when malformed)."""
    if is_blank(value) or isinstance(value, bool):
        return 0
    if _is_number(value):
        number = Decimal(str(value)) if math.isfinite(float(value)) else None
    else:
        try:
            number = Decimal(_AMOUNT_NOISE.sub("", str(value)))
        except InvalidOperation:
            return 0
    if number is None or not number.is_finite() or number < 0:
        return 0
    return int(number.to_integral_value(rounding=ROUND_HALF_UP))


def normalize_text(value: Any) -> str:
    if is_blank(value):
        return ""
    return _WHITESPACE.sub("", str(value)).lower()

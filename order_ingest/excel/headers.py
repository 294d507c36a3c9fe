from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .cells import normalize_text

"""Header resolver: arbitrary header row -> ColumnMap (role -> column index).

Matching is exact on normalized text (whitespace removed, lowercased), so
" 주문 번호 " and "주문번호" are the same header. Roles are resolved in the order
of the candidate table; a column claimed by an earlier role is not reused by a
later one. Roles with no matching header are left out of the map.
"""

__all__ = [
    "ColumnMap",
    "ROLES",
    "DEFAULT_HEADER_CANDIDATES",
    "build_candidates",
    "resolve_columns",
]

ColumnMap = dict[str, int]

# 表順 = 優先順位
DEFAULT_HEADER_CANDIDATES: dict[str, tuple[str, ...]] = {
    "date": ("주문일시", "날짜", "주문날짜", "orderdate", "date"),
    "orderNo": ("주문번호", "주문no", "주문id", "ordernumber", "orderid"),
    "product": ("상품명", "상품이름", "productname", "product", "상품"),
    "qty": ("수량", "quantity", "qty", "개수"),
    "totalQty": ("총수량", "totalqty", "total_qty"),
    "totalPrice": ("총상품가격", "총상품가", "상품가격", "totalprice"),
    "payment": ("결제금액", "결제", "payment", "amount", "금액"),
    "category": ("카테고리", "category", "분류"),
    "mall": ("쇼핑몰", "몰", "mall", "shop", "channel", "판매채널"),
    "note": ("메모", "note", "비고", "memo"),
}

ROLES: tuple[str, ...] = tuple(DEFAULT_HEADER_CANDIDATES)


def build_candidates(
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> dict[str, tuple[str, ...]]:
    """Default table extended with extra per-role aliases (normalized on the way in).

    Unknown roles are ignored; the role order of the default table is kept.
    """
    table = {role: tuple(cands) for role, cands in DEFAULT_HEADER_CANDIDATES.items()}
    for role, extra in (aliases or {}).items():
        if role not in table:
            continue
        merged = list(table[role])
        for label in extra:
            norm = normalize_text(label)
            if norm and norm not in merged:
                merged.append(norm)
        table[role] = tuple(merged)
    return table


def resolve_columns(
    header_row: Sequence[Any],
    candidates: Mapping[str, Sequence[str]] | None = None,
) -> ColumnMap:
    """Map canonical roles to the first header cell matching one of their candidates."""
    table = candidates if candidates is not None else DEFAULT_HEADER_CANDIDATES
    normalized = [normalize_text(h) for h in header_row]
    column_map: ColumnMap = {}
    claimed: set[int] = set()
    for role, cands in table.items():
        wanted = set(cands)
        for idx, header in enumerate(normalized):
            if idx in claimed or not header:
                continue
            if header in wanted:
                column_map[role] = idx
                claimed.add(idx)
                break
    return column_map

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..excel.cells import normalize_text
from ..models.mall import MALL_COLORS, MallEntry
from .merger import IdFactory, next_unique_id

"""Mall resolver: free-text shop names -> registry entries.

A name matches the first registry entry (registry order) whose name equals it,
is contained in it, or contains it. Names are compared with whitespace removed
and lowercased. Over-matching is accepted: "쿠팡" links "쿠팡 로켓배송" and
vice versa. Unmatched names are kept on the order as free
text and collected in ``unknown_names`` for a single aggregate warning.

The registry is passed in explicitly and never modified here; registering new
malls is the caller's job (see ``register_mall``).
"""

__all__ = [
    "MallMatch",
    "MallResolver",
    "register_mall",
]


@dataclass(frozen=True)
class MallMatch:
    id: str  # 未解決なら ""
    resolved_name: str  # 入力をトリムしたもの (未解決でも保持)


class MallResolver:
    """Resolve shop names against one registry snapshot, tracking unknown names."""

    def __init__(self, registry: Sequence[MallEntry]) -> None:
        self.registry = tuple(registry)
        self._unknown: dict[str, None] = {}  # 挿入順を保つ set

    @property
    def unknown_names(self) -> list[str]:
        return list(self._unknown)

    def find(self, name: str) -> MallEntry | None:
        key = normalize_text(name)
        if not key:
            return None
        for entry in self.registry:
            entry_key = normalize_text(entry.name)
            if not entry_key:
                continue
            if entry_key in key or key in entry_key:
                return entry
        return None

    def resolve(self, raw_name: object) -> MallMatch:
        trimmed = "" if raw_name is None else str(raw_name).strip()
        if not trimmed:
            return MallMatch(id="", resolved_name="")
        entry = self.find(trimmed)
        if entry is None:
            self._unknown.setdefault(trimmed, None)
            return MallMatch(id="", resolved_name=trimmed)
        return MallMatch(id=entry.id, resolved_name=trimmed)


def register_mall(
    registry: Sequence[MallEntry],
    name: str,
    id_factory: IdFactory,
    categories: Sequence[str] = (),
) -> list[MallEntry]:
    """Return a copy of ``registry`` with ``name`` appended.

    No-op (plain copy) when an entry with exactly this name already exists.
    Colors rotate through MALL_COLORS by registry size.
    """
    name = name.strip()
    malls = list(registry)
    if not name or any(m.name == name for m in malls):
        return malls
    new_id = next_unique_id(id_factory, {m.id for m in malls})
    malls.append(
        MallEntry(
            id=new_id,
            name=name,
            categories=tuple(c.strip() for c in categories if c.strip()),
            color=MALL_COLORS[len(malls) % len(MALL_COLORS)],
        )
    )
    return malls

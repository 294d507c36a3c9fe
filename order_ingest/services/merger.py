from __future__ import annotations

import itertools
import logging
import uuid
from collections.abc import Callable, Iterable, Sequence

from ..models.ingest_result import MergeResult
from ..models.order import Order

"""Import merger: de-duplicate candidate orders against the persisted set.

Identity key is (date, order_no). Candidates whose key already exists in
``existing`` are skipped and only counted. Accepted orders get a fresh id from
the caller-supplied factory, distinct from every existing id.

Re-importing the same file against the updated collection accepts nothing,
provided the source keeps its order numbers stable.
"""

__all__ = [
    "IdFactory",
    "new_order_id",
    "CounterIdFactory",
    "next_unique_id",
    "merge_orders",
]

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

MAX_ID_ATTEMPTS = 1000


def new_order_id() -> str:
    return uuid.uuid4().hex


class CounterIdFactory:
    """Deterministic ids ("<prefix>1", "<prefix>2", ...), mainly for tests and dry runs."""

    def __init__(self, prefix: str = "o", start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"


def next_unique_id(id_factory: IdFactory, used: set[str]) -> str:
    """Draw ids until one is not in ``used``; the returned id is added to ``used``."""
    for _ in range(MAX_ID_ATTEMPTS):
        candidate = id_factory()
        if candidate and candidate not in used:
            used.add(candidate)
            return candidate
    raise ValueError(f"id factory produced no unused id in {MAX_ID_ATTEMPTS} attempts")


def merge_orders(
    candidates: Iterable[Order],
    existing: Sequence[Order],
    id_factory: IdFactory = new_order_id,
) -> MergeResult:
    existing_keys = {o.key for o in existing}
    used_ids = {o.id for o in existing if o.id}
    accepted: list[Order] = []
    skipped = 0
    for order in candidates:
        if order.key in existing_keys:
            skipped += 1
            continue
        accepted.append(order.with_id(next_unique_id(id_factory, used_ids)))
    logger.debug("merge accepted=%d skipped=%d existing=%d", len(accepted), skipped, len(existing))
    return MergeResult(accepted=accepted, skipped_count=skipped)

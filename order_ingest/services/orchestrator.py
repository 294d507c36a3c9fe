from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ImportConfig
from ..excel.headers import build_candidates
from ..excel.reader import SUPPORTED_SUFFIXES, RawGrid, WorkbookReadError, read_workbook
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.mall import MallEntry
from ..models.order import Order
from ..models.processing_result import FileStat, FileStatus, ImportRunResult
from ..storage.store import JsonBlobStore, StoreError
from .categories import uncategorized_items
from .ingest import ingest_grid
from .mall_resolver import register_mall
from .merger import IdFactory, merge_orders, new_order_id
from .progress import ProgressTracker

"""Batch orchestration: directory scan -> read -> ingest -> merge -> persist.

Each file is ingested against the registry and the order collection as they
stand after the previous files, so the same order appearing in two files of one
run is only accepted once. A file that cannot be read is recorded as failed
(with an ErrorRecord) and the run continues. The store is written once, at the
end, and not at all in dry-run mode.
"""

__all__ = [
    "ProcessingError",
    "scan_source_files",
    "process_all",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that stops the whole run (missing directory, unusable store)."""


def scan_source_files(directory: Path) -> list[Path]:
    """Supported spreadsheet files directly under ``directory``, sorted by name.

    Raises:
        ProcessingError: directory missing or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"path is not a directory: {directory}")
    try:
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"error reading directory {directory}: {e}") from e


@dataclass
class _RunState:
    """Registry / orders as they evolve during one run."""
    registry: list[MallEntry]
    orders: list[Order]
    categories: list[str]
    registry_changed: bool = False
    unknown_malls: dict[str, None] = field(default_factory=dict)


def _select_grid(sheets: dict[str, RawGrid], sheet_name: str | None) -> tuple[str, RawGrid]:
    if sheet_name is not None:
        return sheet_name, sheets[sheet_name]
    first = next(iter(sheets))
    return first, sheets[first]


def _process_single_file(
    file_path: Path,
    config: ImportConfig,
    state: _RunState,
    error_log: ErrorLogBuffer,
    id_factory: IdFactory,
    register_malls: bool,
) -> FileStat:
    start = datetime.now(UTC)

    def elapsed() -> float:
        return (datetime.now(UTC) - start).total_seconds()

    try:
        sheets = read_workbook(file_path, config.sheet_name)
    except WorkbookReadError as e:
        logger.error("file=%s: %s", file_path.name, e)
        error_log.append(ErrorRecord.create(
            file=file_path.name, sheet="<FILE_LEVEL>", row=-1,
            error_type="WORKBOOK_READ_ERROR", message=str(e),
        ))
        return FileStat(
            file_name=file_path.name,
            status=FileStatus.FAILED.value,
            elapsed_seconds=elapsed(),
            error=str(e),
        )
    if not sheets:
        message = f"no sheets in {file_path.name}"
        logger.error("file=%s: %s", file_path.name, message)
        error_log.append(ErrorRecord.create(
            file=file_path.name, sheet="<FILE_LEVEL>", row=-1,
            error_type="NO_SHEETS", message=message,
        ))
        return FileStat(
            file_name=file_path.name, status=FileStatus.FAILED.value,
            elapsed_seconds=elapsed(), error=message,
        )

    sheet_name, grid = _select_grid(sheets, config.sheet_name)
    candidates = build_candidates(config.header_aliases)
    today = config.today()

    result = ingest_grid(grid, state.registry, sheet_name=sheet_name, candidates=candidates, today=today)
    if register_malls and result.unknown_malls:
        for name in result.unknown_malls:
            state.registry = register_mall(state.registry, name, id_factory)
            logger.info("registered mall: %s", name)
        state.registry_changed = True
        # 新規 id で紐付け直す
        result = ingest_grid(grid, state.registry, sheet_name=sheet_name, candidates=candidates, today=today)

    for name in result.unknown_malls:
        state.unknown_malls.setdefault(name, None)

    for order in result.orders:
        stray = uncategorized_items(order, state.registry, state.categories)
        if stray:
            logger.debug("order %s/%s: categories outside list: %s", order.date, order.order_no, stray)

    merged = merge_orders(result.orders, state.orders, id_factory)
    state.orders.extend(merged.accepted)
    logger.info(
        "file=%s sheet=%s parsed=%d accepted=%d skipped=%d",
        file_path.name, sheet_name, len(result.orders), len(merged.accepted), merged.skipped_count,
    )
    return FileStat(
        file_name=file_path.name,
        status=FileStatus.SUCCESS.value,
        sheet_name=sheet_name,
        layout=result.layout.value if result.layout else None,
        parsed_orders=len(result.orders),
        accepted_orders=len(merged.accepted),
        skipped_orders=merged.skipped_count,
        elapsed_seconds=elapsed(),
    )


def process_all(
    config: ImportConfig,
    store: JsonBlobStore,
    *,
    dry_run: bool = False,
    register_malls: bool = False,
    id_factory: IdFactory = new_order_id,
    error_log: ErrorLogBuffer | None = None,
) -> ImportRunResult:
    """Import every supported file of ``config.source_directory`` into ``store``.

    Raises:
        ProcessingError: directory problems or an unreadable/unwritable store
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()

    file_paths = scan_source_files(Path(config.source_directory))

    try:
        state = _RunState(
            registry=store.load_malls(),
            orders=store.load_orders(),
            categories=store.load_categories(),
        )
    except StoreError as e:
        raise ProcessingError(str(e)) from e

    baseline = len(state.orders)
    file_stats: list[FileStat] = []
    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            stat = _process_single_file(file_path, config, state, error_log, id_factory, register_malls)
            file_stats.append(stat)
            progress.finish_file(accepted=stat.accepted_orders, skipped=stat.skipped_orders)

    if not dry_run:
        try:
            if len(state.orders) != baseline:
                store.save_orders(state.orders)
            if state.registry_changed:
                store.save_malls(state.registry)
        except StoreError as e:
            raise ProcessingError(str(e)) from e
    else:
        logger.info("dry run: store not written")

    log_path = error_log.flush()
    if log_path is not None:
        logger.info("error log written: %s", log_path)

    end_time = datetime.now(UTC)
    return ImportRunResult(
        success_files=sum(1 for s in file_stats if s.status == FileStatus.SUCCESS.value),
        failed_files=sum(1 for s in file_stats if s.status == FileStatus.FAILED.value),
        parsed_orders=sum(s.parsed_orders for s in file_stats),
        accepted_orders=sum(s.accepted_orders for s in file_stats),
        skipped_orders=sum(s.skipped_orders for s in file_stats),
        unknown_malls=list(state.unknown_malls),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )

"""Domain models for the order ingestion engine.

Frozen dataclasses shared by the engine (excel/, services/) and the batch layer
(cli/, storage/).
"""

from .error_record import ErrorRecord
from .ingest_result import IngestResult, MergeResult, SheetLayout
from .mall import MALL_COLORS, MallEntry
from .order import LineItem, Order
from .processing_result import FileStat, FileStatus, ImportRunResult
from .row_data import RowData

__all__ = [
    # Records
    "LineItem",
    "Order",
    "MallEntry",
    "MALL_COLORS",
    # Engine
    "RowData",
    "SheetLayout",
    "IngestResult",
    "MergeResult",
    # Batch run
    "ErrorRecord",
    "FileStat",
    "FileStatus",
    "ImportRunResult",
]

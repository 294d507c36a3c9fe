from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Processing result models for a batch import run.

FileStat carries per-file metrics, ImportRunResult aggregates them for the
SUMMARY line printed by the CLI.
"""

__all__ = [
    "FileStatus",
    "FileStat",
    "ImportRunResult",
]


class FileStatus(Enum):
    """Outcome of one source file within a run."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    sheet_name: str | None = None
    layout: str | None = None  # grouped/flat (None: データ行なし or 失敗)
    parsed_orders: int = 0
    accepted_orders: int = 0
    skipped_orders: int = 0
    elapsed_seconds: float = 0.0
    error: str | None = None


@dataclass(frozen=True)
class ImportRunResult:
    """Aggregated results of one CLI run."""
    success_files: int
    failed_files: int
    parsed_orders: int  # ビルダー出力件数
    accepted_orders: int  # マージで追加された件数
    skipped_orders: int  # 重複スキップ件数
    unknown_malls: list[str]
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files

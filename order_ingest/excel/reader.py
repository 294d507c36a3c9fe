from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

"""Workbook reader: file -> raw grids (list of rows) keyed by sheet name.

This is the decoding collaborator in front of the ingestion engine. Sheets are
read without a header (row 0 of the grid is whatever the first sheet row is) and
with pandas' NA-string conversion disabled so cells like "NA" stay text. Empty
cells become "". Trailing all-empty rows are dropped.

Supported: .xlsx / .xlsm (openpyxl), legacy .xls (xlrd) and .csv. A CSV is a single
sheet, named after the file unless a sheet name is requested.
"""

__all__ = [
    "SUPPORTED_SUFFIXES",
    "RawGrid",
    "WorkbookReadError",
    "read_workbook",
    "frame_to_grid",
]

RawGrid = list[list[Any]]

SUPPORTED_SUFFIXES = (".xlsx", ".xlsm", ".xls", ".csv")


class WorkbookReadError(Exception):
    """Raised when a file cannot be decoded as a spreadsheet."""


def frame_to_grid(df: pd.DataFrame) -> RawGrid:
    """Convert a header-less DataFrame into plain Python rows."""
    obj = df.astype(object).where(df.notna(), "")
    grid: RawGrid = [list(row) for row in obj.itertuples(index=False, name=None)]
    # 末尾の空行を除去
    while grid and all(isinstance(c, str) and not c.strip() for c in grid[-1]):
        grid.pop()
    return grid


def read_workbook(path: Path, sheet_name: str | None = None) -> dict[str, RawGrid]:
    """Read ``path`` returning raw grids keyed by sheet name (workbook order).

    Parameters
    ----------
    path: workbook path
    sheet_name: only read this sheet (None reads every sheet); a CSV is returned under this name

    Raises
    ------
    WorkbookReadError: unsupported suffix, unreadable file, or missing sheet
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise WorkbookReadError(f"unsupported file type: {path.name}")
    try:
        if suffix == ".csv":
            df = pd.read_csv(path, header=None, dtype=object, keep_default_na=False, skip_blank_lines=True)
            # CSV は 1 シートのみ: 指定シート名で返す
            return {sheet_name or path.stem: frame_to_grid(df)}
        xls = pd.ExcelFile(path)
        names = [str(n) for n in xls.sheet_names]
        if sheet_name is not None:
            if sheet_name not in names:
                raise WorkbookReadError(f"sheet '{sheet_name}' not found in {path.name} (sheets: {names})")
            names = [sheet_name]
        return {
            name: frame_to_grid(xls.parse(name, header=None, keep_default_na=False, na_values=[]))
            for name in names
        }
    except WorkbookReadError:
        raise
    except pd.errors.EmptyDataError:
        return {sheet_name or path.stem: []}
    except Exception as e:
        raise WorkbookReadError(f"cannot read {path.name}: {e}") from e

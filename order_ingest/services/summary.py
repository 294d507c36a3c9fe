from __future__ import annotations

from ..models.processing_result import ImportRunResult

"""SUMMARY line rendering for the import CLI."""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(value: float) -> str:
    """Plain decimal without scientific notation; whole numbers lose the fraction."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ImportRunResult) -> str:
    """Render the run summary.

    Format::

        SUMMARY files={n}/{n} success={s} failed={f} orders={parsed}
        accepted={a} skipped={k} unknown_malls={u} elapsed_sec={e}

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> r = ImportRunResult(
        ...     success_files=1, failed_files=0, parsed_orders=3, accepted_orders=2,
        ...     skipped_orders=1, unknown_malls=[], start_time=t, end_time=t,
        ...     elapsed_seconds=2.0)
        >>> render_summary_line(r)
        'SUMMARY files=1/1 success=1 failed=0 orders=3 accepted=2 skipped=1 unknown_malls=0 elapsed_sec=2'
    """
    total = result.total_files
    return (
        f"SUMMARY files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"orders={result.parsed_orders} "
        f"accepted={result.accepted_orders} "
        f"skipped={result.skipped_orders} "
        f"unknown_malls={len(result.unknown_malls)} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )

from __future__ import annotations

from datetime import UTC, datetime

from order_ingest.models.processing_result import ImportRunResult
from order_ingest.services.summary import format_seconds, render_summary_line


def _result(**kw) -> ImportRunResult:
    t = datetime(2024, 1, 1, tzinfo=UTC)
    base = dict(
        success_files=2, failed_files=1, parsed_orders=10, accepted_orders=7, skipped_orders=3,
        unknown_malls=["새로운몰"], start_time=t, end_time=t, elapsed_seconds=1.5,
    )
    base.update(kw)
    return ImportRunResult(**base)


def test_render_summary_line():
    assert render_summary_line(_result()) == (
        "SUMMARY files=3/3 success=2 failed=1 orders=10 accepted=7 skipped=3 unknown_malls=1 elapsed_sec=1.5"
    )


def test_format_seconds():
    assert format_seconds(0) == "0"
    assert format_seconds(2.0) == "2"
    assert format_seconds(0.000123) == "0.000123"
    assert format_seconds(1.23456) == "1.235"
    assert "e" not in format_seconds(0.0000001)

from __future__ import annotations

import re
from pathlib import Path

import pytest

from order_ingest.cli.__main__ import main as cli_main

"""Output contract: exactly one SUMMARY line with fixed keys, in a fixed order."""

pytestmark = pytest.mark.contract

SUMMARY_RE = re.compile(
    r"^SUMMARY files=(\d+)/(\d+) success=(\d+) failed=(\d+) orders=(\d+) "
    r"accepted=(\d+) skipped=(\d+) unknown_malls=(\d+) elapsed_sec=(\d+(?:\.\d+)?)$"
)


def _summary_lines(out: str) -> list[str]:
    return [line for line in out.splitlines() if line.startswith("SUMMARY")]


def test_summary_line_format(write_config, temp_workdir: Path, make_workbook, flat_rows, capsys):
    make_workbook(temp_workdir / "data" / "orders.xlsx", {"S": flat_rows})
    assert cli_main([]) == 0

    lines = _summary_lines(capsys.readouterr().out)
    assert len(lines) == 1
    m = SUMMARY_RE.match(lines[0])
    assert m, lines[0]
    files, total, success, failed = (int(g) for g in m.groups()[:4])
    assert files == total == success + failed == 1


def test_summary_line_with_no_files(write_config, capsys):
    assert cli_main([]) == 0
    lines = _summary_lines(capsys.readouterr().out)
    assert len(lines) == 1
    assert SUMMARY_RE.match(lines[0])
    assert lines[0].startswith("SUMMARY files=0/0 success=0 failed=0 orders=0")


def test_no_summary_on_fatal_error(temp_workdir: Path, capsys):
    assert cli_main(["--config", "missing.yml"]) == 1
    assert _summary_lines(capsys.readouterr().out) == []

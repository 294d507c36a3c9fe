# Shared pytest fixtures
from __future__ import annotations
import logging
import tempfile
from datetime import date
from pathlib import Path
from typing import Any, Callable

import pandas as pd
import pytest

from order_ingest.logging.init import reset_logging
from order_ingest.models.mall import MallEntry

FIXED_TODAY = date(2024, 6, 1)


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handler は sys.stdout を保持するので capsys ごとに作り直す
    reset_logging()
    yield
    app_logger = logging.getLogger("order_ingest")
    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)
    app_logger.setLevel(logging.NOTSET)
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("ORDER_INGEST_STORE", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
store_path: ./store/orders.json
timezone: UTC
header_aliases:
  orderNo: ["order no"]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def registry() -> list[MallEntry]:
    return [
        MallEntry(id="m1", name="쿠팡"),
        MallEntry(id="m2", name="네이버 스마트스토어", categories=("상의", "하의")),
    ]


@pytest.fixture()
def today() -> date:
    return FIXED_TODAY


@pytest.fixture()
def make_workbook() -> Callable[..., Path]:
    def _make(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def grouped_rows() -> list[list[Any]]:
    return [
        ["주문일시", "주문번호", "쇼핑몰", "상품명", "카테고리", "수량", "결제금액", "메모"],
        ["2024-01-01", "A100", "쿠팡", "반팔 티셔츠", "상의", 1, "30,000", "선물"],
        ["", "", "", "청바지", "하의", 2, "", ""],
        ["2024.01.02", "A101", "새로운몰", "운동화", "신발", 1, "59,000", ""],
    ]


@pytest.fixture()
def flat_rows() -> list[list[Any]]:
    return [
        ["date", "Order ID", "mall", "product", "qty", "amount"],
        ["2024-01-01", "R9", "쿠팡 로켓배송", "A", 1, 500],
        ["2024-01-01", "R9", "쿠팡 로켓배송", "B", 1, 700],
        ["2024-01-03", "R10", "", "C", 3, 900],
    ]

#!/usr/bin/env python3
"""Generate sample order exports for manual testing of the import CLI.

Two layouts are produced, matching what the ingestion engine recognizes:
- grouped: the first row of an order carries date / order number / payment,
  further items follow on rows with those cells left blank
- flat: every row repeats date and order number, payment is per row

Headers are Korean back-office labels (주문일시, 주문번호, 상품명, ...).
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

HEADER = ["주문일시", "주문번호", "쇼핑몰", "상품명", "카테고리", "수량", "결제금액", "메모"]
MALLS = ["쿠팡", "네이버 스마트스토어", "11번가", "지마켓", "새로운몰"]
PRODUCTS = [
    ("반팔 티셔츠", "상의"), ("청바지", "하의"), ("패딩", "아우터"), ("운동화", "신발"),
    ("토트백", "가방"), ("선크림", "뷰티"), ("견과류", "식품"), ("무선 이어폰", "가전"),
]


def generate_rows(orders: int, layout: str, seed: int = 42) -> list[list[Any]]:
    """Build the sheet rows (header first) for ``orders`` random orders."""
    rng = np.random.default_rng(seed)
    dates = pd.date_range("2024-01-01", "2024-12-31", periods=60)
    rows: list[list[Any]] = [HEADER]
    for n in range(orders):
        order_date = pd.Timestamp(rng.choice(dates)).strftime("%Y.%m.%d")
        order_no = f"A{100000 + n}"
        mall = str(rng.choice(MALLS))
        count = int(rng.integers(1, 4))
        picks = rng.choice(len(PRODUCTS), size=count, replace=False)
        lines = []
        for idx in picks:
            product, category = PRODUCTS[int(idx)]
            qty = int(rng.integers(1, 4))
            price = int(rng.integers(5, 100)) * 1000
            lines.append((product, category, qty, price * qty))
        if layout == "grouped":
            total = sum(line[3] for line in lines)
            for i, (product, category, qty, _amount) in enumerate(lines):
                if i == 0:
                    rows.append([order_date, order_no, mall, product, category, qty, f"{total:,}", ""])
                else:
                    rows.append(["", "", "", product, category, qty, "", ""])
        else:
            for product, category, qty, amount in lines:
                rows.append([order_date, order_no, mall, product, category, qty, amount, ""])
    return rows


def write_workbook(output_path: Path, rows: list[list[Any]], sheet_name: str = "주문내역") -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    print(f"Created workbook: {output_path} ({len(rows) - 1} data rows)")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate sample order exports (grouped / flat layouts)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/grouped.xlsx --layout grouped --orders 50
  %(prog)s data/flat.xlsx --layout flat --orders 200 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output .xlsx path")
    parser.add_argument("--layout", choices=["grouped", "flat"], default="grouped")
    parser.add_argument("--orders", type=int, default=20, help="Number of orders (default: 20)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.orders <= 0:
        print("Error: --orders must be positive", file=sys.stderr)
        return 1
    if args.output.suffix.lower() != ".xlsx":
        print("Error: output must have .xlsx extension", file=sys.stderr)
        return 1

    write_workbook(args.output, generate_rows(args.orders, args.layout, args.seed))
    return 0


if __name__ == "__main__":
    sys.exit(main())

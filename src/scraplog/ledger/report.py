"""取引履歴の CSV エクスポート"""

import csv
import io
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from .models import Record
from .normalizer import to_number

REPORT_HEADER = [
    "Transaction Date",
    "Item",
    "Weight (kg)",
    "Price per kg (₦)",
    "Total Amount (₦)",
    "Supplier",
    "Created Date",
]


def _money(value) -> str:
    return f"{to_number(value):.2f}"


def _created_date(record: Record) -> str:
    created = record.created_at or record.timestamp or ""
    return created.split("T", 1)[0].split(" ", 1)[0]


def report_rows(records: Iterable[Record]) -> list[list[str]]:
    """表示中の順序のまま1レコード1行に変換"""
    rows = []
    for record in records:
        rows.append([
            record.transaction_date,
            record.item_name,
            _money(record.weight),
            _money(record.price_per_kg),
            _money(record.total_amount),
            record.supplier_name,
            _created_date(record),
        ])
    return rows


def export_csv(records: Iterable[Record]) -> str:
    """CSV テキストを返す（全フィールドをダブルクォート）"""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    writer.writerows(report_rows(records))
    return buf.getvalue()


def write_csv(records: Iterable[Record], path: Optional[Path] = None) -> Path:
    """CSV をファイルに保存。

    Returns:
        保存先の Path（省略時は scrap-records-YYYY-MM-DD.csv）
    """
    if path is None:
        path = Path(f"scrap-records-{date.today().isoformat()}.csv")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_csv(records), encoding="utf-8")
    return path

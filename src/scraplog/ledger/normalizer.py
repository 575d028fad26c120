"""取引レコードの正規化

リモート API のレスポンス（item_name 等のワイヤ形式）と、ローカルにキャッシュされた
旧・新2世代のレコード（itemName 等の表示形式）を、同じ Record に揃える。
形の崩れた入力は例外にせずデフォルト値で埋める。
"""

import itertools
import math
import time
import uuid
from datetime import date
from typing import Any, Optional

from scraplog.logging_setup import get_logger

from .models import Record

logger = get_logger("scraplog.ledger.normalizer")

# 正規フィールド → 受け付けるキー（優先順）。表示形式を先に置く。
FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "id": ("id", "_id"),
    "item_name": ("itemName", "item_name"),
    "weight": ("weight",),
    "price_per_kg": ("pricePerKg", "price_per_kg"),
    "amount": ("amount",),
    "supplier_name": ("supplierName", "supplier_name"),
    "transaction_date": ("transactionDate", "transaction_date"),
    "total_amount": ("totalAmount", "total_amount"),
    "timestamp": ("timestamp",),
    "created_at": ("createdAt", "created_at"),
    "display_date": ("displayDate", "display_date"),
}

NUMERIC_FIELDS = ("weight", "price_per_kg", "amount", "total_amount")
TEXT_FIELDS = ("item_name", "supplier_name")
OPTIONAL_TEXT_FIELDS = ("timestamp", "created_at", "display_date")

LOCAL_ID_PREFIX = "local-"

_id_counter = itertools.count()


def new_local_id() -> str:
    """ローカル採番の ID（現在時刻 + ランダム値 + プロセス内連番）"""
    millis = int(time.time() * 1000)
    return f"{LOCAL_ID_PREFIX}{millis}-{uuid.uuid4().hex[:8]}{next(_id_counter):x}"


def is_local_id(record_id: str) -> bool:
    return str(record_id).startswith(LOCAL_ID_PREFIX)


def to_number(value: Any) -> float:
    """数値らしき値を安全に float に変換。変換できなければ 0。"""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "").replace("₦", "")
        try:
            number = float(text)
        except ValueError:
            return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def lookup(raw: dict, field_name: str) -> Optional[Any]:
    """FIELD_KEYS の順にキーを探し、最初の空でない値を返す"""
    for key in FIELD_KEYS[field_name]:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def date_part(value: Any) -> str:
    """日時文字列から日付部分（YYYY-MM-DD）だけを取り出す"""
    text = str(value).strip()
    first = text.split()[0] if text else ""
    return first.split("T", 1)[0]


def normalize_record(raw: Any) -> Record:
    """任意形状のレコードを Record に正規化する。例外は投げない。

    Args:
        raw: dict（表示形式・ワイヤ形式どちらでも可）または Record

    Returns:
        Record（raw に元の入力を保持）
    """
    if isinstance(raw, Record):
        raw = raw.to_display()
    if not isinstance(raw, dict):
        logger.debug("Non-mapping record input (%s); using defaults", type(raw).__name__)
        raw = {}

    values: dict[str, Any] = {}

    for name in NUMERIC_FIELDS:
        values[name] = to_number(lookup(raw, name))

    for name in TEXT_FIELDS:
        value = lookup(raw, name)
        values[name] = str(value).strip() if value is not None else ""

    for name in OPTIONAL_TEXT_FIELDS:
        value = lookup(raw, name)
        values[name] = str(value).strip() if value is not None else None

    record_id = lookup(raw, "id")
    values["id"] = str(record_id) if record_id is not None else new_local_id()

    txn_date = lookup(raw, "transaction_date")
    values["transaction_date"] = date_part(txn_date) if txn_date is not None else date.today().isoformat()

    return Record(raw=raw, **values)


def normalize_records(raw_list: Any) -> list[Record]:
    """レコード列をまとめて正規化。リストでなければ空リスト。"""
    if not isinstance(raw_list, (list, tuple)):
        return []
    return [normalize_record(r) for r in raw_list]

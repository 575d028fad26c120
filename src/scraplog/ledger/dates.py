"""レコードの日付解決

1件のレコードには最大6種類の日付フィールドが重なって入っている
（displayDate / transactionDate / transaction_date / createdAt / created_at / timestamp）。
優先順に取り出し、最初に解釈できたものをそのレコードの日時とする。
"""

import re
from datetime import date, datetime, timezone
from typing import Any, Callable, Optional

from .models import Record

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_DATETIME_HEAD = re.compile(r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?")
_ZONE = re.compile(r"Z|[+-]\d{2}:?\d{2}")
_SPURIOUS_TAIL = re.compile(r"(?:T\d{2}:\d{2}|Z|[+-]\d{2}:?\d{2})")


def repair_timestamp(text: str) -> str:
    """タイムゾーン指定子が二重になった日時文字列を修復する。

    旧データには "2024-03-01T14:22:10.000ZT00:00:00.000Z" や
    "2024-03-01T00:00:00T00:00:00Z" のように、日時の後ろへ余計な時刻・ゾーン指定が
    付いたものがある。余計な部分以降を切り落とし、ゾーン指定子を1つだけ付け直す。
    修復の必要がなければそのまま返す。
    """
    head = _DATETIME_HEAD.match(text)
    if not head:
        return text
    base = head.group(0)
    rest = text[head.end():]

    zone_match = _ZONE.match(rest)
    zone = zone_match.group(0) if zone_match else ""
    tail = rest[len(zone):]
    if not tail or not _SPURIOUS_TAIL.match(tail):
        return text
    return base + (zone or "Z")


def parse_datetime(value: Any) -> Optional[datetime]:
    """日時らしき値を UTC の aware datetime に変換。解釈できなければ None。

    タイムゾーンなしの値は UTC、日付のみの値は UTC の 0 時として扱う。
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            dt = datetime.fromisoformat(repair_timestamp(text))
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _pick(record: Any, attr: str, keys: tuple[str, ...]) -> Any:
    if isinstance(record, Record):
        return getattr(record, attr)
    if isinstance(record, dict):
        for key in keys:
            value = record.get(key)
            if value not in (None, ""):
                return value
    return None


def _display_date(record: Any) -> Any:
    return _pick(record, "display_date", ("displayDate", "display_date"))


def _transaction_date(record: Any) -> Any:
    return _pick(record, "transaction_date", ("transactionDate", "transaction_date"))


def _created_at(record: Any) -> Any:
    return _pick(record, "created_at", ("createdAt", "created_at"))


def _timestamp(record: Any) -> Any:
    return _pick(record, "timestamp", ("timestamp",))


# 優先順。最初に解釈できた候補を採用する。
DATE_EXTRACTORS: list[Callable[[Any], Any]] = [
    _display_date,
    _transaction_date,
    _created_at,
    _timestamp,
]


def resolve_date(record: Any, default: Optional[datetime] = None) -> datetime:
    """レコードの代表日時を返す。

    Args:
        record: Record または生の dict
        default: どの候補も解釈できなかったときの値（省略時は現在時刻）

    Returns:
        UTC の aware datetime
    """
    for extract in DATE_EXTRACTORS:
        dt = parse_datetime(extract(record))
        if dt is not None:
            return dt
    if default is not None:
        return default
    return datetime.now(timezone.utc)


def resolve_date_only(record: Any) -> date:
    """代表日時の日付部分（時刻を無視した日単位の比較用）"""
    return resolve_date(record).date()


def resolve_date_key(record: Any) -> str:
    """代表日付の ISO 文字列（YYYY-MM-DD）。文字列比較でそのまま日付順になる。"""
    return resolve_date_only(record).isoformat()

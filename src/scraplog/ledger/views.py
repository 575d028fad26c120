"""履歴ビュー（絞り込み + 並び替え）"""

from typing import Callable, Iterable, Optional, Union

from .dates import EPOCH, resolve_date, resolve_date_key
from .models import Record, ViewFilters
from .normalizer import normalize_record, to_number

DEFAULT_SORT = "date-desc"

# ソートキー → (キー関数, 降順か)
SORT_KEYS: dict[str, tuple[Callable[[Record], object], bool]] = {
    "date-asc": (lambda r: resolve_date(r, default=EPOCH), False),
    "date-desc": (lambda r: resolve_date(r, default=EPOCH), True),
    "amount-asc": (lambda r: to_number(r.total_amount), False),
    "amount-desc": (lambda r: to_number(r.total_amount), True),
}


def _coerce_filters(filters: Union[ViewFilters, dict, None]) -> ViewFilters:
    if isinstance(filters, ViewFilters):
        return filters
    return ViewFilters.from_mapping(filters)


def _as_records(records: Iterable) -> list[Record]:
    """dict が混ざっていれば正規化してから扱う"""
    return [r if isinstance(r, Record) else normalize_record(r) for r in records or []]


def filter_records(
    records: Iterable[Record],
    filters: Union[ViewFilters, dict, None] = None,
) -> list[Record]:
    """条件に合うレコードだけを元の順序のまま返す"""
    f = _coerce_filters(filters)
    item_q = f.item_name.lower()
    supplier_q = f.supplier_name.lower()

    result = []
    for record in _as_records(records):
        if item_q and item_q not in (record.item_name or "").lower():
            continue
        if supplier_q and supplier_q not in (record.supplier_name or "").lower():
            continue
        if f.start_date or f.end_date:
            day = resolve_date_key(record)
            if f.start_date and day < f.start_date:
                continue
            if f.end_date and day > f.end_date:
                continue
        result.append(record)
    return result


def sort_records(records: Iterable[Record], sort_key: Optional[str] = DEFAULT_SORT) -> list[Record]:
    """安定ソート。未知のキーは date-desc 扱い。"""
    key_func, descending = SORT_KEYS.get(sort_key or DEFAULT_SORT, SORT_KEYS[DEFAULT_SORT])
    return sorted(_as_records(records), key=key_func, reverse=descending)


def build_view(
    records: Iterable[Record],
    filters: Union[ViewFilters, dict, None] = None,
    sort_key: Optional[str] = DEFAULT_SORT,
) -> list[Record]:
    """絞り込みと並び替えを適用した新しいリストを返す（入力は変更しない）。

    Args:
        records: 正規化済みレコード
        filters: ViewFilters または dict（itemName / startDate 等）
        sort_key: date-asc / date-desc / amount-asc / amount-desc
    """
    return sort_records(filter_records(records, filters), sort_key)

"""ダッシュボード集計"""

from typing import Iterable

from .dates import EPOCH, resolve_date
from .models import ItemStats, Record, Summary, SupplierStats
from .normalizer import normalize_record, to_number

RECENT_LIMIT = 5


def aggregate(records: Iterable, recent_limit: int = RECENT_LIMIT) -> Summary:
    """レコード一覧から合計・品目別・仕入先別の集計と直近取引を求める。

    数値はすでに float のはずだが、文字列のまま残ったデータにも耐えるよう
    ここでも to_number() を通す。dict が混ざっていれば先に正規化する。

    Args:
        records: Record（または生 dict）のイテラブル
        recent_limit: 直近取引として返す件数

    Returns:
        Summary（空入力ならすべて 0 / 空）
    """
    summary = Summary()
    collected: list[Record] = []

    for record in records or []:
        if not isinstance(record, Record):
            record = normalize_record(record)
        collected.append(record)

        weight = to_number(record.weight)
        amount = to_number(record.total_amount)

        summary.total_records += 1
        summary.total_weight += weight
        summary.total_amount += amount

        item = summary.item_stats.setdefault(record.item_name, ItemStats())
        item.total_weight += weight
        item.total_amount += amount
        item.count += 1

        supplier = summary.supplier_stats.setdefault(record.supplier_name, SupplierStats())
        supplier.total_amount += amount
        supplier.count += 1

    # 日付が解釈できないものはエポック扱い（最も古い）
    summary.recent_transactions = sorted(
        collected,
        key=lambda r: resolve_date(r, default=EPOCH),
        reverse=True,
    )[:recent_limit]
    return summary

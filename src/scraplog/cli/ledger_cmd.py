#!/usr/bin/env python3
"""
スクラップ買取台帳 CLI

Usage:
    scraplog add --item Iron --weight 10 --price 50 --supplier "Musa" [--date YYYY-MM-DD]
    scraplog add --item Pot --weight 3 --amount 200 --supplier "Ada"
    scraplog history [--item X] [--supplier Y] [--from-date YYYY-MM-DD] [--to-date YYYY-MM-DD]
                     [--sort date-desc|date-asc|amount-desc|amount-asc] [--export out.csv]
    scraplog daily [--date YYYY-MM-DD]
    scraplog dashboard [--from-date YYYY-MM-DD] [--to-date YYYY-MM-DD]
    scraplog delete <ID>
"""

import argparse
import sys
from datetime import date
from typing import Optional

from scraplog.backend.client import RecordsAPIClient
from scraplog.config import Settings
from scraplog.errors import RecordValidationError, RemoteWriteError
from scraplog.ledger import LocalMirror, RecordStore, ViewFilters, aggregate, build_view, write_csv
from scraplog.ledger.dates import EPOCH, resolve_date
from scraplog.ledger.views import SORT_KEYS
from scraplog.logging_setup import configure_logging


def _money(value: float) -> str:
    return f"₦{value:,.2f}"


def _open_store(settings: Settings) -> RecordStore:
    client = RecordsAPIClient(settings.api_url, settings.api_token, timeout=settings.timeout)
    mirror = LocalMirror(settings.db_path)
    return RecordStore(client, mirror)


def _print_notice(store: RecordStore):
    if store.last_error is not None:
        print(f"[注意] サーバーに接続できないため、ローカルのデータを表示しています。({store.last_error})")


def cmd_add(args, store: RecordStore) -> int:
    """取引を1件登録"""
    data = {
        "itemName": args.item,
        "weight": args.weight,
        "pricePerKg": args.price,
        "amount": args.amount,
        "supplierName": args.supplier,
        "transactionDate": args.date,
    }
    data = {k: v for k, v in data.items() if v is not None}

    try:
        record = store.create(data)
    except RecordValidationError as e:
        print(f"入力エラー: {e}")
        return 1
    except RemoteWriteError as e:
        record = e.record
        print(f"[注意] サーバーに保存できませんでした。ローカルにのみ保存しました。({e.cause})")

    print(f"登録しました: {record.id}")
    print(f"  {record.transaction_date}  {record.item_name}  {record.weight:g} kg  "
          f"{_money(record.total_amount)}  {record.supplier_name}")
    return 0


def cmd_history(args, store: RecordStore) -> int:
    """取引履歴を表示（絞り込み・並び替え・CSV 出力）"""
    filters = ViewFilters(
        item_name=args.item or "",
        supplier_name=args.supplier or "",
        start_date=args.from_date or "",
        end_date=args.to_date or "",
    )
    records = build_view(store.list(filters), None, args.sort)
    _print_notice(store)

    if args.export:
        path = write_csv(records, args.export)
        print(f"{len(records)} 件を {path} に出力しました。")
        return 0

    if not records:
        print("該当する取引はありません。")
        return 0

    print(f"=== 取引履歴 ({len(records)} 件) ===\n")
    for r in records:
        price = _money(r.amount) + " (一括)" if r.is_pot else f"{_money(r.price_per_kg)}/kg"
        print(f"  {r.transaction_date}  {r.item_name:<10} {r.weight:>8g} kg  {price:<16} "
              f"{_money(r.total_amount):>14}  {r.supplier_name}")
        print(f"    ID: {r.id}")
    return 0


def cmd_daily(args, store: RecordStore) -> int:
    """指定日（デフォルト: 今日）の取引と件数・合計"""
    day = args.date or date.today().isoformat()
    records = build_view(store.list(ViewFilters(start_date=day, end_date=day)), None, "date-asc")
    summary = aggregate(records)
    _print_notice(store)

    print(f"=== {day} の取引 ===\n")
    print(f"  取引件数: {summary.total_records}")
    print(f"  合計金額: {_money(summary.total_amount)}\n")

    if not records:
        print("  この日の取引はありません。")
    for r in records:
        print(f"  {r.item_name:<10} {r.weight:>8g} kg  {_money(r.total_amount):>14}  {r.supplier_name}")
    return 0


def cmd_dashboard(args, store: RecordStore) -> int:
    """集計を表示"""
    filters = ViewFilters(start_date=args.from_date or "", end_date=args.to_date or "")
    summary = aggregate(store.list(filters))
    _print_notice(store)

    print("=== ダッシュボード ===\n")
    print(f"  合計金額: {_money(summary.total_amount)}")
    print(f"  合計重量: {summary.total_weight:,.2f} kg")
    print(f"  取引件数: {summary.total_records}")

    print("\n【品目別】")
    if not summary.item_stats:
        print("  データがありません。")
    for item, stats in summary.item_stats.items():
        print(f"  {item or '(未設定)':<12} {stats.total_weight:>10,.2f} kg  "
              f"{_money(stats.total_amount):>14}  {stats.count} 件")

    print("\n【仕入先別】")
    if not summary.supplier_stats:
        print("  データがありません。")
    for supplier, stats in summary.suppliers_by_amount():
        print(f"  {supplier or '(未設定)':<20} {_money(stats.total_amount):>14}  {stats.count} 件")

    print("\n【最近の取引】")
    if not summary.recent_transactions:
        print("  最近の取引はありません。")
    for r in summary.recent_transactions:
        dt = resolve_date(r, default=EPOCH)
        day = dt.date().isoformat() if dt != EPOCH else "日付不明"
        print(f"  {day}  {r.item_name:<10} {r.weight:>8g} kg  {_money(r.total_amount):>14}  {r.supplier_name}")
    return 0


def cmd_delete(args, store: RecordStore) -> int:
    """取引を削除"""
    if store.delete(args.id):
        print(f"削除しました: {args.id}")
    else:
        print(f"[注意] サーバーから削除できませんでした。ローカルからは削除しました: {args.id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="スクラップ買取台帳")
    parser.add_argument("--env", default=None, help=".envファイルのパス (default: 自動探索)")
    subparsers = parser.add_subparsers(dest="command")

    # add コマンド
    p_add = subparsers.add_parser("add", help="取引を登録")
    p_add.add_argument("--item", help="品目 (Iron, Ceramic, Pot など)")
    p_add.add_argument("--weight", help="重量 (kg)")
    p_add.add_argument("--price", help="kg あたりの単価 (Pot 以外)")
    p_add.add_argument("--amount", help="合計金額 (Pot のみ)")
    p_add.add_argument("--supplier", help="仕入先")
    p_add.add_argument("--date", help="取引日 (YYYY-MM-DD, デフォルト: 今日)")

    # history コマンド
    p_history = subparsers.add_parser("history", help="取引履歴を表示")
    p_history.add_argument("--item", help="品目で絞り込み (部分一致)")
    p_history.add_argument("--supplier", help="仕入先で絞り込み (部分一致)")
    p_history.add_argument("--from-date", help="開始日 (YYYY-MM-DD)")
    p_history.add_argument("--to-date", help="終了日 (YYYY-MM-DD)")
    p_history.add_argument("--sort", default="date-desc", choices=sorted(SORT_KEYS), help="並び順 (デフォルト: date-desc)")
    p_history.add_argument("--export", help="CSV の出力先")

    # daily コマンド
    p_daily = subparsers.add_parser("daily", help="1日分の取引を表示")
    p_daily.add_argument("--date", help="対象日 (YYYY-MM-DD, デフォルト: 今日)")

    # dashboard コマンド
    p_dashboard = subparsers.add_parser("dashboard", help="集計を表示")
    p_dashboard.add_argument("--from-date", help="開始日 (YYYY-MM-DD)")
    p_dashboard.add_argument("--to-date", help="終了日 (YYYY-MM-DD)")

    # delete コマンド
    p_delete = subparsers.add_parser("delete", help="取引を削除")
    p_delete.add_argument("id", help="取引 ID")

    return parser


COMMANDS = {
    "add": cmd_add,
    "history": cmd_history,
    "daily": cmd_daily,
    "dashboard": cmd_dashboard,
    "delete": cmd_delete,
}


def main(argv: Optional[list[str]] = None, store: Optional[RecordStore] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 0

    settings = Settings.from_env(args.env)
    configure_logging(settings.log_level)

    if store is None:
        store = _open_store(settings)
    try:
        return command(args, store)
    finally:
        store.mirror.close()


if __name__ == "__main__":
    sys.exit(main())

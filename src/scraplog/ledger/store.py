"""取引レコードの保存窓口（リモート + ローカルミラー）

RecordStore はメモリ上のレコード一覧とローカルミラーを1つずつ所有し、
リモートのバックエンドへの読み書きを仲介する。リモートに届かないときは
ローカルミラーで処理を完結させ、失敗は呼び出し側に知らせる。
"""

import math
from datetime import date
from typing import Optional, Protocol, Union

from scraplog.backend.client import BackendError
from scraplog.errors import RecordValidationError, RemoteWriteError
from scraplog.logging_setup import get_logger

from .dates import parse_datetime
from .db import LocalMirror
from .models import Record, ViewFilters, is_pot, utc_now_iso
from .normalizer import date_part, is_local_id, lookup, new_local_id, normalize_record, normalize_records
from .views import filter_records

logger = get_logger("scraplog.ledger.store")


class RecordBackend(Protocol):
    """リモート保存先に求めるインターフェース（RecordsAPIClient が実装）"""

    def list_records(self, filters: Optional[dict] = None) -> list[dict]: ...

    def create_record(self, payload: dict) -> dict: ...

    def get_record(self, record_id: str) -> dict: ...

    def delete_record(self, record_id: str) -> None: ...


def _required_text(data: dict, field: str, label: str) -> str:
    value = lookup(data, field)
    if value is None or not str(value).strip():
        raise RecordValidationError(field, f"{label} is required")
    return str(value).strip()


def _required_number(data: dict, field: str, label: str) -> float:
    value = lookup(data, field)
    if value is None:
        raise RecordValidationError(field, f"{label} is required")
    try:
        number = float(str(value).strip().replace(",", "").replace("₦", ""))
    except ValueError:
        raise RecordValidationError(field, f"{label} must be a number") from None
    if not math.isfinite(number):
        raise RecordValidationError(field, f"{label} must be a number")
    if number < 0:
        raise RecordValidationError(field, f"{label} must not be negative")
    return number


def build_record(data: dict) -> Record:
    """フォーム入力を検証し、保存前の Record を組み立てる。

    Pot は amount をそのまま合計金額とし price_per_kg を 0 に、
    それ以外は weight × price_per_kg を合計金額とし amount を 0 にする。

    Raises:
        RecordValidationError: 必須項目の欠落・数値でない値・負の値
    """
    if not isinstance(data, dict):
        raise RecordValidationError("record", "Record input must be a mapping")

    item_name = _required_text(data, "item_name", "Item name")
    supplier_name = _required_text(data, "supplier_name", "Supplier name")
    weight = _required_number(data, "weight", "Weight")

    if is_pot(item_name):
        amount = _required_number(data, "amount", "Amount")
        price_per_kg = 0.0
        total_amount = amount
    else:
        price_per_kg = _required_number(data, "price_per_kg", "Price per kg")
        amount = 0.0
        total_amount = weight * price_per_kg

    raw_date = lookup(data, "transaction_date")
    if raw_date is None:
        transaction_date = date.today().isoformat()
    else:
        if parse_datetime(str(raw_date)) is None:
            raise RecordValidationError("transaction_date", f"Invalid transaction date: {raw_date!r}")
        # 読み込み時の正規化と同じく、タイムゾーン変換せず日付部分だけを使う
        transaction_date = date_part(raw_date)

    return Record(
        id="",
        item_name=item_name,
        weight=weight,
        price_per_kg=price_per_kg,
        amount=amount,
        supplier_name=supplier_name,
        transaction_date=transaction_date,
        total_amount=total_amount,
        raw=data,
    )


class RecordStore:
    """取引レコードの保存窓口"""

    def __init__(self, backend: RecordBackend, mirror: LocalMirror):
        self.backend = backend
        self.mirror = mirror
        self.last_error: Optional[Exception] = None
        self._records: list[Record] = []
        self.load()

    @property
    def records(self) -> list[Record]:
        """メモリ上のレコード一覧（コピー）"""
        return list(self._records)

    def load(self) -> list[Record]:
        """ローカルミラーからメモリ上の一覧を読み込む。

        ID の無い旧形式レコードにはここで採番し、その ID をミラーへ書き戻す。
        """
        self._records = self.mirror.load()
        missing = sum(1 for r in self._records if lookup(r.raw, "id") is None)
        if missing:
            logger.info("Assigned local ids to %d mirror records without one", missing)
            self._commit()
        logger.debug("Loaded %d records from local mirror", len(self._records))
        return self.records

    def _commit(self):
        self.mirror.save(self._records)

    # ── 作成 ──

    def create(self, data: dict) -> Record:
        """レコードを作成する。

        リモートへの書き込みに失敗した場合はローカル ID で保存したうえで
        RemoteWriteError を送出する（e.record に保存したレコード）。

        Raises:
            RecordValidationError: 入力不備（何も保存しない）
            RemoteWriteError: ローカルミラーにだけ保存した
        """
        draft = build_record(data)
        payload = draft.to_storage()
        date_supplied = lookup(data, "transaction_date") is not None

        try:
            response = self.backend.create_record(payload)
        except BackendError as e:
            logger.warning("Remote create failed, saving locally: %s", e)
            self.last_error = e
            record = Record(
                id=new_local_id(),
                item_name=draft.item_name,
                weight=draft.weight,
                price_per_kg=draft.price_per_kg,
                amount=draft.amount,
                supplier_name=draft.supplier_name,
                transaction_date=draft.transaction_date,
                total_amount=draft.total_amount,
                timestamp=f"{draft.transaction_date}T00:00:00.000Z" if date_supplied else utc_now_iso(),
                raw=dict(data),
            )
            self._records.append(record)
            self._commit()
            raise RemoteWriteError(record, e) from e

        record = normalize_record({**payload, **response})
        self._records.append(record)
        self._commit()
        logger.info("Created record %s (%s, %.2f)", record.id, record.item_name, record.total_amount)
        return record

    # ── 一覧・取得 ──

    def list(self, filters: Union[ViewFilters, dict, None] = None) -> list[Record]:
        """レコード一覧を返す。リモート優先、失敗時はローカルミラー。

        サーバーの品目絞り込みは完全一致なので、サーバーには日付だけを渡し、
        品目・仕入先の部分一致はどちらの取得元でも手元で適用する。
        日付の絞り込みなしでリモートから取れた場合は、メモリとミラーを
        その内容で置き換える。リモートに未送信のローカル専用レコードは残す。
        """
        f = filters if isinstance(filters, ViewFilters) else ViewFilters.from_mapping(filters)
        wire = ViewFilters(start_date=f.start_date, end_date=f.end_date)

        try:
            remote = normalize_records(self.backend.list_records(wire.to_query()))
        except BackendError as e:
            logger.warning("Remote list failed, reading local mirror: %s", e)
            self.last_error = e
            return filter_records(self._records, f)

        self.last_error = None
        remote_ids = {r.id for r in remote}
        local_only = [r for r in self._records if is_local_id(r.id) and r.id not in remote_ids]

        if wire.is_empty():
            self._records = remote + local_only
            self._commit()
        return filter_records(remote + local_only, f)

    def get(self, record_id: str) -> Optional[Record]:
        """ID でレコードを1件取得。見つからなければ None。"""
        record_id = str(record_id)
        if not is_local_id(record_id):
            try:
                return normalize_record(self.backend.get_record(record_id))
            except BackendError as e:
                logger.warning("Remote get failed for %s, reading local mirror: %s", record_id, e)
                self.last_error = e
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    # ── 削除 ──

    def delete(self, record_id: str) -> bool:
        """レコードを削除する。

        リモートの成否にかかわらずメモリとミラーからは必ず取り除く。

        Returns:
            リモートでの削除が成功した（またはローカル専用レコードだった）か
        """
        record_id = str(record_id)
        remote_ok = True
        if not is_local_id(record_id):
            try:
                self.backend.delete_record(record_id)
            except BackendError as e:
                logger.warning("Remote delete failed for %s, removing locally: %s", record_id, e)
                self.last_error = e
                remote_ok = False

        self._records = [r for r in self._records if r.id != record_id]
        self._commit()
        return remote_ok


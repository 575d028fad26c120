"""スクラップ買取台帳 データモデル定義"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

POT_ITEM = "Pot"


def is_pot(item_name: Optional[str]) -> bool:
    """Pot（重量×単価ではなく金額を直接入力する品目）かどうか"""
    return (item_name or "").strip().lower() == POT_ITEM.lower()


@dataclass
class Record:
    """正規化済みの取引レコード1件分"""
    id: str
    item_name: str = ""
    weight: float = 0.0
    price_per_kg: float = 0.0
    amount: float = 0.0
    supplier_name: str = ""
    transaction_date: str = ""       # YYYY-MM-DD
    total_amount: float = 0.0
    timestamp: Optional[str] = None  # 旧ローカル専用経路で付与される作成日時
    created_at: Optional[str] = None
    display_date: Optional[str] = None
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_pot(self) -> bool:
        return is_pot(self.item_name)

    def to_display(self) -> dict:
        """表示用キー（itemName 等）の dict。ローカルミラーの保存形式でもある。"""
        data = {
            "id": self.id,
            "itemName": self.item_name,
            "weight": self.weight,
            "pricePerKg": self.price_per_kg,
            "amount": self.amount,
            "supplierName": self.supplier_name,
            "transactionDate": self.transaction_date,
            "totalAmount": self.total_amount,
        }
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        if self.display_date is not None:
            data["displayDate"] = self.display_date
        return data

    def to_storage(self) -> dict:
        """バックエンドのワイヤ形式（item_name 等）の dict"""
        return {
            "item_name": self.item_name,
            "weight": self.weight,
            "price_per_kg": self.price_per_kg,
            "amount": self.amount,
            "supplier_name": self.supplier_name,
            "transaction_date": self.transaction_date,
            "total_amount": self.total_amount,
        }


@dataclass
class ItemStats:
    """品目別の集計"""
    total_weight: float = 0.0
    total_amount: float = 0.0
    count: int = 0


@dataclass
class SupplierStats:
    """仕入先別の集計"""
    total_amount: float = 0.0
    count: int = 0


@dataclass
class Summary:
    """ダッシュボード用の集計結果"""
    total_weight: float = 0.0
    total_amount: float = 0.0
    total_records: int = 0
    item_stats: dict[str, ItemStats] = field(default_factory=dict)
    supplier_stats: dict[str, SupplierStats] = field(default_factory=dict)
    recent_transactions: list[Record] = field(default_factory=list)

    def suppliers_by_amount(self) -> list[tuple[str, SupplierStats]]:
        """仕入先を合計金額の降順で返す（同額は初出順）"""
        return sorted(
            self.supplier_stats.items(),
            key=lambda kv: kv[1].total_amount,
            reverse=True,
        )


@dataclass
class ViewFilters:
    """履歴ビューの絞り込み条件（すべて任意・AND 結合）"""
    item_name: str = ""
    supplier_name: str = ""
    start_date: str = ""   # YYYY-MM-DD（この日を含む）
    end_date: str = ""     # YYYY-MM-DD（この日を含む）

    @classmethod
    def from_mapping(cls, data: Optional[dict]) -> "ViewFilters":
        """表示用キー・ワイヤ用キーのどちらでも受け付ける"""
        data = data or {}

        def pick(*keys: str) -> str:
            for key in keys:
                value = data.get(key)
                if value:
                    return str(value).strip()
            return ""

        return cls(
            item_name=pick("itemName", "item_name"),
            supplier_name=pick("supplierName", "supplier_name"),
            start_date=pick("startDate", "start_date"),
            end_date=pick("endDate", "end_date"),
        )

    def is_empty(self) -> bool:
        return not (self.item_name or self.supplier_name or self.start_date or self.end_date)

    def to_query(self) -> dict[str, str]:
        """バックエンド一覧 API のクエリパラメータ"""
        query = {
            "start_date": self.start_date,
            "end_date": self.end_date,
            "item_name": self.item_name,
            "supplier_name": self.supplier_name,
        }
        return {k: v for k, v in query.items() if v}


def utc_now_iso() -> str:
    """現在時刻（UTC, ミリ秒精度, 末尾 Z）"""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"

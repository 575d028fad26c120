"""ローカルミラー SQLite データベース層

リモートに届かないときの予備の保存先。名前付きスロットに
レコード一覧を JSON 配列（表示形式のキー）として丸ごと保存する。
"""

import json
import sqlite3
from pathlib import Path
from typing import Iterable, Optional

from scraplog.logging_setup import get_logger

from .models import Record
from .normalizer import normalize_records

DB_PATH = Path.cwd() / "scraplog.db"
RECORDS_SLOT = "scrapRecords"

logger = get_logger("scraplog.ledger.db")


class LocalMirror:
    """ローカルミラー"""

    def __init__(self, db_path: Optional[Path] = None, slot: str = RECORDS_SLOT):
        self.db_path = db_path or DB_PATH
        self.slot = slot
        self._conn: Optional[sqlite3.Connection] = None
        self._init_db()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_db(self):
        """テーブル作成"""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS slots (
                name TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT DEFAULT (datetime('now', 'localtime'))
            );
        """)
        self.conn.commit()

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    # ── 生データ ──

    def read_raw(self) -> list:
        """スロットの JSON 配列をそのまま返す。無い・壊れている場合は空リスト。"""
        row = self.conn.execute(
            "SELECT value FROM slots WHERE name = ?", (self.slot,)
        ).fetchone()
        if not row:
            return []
        try:
            data = json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning("Local mirror slot %r holds invalid JSON; ignoring it", self.slot)
            return []
        return data if isinstance(data, list) else []

    def write_raw(self, items: list):
        """スロットを上書き保存"""
        self.conn.execute("""
            INSERT OR REPLACE INTO slots (name, value, updated_at)
            VALUES (?, ?, datetime('now', 'localtime'))
        """, (self.slot, json.dumps(items, ensure_ascii=False)))
        self.conn.commit()

    # ── レコード ──

    def load(self) -> list[Record]:
        """保存済みレコードを正規化して返す（旧形式のキャッシュも読める）"""
        return normalize_records(self.read_raw())

    def save(self, records: Iterable[Record]):
        """レコード一覧でスロットを置き換える"""
        self.write_raw([r.to_display() for r in records])

    def append(self, record: Record):
        records = self.load()
        records.append(record)
        self.save(records)

    def remove(self, record_id: str) -> int:
        """ID が一致するレコードを削除。削除件数を返す。"""
        records = self.load()
        kept = [r for r in records if r.id != str(record_id)]
        self.save(kept)
        return len(records) - len(kept)

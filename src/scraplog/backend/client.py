"""
取引レコード REST API クライアント

バックエンドの records テーブルを読み書きする薄いラッパー。
フィールド名はワイヤ形式（item_name, price_per_kg, supplier_name,
transaction_date, total_amount）のまま送受信し、正規化は呼び出し側で行う。

エンドポイント:
1. GET    /records           一覧（start_date, end_date, item_name, supplier_name で絞り込み）
2. POST   /records           作成
3. GET    /records/{id}      1件取得
4. DELETE /records/{id}      削除
"""

from typing import Any, Optional

import requests

from scraplog.errors import ScraplogError
from scraplog.logging_setup import get_logger

DEFAULT_TIMEOUT = 10.0

USER_AGENT = "scraplog/0.1.0"

logger = get_logger("scraplog.backend.client")


class BackendError(ScraplogError):
    """リモート I/O エラー（通信失敗・非 2xx・不正なレスポンス）"""
    def __init__(self, code: str, message: str = ""):
        self.code = code
        super().__init__(f"Backend Error [{code}]: {message}")


class RecordsAPIClient:
    """取引レコード API クライアント"""

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: API のベース URL（例: "https://example.onrender.com/api"）
            access_token: Bearer トークン。省略時は Authorization ヘッダーを付けない。
            timeout: 1リクエストあたりのタイムアウト秒数
            session: 差し替え用の requests.Session
        """
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        })

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json_body: Optional[dict] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.request(
                method,
                url,
                headers=self._headers(),
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise BackendError("NETWORK", f"{method} {url}: {e}") from e

        if not resp.ok:
            raise BackendError(str(resp.status_code), _error_message(resp))

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            payload = resp.json()
        except ValueError as e:
            raise BackendError("BAD_RESPONSE", f"{method} {url}: response is not JSON") from e
        return _unwrap(payload)

    # ── 一覧 ──

    def list_records(self, filters: Optional[dict] = None) -> list[dict]:
        """レコード一覧を取得。

        Args:
            filters: {"start_date", "end_date", "item_name", "supplier_name"} の任意の組み合わせ

        Returns:
            ワイヤ形式の dict のリスト
        """
        params = {k: v for k, v in (filters or {}).items() if v}
        data = self._request("GET", "/records", params=params or None)
        if data is None:
            return []
        if not isinstance(data, list):
            raise BackendError("BAD_RESPONSE", f"expected a list of records, got {type(data).__name__}")
        logger.debug("Fetched %d records from %s", len(data), self.base_url)
        return data

    # ── 作成・取得・削除 ──

    def create_record(self, payload: dict) -> dict:
        """レコードを作成し、バックエンドが返したレコードを返す"""
        data = self._request("POST", "/records", json_body=payload)
        if not isinstance(data, dict):
            raise BackendError("BAD_RESPONSE", "create did not return a record")
        return data

    def get_record(self, record_id: str) -> dict:
        data = self._request("GET", f"/records/{record_id}")
        if not isinstance(data, dict):
            raise BackendError("NOT_FOUND", f"record {record_id} not found")
        return data

    def delete_record(self, record_id: str) -> None:
        self._request("DELETE", f"/records/{record_id}")


def _unwrap(payload: Any) -> Any:
    """{"success": ..., "data": ..., "message": ...} 形式のエンベロープを外す"""
    if isinstance(payload, dict) and "success" in payload:
        if not payload.get("success"):
            raise BackendError("FAILED", str(payload.get("message") or "request failed"))
        return payload.get("data")
    return payload


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200] or resp.reason or ""
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)

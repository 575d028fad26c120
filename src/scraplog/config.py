"""設定の読み込み（.env + 環境変数）"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from scraplog.backend.client import DEFAULT_TIMEOUT

DEFAULT_API_URL = "http://localhost:8000/api"


@dataclass
class Settings:
    """実行時設定"""
    api_url: str = DEFAULT_API_URL
    api_token: Optional[str] = None
    db_path: Optional[Path] = None      # None ならカレントディレクトリの scraplog.db
    timeout: float = DEFAULT_TIMEOUT
    log_level: Optional[str] = None

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """.env を読み込んだうえで SCRAPLOG_* 環境変数から設定を作る。

        Args:
            env_file: .env ファイルのパス（省略時は python-dotenv の探索に任せる）
        """
        load_dotenv(env_file)

        db_path = os.getenv("SCRAPLOG_DB_PATH")
        timeout = os.getenv("SCRAPLOG_TIMEOUT")
        try:
            timeout_value = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError:
            timeout_value = DEFAULT_TIMEOUT

        return cls(
            api_url=os.getenv("SCRAPLOG_API_URL") or DEFAULT_API_URL,
            api_token=os.getenv("SCRAPLOG_API_TOKEN") or None,
            db_path=Path(db_path) if db_path else None,
            timeout=timeout_value,
            log_level=os.getenv("SCRAPLOG_LOG_LEVEL") or None,
        )

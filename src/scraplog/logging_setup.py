"""scraplog パッケージのログ設定

- configure_logging(): パッケージのルートロガー "scraplog" に StreamHandler を1つだけ付ける。
  CLI などのエントリポイントが起動時に1回呼ぶ。
- get_logger(name): ロガーを取得する。未設定なら NullHandler を付けて
  ライブラリとして使われたときに余計な警告が出ないようにする。

ライブラリ側のモジュールはハンドラを付けず get_logger("scraplog.<module>") だけを使う。
"""

import logging
import os
import sys
from typing import IO, Optional, Union

_PKG_LOGGER_NAME = "scraplog"
_CONFIGURED = False

DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _from_name(level: Union[int, str, None]) -> Optional[int]:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return None


def parse_level(level: Union[int, str, None]) -> int:
    """ログレベルを int に変換。解釈できなければ SCRAPLOG_LOG_LEVEL、それも無ければ WARNING。"""
    numeric = _from_name(level)
    if numeric is None:
        numeric = _from_name(os.getenv("SCRAPLOG_LOG_LEVEL"))
    return logging.WARNING if numeric is None else numeric


def configure_logging(
    level: Union[int, str, None] = None,
    fmt: Optional[str] = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """ルートロガーを1回だけ設定する"""
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    numeric = parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    logger.setLevel(numeric)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)

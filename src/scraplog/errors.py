"""scraplog 共通の例外"""


class ScraplogError(Exception):
    """scraplog が送出する例外の基底クラス"""


class RecordValidationError(ScraplogError):
    """入力不備（必須項目の欠落など）。永続化の前に送出され、状態は変わらない。"""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class RemoteWriteError(ScraplogError):
    """リモートへの書き込みに失敗し、ローカルミラーにだけ保存したことを知らせる"""
    def __init__(self, record, cause: Exception):
        self.record = record
        self.cause = cause
        super().__init__(f"Saved locally only (record {record.id}): {cause}")

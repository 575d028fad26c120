"""取引レコード REST API"""

from .client import BackendError, RecordsAPIClient

__all__ = ["BackendError", "RecordsAPIClient"]

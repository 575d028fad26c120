"""scraplog - scrap-metal purchase ledger with remote storage and a local fallback mirror"""

__version__ = "0.1.0"

from scraplog.backend.client import BackendError, RecordsAPIClient
from scraplog.errors import RecordValidationError, RemoteWriteError, ScraplogError
from scraplog.ledger.db import LocalMirror
from scraplog.ledger.store import RecordStore

__all__ = [
    "BackendError",
    "LocalMirror",
    "RecordStore",
    "RecordValidationError",
    "RecordsAPIClient",
    "RemoteWriteError",
    "ScraplogError",
]

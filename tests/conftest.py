"""Shared fixtures.

Every test gets its own SQLite mirror under ``tmp_path`` and a scrubbed
environment so a developer's ``.env`` / ``SCRAPLOG_*`` variables never leak
into assertions.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from scraplog.ledger.db import LocalMirror
from scraplog.ledger.store import RecordStore
from tests.helpers.fake_backend import FakeBackend


_ENV_NAMES = ("SCRAPLOG_API_URL", "SCRAPLOG_API_TOKEN", "SCRAPLOG_DB_PATH", "SCRAPLOG_TIMEOUT", "SCRAPLOG_LOG_LEVEL")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv() writes straight into os.environ
    for name in _ENV_NAMES:
        os.environ.pop(name, None)


@pytest.fixture
def mirror(tmp_path: Path):
    m = LocalMirror(tmp_path / "mirror.db")
    yield m
    m.close()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def store(backend: FakeBackend, mirror: LocalMirror) -> RecordStore:
    return RecordStore(backend, mirror)

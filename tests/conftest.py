"""
Shared fixtures for Marina tests.

No test touches the real environment: settings are reloaded for every test
and all files live under pytest's tmp_path.
"""

from pathlib import Path
from typing import Optional

import pytest

from marina.config import get_settings
from marina.models.audit import AuditEvent
from marina.registry import BoatRegistry
from marina.storage import AuditStorageInterface, FlatFileBoatStorage


class InMemoryAuditStorage(AuditStorageInterface):
    """Audit storage that just keeps events in a list."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self.events))[:limit]

    def event_types(self) -> list[str]:
        return [event.event_type.value for event in self.events]


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Drop cached settings and any MARINA_* overrides around every test."""
    for name in (
        "MARINA_MAX_BOATS",
        "MARINA_AUDIT_LOG_PATH",
        "MARINA_SAVE_ATTEMPTS",
        "MARINA_LOG_LEVEL",
        "MARINA_LOG_JSON",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def registry() -> BoatRegistry:
    return BoatRegistry(capacity=120)


@pytest.fixture
def data_file(tmp_path) -> Path:
    return tmp_path / "BoatData.csv"


@pytest.fixture
def write_data(data_file):
    """Write lines to the data file and return its path."""
    def _write(*lines: str, path: Optional[Path] = None) -> Path:
        target = path or data_file
        target.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return target
    return _write


@pytest.fixture
def storage(data_file) -> FlatFileBoatStorage:
    return FlatFileBoatStorage(data_file, save_attempts=1)


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()

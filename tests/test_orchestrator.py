"""
Tests for the session flow (load -> commands -> save) and its audit trail.
"""

import logging
import sys
from decimal import Decimal

import pytest
import structlog

from marina.audit import AuditLogger, configure_logging
from marina.config import MarinaSettings
from marina.models.audit import AuditEventBuilder, AuditEventType, AuditSeverity
from marina.orchestrator import MarinaSession, create_app_components
from marina.registry import (
    BoatNotFoundError,
    BoatRegistry,
    CapacityExceededError,
    OverpaymentError,
    ParseError,
)
from marina.storage import FileOpenError, FlatFileBoatStorage, JsonLinesAuditStorage


@pytest.fixture
def session(storage, audit_storage) -> MarinaSession:
    return MarinaSession(
        storage=storage,
        audit_logger=AuditLogger(storage=audit_storage),
    )


class TestSessionFlow:
    """End-to-end session behaviour."""

    def test_registry_unavailable_before_start(self, session):
        with pytest.raises(RuntimeError):
            _ = session.registry

    def test_fresh_database(self, session, audit_storage):
        report = session.start()
        assert report.opened is False
        assert len(session.registry) == 0
        assert audit_storage.events == []

    def test_full_session_persists_once(self, session, data_file, write_data, audit_storage):
        write_data("Eagle,40,slip,23,1500.00")
        session.start()

        session.add_line("Dolphin,22,land,B,0")
        session.pay("eagle", Decimal("100"))
        session.accrue_month()
        session.remove("dolphin")

        # Nothing is written before finish()
        assert data_file.read_text(encoding="utf-8") == "Eagle,40,slip,23,1500.00\n"

        assert session.finish() == 1
        assert data_file.read_text(encoding="utf-8") == "Eagle,40,slip,23,1900.00\n"
        assert audit_storage.event_types() == [
            "inventory_loaded",
            "boat_added",
            "payment_applied",
            "monthly_charges_accrued",
            "boat_removed",
            "inventory_saved",
        ]

    def test_inventory_is_sorted(self, session):
        session.start()
        session.add_line("Zephyr,30,slip,1,0")
        session.add_line("alpha,30,slip,2,0")
        assert [r.name for r in session.inventory()] == ["alpha", "Zephyr"]


class TestSessionErrors:
    """Failures are audited and then re-raised unchanged."""

    def test_bad_line_is_audited(self, session, audit_storage):
        session.start()
        with pytest.raises(ParseError):
            session.add_line("Bad,abc,slip,1,100")
        event = audit_storage.events[-1]
        assert event.event_type == AuditEventType.ADD_REJECTED
        assert event.severity == AuditSeverity.WARNING
        assert event.details["line"] == "Bad,abc,slip,1,100"

    def test_full_marina_is_audited(self, data_file, audit_storage):
        session = MarinaSession(
            storage=FlatFileBoatStorage(
                data_file,
                registry_factory=lambda: BoatRegistry(capacity=1),
                save_attempts=1,
            ),
            audit_logger=AuditLogger(storage=audit_storage),
        )
        session.start()
        session.add_line("First,20,slip,1,0")
        with pytest.raises(CapacityExceededError):
            session.add_line("Second,20,slip,2,0")
        assert audit_storage.events[-1].event_type == AuditEventType.ADD_REJECTED

    def test_remove_miss_is_audited(self, session, audit_storage):
        session.start()
        with pytest.raises(BoatNotFoundError):
            session.remove("nonexistent")
        assert audit_storage.events[-1].event_type == AuditEventType.REMOVE_REJECTED

    def test_overpayment_is_audited(self, session, audit_storage):
        session.start()
        session.add_line("Eagle,40,slip,23,10.00")
        with pytest.raises(OverpaymentError):
            session.pay("Eagle", Decimal("10.01"))
        event = audit_storage.events[-1]
        assert event.event_type == AuditEventType.PAYMENT_REJECTED
        assert session.registry.find("Eagle").amount_owed == Decimal("10.00")

    def test_save_failure_is_audited(self, tmp_path, audit_storage):
        session = MarinaSession(
            storage=FlatFileBoatStorage(tmp_path, save_attempts=1),
            audit_logger=AuditLogger(storage=audit_storage),
        )
        session.start()
        with pytest.raises(FileOpenError):
            session.finish()
        event = audit_storage.events[-1]
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.severity == AuditSeverity.ERROR


class TestAuditLogger:
    """Tests for the audit logger itself."""

    def test_without_storage_always_succeeds(self):
        assert AuditLogger().log(AuditEventBuilder.boat_removed("Eagle")) is True

    def test_storage_failure_is_swallowed(self, tmp_path):
        logger = AuditLogger(storage=JsonLinesAuditStorage(tmp_path))
        assert logger.log(AuditEventBuilder.boat_removed("Eagle")) is False

    def test_configure_logging_routes_to_stderr(self):
        """Logging is set up by configure_logging, not by importing the package."""
        configure_logging("info", json_logs=False)
        try:
            root = logging.getLogger()
            assert root.level == logging.INFO
            assert any(
                getattr(handler, "stream", None) is sys.stderr for handler in root.handlers
            )
            assert structlog.is_configured()
        finally:
            structlog.reset_defaults()


class TestCreateAppComponents:
    """Tests for wiring a session from settings."""

    def test_settings_drive_capacity_and_rates(self, data_file, write_data):
        write_data("Eagle,40,slip,23,0")
        settings = MarinaSettings(slip_rate=Decimal("1.00"), max_boats=5)
        session = create_app_components(data_file, settings)
        session.start()
        assert session.registry.capacity == 5
        session.accrue_month()
        assert session.registry.find("Eagle").amount_owed == Decimal("40.00")

    def test_audit_file_from_settings(self, data_file, tmp_path):
        audit_path = tmp_path / "audit.jsonl"
        settings = MarinaSettings(audit_log_path=str(audit_path), save_attempts=1)
        session = create_app_components(data_file, settings)
        session.start()
        session.add_line("Eagle,40,slip,23,0")
        session.finish()

        lines = audit_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert '"boat_added"' in lines[0]
        assert '"inventory_saved"' in lines[1]

    def test_settings_from_environment(self, monkeypatch, data_file):
        monkeypatch.setenv("MARINA_MAX_BOATS", "3")
        session = create_app_components(data_file, MarinaSettings())
        session.start()
        assert session.registry.capacity == 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""
Main Orchestrator for Marina

This module ties together the registry, the storage and the audit trail
and defines the session flow:
1. Start   (data file -> registry)
2. Command (add / remove / pay / month / inventory, any number of times)
3. Finish  (registry -> data file)

DESIGN DECISION: The orchestrator is the only place that audits.
Registry and storage stay ignorant of the audit trail; every error they
raise is audited here and then re-raised unchanged for the console to
report.
"""

from decimal import Decimal
from pathlib import Path
from typing import Optional, Union
from uuid import UUID

from marina.audit import AuditLogger, create_session_id
from marina.config import MarinaSettings, get_settings
from marina.models.audit import AuditEventBuilder
from marina.models.boat import BoatRecord, format_amount
from marina.registry import (
    BoatRegistry,
    CapacityExceededError,
    ParseError,
    RegistryError,
)
from marina.storage import (
    BoatStorageInterface,
    FileOpenError,
    FlatFileBoatStorage,
    JsonLinesAuditStorage,
    LoadReport,
)


class MarinaSession:
    """
    One run of the inventory manager against one data file.

    Flow:
    1. start()  -> load the data file (missing file means empty marina)
    2. add_line / remove / pay / accrue_month / inventory
    3. finish() -> write the data file once

    There is no autosave: nothing reaches the file before finish().
    """

    def __init__(
        self,
        storage: BoatStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        session_id: Optional[UUID] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._session_id = session_id or create_session_id()
        self._registry: Optional[BoatRegistry] = None
        self._load_report: Optional[LoadReport] = None

    @property
    def session_id(self) -> UUID:
        return self._session_id

    @property
    def registry(self) -> BoatRegistry:
        if self._registry is None:
            raise RuntimeError("Session has not been started")
        return self._registry

    @property
    def load_report(self) -> Optional[LoadReport]:
        return self._load_report

    def start(self) -> LoadReport:
        """Load the inventory. Returns what the load found."""
        registry, report = self._storage.load()
        self._registry = registry
        self._load_report = report

        if report.opened:
            self._audit_logger.log(AuditEventBuilder.inventory_loaded(
                path=report.source,
                boat_count=report.loaded,
                rejected_lines=len(report.rejected),
                session_id=self._session_id,
            ))
        return report

    def add_line(self, line: str) -> BoatRecord:
        """
        Parse one line of boat data and add the boat.

        Raises:
            CapacityExceededError, ParseError
        """
        try:
            record = self.registry.parse_and_add(line)
        except (CapacityExceededError, ParseError) as e:
            self._audit_logger.log(AuditEventBuilder.add_rejected(
                line=line,
                reason=str(e),
                session_id=self._session_id,
            ))
            raise

        self._audit_logger.log(AuditEventBuilder.boat_added(
            boat_name=record.name,
            record=record.to_log_dict(),
            session_id=self._session_id,
        ))
        return record

    def remove(self, name: str) -> BoatRecord:
        """
        Remove a boat by name.

        Raises:
            BoatNotFoundError
        """
        try:
            removed = self.registry.remove(name)
        except RegistryError as e:
            self._audit_logger.log(AuditEventBuilder.remove_rejected(
                boat_name=name,
                reason=str(e),
                session_id=self._session_id,
            ))
            raise

        self._audit_logger.log(AuditEventBuilder.boat_removed(
            boat_name=removed.name,
            session_id=self._session_id,
        ))
        return removed

    def pay(self, name: str, amount: Decimal) -> BoatRecord:
        """
        Apply a payment to a boat's balance.

        Raises:
            BoatNotFoundError, InvalidPaymentError, OverpaymentError
        """
        try:
            record = self.registry.apply_payment(name, amount)
        except RegistryError as e:
            self._audit_logger.log(AuditEventBuilder.payment_rejected(
                boat_name=name,
                amount=str(amount),
                reason=str(e),
                session_id=self._session_id,
            ))
            raise

        self._audit_logger.log(AuditEventBuilder.payment_applied(
            boat_name=record.name,
            amount=format_amount(amount),
            balance=format_amount(record.amount_owed),
            session_id=self._session_id,
        ))
        return record

    def accrue_month(self) -> Decimal:
        """Charge every boat one month of fees. Returns the total charged."""
        total = self.registry.accrue_monthly_charges()
        self._audit_logger.log(AuditEventBuilder.monthly_charges_accrued(
            boat_count=len(self.registry),
            total_charged=format_amount(total),
            session_id=self._session_id,
        ))
        return total

    def inventory(self) -> list[BoatRecord]:
        """All boats, name-sorted."""
        return self.registry.list_sorted()

    def finish(self) -> int:
        """
        Write the inventory back to storage.

        Returns the number of boats written.

        Raises:
            FileOpenError: If the data file cannot be written. The registry
                           is left untouched so the caller may retry.
        """
        try:
            written = self._storage.save(self.registry)
        except FileOpenError as e:
            self._audit_logger.log(AuditEventBuilder.save_failed(
                path=e.path,
                error_message=str(e),
                session_id=self._session_id,
            ))
            raise

        self._audit_logger.log(AuditEventBuilder.inventory_saved(
            path=str(getattr(self._storage, "path", "storage")),
            boat_count=written,
            session_id=self._session_id,
        ))
        return written


def create_app_components(
    data_path: Union[str, Path],
    settings: Optional[MarinaSettings] = None,
) -> MarinaSession:
    """
    Create a session wired up from settings.

    Args:
        data_path: The inventory data file.
        settings: Overrides the cached settings (mainly for tests).
    """
    settings = settings or get_settings()

    def registry_factory() -> BoatRegistry:
        return BoatRegistry(
            capacity=settings.max_boats,
            rates=settings.rate_table(),
        )

    storage = FlatFileBoatStorage(
        data_path,
        registry_factory=registry_factory,
        save_attempts=settings.save_attempts,
    )

    audit_storage = None
    if settings.audit_log_path:
        audit_storage = JsonLinesAuditStorage(settings.audit_log_path)

    return MarinaSession(
        storage=storage,
        audit_logger=AuditLogger(storage=audit_storage),
    )

"""
Audit Models for Marina

Every significant change to the inventory is logged for audit purposes.
This provides:
1. Traceability of who owed what, and when it changed
2. Debugging information when a data file looks wrong
3. Ability to reconstruct a session from its events

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every registry mutation and every persistence step has its own event type.
    """
    # Inventory changes
    BOAT_ADDED = "boat_added"
    ADD_REJECTED = "add_rejected"
    BOAT_REMOVED = "boat_removed"
    REMOVE_REJECTED = "remove_rejected"

    # Billing
    PAYMENT_APPLIED = "payment_applied"
    PAYMENT_REJECTED = "payment_rejected"
    MONTHLY_CHARGES_ACCRUED = "monthly_charges_accrued"

    # Persistence
    INVENTORY_LOADED = "inventory_loaded"
    INVENTORY_SAVED = "inventory_saved"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which boat is this about?
    boat_name: Optional[str] = Field(
        default=None,
        description="Name of the boat this event relates to"
    )

    # Correlation - every event of one console session shares this
    session_id: Optional[UUID] = Field(
        default=None,
        description="ID of the session that produced the event"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a menu command?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "boat_name": self.boat_name,
            "session_id": str(self.session_id) if self.session_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_json_line(self) -> str:
        """Serialize as one line of a JSON-lines audit file."""
        return json.dumps(self.to_log_dict(), sort_keys=True)


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.boat_added("Eagle", record_dict, session_id)
        event = AuditEventBuilder.payment_applied("Eagle", "100.00", "1400.00", session_id)
    """

    @staticmethod
    def boat_added(
        boat_name: str,
        record: dict,
        session_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BOAT_ADDED,
            boat_name=boat_name,
            session_id=session_id,
            description=f"Boat added: {boat_name}",
            details=record,
            is_user_action=True,
        )

    @staticmethod
    def add_rejected(
        line: str,
        reason: str,
        session_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADD_REJECTED,
            severity=AuditSeverity.WARNING,
            session_id=session_id,
            description="Boat data rejected",
            details={"line": line},
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def boat_removed(
        boat_name: str,
        session_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BOAT_REMOVED,
            boat_name=boat_name,
            session_id=session_id,
            description=f"Boat removed: {boat_name}",
            is_user_action=True,
        )

    @staticmethod
    def remove_rejected(
        boat_name: str,
        reason: str,
        session_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMOVE_REJECTED,
            severity=AuditSeverity.WARNING,
            boat_name=boat_name,
            session_id=session_id,
            description=f"Could not remove boat: {boat_name}",
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def payment_applied(
        boat_name: str,
        amount: str,
        balance: str,
        session_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_APPLIED,
            boat_name=boat_name,
            session_id=session_id,
            description=f"Payment received: {boat_name} - ${amount}",
            details={
                "amount": amount,
                "balance": balance,
            },
            is_user_action=True,
        )

    @staticmethod
    def payment_rejected(
        boat_name: str,
        amount: str,
        reason: str,
        session_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_REJECTED,
            severity=AuditSeverity.WARNING,
            boat_name=boat_name,
            session_id=session_id,
            description=f"Payment rejected: {boat_name} - ${amount}",
            details={"amount": amount},
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def monthly_charges_accrued(
        boat_count: int,
        total_charged: str,
        session_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTHLY_CHARGES_ACCRUED,
            session_id=session_id,
            description=f"Monthly charges accrued for {boat_count} boats",
            details={
                "boat_count": boat_count,
                "total_charged": total_charged,
            },
            is_user_action=True,
        )

    @staticmethod
    def inventory_loaded(
        path: str,
        boat_count: int,
        rejected_lines: int,
        session_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVENTORY_LOADED,
            severity=AuditSeverity.WARNING if rejected_lines else AuditSeverity.INFO,
            session_id=session_id,
            description=f"Loaded {boat_count} boats from {path}",
            details={
                "path": path,
                "boat_count": boat_count,
                "rejected_lines": rejected_lines,
            },
        )

    @staticmethod
    def inventory_saved(
        path: str,
        boat_count: int,
        session_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVENTORY_SAVED,
            session_id=session_id,
            description=f"Saved {boat_count} boats to {path}",
            details={
                "path": path,
                "boat_count": boat_count,
            },
        )

    @staticmethod
    def save_failed(
        path: str,
        error_message: str,
        session_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            session_id=session_id,
            description=f"Could not save inventory to {path}",
            details={"path": path},
            error_message=error_message,
        )


"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the flat file for a real database later
2. Use in-memory storage for testing
3. Keep registry logic decoupled from file formats

The interface is intentionally simple - the whole inventory is read once
at startup and written once at exit.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from marina.models.audit import AuditEvent
from marina.registry import BoatRegistry


class LoadReport(BaseModel):
    """What happened while the inventory was being loaded."""

    source: str = Field(
        ...,
        description="Where the inventory was read from"
    )
    opened: bool = Field(
        ...,
        description="False when the source could not be opened (fresh database)"
    )
    loaded: int = Field(
        default=0,
        ge=0,
        description="Number of boats loaded"
    )
    rejected: list[str] = Field(
        default_factory=list,
        description="Reasons for every line that could not be loaded"
    )


class BoatStorageInterface(ABC):
    """
    Abstract interface for inventory storage.

    Any storage implementation (flat file, SQLite, etc.)
    must implement these methods.
    """

    @abstractmethod
    def load(self) -> tuple[BoatRegistry, LoadReport]:
        """
        Read the whole inventory into a new registry.

        A source that cannot be opened yields an empty registry and a
        report with opened=False. It is not an error.

        Returns:
            (registry, report)
        """
        pass

    @abstractmethod
    def save(self, registry: BoatRegistry) -> int:
        """
        Replace the stored inventory with the registry's contents.

        Args:
            registry: The registry to write, in its insertion order

        Returns:
            Number of boats written

        Raises:
            FileOpenError: If the destination cannot be written
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class FileOpenError(StorageError):
    """A data or audit file could not be opened."""

    def __init__(self, path: str, mode: str, reason: str):
        self.path = path
        self.mode = mode
        self.reason = reason
        super().__init__(f"Error opening file {path} for {mode}: {reason}")

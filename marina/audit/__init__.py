"""Audit logging package."""

from marina.audit.logger import AuditLogger, configure_logging, create_session_id

__all__ = ["AuditLogger", "configure_logging", "create_session_id"]

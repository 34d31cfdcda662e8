"""
Data Models Package

This package contains all Pydantic models used by Marina.
Every boat record and audit event must conform to these schemas.
"""

from marina.models.boat import (
    MAX_BOAT_NAME_LENGTH,
    MAX_LICENSE_LENGTH,
    BoatRecord,
    LandDetail,
    NoDetail,
    PlacementDetail,
    PlacementKind,
    SlipDetail,
    StorageDetail,
    TrailorDetail,
    build_record,
    format_amount,
    parse_detail,
    parse_placement,
    placement_to_string,
)
from marina.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Boat models
    "MAX_BOAT_NAME_LENGTH",
    "MAX_LICENSE_LENGTH",
    "BoatRecord",
    "LandDetail",
    "NoDetail",
    "PlacementDetail",
    "PlacementKind",
    "SlipDetail",
    "StorageDetail",
    "TrailorDetail",
    "build_record",
    "format_amount",
    "parse_detail",
    "parse_placement",
    "placement_to_string",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

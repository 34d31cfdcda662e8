"""
Storage Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a flat text file for the inventory and a JSON-lines
file for the audit trail, but designed to be swappable.
"""

from marina.storage.interface import (
    AuditStorageInterface,
    BoatStorageInterface,
    FileOpenError,
    LoadReport,
    StorageError,
)
from marina.storage.flat_file import FlatFileBoatStorage, record_to_line
from marina.storage.audit_file import JsonLinesAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "BoatStorageInterface",
    "LoadReport",
    # Exceptions
    "FileOpenError",
    "StorageError",
    # Implementations
    "FlatFileBoatStorage",
    "JsonLinesAuditStorage",
    "record_to_line",
]

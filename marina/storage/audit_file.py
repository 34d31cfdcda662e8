"""
JSON-lines Audit Storage

Each audit event is appended to a text file as one JSON object per line.
The file is opened for every append so an interrupted session still leaves
every earlier event on disk.
"""

import json
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from marina.models.audit import AuditEvent
from marina.storage.interface import AuditStorageInterface, FileOpenError


class JsonLinesAuditStorage(AuditStorageInterface):
    """Append-only audit log kept in a JSON-lines file."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def append_event(self, event: AuditEvent) -> bool:
        try:
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(event.to_json_line() + "\n")
        except OSError as e:
            raise FileOpenError(str(self._path), "appending", str(e))
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        if not self._path.exists():
            return []

        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise FileOpenError(str(self._path), "reading", str(e))

        events = []
        for line in reversed(lines):
            if len(events) >= limit:
                break
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate(json.loads(line)))
            except (json.JSONDecodeError, ValidationError):
                # Skip damaged lines rather than hide the rest of the trail
                continue
        return events

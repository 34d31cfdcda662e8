"""
Flat File Storage Implementation

DESIGN DECISION: The inventory lives in a plain comma-delimited text file
because:
1. It can be read and fixed by hand in any editor
2. No database setup required
3. The whole marina fits in memory many times over

TRADEOFFS:
- No quoting, so names cannot contain commas
- No transactions (the file is rewritten in one go at exit)
- No header row or version marker

Each line is: name,length,placement,detail,amount_owed
"""

from pathlib import Path
from typing import Callable, Optional, Union

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from marina.config import get_settings
from marina.models.boat import (
    BoatRecord,
    PlacementKind,
    format_amount,
    placement_to_string,
)
from marina.registry import BoatRegistry, RegistryError
from marina.storage.interface import (
    BoatStorageInterface,
    FileOpenError,
    LoadReport,
)


logger = structlog.get_logger(__name__)


def record_to_line(record: BoatRecord) -> str:
    """Convert a BoatRecord to one line of the data file (without newline)."""
    return ",".join([
        record.name,
        str(record.length),
        placement_to_string(record.placement),
        record.detail.to_field(),
        format_amount(record.amount_owed),
    ])


class FlatFileBoatStorage(BoatStorageInterface):
    """
    Flat-file implementation of inventory storage.

    One boat per line, no header. Blank lines are ignored on load.
    Lines that cannot be parsed are reported and skipped; the rest of the
    file still loads.
    """

    def __init__(
        self,
        path: Union[str, Path],
        registry_factory: Optional[Callable[[], BoatRegistry]] = None,
        save_attempts: Optional[int] = None,
    ):
        """
        Args:
            path: Location of the data file.
            registry_factory: Builds the empty registry that load() fills.
            save_attempts: Write attempts before giving up.
                           Defaults to settings.save_attempts.
        """
        self._path = Path(path)
        self._registry_factory = registry_factory or BoatRegistry
        self._save_attempts = (
            save_attempts if save_attempts is not None
            else get_settings().save_attempts
        )

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> tuple[BoatRegistry, LoadReport]:
        registry = self._registry_factory()
        source = str(self._path)

        try:
            handle = self._path.open("r", encoding="utf-8", errors="replace")
        except OSError as e:
            logger.info("data_file_unavailable", path=source, error=str(e))
            return registry, LoadReport(source=source, opened=False)

        rejected: list[str] = []
        with handle:
            for line_number, line in enumerate(handle, start=1):
                line = line.rstrip("\r\n")
                if not line.strip():
                    continue
                try:
                    registry.parse_and_add(line)
                except RegistryError as e:
                    logger.warning(
                        "line_rejected",
                        path=source,
                        line_number=line_number,
                        error=str(e),
                    )
                    rejected.append(f"line {line_number}: {e}")

        report = LoadReport(
            source=source,
            opened=True,
            loaded=len(registry),
            rejected=rejected,
        )
        logger.info("inventory_loaded", path=source, boats=report.loaded)
        return registry, report

    def save(self, registry: BoatRegistry) -> int:
        lines = []
        for record in registry:
            if record.placement == PlacementKind.UNKNOWN:
                logger.warning("unknown_placement_not_saved", name=record.name)
                continue
            lines.append(record_to_line(record) + "\n")

        retrying = Retrying(
            stop=stop_after_attempt(self._save_attempts),
            wait=wait_exponential(multiplier=0.1, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            retrying(self._write_lines, lines)
        except OSError as e:
            logger.error("data_file_write_failed", path=str(self._path), error=str(e))
            raise FileOpenError(str(self._path), "writing", str(e))

        logger.info("inventory_saved", path=str(self._path), boats=len(lines))
        return len(lines)

    def _write_lines(self, lines: list[str]) -> None:
        with self._path.open("w", encoding="utf-8") as handle:
            handle.writelines(lines)

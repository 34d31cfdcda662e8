"""
Configuration Management for Marina

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Capacity, monthly rates and logging behaviour are read once at startup
and validated before the first prompt is shown.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from marina.models.boat import PlacementKind


class MarinaSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from MARINA_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MARINA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Capacity
    max_boats: int = Field(
        default=120,
        ge=1,
        description="Maximum number of boats the marina can hold"
    )

    # Monthly rates, per foot of boat length
    slip_rate: Decimal = Field(
        default=Decimal("12.50"),
        ge=0,
        description="Monthly rate per foot for boats in a slip"
    )
    land_rate: Decimal = Field(
        default=Decimal("14.00"),
        ge=0,
        description="Monthly rate per foot for boats on land"
    )
    trailor_rate: Decimal = Field(
        default=Decimal("25.00"),
        ge=0,
        description="Monthly rate per foot for boats on a trailor"
    )
    storage_rate: Decimal = Field(
        default=Decimal("11.20"),
        ge=0,
        description="Monthly rate per foot for boats in storage"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Minimum level for diagnostic logs (written to stderr)"
    )
    log_json: bool = Field(
        default=True,
        description="Render diagnostic logs as JSON instead of console text"
    )

    # Audit trail
    audit_log_path: Optional[str] = Field(
        default=None,
        description="JSON-lines file to append audit events to"
    )

    # Persistence
    save_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times to try writing the data file before giving up"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {allowed}")
        return v.upper()

    def rate_table(self) -> dict[PlacementKind, Decimal]:
        """Monthly per-foot rate for every placement kind."""
        return {
            PlacementKind.SLIP: self.slip_rate,
            PlacementKind.LAND: self.land_rate,
            PlacementKind.TRAILOR: self.trailor_rate,
            PlacementKind.STORAGE: self.storage_rate,
            PlacementKind.UNKNOWN: Decimal("0"),
        }


@lru_cache()
def get_settings() -> MarinaSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return MarinaSettings()

"""Configuration package."""

from marina.config.settings import (
    MarinaSettings,
    get_settings,
)

__all__ = [
    "MarinaSettings",
    "get_settings",
]

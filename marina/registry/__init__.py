"""Boat registry package."""

from marina.registry.errors import (
    BoatNotFoundError,
    CapacityExceededError,
    InvalidPaymentError,
    OverpaymentError,
    ParseError,
    RegistryError,
)
from marina.registry.registry import BoatRegistry

__all__ = [
    "BoatRegistry",
    # Exceptions
    "BoatNotFoundError",
    "CapacityExceededError",
    "InvalidPaymentError",
    "OverpaymentError",
    "ParseError",
    "RegistryError",
]

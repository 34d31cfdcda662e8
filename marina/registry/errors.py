"""
Registry Exceptions

Every failure of a registry operation is one of these.
They carry the message shown to the person at the console.
"""

from decimal import Decimal

from marina.models.boat import format_amount


class RegistryError(Exception):
    """Base exception for registry operations."""
    pass


class CapacityExceededError(RegistryError):
    """The marina already holds the maximum number of boats."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__("Marina is full, cannot add more boats.")


class ParseError(RegistryError):
    """A line of boat data is malformed (missing field or bad number)."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Invalid boat data ({reason}): {line}")


class BoatNotFoundError(RegistryError):
    """No boat matches the given name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__("No boat with that name")


class OverpaymentError(RegistryError):
    """Payment is larger than the boat's balance."""

    def __init__(self, name: str, amount: Decimal, balance: Decimal):
        self.name = name
        self.amount = amount
        self.balance = balance
        super().__init__(
            f"That is more than the amount owed, ${format_amount(balance)}"
        )


class InvalidPaymentError(RegistryError):
    """Payment amount is not a finite number (NaN or infinity)."""

    def __init__(self, amount: Decimal):
        self.amount = amount
        super().__init__(f"Invalid payment amount: {amount}")

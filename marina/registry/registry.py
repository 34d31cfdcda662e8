"""
Boat Registry

DESIGN DECISION: The registry keeps boats in insertion order and sorts
only on demand. The inventory listing is always name-sorted, while the
data file is written in insertion order. That asymmetry is kept on purpose:
saving never reorders the file.

GUARANTEES:
- Never holds more than `capacity` boats
- A failed operation leaves the registry exactly as it was
- Records are owned by the registry; `add` stores its own copy
"""

from decimal import Decimal, InvalidOperation
from typing import Iterator, Optional

import structlog
from pydantic import ValidationError

from marina.config import get_settings
from marina.models.boat import (
    BoatRecord,
    PlacementKind,
    build_record,
    parse_placement,
)
from marina.registry.errors import (
    BoatNotFoundError,
    CapacityExceededError,
    InvalidPaymentError,
    OverpaymentError,
    ParseError,
)


FIELD_SEPARATOR = ","
FIELD_COUNT = 5

logger = structlog.get_logger(__name__)


class BoatRegistry:
    """
    In-memory collection of every boat at the marina.

    Lookups are case-insensitive exact matches on the boat name and the
    first match in insertion order wins.
    """

    def __init__(
        self,
        capacity: Optional[int] = None,
        rates: Optional[dict[PlacementKind, Decimal]] = None,
    ):
        """
        Initialize an empty registry.

        Args:
            capacity: Maximum number of boats. Defaults to settings.max_boats.
            rates: Monthly per-foot rate per placement kind.
                   Defaults to settings.rate_table().
        """
        if capacity is None or rates is None:
            settings = get_settings()
            capacity = capacity if capacity is not None else settings.max_boats
            rates = rates if rates is not None else settings.rate_table()
        self._capacity = capacity
        self._rates = rates
        self._boats: list[BoatRecord] = []

    def __len__(self) -> int:
        return len(self._boats)

    def __iter__(self) -> Iterator[BoatRecord]:
        """Iterate in insertion order (the order the data file is written in)."""
        return iter(list(self._boats))

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._boats) >= self._capacity

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, record: BoatRecord) -> BoatRecord:
        """
        Add a boat to the registry.

        Returns the registry's own copy of the record.

        Raises:
            CapacityExceededError: If the registry is already full.
        """
        if self.is_full:
            raise CapacityExceededError(self._capacity)

        stored = record.model_copy(deep=True)
        self._boats.append(stored)
        logger.debug("boat_added", **stored.to_log_dict())
        return stored

    def parse_and_add(self, line: str) -> BoatRecord:
        """
        Parse one line of boat data and add it.

        Format: name,length,placement,detail,amount_owed

        Placement text that is not recognised is accepted as UNKNOWN with
        an empty detail. Length and amount are not range-checked.

        Raises:
            CapacityExceededError: If the registry is already full.
            ParseError: If a field is missing or a number cannot be read.
        """
        if self.is_full:
            raise CapacityExceededError(self._capacity)

        fields = line.rstrip("\r\n").split(FIELD_SEPARATOR)
        if len(fields) < FIELD_COUNT:
            raise ParseError(
                line, f"expected {FIELD_COUNT} fields, found {len(fields)}"
            )

        name, length_text, placement_text, detail_text, amount_text = fields[:FIELD_COUNT]

        if not name.strip():
            raise ParseError(line, "missing boat name")

        try:
            length = int(length_text.strip())
        except ValueError:
            raise ParseError(line, f"length '{length_text}' is not a whole number")

        try:
            amount_owed = Decimal(amount_text.strip())
        except InvalidOperation:
            raise ParseError(line, f"amount owed '{amount_text}' is not a number")
        if not amount_owed.is_finite():
            raise ParseError(line, f"amount owed '{amount_text}' is not a number")

        placement = parse_placement(placement_text)
        if placement != PlacementKind.UNKNOWN and not detail_text.strip():
            raise ParseError(line, f"missing {placement.value} detail")

        try:
            record = build_record(
                name=name,
                length=length,
                placement=placement,
                detail_text=detail_text,
                amount_owed=amount_owed,
            )
        except ValidationError as e:
            raise ParseError(line, str(e.errors()[0]["msg"]))

        if placement == PlacementKind.UNKNOWN:
            logger.warning(
                "unknown_placement",
                name=record.name,
                placement_text=placement_text,
            )

        return self.add(record)

    def remove(self, name: str) -> BoatRecord:
        """
        Remove the first boat whose name matches (case-insensitive).

        Returns the removed record.

        Raises:
            BoatNotFoundError: If no boat has that name.
        """
        for index, record in enumerate(self._boats):
            if record.matches(name):
                removed = self._boats.pop(index)
                logger.debug("boat_removed", name=removed.name)
                return removed
        raise BoatNotFoundError(name)

    def apply_payment(self, name: str, amount: Decimal) -> BoatRecord:
        """
        Reduce a boat's balance by a payment.

        The payment is applied in full or not at all. Amounts are not
        range-checked, so a negative payment raises the balance.

        Raises:
            BoatNotFoundError: If no boat has that name.
            InvalidPaymentError: If the amount is not a finite number.
            OverpaymentError: If the amount is larger than the balance.
        """
        record = self.find(name)
        if record is None:
            raise BoatNotFoundError(name)

        if not amount.is_finite():
            raise InvalidPaymentError(amount)

        if amount > record.amount_owed:
            raise OverpaymentError(record.name, amount, record.amount_owed)

        record.amount_owed = record.amount_owed - amount
        return record

    def accrue_monthly_charges(self) -> Decimal:
        """
        Add one month of fees to every boat's balance.

        Each boat is charged length * rate(placement). Boats with UNKNOWN
        placement are charged nothing.

        Returns the total amount charged across all boats.
        """
        total = Decimal("0")
        for record in self._boats:
            charge = record.monthly_charge(self._rates)
            record.amount_owed = record.amount_owed + charge
            total += charge
        logger.debug("monthly_charges_accrued", boats=len(self._boats), total=str(total))
        return total

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def find(self, name: str) -> Optional[BoatRecord]:
        """First boat whose name matches (case-insensitive), or None."""
        for record in self._boats:
            if record.matches(name):
                return record
        return None

    def list_sorted(self) -> list[BoatRecord]:
        """All boats ordered by name, case-insensitive. Ties keep insertion order."""
        return sorted(self._boats, key=lambda record: record.name_key)

    def total_owed(self) -> Decimal:
        """Sum of every boat's balance."""
        return sum((record.amount_owed for record in self._boats), Decimal("0"))

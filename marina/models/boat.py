"""
Core Boat Models for Marina

These models define the schema of every record kept in the inventory.
They are designed to:
1. Make a placement/detail mismatch impossible to construct
2. Keep money exact (Decimal, never float)
3. Render back to the flat-file and console formats without loss

DESIGN DECISION: Placement detail is a discriminated union keyed by the
placement kind. A slip boat carries a slip number and nothing else, a land
boat carries a bay letter and nothing else, and so on.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


MAX_BOAT_NAME_LENGTH = 127
MAX_LICENSE_LENGTH = 15

_CENTS = Decimal("0.01")
_FIELD_DELIMITERS = (",", "\n", "\r")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class PlacementKind(str, Enum):
    """
    Where a boat is kept.

    UNKNOWN is a parse-recovery sentinel for unrecognised placement text.
    It is never written back to the data file.
    """
    SLIP = "slip"
    LAND = "land"
    TRAILOR = "trailor"
    STORAGE = "storage"
    UNKNOWN = "unknown"


def placement_to_string(kind: PlacementKind) -> str:
    """Return the literal used for a placement kind in files and on screen."""
    return kind.value


def parse_placement(text: str) -> PlacementKind:
    """
    Case-insensitive lookup of a placement kind.

    Anything that is not slip/land/trailor/storage maps to UNKNOWN.
    Never raises.
    """
    candidate = text.strip().lower()
    for kind in (
        PlacementKind.SLIP,
        PlacementKind.LAND,
        PlacementKind.TRAILOR,
        PlacementKind.STORAGE,
    ):
        if candidate == kind.value:
            return kind
    return PlacementKind.UNKNOWN


def format_amount(amount: Decimal) -> str:
    """
    Render a currency amount with exactly two fraction digits.

    Precision is widened to fit the amount, so balances of any size keep
    every integer digit.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        ctx.Emax = max(ctx.Emax, amount.adjusted() + 1)
        return str(amount.quantize(_CENTS, rounding=ROUND_HALF_UP))


def reject_field_delimiters(value: str) -> str:
    """Text fields end up in a comma-separated line and must not split it."""
    if any(delimiter in value for delimiter in _FIELD_DELIMITERS):
        raise ValueError("must not contain commas or line breaks")
    return value


def leading_int(text: str) -> int:
    """
    Integer value of the leading digits of text, or 0 if there are none.

    Used for slip and storage numbers, which historically were read
    leniently ("12b" is slip 12, "abc" is slip 0).
    """
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


# =============================================================================
# PLACEMENT DETAIL VARIANTS
# =============================================================================

class SlipDetail(BaseModel):
    """Boat moored in a numbered slip."""
    kind: Literal[PlacementKind.SLIP] = PlacementKind.SLIP
    slip_number: int

    def to_field(self) -> str:
        return str(self.slip_number)

    def describe(self) -> str:
        return f"   slip   # {self.slip_number}   "


class LandDetail(BaseModel):
    """Boat kept on land in a lettered bay."""
    model_config = ConfigDict(str_strip_whitespace=True)

    kind: Literal[PlacementKind.LAND] = PlacementKind.LAND
    bay_letter: str = Field(
        ...,
        min_length=1,
        max_length=1,
        description="Single character bay identifier (normally A-Z)"
    )

    def to_field(self) -> str:
        return self.bay_letter

    def describe(self) -> str:
        return f"  land      {self.bay_letter}   "


class TrailorDetail(BaseModel):
    """Boat kept on a trailor, identified by the trailor's license plate."""
    model_config = ConfigDict(str_strip_whitespace=True)

    kind: Literal[PlacementKind.TRAILOR] = PlacementKind.TRAILOR
    license: str = Field(
        ...,
        min_length=1,
        max_length=MAX_LICENSE_LENGTH,
        description="Trailor license plate"
    )

    @field_validator("license")
    @classmethod
    def validate_license_fits_line(cls, v: str) -> str:
        return reject_field_delimiters(v)

    def to_field(self) -> str:
        return self.license

    def describe(self) -> str:
        return f"trailor {self.license}   "


class StorageDetail(BaseModel):
    """Boat kept in a numbered storage bay."""
    kind: Literal[PlacementKind.STORAGE] = PlacementKind.STORAGE
    storage_number: int

    def to_field(self) -> str:
        return str(self.storage_number)

    def describe(self) -> str:
        return f"storage   # {self.storage_number}   "


class NoDetail(BaseModel):
    """Empty detail carried by records whose placement text was not recognised."""
    kind: Literal[PlacementKind.UNKNOWN] = PlacementKind.UNKNOWN

    def to_field(self) -> str:
        return ""

    def describe(self) -> str:
        return "unknown           "


PlacementDetail = Annotated[
    Union[SlipDetail, LandDetail, TrailorDetail, StorageDetail, NoDetail],
    Field(discriminator="kind"),
]


def parse_detail(kind: PlacementKind, text: str) -> PlacementDetail:
    """
    Build the detail variant for a placement kind from its file text.

    Slip and storage numbers use the leading digits of the text, the bay
    letter is the first character, and the license is cut to
    MAX_LICENSE_LENGTH characters. UNKNOWN ignores the text entirely.

    Raises:
        ValueError: If a land bay or trailor license is empty.
    """
    if kind == PlacementKind.SLIP:
        return SlipDetail(slip_number=leading_int(text))
    if kind == PlacementKind.LAND:
        return LandDetail(bay_letter=text.strip()[:1])
    if kind == PlacementKind.TRAILOR:
        return TrailorDetail(license=text.strip()[:MAX_LICENSE_LENGTH])
    if kind == PlacementKind.STORAGE:
        return StorageDetail(storage_number=leading_int(text))
    return NoDetail()


# =============================================================================
# CORE BOAT MODEL
# =============================================================================

class BoatRecord(BaseModel):
    """
    A single boat in the inventory.

    The name is the lookup key: it is compared case-insensitively and the
    first match wins. Records are mutated in place by payments and monthly
    accrual; validate_assignment keeps them valid while that happens.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_BOAT_NAME_LENGTH,
        description="Boat name (display identity)"
    )
    length: int = Field(
        ...,
        description="Boat length in feet"
    )
    placement: PlacementKind = Field(
        ...,
        description="Where the boat is kept"
    )
    detail: PlacementDetail = Field(
        ...,
        description="Placement-specific detail, matching placement"
    )
    amount_owed: Decimal = Field(
        default=Decimal("0"),
        description="Outstanding balance owed to the marina"
    )

    @field_validator("name")
    @classmethod
    def validate_name_fits_line(cls, v: str) -> str:
        """The name is written as the first field of a data file line."""
        return reject_field_delimiters(v)

    @model_validator(mode='after')
    def validate_detail_matches_placement(self) -> 'BoatRecord':
        """The detail variant must belong to the record's placement kind."""
        if self.detail.kind != self.placement:
            raise ValueError(
                f"Placement detail '{self.detail.kind.value}' does not match "
                f"placement '{self.placement.value}'"
            )
        return self

    @property
    def name_key(self) -> str:
        """Case-folded name used for sorting and lookup."""
        return self.name.lower()

    def matches(self, name: str) -> bool:
        """Case-insensitive exact name comparison."""
        return self.name_key == name.strip().lower()

    def monthly_charge(self, rates: dict[PlacementKind, Decimal]) -> Decimal:
        """One month of fees for this boat under the given rate table."""
        return self.length * rates.get(self.placement, Decimal("0"))

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "name": self.name,
            "length": self.length,
            "placement": self.placement.value,
            "detail": self.detail.to_field(),
            "amount_owed": format_amount(self.amount_owed),
        }


def build_record(
    name: str,
    length: int,
    placement: PlacementKind,
    detail_text: str,
    amount_owed: Decimal,
) -> BoatRecord:
    """
    Convenience constructor that derives the detail from its text form.

    The name is cut to MAX_BOAT_NAME_LENGTH characters.
    """
    return BoatRecord(
        name=name.strip()[:MAX_BOAT_NAME_LENGTH],
        length=length,
        placement=placement,
        detail=parse_detail(placement, detail_text),
        amount_owed=amount_owed,
    )

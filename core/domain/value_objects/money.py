"""
Money conversion helpers.

The commerce system sends every amount as an integer count of
minor units (cents). Conversion to a decimal happens exactly once,
when a payload is mapped into a domain object.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


MINOR_UNITS_PER_MAJOR = 100
CENT = Decimal("0.01")


def from_minor_units(amount: Any) -> Optional[Decimal]:
    """
    Convert an integer minor-unit amount to a 2-place Decimal.

    Returns None when the amount is missing or not an integer value.
    """
    if amount is None or isinstance(amount, bool):
        return None
    try:
        minor = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return None
    if minor != minor.to_integral_value():
        return None
    return (minor / MINOR_UNITS_PER_MAJOR).quantize(CENT)


def amounts_match(expected: Optional[Decimal], actual: Optional[Decimal], tolerance: Decimal) -> bool:
    """Compare two currency amounts with an absolute tolerance."""
    if expected is None or actual is None:
        return expected is None and actual is None
    return abs(Decimal(expected) - Decimal(actual)) < tolerance

"""Domain value objects."""

from .money import CENT, MINOR_UNITS_PER_MAJOR, amounts_match, from_minor_units
from .timestamps import ensure_utc, parse_timestamp, utcnow

__all__ = [
    "CENT",
    "MINOR_UNITS_PER_MAJOR",
    "amounts_match",
    "ensure_utc",
    "from_minor_units",
    "parse_timestamp",
    "utcnow",
]

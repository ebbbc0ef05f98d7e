"""Square infrastructure adapter."""

from .client import SquareCommerceClient
from .event_parser import parse_event
from .mapper import SquareMapper

__all__ = ["SquareCommerceClient", "SquareMapper", "parse_event"]

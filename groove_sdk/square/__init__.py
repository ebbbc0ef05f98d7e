from groove_sdk.square.client import SQUARE_PRODUCTION_URL, SQUARE_SANDBOX_URL, SquareAPI
from groove_sdk.square.models import (
    SquareCatalogItem,
    SquareInventoryCount,
    SquareLineItem,
    SquareOrder,
)

__all__ = [
    "SQUARE_PRODUCTION_URL",
    "SQUARE_SANDBOX_URL",
    "SquareAPI",
    "SquareCatalogItem",
    "SquareInventoryCount",
    "SquareLineItem",
    "SquareOrder",
]

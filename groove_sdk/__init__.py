"""Async SDKs for the commerce (Square) and enrichment (Discogs) APIs."""

from groove_sdk.errors import DiscogsAPIError, GrooveSDKError, SquareAPIError

__all__ = ["DiscogsAPIError", "GrooveSDKError", "SquareAPIError"]

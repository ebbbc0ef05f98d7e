from typing import Any, Optional


class GrooveSDKError(Exception):
    """Base error for SDK calls."""


class _HTTPError(GrooveSDKError):
    api_name = "API"

    def __init__(self, status: int, message: str, body: Optional[Any] = None):
        self.status = status
        self.message = message
        self.body = body
        super().__init__(f"{self.api_name} error {status}: {message}")


class SquareAPIError(_HTTPError):
    """Non-2xx response from the Square API."""

    api_name = "Square API"


class DiscogsAPIError(_HTTPError):
    """Non-2xx response from the Discogs API."""

    api_name = "Discogs API"

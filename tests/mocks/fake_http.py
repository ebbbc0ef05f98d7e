"""Scripted stand-in for aiohttp.ClientSession used by SDK tests."""
from typing import Any, Dict, List, Optional, Tuple


class FakeResponse:

    def __init__(self, status: int, body: Any):
        self.status = status
        self.reason = "Not Found" if status == 404 else "OK"
        self._body = body

    async def json(self, content_type=None):
        return self._body

    async def text(self):
        return str(self._body)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """
    Answers requests from a queue of (status, body) tuples and records
    every call as a dict.
    """

    def __init__(self, responses: List[Tuple[int, Any]]):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def request(self, method: str, url: str, headers=None, params=None, json=None):
        self.calls.append({"method": method, "url": url, "headers": headers, "params": params, "json": json})
        status, body = self.responses.pop(0)
        return FakeResponse(status, body)

    def get(self, url: str, headers=None, params=None):
        return self.request("GET", url, headers=headers, params=params)

    def last(self) -> Optional[Dict[str, Any]]:
        return self.calls[-1] if self.calls else None

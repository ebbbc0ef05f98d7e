from groove_sdk.logging import get_logger
from groove_sdk.errors import DiscogsAPIError
logger = get_logger("DiscogsAPI")

# ====================== ⚙️ DISCOGS API ======================
from typing import Any, Dict, List, Optional

import aiohttp

from groove_sdk.discogs.models import DiscogsRelease, DiscogsSearchResult
from groove_sdk.discogs.parsers import parse_release, parse_search_result


DISCOGS_API_BASE = "https://api.discogs.com"
SEARCH_PAGE_SIZE = 10


class DiscogsAPI:
    """
    Minimal Discogs database client: release search and release lookup.

    Rate limiting is the caller's concern; every method issues exactly
    one request.
    """

    def __init__(
        self,
        user_token: str,
        user_agent: str,
        base_url: str = DISCOGS_API_BASE,
        timeout_seconds: float = 15.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        if not user_token:
            raise ValueError("Discogs user token is required")
        self.user_agent = user_agent
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._user_token = user_token
        self._session = session

    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Authorization": f"Discogs token={self._user_token}",
            "Accept": "application/json",
        }

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if self._session is not None:
            return await self._send(self._session, path, params)
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            return await self._send(session, path, params)

    async def _send(self, session: aiohttp.ClientSession, path: str, params) -> Dict[str, Any]:
        async with session.get(
            f"{self.base_url}{path}", headers=self._headers(), params=params
        ) as response:
            if response.status >= 400:
                text = await response.text()
                logger.error(f"❌ GET {path} failed [{response.status}]: {text[:200]}")
                raise DiscogsAPIError(response.status, response.reason or "request failed", text)
            return await response.json(content_type=None) or {}

    async def search(self, query: str) -> List[DiscogsSearchResult]:
        """Release search, best matches first."""
        body = await self._get(
            "/database/search",
            params={"q": query, "type": "release", "per_page": str(SEARCH_PAGE_SIZE)},
        )
        results = (parse_search_result(obj) for obj in body.get("results") or [])
        found = [result for result in results if result is not None]
        logger.info(f"Discogs search '{query}': {len(found)} result(s)")
        return found

    async def get_release(self, release_id: int) -> Optional[DiscogsRelease]:
        try:
            body = await self._get(f"/releases/{int(release_id)}")
        except DiscogsAPIError as e:
            if e.status == 404:
                logger.warning(f"Discogs release not found: {release_id}")
                return None
            raise
        return parse_release(body)

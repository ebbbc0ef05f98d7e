"""
Discogs enrichment client.

Implements IEnrichmentClient over groove_sdk.discogs. Every outbound
request goes through the shared RateLimiter so bursts of catalog
events queue instead of tripping the vendor quota.
"""
import logging
from typing import Optional

from core.application.interfaces import IEnrichmentClient
from core.domain.entities import ReleaseMetadata
from core.infrastructure.concurrency import RateLimiter
from core.settings.modules.discogs_settings import DiscogsSettings
from groove_sdk.discogs import DiscogsAPI, DiscogsRelease, extract_tracklist


logger = logging.getLogger(__name__)


class DiscogsEnrichmentClient(IEnrichmentClient):
    """Search-then-fetch release lookup, first search hit wins."""

    def __init__(self, api: DiscogsAPI, rate_limiter: RateLimiter):
        self.api = api
        self.rate_limiter = rate_limiter

    @classmethod
    def from_settings(cls, settings: DiscogsSettings, rate_limiter: RateLimiter) -> "DiscogsEnrichmentClient":
        api = DiscogsAPI(
            user_token=settings.user_token,
            user_agent=settings.user_agent,
            timeout_seconds=settings.timeout_seconds,
        )
        logger.info(
            f"DiscogsEnrichmentClient initialized ({rate_limiter.requests_per_minute} req/min)"
        )
        return cls(api, rate_limiter)

    async def find_release(self, query: str) -> Optional[ReleaseMetadata]:
        query = (query or "").strip()
        if not query:
            return None

        results = await self.rate_limiter.execute(lambda: self.api.search(query))
        if not results:
            logger.info(f"No Discogs match for '{query}'")
            return None

        best = results[0]
        logger.info(f"Discogs match for '{query}': {best.title} (id={best.id})")

        release = await self.rate_limiter.execute(lambda: self.api.get_release(best.id))
        if release is None:
            return None
        return self._to_metadata(release, fallback_thumb=best.thumb)

    @staticmethod
    def _to_metadata(release: DiscogsRelease, fallback_thumb: Optional[str] = None) -> ReleaseMetadata:
        return ReleaseMetadata(
            release_id=release.id,
            title=release.title,
            year=release.year,
            label=release.label,
            tracklist=tuple(track.to_dict() for track in extract_tracklist(release)),
            thumbnail_url=release.thumb or fallback_thumb,
        )

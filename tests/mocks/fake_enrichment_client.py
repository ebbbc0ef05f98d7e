"""In-memory release lookup keyed by search query."""
from typing import Dict, List, Optional

from core.application.interfaces import IEnrichmentClient
from core.domain.entities import ReleaseMetadata


class FakeEnrichmentClient(IEnrichmentClient):

    def __init__(self):
        self.releases: Dict[str, ReleaseMetadata] = {}
        self.queries: List[str] = []

    async def find_release(self, query: str) -> Optional[ReleaseMetadata]:
        self.queries.append(query)
        return self.releases.get(query)

from groove_sdk.discogs.client import DISCOGS_API_BASE, DiscogsAPI
from groove_sdk.discogs.models import DiscogsRelease, DiscogsSearchResult, DiscogsTrack
from groove_sdk.discogs.parsers import extract_tracklist

__all__ = [
    "DISCOGS_API_BASE",
    "DiscogsAPI",
    "DiscogsRelease",
    "DiscogsSearchResult",
    "DiscogsTrack",
    "extract_tracklist",
]

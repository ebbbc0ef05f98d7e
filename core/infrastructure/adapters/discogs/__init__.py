"""Discogs enrichment adapter."""

from .client import DiscogsEnrichmentClient

__all__ = ["DiscogsEnrichmentClient"]

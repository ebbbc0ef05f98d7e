"""
Enrichment Service.

Looks a music product up in the release database and merges the
release facts into its item detail.
"""
import logging
from core.application.context import SyncContext
from core.application.dtos import EnrichmentResultDTO
from core.domain.entities import ItemDetail
from core.domain.exceptions import EntityNotFoundError
from core.domain.services.attribute_inference import is_music_product, search_query_for


logger = logging.getLogger(__name__)


class EnrichmentService:
    """
    Release metadata enrichment for one catalog item.

    Only items that look like music and have not been enriched yet
    are looked up. The merge goes through the null-preserving detail
    upsert, so a miss never erases anything.
    """

    def __init__(self, context: SyncContext):
        self.context = context

    async def enrich_item(self, item_id: str, force: bool = False) -> EnrichmentResultDTO:
        """
        Enrich one item.

        Args:
            item_id: Mirror item id
            force: Look up again even if the item already carries a release id

        Raises:
            EntityNotFoundError: If the item is not mirrored
        """
        client = self.context.enrichment_client
        if client is None:
            return EnrichmentResultDTO(item_id=item_id, status="disabled", reason="enrichment API not configured")

        async with self.context.unit_of_work() as uow:
            item = await uow.catalog.get_item(item_id)
            if item is None:
                raise EntityNotFoundError("CatalogItem", item_id)
            detail = await uow.catalog.get_detail(item_id) or ItemDetail(item_id=item_id)

        if detail.has_enrichment and not force:
            return EnrichmentResultDTO(
                item_id=item_id,
                status="skipped",
                release_id=detail.enrichment_release_id,
                year=detail.enrichment_year,
                label=detail.enrichment_label,
                track_count=len(detail.tracklist or []),
                reason="already enriched",
            )
        if not is_music_product(item.name, detail.description, detail.category, detail.format):
            return EnrichmentResultDTO(item_id=item_id, status="skipped", reason="not a music product")

        query = search_query_for(item.name)
        logger.info(f"🔎 Enriching {item_id} with query '{query}'")
        release = await client.find_release(query)
        if release is None:
            logger.info(f"No release match for {item_id} ('{query}')")
            return EnrichmentResultDTO(item_id=item_id, status="no_match", reason=f"no match for '{query}'")

        enriched = ItemDetail(
            item_id=item_id,
            enrichment_release_id=release.release_id,
            enrichment_year=release.year,
            enrichment_label=release.label,
            tracklist=[dict(track) for track in release.tracklist] or None,
            thumbnail_url=None if detail.thumbnail_url else release.thumbnail_url,
        )
        async with self.context.unit_of_work() as uow:
            await uow.catalog.upsert_item_detail(enriched)
            await uow.commit()

        logger.info(f"✅ Enriched {item_id} from release {release.release_id} ({release.title})")
        return EnrichmentResultDTO(
            item_id=item_id,
            status="enriched",
            release_id=release.release_id,
            year=release.year,
            label=release.label,
            track_count=len(release.tracklist),
        )

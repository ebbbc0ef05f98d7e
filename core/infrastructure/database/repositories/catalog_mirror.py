"""
Catalog Mirror Repository.

Upserts catalog items and their details keyed by the commerce
system's item id.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import CatalogItem, ItemDetail
from core.domain.value_objects import ensure_utc, utcnow
from core.infrastructure.database.models import CatalogItemModel, ItemDetailModel, ItemVariationModel
from core.infrastructure.database.upsert import upsert_coalesce, upsert_overwrite


logger = logging.getLogger(__name__)

ITEM_TABLE = CatalogItemModel.__table__
DETAIL_TABLE = ItemDetailModel.__table__
VARIATION_TABLE = ItemVariationModel.__table__

DETAIL_ATTRIBUTES = (
    "category",
    "format",
    "condition_sleeve",
    "condition_media",
    "description",
    "is_staff_pick",
    "thumbnail_url",
    "tracklist",
    "enrichment_release_id",
    "enrichment_year",
    "enrichment_label",
)


class CatalogMirror:
    """
    Upsert layer for catalog items and item details.

    Writes happen inside the caller's transaction; commit is handled
    by the Unit of Work.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def upsert_item(self, item: CatalogItem) -> None:
        """
        Insert or update a catalog item by id.

        name and base_price are overwritten; a missing variation id
        keeps the stored one. Every variation id is mapped to the item
        so counts and order lines on any variation resolve to it.
        """
        stmt = upsert_coalesce(
            self.session,
            ITEM_TABLE,
            values={
                "id": item.id,
                "name": item.name,
                "base_price": item.base_price,
                "variation_id": item.variation_id,
                "updated_at": utcnow(),
            },
            index_elements=["id"],
            merge_columns=["variation_id"],
            overwrite_columns=["name", "base_price", "updated_at"],
        )
        await self.session.execute(stmt)
        await self._upsert_variations(item)
        logger.info(f"✅ Upserted catalog item {item.id} ({item.name})")

    async def _upsert_variations(self, item: CatalogItem) -> None:
        variation_ids = dict.fromkeys(item.variation_ids)
        if item.variation_id:
            variation_ids.setdefault(item.variation_id)

        for variation_id in variation_ids:
            if not variation_id or variation_id == item.id:
                continue
            stmt = upsert_overwrite(
                self.session,
                VARIATION_TABLE,
                values={"variation_id": variation_id, "item_id": item.id, "updated_at": utcnow()},
                index_elements=["variation_id"],
                update_columns=["item_id", "updated_at"],
            )
            await self.session.execute(stmt)

    async def upsert_item_detail(self, detail: ItemDetail) -> bool:
        """
        Merge an item detail into the mirror.

        Each attribute becomes COALESCE(new, existing) so an update
        that omits a field never erases it.

        Returns:
            False when the parent catalog item is not mirrored yet and
            the detail was skipped, True otherwise
        """
        if not await self.exists(detail.item_id):
            logger.warning(
                f"⚠️ Skipping detail for {detail.item_id}: catalog item not mirrored yet"
            )
            return False

        values = {"item_id": detail.item_id, "updated_at": utcnow()}
        values.update(detail.attributes())

        stmt = upsert_coalesce(
            self.session,
            DETAIL_TABLE,
            values=values,
            index_elements=["item_id"],
            merge_columns=DETAIL_ATTRIBUTES,
            overwrite_columns=["updated_at"],
        )
        await self.session.execute(stmt)
        logger.info(f"✅ Merged item detail for {detail.item_id}")
        return True

    async def exists(self, item_id: str) -> bool:
        result = await self.session.execute(
            select(CatalogItemModel.id).where(CatalogItemModel.id == item_id)
        )
        return result.scalar_one_or_none() is not None

    async def resolve_item_ids(self, object_ids: Iterable[str]) -> Dict[str, str]:
        """
        Map catalog object ids (item or variation ids) to mirrored item ids.

        Ids with no mirrored item are absent from the result.
        """
        wanted = {object_id for object_id in object_ids if object_id}
        if not wanted:
            return {}

        resolved: Dict[str, str] = {}

        variations = await self.session.execute(
            select(ItemVariationModel.variation_id, ItemVariationModel.item_id).where(
                ItemVariationModel.variation_id.in_(wanted)
            )
        )
        for variation_id, item_id in variations.all():
            resolved[variation_id] = item_id

        items = await self.session.execute(
            select(CatalogItemModel.id, CatalogItemModel.variation_id).where(
                or_(
                    CatalogItemModel.id.in_(wanted),
                    CatalogItemModel.variation_id.in_(wanted),
                )
            )
        )
        for item_id, variation_id in items.all():
            if variation_id in wanted:
                resolved.setdefault(variation_id, item_id)
            if item_id in wanted:
                resolved[item_id] = item_id
        return resolved

    async def get_item(self, item_id: str) -> Optional[CatalogItem]:
        result = await self.session.execute(
            select(CatalogItemModel)
            .where(CatalogItemModel.id == item_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        variations = await self._variation_ids([item_id])
        return self._to_item(model, variations.get(item_id, ()))

    async def get_detail(self, item_id: str) -> Optional[ItemDetail]:
        result = await self.session.execute(
            select(ItemDetailModel)
            .where(ItemDetailModel.item_id == item_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return self._to_detail(model)

    async def list_items(self) -> List[CatalogItem]:
        result = await self.session.execute(
            select(CatalogItemModel)
            .order_by(CatalogItemModel.id)
            .execution_options(populate_existing=True)
        )
        models = result.scalars().all()
        variations = await self._variation_ids()
        return [self._to_item(model, variations.get(model.id, ())) for model in models]

    async def list_details(self) -> Dict[str, ItemDetail]:
        result = await self.session.execute(
            select(ItemDetailModel).execution_options(populate_existing=True)
        )
        return {model.item_id: self._to_detail(model) for model in result.scalars().all()}

    async def _variation_ids(self, item_ids: Optional[Iterable[str]] = None) -> Dict[str, Tuple[str, ...]]:
        query = select(ItemVariationModel.item_id, ItemVariationModel.variation_id).order_by(
            ItemVariationModel.variation_id
        )
        if item_ids is not None:
            query = query.where(ItemVariationModel.item_id.in_(list(item_ids)))
        result = await self.session.execute(query)

        grouped: Dict[str, List[str]] = defaultdict(list)
        for item_id, variation_id in result.all():
            grouped[item_id].append(variation_id)
        return {item_id: tuple(ids) for item_id, ids in grouped.items()}

    # =========================================================================
    # MAPPING
    # =========================================================================

    @staticmethod
    def _to_item(model: CatalogItemModel, variation_ids: Tuple[str, ...] = ()) -> CatalogItem:
        return CatalogItem(
            id=model.id,
            name=model.name,
            base_price=model.base_price,
            variation_id=model.variation_id,
            variation_ids=variation_ids,
            updated_at=ensure_utc(model.updated_at),
        )

    @staticmethod
    def _to_detail(model: ItemDetailModel) -> ItemDetail:
        return ItemDetail(
            item_id=model.item_id,
            updated_at=ensure_utc(model.updated_at),
            **{name: getattr(model, name) for name in DETAIL_ATTRIBUTES},
        )

"""
SQLAlchemy ORM Models.

Tables of the read-optimized mirror: catalog items and their
details, the inventory ledger, orders with line items, the cache
snapshot and the webhook audit trail.
"""
from sqlalchemy import (
    Column, String, DateTime, Integer, Numeric, Text, Boolean,
    Index, ForeignKey, CheckConstraint, JSON,
)
from sqlalchemy.orm import declarative_base, relationship

from core.domain.value_objects.timestamps import utcnow


Base = declarative_base()


# =============================================================================
# CATALOG
# =============================================================================

class CatalogItemModel(Base):
    """
    Catalog item mirror.

    Keyed by the commerce system's item id. name and base_price are
    overwritten on every upsert.
    """

    __tablename__ = "catalog_items"

    id = Column(String(64), primary_key=True)
    variation_id = Column(String(64), nullable=True, index=True)
    name = Column(String(500), nullable=False)
    base_price = Column(Numeric(12, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    detail = relationship("ItemDetailModel", back_populates="item", uselist=False)
    variations = relationship("ItemVariationModel", back_populates="item")

    def __repr__(self):
        return f"<CatalogItemModel(id={self.id}, name={self.name}, base_price={self.base_price})>"


class ItemDetailModel(Base):
    """
    Descriptive and enrichment attributes of a catalog item.

    Rows may only exist for a mirrored catalog item. Writes merge
    field by field: a NULL in an update keeps the stored value.
    """

    __tablename__ = "item_details"

    item_id = Column(String(64), ForeignKey("catalog_items.id", ondelete="CASCADE"), primary_key=True)

    category = Column(String(100), nullable=True, index=True)
    format = Column(String(50), nullable=True)
    condition_sleeve = Column(String(50), nullable=True)
    condition_media = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    is_staff_pick = Column(Boolean, nullable=True)
    thumbnail_url = Column(String(1000), nullable=True)
    tracklist = Column(JSON(none_as_null=True), nullable=True)

    # Metadata enrichment
    enrichment_release_id = Column(Integer, nullable=True)
    enrichment_year = Column(Integer, nullable=True)
    enrichment_label = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    item = relationship("CatalogItemModel", back_populates="detail")

    def __repr__(self):
        return f"<ItemDetailModel(item_id={self.item_id}, category={self.category}, format={self.format})>"


class ItemVariationModel(Base):
    """
    Variation id to item id.

    Inventory counts and order lines reference variations; every
    variation of a mirrored item resolves to that item.
    """

    __tablename__ = "item_variations"

    variation_id = Column(String(64), primary_key=True)
    item_id = Column(String(64), ForeignKey("catalog_items.id", ondelete="CASCADE"), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    item = relationship("CatalogItemModel", back_populates="variations")

    def __repr__(self):
        return f"<ItemVariationModel(variation_id={self.variation_id}, item_id={self.item_id})>"


# =============================================================================
# INVENTORY LEDGER
# =============================================================================

class InventoryObservationModel(Base):
    """
    Append-only stock-level observation.

    Rows are keyed by item, catalog object and location. Current stock
    for an item is the sum, over those keys, of the stock_level of the
    row with the latest recorded_at.
    """

    __tablename__ = "inventory_observations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(String(64), ForeignKey("catalog_items.id"), nullable=False)
    catalog_object_id = Column(String(64), nullable=False)
    location_id = Column(String(64), nullable=True)
    stock_level = Column(Integer, nullable=False)
    recorded_at = Column(DateTime(timezone=True), nullable=False)
    source = Column(String(16), nullable=False)
    event_id = Column(String(255), nullable=True)

    __table_args__ = (
        CheckConstraint("stock_level >= 0", name="ck_inventory_observations_stock_level"),
        Index("ix_inventory_observations_item_recorded", "item_id", "catalog_object_id", "recorded_at"),
    )

    def __repr__(self):
        return (
            f"<InventoryObservationModel(item_id={self.item_id}, stock_level={self.stock_level}, "
            f"recorded_at={self.recorded_at}, source={self.source})>"
        )


# =============================================================================
# ORDERS
# =============================================================================

class OrderModel(Base):
    """
    Order mirror.

    external_order_number identifies one logical order across
    redeliveries; id is the surrogate key referenced by line items.
    """

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_order_number = Column(String(255), unique=True, nullable=False)
    external_order_id = Column(String(255), nullable=True, index=True)
    customer_id = Column(String(255), nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=True)
    status = Column(String(20), nullable=False, default="Processing", index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    items = relationship("OrderItemModel", back_populates="order", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_orders_created_at", "created_at"),
    )

    def __repr__(self):
        return (
            f"<OrderModel(id={self.id}, external_order_number={self.external_order_number}, "
            f"status={self.status})>"
        )


class OrderItemModel(Base):
    """Line item of a mirrored order. Replaced wholesale on every order upsert."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(String(64), ForeignKey("catalog_items.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price_at_purchase = Column(Numeric(12, 2), nullable=True)

    order = relationship("OrderModel", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity"),
    )

    def __repr__(self):
        return f"<OrderItemModel(order_id={self.order_id}, item_id={self.item_id}, quantity={self.quantity})>"


# =============================================================================
# CACHE SNAPSHOT
# =============================================================================

class CacheSnapshotModel(Base):
    """
    Denormalized catalog snapshot served to the storefront.

    Disposable: can be deleted and rebuilt at any time.
    """

    __tablename__ = "product_cache"

    key = Column(String(255), primary_key=True)
    value = Column(JSON, nullable=False)
    stale = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<CacheSnapshotModel(key={self.key}, stale={self.stale}, updated_at={self.updated_at})>"


# =============================================================================
# WEBHOOK AUDIT TRAIL
# =============================================================================

class WebhookEventModel(Base):
    """One row per webhook delivery outcome."""

    __tablename__ = "webhook_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(String(255), nullable=True, index=True)
    event_type = Column(String(100), nullable=True, index=True)
    route = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False, index=True)
    correlation_id = Column(String(64), nullable=False)
    detail = Column(Text, nullable=True)
    received_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_webhook_events_received_at", "received_at"),
    )

    def __repr__(self):
        return (
            f"<WebhookEventModel(event_id={self.event_id}, type={self.event_type}, "
            f"status={self.status})>"
        )

"""End-to-end tests for the REST layer."""
from decimal import Decimal

import pytest

from core.domain.entities import CatalogItem, ExternalProduct, ItemDetail, ReleaseMetadata
from core.infrastructure.database.unit_of_work import SyncUnitOfWork
from tests.conftest import signed


def catalog_created(item_id="A1", name="Radiohead - OK Computer"):
    return {
        "type": "catalog.item.created",
        "event_id": f"evt-{item_id}",
        "data": {
            "id": item_id,
            "object": {
                "catalog_object": {
                    "type": "ITEM",
                    "id": item_id,
                    "item_data": {
                        "name": name,
                        "variations": [
                            {"id": f"{item_id}-V1", "item_variation_data": {"price_money": {"amount": 2999}}},
                        ],
                    },
                }
            },
        },
    }


async def post_webhook(client, route, payload, **kwargs):
    request = signed(route, payload, **kwargs)
    return await client.post(
        f"/api/v1/webhooks/{route}", content=request["body"], headers=request["headers"]
    )


# =============================================================================
# HEALTH
# =============================================================================

@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["service"] == "groove-sync"


@pytest.mark.asyncio
async def test_readiness_reports_database_and_clients(client):
    response = await client.get("/health/ready")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert body["checks"]["database"] == "ok"
    assert body["checks"]["commerce_client"] == "configured"
    assert body["checks"]["enrichment"] == "disabled"


# =============================================================================
# WEBHOOKS
# =============================================================================

@pytest.mark.asyncio
async def test_signed_catalog_webhook_mirrors_item(client, session_factory):
    response = await post_webhook(client, "catalog", catalog_created())

    assert response.status_code == 200
    assert response.json()["status"] == "processed"
    async with SyncUnitOfWork(session_factory) as uow:
        item = await uow.catalog.get_item("A1")
    assert item.base_price == Decimal("29.99")


@pytest.mark.asyncio
async def test_tampered_webhook_is_forbidden(client, session_factory):
    request = signed("catalog", catalog_created())

    response = await client.post(
        "/api/v1/webhooks/catalog",
        content=request["body"].replace(b"OK Computer", b"Kid A"),
        headers=request["headers"],
    )

    assert response.status_code == 403
    async with SyncUnitOfWork(session_factory) as uow:
        assert await uow.catalog.exists("A1") is False


@pytest.mark.asyncio
async def test_malformed_webhook_is_bad_request(client):
    response = await post_webhook(client, "orders", {"type": "order.created"})

    assert response.status_code == 400
    assert "errorId" in response.json()


@pytest.mark.asyncio
async def test_new_music_item_is_enriched_after_response(client, context, enrichment_client):
    context.enrichment_client = enrichment_client
    enrichment_client.releases["Radiohead - OK Computer"] = ReleaseMetadata(
        release_id=249504, title="OK Computer", year=1997, label="Parlophone",
    )

    response = await post_webhook(client, "catalog", catalog_created())

    assert response.status_code == 200
    view = (await client.get("/api/v1/catalog/products/A1")).json()
    assert view["enrichmentReleaseId"] == 249504
    assert view["enrichmentYear"] == 1997


# =============================================================================
# CATALOG
# =============================================================================

@pytest.mark.asyncio
async def test_products_empty_before_warm(client):
    response = await client.get("/api/v1/catalog/products")

    assert response.status_code == 200
    assert response.json() == {"products": [], "timestamp": None, "count": 0, "stale": False}


@pytest.mark.asyncio
async def test_warm_then_read_products(client, commerce_client):
    commerce_client.add_product(ExternalProduct(
        item=CatalogItem(id="A1", name="Album One", base_price=Decimal("20.00")),
        detail=ItemDetail(item_id="A1", format="LP"),
        stock_level=2,
        image_url="https://img/a1.jpg",
    ))

    warm = await client.post("/api/v1/cache/warm")
    products = await client.get("/api/v1/catalog/products")

    assert warm.status_code == 200
    assert warm.json()["succeeded"] == 1
    body = products.json()
    assert body["count"] == 1
    assert body["products"][0]["stockCount"] == 2
    assert body["products"][0]["status"] == "low_stock"
    assert body["products"][0]["imageUrl"] == "https://img/a1.jpg"
    assert body["products"][0]["price"] == 20.0


@pytest.mark.asyncio
async def test_warm_without_commerce_client_is_unavailable(client, context):
    context.commerce_client = None

    response = await client.post("/api/v1/cache/warm")

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_unknown_product_is_404(client):
    assert (await client.get("/api/v1/catalog/products/NOPE")).status_code == 404


@pytest.mark.asyncio
async def test_enrich_endpoint_reports_disabled(client, session_factory):
    async with SyncUnitOfWork(session_factory) as uow:
        await uow.catalog.upsert_item(CatalogItem(id="A1", name="Radiohead - OK Computer"))
        await uow.commit()

    response = await client.post("/api/v1/catalog/products/A1/enrich")

    assert response.status_code == 200
    assert response.json()["status"] == "disabled"


# =============================================================================
# MONITORING
# =============================================================================

@pytest.mark.asyncio
async def test_inventory_check_get_does_not_alert(client, commerce_client, notification_service):
    commerce_client.add_product(ExternalProduct(
        item=CatalogItem(id="Z", name="Album Z"), detail=ItemDetail(item_id="Z"), stock_level=1,
    ))

    response = await client.get("/api/v1/monitoring/inventory-sync-check")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "all_match"
    assert body["externalOnly"] == ["Z"]
    assert notification_service.get_notifications() == []


@pytest.mark.asyncio
async def test_order_check_post_sends_alert(client, notification_service):
    response = await client.post("/api/v1/monitoring/order-reconciliation-check")

    assert response.status_code == 200
    assert response.json()["status"] == "all_reconciled"
    assert notification_service.get_notifications("generic")[0]["severity"] == 20


@pytest.mark.asyncio
async def test_webhook_stats_after_deliveries(client):
    await post_webhook(client, "catalog", catalog_created())
    await post_webhook(client, "inventory", catalog_created("B1"))

    response = await client.get("/api/v1/monitoring/webhook-stats", params={"hours": 1})

    assert response.status_code == 200
    assert response.json()["byStatus"] == {"processed": 1, "skipped": 1, "failed": 0}


@pytest.mark.asyncio
async def test_webhook_stats_rejects_out_of_range_window(client):
    response = await client.get("/api/v1/monitoring/webhook-stats", params={"hours": 0})

    assert response.status_code == 422

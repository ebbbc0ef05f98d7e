"""Unit tests for the notification and enrichment adapters."""
import pytest

from core.infrastructure.adapters.discogs import DiscogsEnrichmentClient
from core.infrastructure.adapters.notifications import build_notification_service
from core.infrastructure.adapters.notifications.mock_notification_service import MockNotificationService
from core.infrastructure.adapters.notifications.slack_notification_service import (
    SlackNotificationService,
    severity_color,
)
from core.infrastructure.concurrency import RateLimiter
from core.settings.modules import SlackSettings
from groove_sdk.discogs import DiscogsRelease, DiscogsSearchResult, DiscogsTrack


class FakeDiscogsAPI:

    def __init__(self, results=(), releases=None):
        self.results = list(results)
        self.releases = releases or {}
        self.calls = []

    async def search(self, query):
        self.calls.append(("search", query))
        return list(self.results)

    async def get_release(self, release_id):
        self.calls.append(("release", release_id))
        return self.releases.get(release_id)


class CountingLimiter(RateLimiter):
    """RateLimiter that counts calls routed through it."""

    def __init__(self):
        super().__init__(6000, name="counting")
        self.executed = 0

    async def execute(self, fn):
        self.executed += 1
        return await super().execute(fn)


# =============================================================================
# NOTIFICATIONS
# =============================================================================

def test_builder_falls_back_to_mock_without_webhook_url():
    settings = SlackSettings(_env_file=None, enabled=True, webhook_url="")

    assert isinstance(build_notification_service(settings), MockNotificationService)


def test_builder_returns_slack_when_enabled_and_configured():
    settings = SlackSettings(_env_file=None, enabled=True, webhook_url="https://hooks.slack.test/x")

    assert isinstance(build_notification_service(settings), SlackNotificationService)


@pytest.mark.asyncio
async def test_mock_records_errors_and_notifications():
    service = MockNotificationService()

    await service.send_error("cid-1", "webhook:orders", "boom", "order.created (evt-1)")
    await service.notify("all clear", severity=20)

    errors = service.get_notifications("error")
    assert errors[0]["correlation_id"] == "cid-1"
    assert errors[0]["source"] == "webhook:orders"
    assert service.get_notifications("generic")[0]["severity"] == 20

    service.clear()
    assert service.get_notifications() == []


def test_slack_colors_follow_severity():
    assert [severity_color(s) for s in (90, 80, 60, 50, 20)] == ["danger", "danger", "warning", "warning", "good"]


def test_slack_error_payload_carries_fields():
    payload = SlackNotificationService._attachment("boom", "danger", [{"title": "Source", "value": "x"}])

    attachment = payload["attachments"][0]
    assert attachment["color"] == "danger"
    assert attachment["fields"][0]["title"] == "Source"


@pytest.mark.asyncio
async def test_slack_without_url_skips_silently():
    service = SlackNotificationService(SlackSettings(_env_file=None, enabled=True, webhook_url=""))

    await service.notify("nothing to send")


# =============================================================================
# DISCOGS ENRICHMENT
# =============================================================================

@pytest.mark.asyncio
async def test_find_release_uses_first_hit_through_rate_limiter():
    release = DiscogsRelease(
        id=249504,
        title="OK Computer",
        year=1997,
        labels=("Parlophone",),
        tracklist=(
            DiscogsTrack(position="", title="Side A", type_="heading"),
            DiscogsTrack(position="A1", title="Airbag", duration="4:44", type_="track"),
        ),
    )
    api = FakeDiscogsAPI(
        results=[
            DiscogsSearchResult(id=249504, title="Radiohead - OK Computer", thumb="https://img/t.jpg"),
            DiscogsSearchResult(id=1, title="Radiohead - OK Computer (bootleg)"),
        ],
        releases={249504: release},
    )
    limiter = CountingLimiter()
    client = DiscogsEnrichmentClient(api, limiter)

    metadata = await client.find_release("Radiohead - OK Computer")

    assert metadata.release_id == 249504
    assert metadata.year == 1997
    assert metadata.label == "Parlophone"
    assert metadata.tracklist == ({"position": "A1", "title": "Airbag", "duration": "4:44"},)
    assert metadata.thumbnail_url == "https://img/t.jpg"
    assert limiter.executed == 2
    assert api.calls == [("search", "Radiohead - OK Computer"), ("release", 249504)]


@pytest.mark.asyncio
async def test_find_release_without_results_or_query():
    api = FakeDiscogsAPI()
    client = DiscogsEnrichmentClient(api, CountingLimiter())

    assert await client.find_release("Unknown Artist - Nothing") is None
    assert await client.find_release("   ") is None
    assert api.calls == [("search", "Unknown Artist - Nothing")]

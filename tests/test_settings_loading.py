"""
Test settings loading.

Verifies that .env.example documents exactly the variables the
settings modules read, and that values load from the environment.
"""
from __future__ import annotations

from decimal import Decimal
from pathlib import Path
import re

import pytest

from core.infrastructure.database.config import DatabaseSettings
from core.settings.modules import (
    DiscogsSettings,
    SlackSettings,
    SquareSettings,
    SyncSettings,
    WebhookSettings,
)


ALIASED_MODULES = {
    "square": SquareSettings,
    "webhooks": WebhookSettings,
    "discogs": DiscogsSettings,
    "sync": SyncSettings,
    "slack": SlackSettings,
}


def _parse_env_keys(env_path: Path) -> list[str]:
    text = env_path.read_text(encoding="utf-8", errors="replace")
    keys: list[str] = []
    for line in text.splitlines():
        s = line.strip()
        if not s or s.startswith("#"):
            continue
        if s.startswith("export "):
            s = s[len("export ") :].strip()
        if "=" not in s:
            continue
        k, _ = s.split("=", 1)
        k = k.strip()
        if not re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", k):
            continue
        keys.append(k)
    # de-duplicate while preserving order
    return list(dict.fromkeys(keys))


def _collect_env_names() -> dict[str, tuple[str, str]]:
    """
    Return map: ENV_NAME -> (module, field_name).
    """
    names: dict[str, tuple[str, str]] = {}
    for module_name, model in ALIASED_MODULES.items():
        for field_name, field in model.model_fields.items():
            assert field.alias, f"{module_name}.{field_name} has no env alias"
            if field.alias in names:
                pytest.fail(f"Duplicate env alias mapped twice: {field.alias}")
            names[field.alias] = (module_name, field_name)

    prefix = DatabaseSettings.model_config["env_prefix"]
    for field_name in DatabaseSettings.model_fields:
        names[f"{prefix}{field_name.upper()}"] = ("database", field_name)
    return names


def test_env_example_matches_settings():
    repo_root = Path(__file__).resolve().parents[1]
    keys = _parse_env_keys(repo_root / ".env.example")
    names = _collect_env_names()

    unmapped = [k for k in keys if k not in names]
    undocumented = [k for k in names if k not in keys]

    assert not unmapped, f"Unmapped env keys: {unmapped}"
    assert not undocumented, f"Settings missing from .env.example: {undocumented}"


def test_settings_load_from_environment(monkeypatch):
    monkeypatch.setenv("SQUARE_ACCESS_TOKEN", "sq-token")
    monkeypatch.setenv("SQUARE_ENVIRONMENT", "sandbox")
    monkeypatch.setenv("GROOVE_ORDER_LOOKBACK_DAYS", "3")
    monkeypatch.setenv("GROOVE_PRICE_TOLERANCE", "0.05")
    monkeypatch.setenv("GROOVE_CACHE_NAMESPACE", "shop")
    monkeypatch.setenv("DB_POOL_SIZE", "12")

    square = SquareSettings(_env_file=None)
    sync = SyncSettings(_env_file=None)
    database = DatabaseSettings(_env_file=None)

    assert square.configured is True
    assert square.base_url == "https://connect.squareupsandbox.com"
    assert sync.order_lookback_days == 3
    assert sync.price_tolerance == Decimal("0.05")
    assert sync.cache_key == "square:products:shop"
    assert database.pool_size == 12


def test_defaults_boot_with_empty_environment():
    square = SquareSettings(_env_file=None, SQUARE_ACCESS_TOKEN="")
    discogs = DiscogsSettings(_env_file=None, DISCOGS_ENABLED=False)

    assert square.configured is False
    assert square.base_url == "https://connect.squareup.com"
    assert discogs.configured is False
    assert discogs.requests_per_minute == 50


def test_webhook_key_fallback_order():
    settings = WebhookSettings(
        _env_file=None,
        ORDER_WEBHOOK_SIGNATURE_KEY="orders-key",
        SQUARE_SIGNATURE_KEY="shared",
        SQUARE_WEBHOOK_SIGNATURE_KEY="legacy",
        INVENTORY_WEBHOOK_SIGNATURE_KEY="",
    )

    assert settings.key_for("orders") == "orders-key"
    assert settings.key_for("inventory") == "shared"
    assert settings.key_for("catalog") == "shared"

    legacy_only = WebhookSettings(
        _env_file=None,
        SQUARE_WEBHOOK_SIGNATURE_KEY="legacy",
        ORDER_WEBHOOK_SIGNATURE_KEY=None,
        INVENTORY_WEBHOOK_SIGNATURE_KEY=None,
        CATALOG_WEBHOOK_SIGNATURE_KEY=None,
        SQUARE_SIGNATURE_KEY=None,
    )
    assert legacy_only.key_for("orders") == "legacy"


def test_lookback_must_be_positive():
    with pytest.raises(ValueError):
        SyncSettings(_env_file=None, GROOVE_ORDER_LOOKBACK_DAYS=0)


def test_database_url_password_is_masked_for_logs():
    database = DatabaseSettings(_env_file=None, database_url="postgresql+asyncpg://groove:s3cret@db:5432/groove")
    local = DatabaseSettings(_env_file=None, database_url="sqlite+aiosqlite:///./groove.db")

    assert "s3cret" not in database.redacted_url
    assert database.redacted_url == "postgresql+asyncpg://groove:***@db:5432/groove"
    assert local.redacted_url == "sqlite+aiosqlite:///./groove.db"

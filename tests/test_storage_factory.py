"""Tests for storage adapter resolution and construction."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from structlog.testing import capture_logs

from src.contact_sync.config import Settings
from src.contact_sync.contacts.storage import factory
from src.contact_sync.contacts.storage import (
    DEFAULT_STORAGE_TYPE,
    PostgresAdapter,
    RedisAdapter,
    StorageAdapter,
    get_storage_adapter,
    register_storage_adapter,
    resolve_storage_type,
)


@pytest.fixture(autouse=True)
def _no_redis_pool(monkeypatch):
    """Keep RedisAdapter construction from creating the shared client."""
    monkeypatch.setattr(
        "src.contact_sync.contacts.storage.redis.get_redis_pool", MagicMock()
    )


@pytest.fixture
def restore_registry(monkeypatch):
    monkeypatch.setattr(factory, "_ADAPTER_FACTORIES", dict(factory._ADAPTER_FACTORIES))


# ── Resolution ─────────────────────────────────────────────────────────────


class TestResolveStorageType:
    """Explicit selector, then configuration, then default."""

    def test_default_is_postgres(self):
        assert DEFAULT_STORAGE_TYPE == "postgres"
        assert resolve_storage_type(None) == "postgres"
        assert resolve_storage_type("", "") == "postgres"

    def test_configured_value_used_when_no_explicit(self):
        assert resolve_storage_type(None, "redis") == "redis"

    def test_explicit_beats_configured(self):
        assert resolve_storage_type("postgres", "redis") == "postgres"

    def test_case_insensitive(self):
        assert resolve_storage_type("REDIS") == "redis"
        assert resolve_storage_type(" Postgres ") == "postgres"

    def test_postgresql_alias(self):
        assert resolve_storage_type("postgresql") == "postgres"

    def test_unknown_type_warns_and_falls_back(self):
        with capture_logs() as logs:
            resolved = resolve_storage_type("bogus")

        assert resolved == "postgres"
        warning = logs[0]
        assert warning["event"] == "storage_factory.unknown_storage_type"
        assert warning["log_level"] == "warning"
        assert warning["storage_type"] == "bogus"
        assert warning["default"] == "postgres"


# ── Construction ───────────────────────────────────────────────────────────


class TestGetStorageAdapter:
    """get_storage_adapter builds a new adapter for the resolved backend."""

    def test_explicit_redis(self):
        adapter = get_storage_adapter("redis", settings=Settings(STORAGE_TYPE="postgres"))

        assert isinstance(adapter, RedisAdapter)
        assert isinstance(adapter, StorageAdapter)

    def test_settings_select_backend(self):
        assert isinstance(get_storage_adapter(settings=Settings(STORAGE_TYPE="redis")), RedisAdapter)
        assert isinstance(get_storage_adapter(settings=Settings(STORAGE_TYPE="")), PostgresAdapter)

    def test_unknown_type_yields_default_adapter(self):
        with capture_logs() as logs:
            adapter = get_storage_adapter("bogus", settings=Settings())

        assert isinstance(adapter, PostgresAdapter)
        assert any(e["event"] == "storage_factory.unknown_storage_type" for e in logs)

    def test_each_call_returns_new_instance(self):
        settings = Settings()

        assert get_storage_adapter("postgres", settings) is not get_storage_adapter("postgres", settings)

    def test_registered_backend_is_resolvable(self, restore_registry):
        custom = MagicMock(spec=StorageAdapter)
        register_storage_adapter("Memory", lambda: custom)

        assert resolve_storage_type("memory") == "memory"
        assert get_storage_adapter("memory", settings=Settings()) is custom
        assert "memory" in factory.available_storage_types()

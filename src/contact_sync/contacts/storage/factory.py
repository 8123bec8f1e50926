"""Storage adapter factory -- resolves and builds the configured contact backend.

Resolution precedence, highest first:
1. The explicit ``storage_type`` argument
2. ``Settings.STORAGE_TYPE`` from the injected settings snapshot
3. DEFAULT_STORAGE_TYPE

Resolution is case-insensitive. Unknown types log a warning and fall back to
the default instead of raising. No instance is cached: every call builds a new
adapter, and adapters share the process-wide connection pools.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

import structlog

from src.contact_sync.config import Settings, get_settings
from src.contact_sync.contacts.storage.adapter import StorageAdapter
from src.contact_sync.contacts.storage.postgres import PostgresAdapter
from src.contact_sync.contacts.storage.redis import RedisAdapter

logger = structlog.get_logger(__name__)


class StorageType(str, Enum):
    """Built-in storage backends."""

    POSTGRES = "postgres"
    REDIS = "redis"


DEFAULT_STORAGE_TYPE = StorageType.POSTGRES.value

_STORAGE_ALIASES: dict[str, str] = {
    "postgresql": StorageType.POSTGRES.value,
}

_ADAPTER_FACTORIES: dict[str, Callable[[], StorageAdapter]] = {
    StorageType.POSTGRES.value: PostgresAdapter,
    StorageType.REDIS.value: RedisAdapter,
}


def register_storage_adapter(storage_type: str, factory: Callable[[], StorageAdapter]) -> None:
    """Register (or replace) the adapter factory for a storage type."""
    _ADAPTER_FACTORIES[storage_type.strip().lower()] = factory


def available_storage_types() -> list[str]:
    return sorted(_ADAPTER_FACTORIES)


def resolve_storage_type(storage_type: str | None, configured: str | None = None) -> str:
    """Resolve the backend tag from an explicit selector and a configured value.

    Pure apart from the warning log: no environment access.

    Args:
        storage_type: Explicit selector; wins when non-empty.
        configured: Configuration value (e.g. Settings.STORAGE_TYPE).

    Returns:
        A registered storage type, DEFAULT_STORAGE_TYPE when nothing is set or
        the requested type is unknown.
    """
    requested = storage_type or configured or DEFAULT_STORAGE_TYPE
    normalized = requested.strip().lower()
    normalized = _STORAGE_ALIASES.get(normalized, normalized)

    if normalized not in _ADAPTER_FACTORIES:
        logger.warning(
            "storage_factory.unknown_storage_type",
            storage_type=requested,
            default=DEFAULT_STORAGE_TYPE,
            available=available_storage_types(),
        )
        return DEFAULT_STORAGE_TYPE

    return normalized


def get_storage_adapter(
    storage_type: str | None = None,
    settings: Settings | None = None,
) -> StorageAdapter:
    """Build the storage adapter for the resolved backend.

    Args:
        storage_type: Optional explicit backend selector ("postgres", "redis").
        settings: Settings snapshot; defaults to get_settings().

    Returns:
        A new adapter, typed as the StorageAdapter contract.
    """
    if settings is None:
        settings = get_settings()

    resolved = resolve_storage_type(storage_type, settings.STORAGE_TYPE)
    logger.info("storage_factory.adapter_created", storage_type=resolved)
    return _ADAPTER_FACTORIES[resolved]()

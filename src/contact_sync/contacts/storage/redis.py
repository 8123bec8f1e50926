"""Redis storage adapter -- contacts as JSON strings and hashes in Redis.

AcmeCRM contacts are JSON documents returned exactly as stored. Internal
contacts are hashes keyed by camelCase field names; the Redis field mapping
decodes them (JSON structures, integer version, ISO-8601 timestamps).
Lookups by (source, sourceId) go through the store's index key.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from src.contact_sync.config import get_settings
from src.contact_sync.contacts.redis_store import RedisContactStore
from src.contact_sync.contacts.schemas import ContactSource, ExternalContact, InternalContact
from src.contact_sync.contacts.storage.adapter import StorageAdapter
from src.contact_sync.contacts.storage.errors import (
    require_external_contact,
    require_id,
    require_internal_contact,
    require_source,
    storage_operation,
)
from src.contact_sync.contacts.storage.field_mapping import (
    internal_to_redis_hash,
    null_redis_fields,
    redis_hash_to_internal,
)
from src.contact_sync.core.redis import close_redis, get_redis_pool

logger = structlog.get_logger(__name__)

BACKEND = "redis"


class RedisAdapter(StorageAdapter):
    """Contact storage backed by Redis via RedisContactStore.

    Args:
        store: RedisContactStore to use. Defaults to one over the shared
            connection pool with the configured key prefix.
        on_close: Coroutine function releasing the connection pool. Defaults
            to closing the shared pool when ``store`` is not given, otherwise
            to ``store.close``.
    """

    def __init__(
        self,
        store: RedisContactStore | None = None,
        on_close: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        if store is None:
            store = RedisContactStore(get_redis_pool(), get_settings().REDIS_KEY_PREFIX)
            on_close = on_close or close_redis
        self._store = store
        self._on_close = on_close or store.close
        self._closed = False

    # ── AcmeCRM contacts ────────────────────────────────────────────────────

    async def store_acme_contact(self, contact_id: str, contact: ExternalContact) -> ExternalContact:
        require_id(contact_id)
        data = require_external_contact(contact)
        async with storage_operation(
            BACKEND, "store_acme_contact", "Failed to store AcmeCRM contact",
            contact_id=contact_id,
        ):
            return await self._store.store_acme_contact(contact_id, data)

    async def get_acme_contact(self, contact_id: str) -> ExternalContact | None:
        require_id(contact_id)
        async with storage_operation(
            BACKEND, "get_acme_contact", "Failed to retrieve AcmeCRM contact",
            contact_id=contact_id,
        ):
            return await self._store.get_acme_contact(contact_id)

    async def delete_acme_contact(self, contact_id: str) -> bool:
        require_id(contact_id)
        async with storage_operation(
            BACKEND, "delete_acme_contact", "Failed to delete AcmeCRM contact",
            contact_id=contact_id,
        ):
            removed = await self._store.delete_acme_contact(contact_id)
        return removed == 1

    # ── Internal contacts ───────────────────────────────────────────────────

    async def store_internal_contact(
        self, contact_id: str, contact: InternalContact | dict[str, Any]
    ) -> InternalContact:
        """Write the contact hash and return it decoded, as stored."""
        require_id(contact_id)
        contact = require_internal_contact(contact_id, contact)
        async with storage_operation(
            BACKEND, "store_internal_contact", "Failed to store internal contact",
            contact_id=contact_id,
            source=contact.source.value if contact.source else None,
            source_id=contact.source_id,
        ):
            fields = await self._store.store_internal_contact(
                contact_id,
                internal_to_redis_hash(contact),
                clear=null_redis_fields(contact),
            )
            stored = redis_hash_to_internal(fields)
        logger.info(
            "redis_storage.internal_contact_stored",
            contact_id=contact_id,
            version=stored.version,
        )
        return stored

    async def get_internal_contact(self, contact_id: str) -> InternalContact | None:
        require_id(contact_id)
        async with storage_operation(
            BACKEND, "get_internal_contact", "Failed to retrieve internal contact",
            contact_id=contact_id,
        ):
            fields = await self._store.get_internal_contact(contact_id)
            return None if fields is None else redis_hash_to_internal(fields)

    async def get_internal_contact_by_source_id(
        self, source: ContactSource | str, source_id: str
    ) -> InternalContact | None:
        source = require_source(source)
        require_id(source_id, "source_id")
        async with storage_operation(
            BACKEND,
            "get_internal_contact_by_source_id",
            "Failed to retrieve internal contact by source ID",
            source=source,
            source_id=source_id,
        ):
            fields = await self._store.get_internal_contact_by_source_id(source, source_id)
            return None if fields is None else redis_hash_to_internal(fields)

    async def delete_internal_contact(self, contact_id: str) -> bool:
        require_id(contact_id)
        async with storage_operation(
            BACKEND, "delete_internal_contact", "Failed to delete internal contact",
            contact_id=contact_id,
        ):
            removed = await self._store.delete_internal_contact(contact_id)
        return removed == 1

    # ── Lifecycle ───────────────────────────────────────────────────────────

    async def close(self) -> None:
        """Close the Redis connection pool once. Failures are logged, not raised."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._on_close()
        except Exception as exc:
            logger.error("redis_storage.close_failed", error=str(exc))

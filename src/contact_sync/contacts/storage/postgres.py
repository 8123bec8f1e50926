"""PostgreSQL storage adapter -- contacts in the acme_contacts / internal_contacts tables.

Delegates SQL to ContactRepository and converts rows with the PostgreSQL field
mapping: snake_case columns to camelCase InternalContact fields, database
timestamps to ISO-8601 text. AcmeCRM contacts are stored as a JSON document and
returned exactly as stored.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from src.contact_sync.contacts.repository import ContactRepository
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
    internal_to_postgres_row,
    postgres_row_to_internal,
)
from src.contact_sync.core.database import close_db, get_session

logger = structlog.get_logger(__name__)

BACKEND = "postgres"


class PostgresAdapter(StorageAdapter):
    """Contact storage backed by PostgreSQL via ContactRepository.

    Args:
        repository: ContactRepository to use. Defaults to one bound to the
            shared engine session factory.
        on_close: Coroutine function releasing the backend's connections.
            Defaults to disposing the shared engine when ``repository`` is
            not given.
    """

    def __init__(
        self,
        repository: ContactRepository | None = None,
        on_close: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        if repository is None:
            repository = ContactRepository(get_session)
            on_close = on_close or close_db
        self._repo = repository
        self._on_close = on_close
        self._closed = False

    # ── AcmeCRM contacts ────────────────────────────────────────────────────

    async def store_acme_contact(self, contact_id: str, contact: ExternalContact) -> ExternalContact:
        """Store the vendor document under ``contact_id`` and return it as stored."""
        require_id(contact_id)
        data = require_external_contact(contact)
        async with storage_operation(
            BACKEND, "store_acme_contact", "Failed to store AcmeCRM contact",
            contact_id=contact_id,
        ):
            row = await self._repo.store_acme_contact(contact_id, data)
        return row.data

    async def get_acme_contact(self, contact_id: str) -> ExternalContact | None:
        require_id(contact_id)
        async with storage_operation(
            BACKEND, "get_acme_contact", "Failed to retrieve AcmeCRM contact",
            contact_id=contact_id,
        ):
            row = await self._repo.get_acme_contact(contact_id)
        return None if row is None else row.data

    async def delete_acme_contact(self, contact_id: str) -> bool:
        require_id(contact_id)
        async with storage_operation(
            BACKEND, "delete_acme_contact", "Failed to delete AcmeCRM contact",
            contact_id=contact_id,
        ):
            return await self._repo.delete_acme_contact(contact_id)

    # ── Internal contacts ───────────────────────────────────────────────────

    async def store_internal_contact(
        self, contact_id: str, contact: InternalContact | dict[str, Any]
    ) -> InternalContact:
        """Upsert the contact and return the stored row as an InternalContact.

        The returned version is 1 for a new row and increments on every
        subsequent store; ``updatedAt`` is the write time.
        """
        require_id(contact_id)
        contact = require_internal_contact(contact_id, contact)
        async with storage_operation(
            BACKEND, "store_internal_contact", "Failed to store internal contact",
            contact_id=contact_id,
        ):
            row = await self._repo.store_internal_contact(
                contact_id, internal_to_postgres_row(contact)
            )
            stored = postgres_row_to_internal(row)
        logger.info(
            "postgres_storage.internal_contact_stored",
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
            row = await self._repo.get_internal_contact(contact_id)
            return None if row is None else postgres_row_to_internal(row)

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
            row = await self._repo.get_internal_contact_by_source_id(source, source_id)
            return None if row is None else postgres_row_to_internal(row)

    async def delete_internal_contact(self, contact_id: str) -> bool:
        require_id(contact_id)
        async with storage_operation(
            BACKEND, "delete_internal_contact", "Failed to delete internal contact",
            contact_id=contact_id,
        ):
            return await self._repo.delete_internal_contact(contact_id)

    # ── Lifecycle ───────────────────────────────────────────────────────────

    async def close(self) -> None:
        """Dispose of database connections once. Failures are logged, not raised."""
        if self._closed:
            return
        self._closed = True
        if self._on_close is None:
            return
        try:
            await self._on_close()
        except Exception as exc:
            logger.error("postgres_storage.close_failed", error=str(exc))

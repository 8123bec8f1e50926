"""Backend error translation for storage adapters.

Every adapter operation runs inside storage_operation(), which records metrics,
logs failures with the operation and identifiers, and re-raises any backend
exception as StorageError. Backend exception types never cross the adapter
boundary.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from typing import Any

import structlog

from src.contact_sync.contacts.schemas import ContactSource, InternalContact
from src.contact_sync.core.errors import StorageError
from src.contact_sync.core.monitoring import track_storage_operation

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def storage_operation(
    backend: str,
    operation: str,
    message: str,
    **context: Any,
) -> AsyncGenerator[None, None]:
    """Run one adapter operation with metrics and error translation.

    Usage:
        async with storage_operation("redis", "get_acme_contact",
                                     "Failed to retrieve AcmeCRM contact", contact_id=contact_id):
            raw = await store.get_acme_contact(contact_id)

    Raises:
        StorageError: Any exception raised inside the block, with the original
            message as ``details``.
    """
    async with track_storage_operation(backend, operation):
        try:
            yield
        except Exception as exc:
            logger.error(
                f"{backend}_storage.{operation}_failed",
                backend=backend,
                operation=operation,
                error=str(exc),
                error_type=type(exc).__name__,
                **context,
            )
            raise StorageError(message, details=str(exc)) from exc


def require_id(value: str, name: str = "id") -> str:
    """Reject empty identifiers before any backend call."""
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string")
    return value


def require_external_contact(contact: Any) -> dict[str, Any]:
    """An external contact must be a mapping; it is stored as given."""
    if contact is None or not isinstance(contact, Mapping):
        raise ValueError("contact must be a mapping of vendor fields")
    return dict(contact)


def require_internal_contact(contact_id: str, contact: Any) -> InternalContact:
    """Validate an internal contact (model or camelCase mapping) for storage.

    Raises:
        ValueError: Missing contact, invalid fields, or an ``id`` that differs
            from ``contact_id``.
    """
    if contact is None:
        raise ValueError("contact is required")
    if isinstance(contact, Mapping):
        contact = InternalContact.model_validate({"id": contact_id, **contact})
    elif not isinstance(contact, InternalContact):
        raise ValueError("contact must be an InternalContact or a mapping of its fields")
    if contact.id != contact_id:
        raise ValueError(f"contact id {contact.id!r} does not match {contact_id!r}")
    return contact


def require_source(source: ContactSource | str) -> str:
    """Normalize a source tag to its stored text form."""
    value = source.value if isinstance(source, ContactSource) else source
    return require_id(value, "source")

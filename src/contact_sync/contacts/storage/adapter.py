"""Storage adapter abstract base class -- the contract every contact backend implements.

Application code depends only on StorageAdapter; the factory decides which
backend sits behind it. No method takes a backend-specific argument, so a new
backend plugs in without touching any caller.

Lookup misses return None. Backend failures raise StorageError. A backend that
leaves a method unimplemented cannot be instantiated, and calling the base
implementation raises NotImplementedError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.contact_sync.contacts.schemas import ContactSource, ExternalContact, InternalContact


class StorageAdapter(ABC):
    """Abstract interface for contact storage backends.

    Methods:
        store_acme_contact: Store an AcmeCRM contact verbatim, return it as stored.
        get_acme_contact: Fetch an AcmeCRM contact by ID, or None.
        delete_acme_contact: Delete an AcmeCRM contact, True if it existed.
        store_internal_contact: Store an internal contact, return it as stored.
        get_internal_contact: Fetch an internal contact by ID, or None.
        get_internal_contact_by_source_id: Fetch by (source, sourceId), or None.
        delete_internal_contact: Delete an internal contact, True if it existed.
        close: Release backend resources. Never raises; safe to repeat.
    """

    @abstractmethod
    async def store_acme_contact(self, contact_id: str, contact: ExternalContact) -> ExternalContact:
        """Store an AcmeCRM contact without renaming any field."""
        raise NotImplementedError(f"{type(self).__name__} does not implement store_acme_contact")

    @abstractmethod
    async def get_acme_contact(self, contact_id: str) -> ExternalContact | None:
        """Fetch an AcmeCRM contact by ID."""
        raise NotImplementedError(f"{type(self).__name__} does not implement get_acme_contact")

    @abstractmethod
    async def delete_acme_contact(self, contact_id: str) -> bool:
        """Delete an AcmeCRM contact by ID."""
        raise NotImplementedError(f"{type(self).__name__} does not implement delete_acme_contact")

    @abstractmethod
    async def store_internal_contact(self, contact_id: str, contact: InternalContact) -> InternalContact:
        """Store an internal contact; the result carries the backend-assigned version."""
        raise NotImplementedError(
            f"{type(self).__name__} does not implement store_internal_contact"
        )

    @abstractmethod
    async def get_internal_contact(self, contact_id: str) -> InternalContact | None:
        """Fetch an internal contact by ID."""
        raise NotImplementedError(f"{type(self).__name__} does not implement get_internal_contact")

    @abstractmethod
    async def get_internal_contact_by_source_id(
        self, source: ContactSource | str, source_id: str
    ) -> InternalContact | None:
        """Fetch the internal contact derived from (source, source_id)."""
        raise NotImplementedError(
            f"{type(self).__name__} does not implement get_internal_contact_by_source_id"
        )

    @abstractmethod
    async def delete_internal_contact(self, contact_id: str) -> bool:
        """Delete an internal contact by ID."""
        raise NotImplementedError(
            f"{type(self).__name__} does not implement delete_internal_contact"
        )

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        raise NotImplementedError(f"{type(self).__name__} does not implement close")

"""Tests for the StorageAdapter contract.

Checks the abstract interface itself: the eight required operations, that
incomplete implementations cannot be instantiated, and that the base methods
refuse to run.
"""

from __future__ import annotations

import pytest

from src.contact_sync.contacts.storage import PostgresAdapter, RedisAdapter, StorageAdapter


class _CompleteAdapter(StorageAdapter):
    """Implements every operation by deferring to the base class."""

    async def store_acme_contact(self, contact_id, contact):
        return await super().store_acme_contact(contact_id, contact)

    async def get_acme_contact(self, contact_id):
        return await super().get_acme_contact(contact_id)

    async def delete_acme_contact(self, contact_id):
        return await super().delete_acme_contact(contact_id)

    async def store_internal_contact(self, contact_id, contact):
        return await super().store_internal_contact(contact_id, contact)

    async def get_internal_contact(self, contact_id):
        return await super().get_internal_contact(contact_id)

    async def get_internal_contact_by_source_id(self, source, source_id):
        return await super().get_internal_contact_by_source_id(source, source_id)

    async def delete_internal_contact(self, contact_id):
        return await super().delete_internal_contact(contact_id)

    async def close(self):
        return await super().close()


class TestStorageAdapterABC:
    """StorageAdapter defines the full contract and nothing more."""

    def test_storage_adapter_has_abstract_methods(self):
        """StorageAdapter ABC has all 8 required abstract methods."""
        expected = {
            "store_acme_contact",
            "get_acme_contact",
            "delete_acme_contact",
            "store_internal_contact",
            "get_internal_contact",
            "get_internal_contact_by_source_id",
            "delete_internal_contact",
            "close",
        }
        assert StorageAdapter.__abstractmethods__ == expected

    def test_storage_adapter_cannot_be_instantiated(self):
        with pytest.raises(TypeError, match="abstract"):
            StorageAdapter()  # type: ignore[abstract]

    def test_partial_implementation_cannot_be_instantiated(self):
        """A subclass missing any operation is rejected at construction."""

        class _Partial(StorageAdapter):
            async def get_acme_contact(self, contact_id):
                return None

        with pytest.raises(TypeError, match="abstract"):
            _Partial()  # type: ignore[abstract]

    @pytest.mark.parametrize(
        "call",
        [
            lambda a: a.store_acme_contact("c1", {}),
            lambda a: a.get_acme_contact("c1"),
            lambda a: a.delete_acme_contact("c1"),
            lambda a: a.store_internal_contact("c1", {}),
            lambda a: a.get_internal_contact("c1"),
            lambda a: a.get_internal_contact_by_source_id("acmecrm", "a1"),
            lambda a: a.delete_internal_contact("c1"),
            lambda a: a.close(),
        ],
    )
    async def test_base_operations_signal_not_implemented(self, call):
        """Every base operation raises NotImplementedError naming the class."""
        with pytest.raises(NotImplementedError, match="_CompleteAdapter"):
            await call(_CompleteAdapter())

    def test_concrete_adapters_implement_contract(self):
        assert issubclass(PostgresAdapter, StorageAdapter)
        assert issubclass(RedisAdapter, StorageAdapter)
        assert PostgresAdapter.__abstractmethods__ == frozenset()
        assert RedisAdapter.__abstractmethods__ == frozenset()

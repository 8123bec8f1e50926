"""Unit tests for backend field mappings.

Pure conversions only -- no database or Redis involved.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from types import SimpleNamespace

from src.contact_sync.contacts.schemas import Address, ContactSource, ContactStatus, InternalContact
from src.contact_sync.contacts.storage.field_mapping import (
    POSTGRES_COLUMN_MAP,
    REDIS_HASH_FIELDS,
    REDIS_JSON_FIELDS,
    internal_to_postgres_row,
    internal_to_redis_hash,
    null_redis_fields,
    postgres_row_to_internal,
    redis_hash_to_internal,
)

# ── Helpers ────────────────────────────────────────────────────────────────


def _make_row(**overrides) -> SimpleNamespace:
    """Attribute-style row with every internal_contacts column."""
    defaults = {
        "id": "c1",
        "first_name": "John",
        "last_name": "Doe",
        "email": "john@example.com",
        "phone": "+1-555-0100",
        "company": "Acme",
        "title": "CTO",
        "address": {"street": "123 Main St", "city": "Springfield", "zipCode": "12345"},
        "notes": None,
        "status": "active",
        "tags": ["vip"],
        "custom_fields": {"tier": "gold"},
        "source": "acmecrm",
        "source_id": "a1",
        "created_at": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 1, 2, 12, 0),
        "version": 3,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _make_contact(**overrides) -> InternalContact:
    defaults = {
        "id": "c1",
        "first_name": "John",
        "last_name": "Doe",
        "email": "john@example.com",
        "address": Address(street="123 Main St", city="Springfield"),
        "status": ContactStatus.LEAD,
        "tags": ["vip", "beta"],
        "custom_fields": {"score": 7, "tier": "gold"},
        "source": ContactSource.ACMECRM,
        "source_id": "a1",
        "created_at": "2024-01-01T12:00:00+00:00",
        "updated_at": "2024-01-02T12:00:00+00:00",
        "version": 2,
    }
    defaults.update(overrides)
    return InternalContact(**defaults)


# ── PostgreSQL Column Map ──────────────────────────────────────────────────


class TestPostgresColumnMap:
    """POSTGRES_COLUMN_MAP is total and one-to-one."""

    def test_covers_every_internal_field(self):
        aliases = {field.alias or name for name, field in InternalContact.model_fields.items()}
        assert set(POSTGRES_COLUMN_MAP) == aliases

    def test_is_injective(self):
        assert len(set(POSTGRES_COLUMN_MAP.values())) == len(POSTGRES_COLUMN_MAP)

    def test_columns_are_snake_case(self):
        assert POSTGRES_COLUMN_MAP["firstName"] == "first_name"
        assert POSTGRES_COLUMN_MAP["sourceId"] == "source_id"
        assert POSTGRES_COLUMN_MAP["customFields"] == "custom_fields"


# ── PostgreSQL Rows ────────────────────────────────────────────────────────


class TestPostgresRowConversion:
    """Row <-> InternalContact conversion."""

    def test_row_to_internal_renames_columns(self):
        contact = postgres_row_to_internal(_make_row())

        dumped = contact.to_camel_dict()
        assert dumped["firstName"] == "John"
        assert dumped["sourceId"] == "a1"
        assert dumped["customFields"] == {"tier": "gold"}
        assert dumped["address"]["zipCode"] == "12345"
        assert contact.version == 3

    def test_row_timestamps_become_iso_text(self):
        """Aware and naive datetimes both come out as ISO-8601 UTC text."""
        contact = postgres_row_to_internal(_make_row())

        assert contact.created_at == "2024-01-01T12:00:00+00:00"
        assert contact.updated_at == "2024-01-02T12:00:00+00:00"

    def test_null_columns_map_to_none(self):
        contact = postgres_row_to_internal(_make_row(phone=None, address=None, source=None, source_id=None))

        assert contact.phone is None
        assert contact.address is None
        assert contact.source is None

    def test_internal_to_row_uses_columns(self):
        row = internal_to_postgres_row(_make_contact())

        assert set(row) == set(POSTGRES_COLUMN_MAP.values())
        assert row["first_name"] == "John"
        assert row["status"] == "lead"
        assert row["source"] == "acmecrm"
        assert row["address"]["street"] == "123 Main St"
        assert row["created_at"] == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_row_round_trip(self):
        contact = _make_contact()
        row = SimpleNamespace(**internal_to_postgres_row(contact))

        assert postgres_row_to_internal(row) == contact


# ── Redis Hashes ───────────────────────────────────────────────────────────


class TestRedisHashConversion:
    """InternalContact <-> Redis hash conversion."""

    def test_hash_fields_are_camel_case(self):
        assert "firstName" in REDIS_HASH_FIELDS
        assert "first_name" not in REDIS_HASH_FIELDS
        assert REDIS_JSON_FIELDS <= set(REDIS_HASH_FIELDS)

    def test_encode_omits_none_and_stringifies(self):
        encoded = internal_to_redis_hash(_make_contact(phone=None))

        assert "phone" not in encoded
        assert all(isinstance(value, str) for value in encoded.values())
        assert encoded["version"] == "2"
        assert encoded["status"] == "lead"
        assert json.loads(encoded["tags"]) == ["vip", "beta"]
        assert json.loads(encoded["customFields"]) == {"score": 7, "tier": "gold"}

    def test_decode_restores_types(self):
        contact = _make_contact()
        decoded = redis_hash_to_internal(internal_to_redis_hash(contact))

        assert decoded == contact
        assert decoded.version == 2
        assert decoded.address == Address(street="123 Main St", city="Springfield")

    def test_decode_normalizes_timestamps(self):
        decoded = redis_hash_to_internal({"id": "c1", "createdAt": "2024-01-01T12:00:00Z", "version": "1"})

        assert decoded.created_at == "2024-01-01T12:00:00+00:00"

    def test_decode_ignores_unknown_fields(self):
        decoded = redis_hash_to_internal({"id": "c1", "version": "1", "legacy": "x"})

        assert decoded.id == "c1"

    def test_null_fields_lists_absent_attributes(self):
        cleared = null_redis_fields(_make_contact(phone=None, company=None))

        assert "phone" in cleared
        assert "company" in cleared
        assert "firstName" not in cleared
        assert "tags" not in cleared

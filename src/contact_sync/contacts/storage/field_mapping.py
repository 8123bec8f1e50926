"""Field mappings between backend-native contact rows and InternalContact.

Defines:
- POSTGRES_COLUMN_MAP: camelCase InternalContact field -> snake_case column.
  Total over InternalContact fields and one-to-one, so the mapping inverts.
- postgres_row_to_internal() / internal_to_postgres_row()
- REDIS_JSON_FIELDS: Hash fields holding JSON-encoded structures.
- redis_hash_to_internal() / internal_to_redis_hash()

All functions are pure: no I/O, no backend client required. Backend temporal
values always come out as ISO-8601 text.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from src.contact_sync.contacts.schemas import (
    InternalContact,
    format_timestamp,
    parse_timestamp,
)

# ── PostgreSQL ─────────────────────────────────────────────────────────────

POSTGRES_COLUMN_MAP: dict[str, str] = {
    "id": "id",
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "company": "company",
    "title": "title",
    "address": "address",
    "notes": "notes",
    "status": "status",
    "tags": "tags",
    "customFields": "custom_fields",
    "source": "source",
    "sourceId": "source_id",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "version": "version",
}

_TIMESTAMP_FIELDS = ("createdAt", "updatedAt")


def postgres_row_to_internal(row: Any) -> InternalContact:
    """Convert a backend row (ORM instance or attribute-style row) to InternalContact.

    Args:
        row: Object exposing the snake_case columns as attributes.

    Returns:
        InternalContact with timestamps rendered as ISO-8601 text.
    """
    data = {field: getattr(row, column) for field, column in POSTGRES_COLUMN_MAP.items()}
    for field in _TIMESTAMP_FIELDS:
        data[field] = format_timestamp(data[field])
    return InternalContact.model_validate(data)


def internal_to_postgres_row(contact: InternalContact) -> dict[str, Any]:
    """Convert an InternalContact to a column -> value dict.

    Timestamps become aware datetimes; enums, address, tags and custom fields
    become plain JSON-compatible values.
    """
    data = contact.model_dump(mode="json", by_alias=True)
    row = {column: data[field] for field, column in POSTGRES_COLUMN_MAP.items()}
    for field in _TIMESTAMP_FIELDS:
        column = POSTGRES_COLUMN_MAP[field]
        row[column] = parse_timestamp(row[column])
    return row


# ── Redis ──────────────────────────────────────────────────────────────────
# Internal contacts are Redis hashes keyed by the camelCase field names.
# Hash values are strings, so structured fields are JSON-encoded and null
# attributes are simply absent from the hash.

REDIS_JSON_FIELDS: frozenset[str] = frozenset({"address", "tags", "customFields"})

REDIS_HASH_FIELDS: tuple[str, ...] = tuple(
    field.alias or name for name, field in InternalContact.model_fields.items()
)


def internal_to_redis_hash(contact: InternalContact) -> dict[str, str]:
    """Encode an InternalContact as a Redis hash mapping (None fields omitted)."""
    encoded: dict[str, str] = {}
    for field, value in contact.model_dump(mode="json", by_alias=True).items():
        if value is None:
            continue
        if field in REDIS_JSON_FIELDS:
            encoded[field] = json.dumps(value)
        else:
            encoded[field] = str(value)
    return encoded


def redis_hash_to_internal(fields: Mapping[str, str]) -> InternalContact:
    """Decode a Redis hash (as returned by HGETALL) into an InternalContact."""
    data: dict[str, Any] = {}
    for field in REDIS_HASH_FIELDS:
        raw = fields.get(field)
        if raw is None:
            continue
        if field in REDIS_JSON_FIELDS:
            data[field] = json.loads(raw)
        elif field == "version":
            data[field] = int(raw)
        elif field in _TIMESTAMP_FIELDS:
            data[field] = format_timestamp(raw)
        else:
            data[field] = raw
    return InternalContact.model_validate(data)


def null_redis_fields(contact: InternalContact) -> list[str]:
    """Hash fields to delete so a re-stored contact drops its null attributes."""
    present = internal_to_redis_hash(contact)
    return [field for field in REDIS_HASH_FIELDS if field not in present]

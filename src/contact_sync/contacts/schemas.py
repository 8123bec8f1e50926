"""Pydantic schemas for contact storage -- internal and external contact shapes.

Defines:
- Enums: ContactStatus, ContactSource
- InternalContact: The service's canonical, backend-agnostic contact. Python
  attributes are snake_case; the serialized shape uses camelCase
  (firstName, sourceId, customFields, createdAt, ...).
- AcmeContact: Validation model for the AcmeCRM vendor shape (acme_* fields).
- ExternalContact: Vendor-shaped record stored and returned verbatim.
- Timestamp helpers shared by the field mappings.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Vendor records are pass-through: field names are whatever the origin CRM used.
ExternalContact = dict[str, Any]

CustomFieldValue = Union[str, int, float, bool, None]

Tag = Annotated[str, Field(max_length=50)]


# ── Timestamp helpers ───────────────────────────────────────────────────────


def format_timestamp(value: datetime | str | None) -> str | None:
    """Render a timestamp as ISO-8601 text with an explicit UTC offset.

    Naive datetimes are taken to be UTC. Text is parsed and re-rendered so
    every stored timestamp has the same shape.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = parse_timestamp(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse ISO-8601 text into an aware UTC datetime."""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_contact_id() -> str:
    """Generate a fresh internal contact ID (never reused)."""
    return str(uuid.uuid4())


# ── Enums ───────────────────────────────────────────────────────────────────


class ContactStatus(str, Enum):
    """Lifecycle status of an internal contact."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    LEAD = "lead"


class ContactSource(str, Enum):
    """Origin system an internal contact was derived from."""

    ACMECRM = "acmecrm"
    MANUAL = "manual"
    IMPORT = "import"


# ── Internal Contact ────────────────────────────────────────────────────────


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, validate_assignment=True
    )


class Address(_CamelModel):
    """Structured postal address."""

    street: str | None = Field(default=None, max_length=200)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    zip_code: str | None = Field(default=None, max_length=20)
    country: str | None = Field(default=None, max_length=100)


class InternalContact(_CamelModel):
    """Contact in the service's canonical shape.

    ``id`` is immutable after creation. ``(source, source_id)`` is unique when
    both are set. ``created_at``/``updated_at`` are ISO-8601 text, never
    datetime objects. ``version`` is assigned by the storage backend on every
    successful store.

    Text lengths match the internal_contacts columns, so a contact that
    validates here fits every backend.
    """

    id: str = Field(min_length=1, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    company: str | None = Field(default=None, max_length=200)
    title: str | None = Field(default=None, max_length=200)
    address: Address | None = None
    notes: str | None = Field(default=None, max_length=2000)
    status: ContactStatus = ContactStatus.ACTIVE
    tags: list[Tag] = Field(default_factory=list)
    custom_fields: dict[str, CustomFieldValue] = Field(default_factory=dict)
    source: ContactSource | None = None
    source_id: str | None = Field(default=None, max_length=255)
    created_at: str | None = None
    updated_at: str | None = None
    version: int = Field(default=1, ge=1)

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple, set, frozenset)):
            return list(dict.fromkeys(value))
        return value

    @field_validator("custom_fields", mode="before")
    @classmethod
    def _default_custom_fields(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _timestamp_as_text(cls, value: Any) -> Any:
        if isinstance(value, (datetime, str)):
            return format_timestamp(value)
        return value

    def to_camel_dict(self) -> dict[str, Any]:
        """JSON-compatible dict with camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)


# ── AcmeCRM Contact ─────────────────────────────────────────────────────────


class AcmeContact(BaseModel):
    """AcmeCRM's native contact shape. Unknown vendor fields are kept."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    acme_first_name: str | None = None
    acme_last_name: str | None = None
    acme_email: str | None = None
    acme_phone: str | None = None
    acme_company: str | None = None
    acme_title: str | None = None
    acme_address: str | None = None
    acme_notes: str | None = None
    acme_status: str | None = None
    acme_tags: list[str] = Field(default_factory=list)
    acme_custom_fields: dict[str, CustomFieldValue] = Field(default_factory=dict)
    acme_created_at: str | None = None
    acme_updated_at: str | None = None
    acme_version: int | None = None

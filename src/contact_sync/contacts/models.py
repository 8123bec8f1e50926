"""Contact persistence models.

Two tables, never merged:
- AcmeContactModel: AcmeCRM records stored verbatim as a JSON document
- InternalContactModel: Internal contacts, one snake_case column per field

JSON columns use JSONB on PostgreSQL and plain JSON elsewhere (SQLite in tests).
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.contact_sync.core.database import ContactBase

JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class AcmeContactModel(ContactBase):
    """AcmeCRM contact, stored without any field renaming."""

    __tablename__ = "acme_contacts"
    __table_args__ = (
        Index("idx_acme_contacts_created_at", "created_at"),
        Index("idx_acme_contacts_updated_at", "updated_at"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    data: Mapped[dict] = mapped_column(JSONDocument, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class InternalContactModel(ContactBase):
    """Internal contact in the backend's snake_case column convention.

    (source, source_id) is unique; PostgreSQL treats NULLs as distinct, so
    contacts without an origin never collide.
    """

    __tablename__ = "internal_contacts"
    __table_args__ = (
        UniqueConstraint("source", "source_id", name="uq_internal_contacts_source"),
        Index("idx_internal_contacts_email", "email"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    company: Mapped[str | None] = mapped_column(String(200), nullable=True)
    title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    address: Mapped[dict | None] = mapped_column(JSONDocument, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")
    tags: Mapped[list] = mapped_column(JSONDocument, nullable=False, default=list)
    custom_fields: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=dict)
    source: Mapped[str | None] = mapped_column(String(50), nullable=True)
    source_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

"""Contact repository -- async SQL operations for the contact tables.

Provides ContactRepository with the session_factory callable pattern. Store
methods are single-statement upserts with RETURNING, so the caller gets the
row as written, including the backend-assigned version and timestamps.

Upserts are built with the dialect's own INSERT construct (PostgreSQL in
production, SQLite in tests); both support ON CONFLICT ... DO UPDATE.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from src.contact_sync.contacts.models import AcmeContactModel, InternalContactModel
from src.contact_sync.contacts.schemas import parse_timestamp, utc_now

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

# Columns an upsert never overwrites on an existing row
_IMMUTABLE_COLUMNS = frozenset({"id", "created_at", "version"})


def _upsert_insert(session: AsyncSession) -> Callable[..., Any]:
    dialect = session.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect]
    except KeyError:
        raise NotImplementedError(f"Upsert not supported for dialect: {dialect}") from None


class ContactRepository:
    """Async CRUD for AcmeCRM and internal contact rows.

    Returns backend-native rows (ORM instances); converting them to the
    contact schemas is the storage adapter's job.

    Args:
        session_factory: Async callable that yields AsyncSession instances.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncGenerator[AsyncSession, None]]
    ) -> None:
        self._session_factory = session_factory

    # ── AcmeCRM contacts ────────────────────────────────────────────────────

    async def store_acme_contact(
        self, contact_id: str, data: dict[str, Any]
    ) -> AcmeContactModel:
        """Insert or replace an AcmeCRM contact document.

        Returns:
            The stored row. ``version`` starts at 1 and increments on replace.
        """
        now = utc_now()
        async for session in self._session_factory():
            insert = _upsert_insert(session)
            stmt = insert(AcmeContactModel).values(
                id=contact_id,
                data=data,
                created_at=now,
                updated_at=now,
                version=1,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[AcmeContactModel.id],
                set_={
                    "data": stmt.excluded.data,
                    "updated_at": stmt.excluded.updated_at,
                    "version": AcmeContactModel.version + 1,
                },
            ).returning(AcmeContactModel)
            result = await session.scalars(
                stmt, execution_options={"populate_existing": True}
            )
            model = result.one()
            await session.commit()
            return model

    async def get_acme_contact(self, contact_id: str) -> AcmeContactModel | None:
        """Get an AcmeCRM contact row by ID, or None."""
        async for session in self._session_factory():
            stmt = select(AcmeContactModel).where(AcmeContactModel.id == contact_id)
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def delete_acme_contact(self, contact_id: str) -> bool:
        """Delete an AcmeCRM contact. Returns True if a row was removed."""
        async for session in self._session_factory():
            result = await session.execute(
                delete(AcmeContactModel).where(AcmeContactModel.id == contact_id)
            )
            await session.commit()
            return result.rowcount > 0

    # ── Internal contacts ───────────────────────────────────────────────────

    async def store_internal_contact(
        self, contact_id: str, values: dict[str, Any]
    ) -> InternalContactModel:
        """Insert or update an internal contact row.

        Args:
            contact_id: Internal contact ID (primary key).
            values: Column name -> value. ``version`` and ``updated_at`` are
                ignored; ``created_at`` is used only when the row is new.

        Returns:
            The stored row with backend-assigned version and timestamps.
        """
        now = utc_now()
        row = {
            column: value
            for column, value in values.items()
            if column not in ("id", "version", "updated_at", "created_at")
        }
        row.update(
            id=contact_id,
            created_at=parse_timestamp(values.get("created_at")) or now,
            updated_at=now,
            version=1,
        )

        async for session in self._session_factory():
            insert = _upsert_insert(session)
            stmt = insert(InternalContactModel).values(**row)
            set_ = {
                column: stmt.excluded[column]
                for column in row
                if column not in _IMMUTABLE_COLUMNS
            }
            set_["version"] = InternalContactModel.version + 1
            stmt = stmt.on_conflict_do_update(
                index_elements=[InternalContactModel.id],
                set_=set_,
            ).returning(InternalContactModel)
            result = await session.scalars(
                stmt, execution_options={"populate_existing": True}
            )
            model = result.one()
            await session.commit()
            return model

    async def get_internal_contact(self, contact_id: str) -> InternalContactModel | None:
        """Get an internal contact row by ID, or None."""
        async for session in self._session_factory():
            stmt = select(InternalContactModel).where(InternalContactModel.id == contact_id)
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def get_internal_contact_by_source_id(
        self, source: str, source_id: str
    ) -> InternalContactModel | None:
        """Get the internal contact derived from (source, source_id), or None."""
        async for session in self._session_factory():
            stmt = select(InternalContactModel).where(
                InternalContactModel.source == source,
                InternalContactModel.source_id == source_id,
            )
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def delete_internal_contact(self, contact_id: str) -> bool:
        """Delete an internal contact. Returns True if a row was removed."""
        async for session in self._session_factory():
            result = await session.execute(
                delete(InternalContactModel).where(InternalContactModel.id == contact_id)
            )
            await session.commit()
            return result.rowcount > 0

"""Shared test fixtures for contact storage.

Provides:
- Per-test SQLite database file (aiosqlite) with the contact tables created
- session_factory matching the get_session() generator contract
- ContactRepository and PostgresAdapter bound to that engine

The SQLite dialect supports the same ON CONFLICT upserts with RETURNING the
repository issues against PostgreSQL, so no database server is required.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine

import src.contact_sync.contacts.models  # noqa: F401
from src.contact_sync.contacts.repository import ContactRepository
from src.contact_sync.contacts.storage.postgres import PostgresAdapter
from src.contact_sync.core.database import ContactBase


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh database per test. Each session checks out its own connection."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'contacts.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(ContactBase.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Async generator function yielding sessions, like core.database.get_session."""

    async def _session_factory() -> AsyncGenerator[AsyncSession, None]:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            yield session

    return _session_factory


@pytest.fixture
def repository(session_factory) -> ContactRepository:
    return ContactRepository(session_factory)


@pytest.fixture
def postgres_adapter(repository, engine) -> PostgresAdapter:
    """PostgresAdapter over the test database; close() disposes the engine."""
    return PostgresAdapter(repository=repository, on_close=engine.dispose)

"""Async SQLAlchemy engine and session factory for contact storage.

Provides:
- ContactBase: Declarative base for the contact tables
- get_engine(): Lazily created AsyncEngine singleton
- get_session(): AsyncSession generator used as a repository session factory
- init_db() / close_db(): Table creation and engine disposal
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from src.contact_sync.config import get_settings

logger = structlog.get_logger(__name__)

# ── Module-level engine (lazy init) ────────────────────────────────────────

_engine: AsyncEngine | None = None


def get_engine() -> AsyncEngine:
    """Get or create the async engine singleton."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
            echo=False,
        )
    return _engine


# ── Declarative Base ────────────────────────────────────────────────────────


class ContactBase(DeclarativeBase):
    """Base class for contact storage models."""


# ── Session Factory ─────────────────────────────────────────────────────────


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an AsyncSession bound to the shared engine."""
    engine = get_engine()
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


# ── Database Initialization ─────────────────────────────────────────────────


async def init_db() -> None:
    """Create the contact tables if they don't exist."""
    # Register the models on ContactBase.metadata
    import src.contact_sync.contacts.models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(ContactBase.metadata.create_all)
    logger.info("database.initialized")


async def close_db() -> None:
    """Dispose of the engine and close all connections.

    Safe to call when the engine was never created or is already disposed.
    """
    global _engine
    if _engine:
        engine, _engine = _engine, None
        await engine.dispose()
        logger.info("database.closed")

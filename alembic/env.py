"""Alembic environment for the contact storage tables.

  alembic upgrade head            -- apply migrations to DATABASE_URL
  alembic upgrade head --sql      -- render the SQL without connecting
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from src.contact_sync.config import get_settings
from src.contact_sync.core.database import ContactBase
import src.contact_sync.contacts.models  # noqa: F401

# Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = ContactBase.metadata


def _sync_url() -> str:
    # Migrations run on the synchronous driver
    return get_settings().DATABASE_URL.replace("+asyncpg", "")


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = create_engine(_sync_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

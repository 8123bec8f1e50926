"""Contact storage layer -- pluggable backend adapters behind one contract.

Provides the abstract StorageAdapter interface with concrete implementations:
- PostgresAdapter: acme_contacts / internal_contacts tables via ContactRepository
- RedisAdapter: JSON documents and hashes via RedisContactStore
- get_storage_adapter(): Resolves the backend from argument, settings or default

Application code should depend on StorageAdapter only.
"""

from src.contact_sync.contacts.storage.adapter import StorageAdapter
from src.contact_sync.contacts.storage.factory import (
    DEFAULT_STORAGE_TYPE,
    StorageType,
    get_storage_adapter,
    register_storage_adapter,
    resolve_storage_type,
)
from src.contact_sync.contacts.storage.field_mapping import (
    POSTGRES_COLUMN_MAP,
    internal_to_postgres_row,
    internal_to_redis_hash,
    postgres_row_to_internal,
    redis_hash_to_internal,
)
from src.contact_sync.contacts.storage.postgres import PostgresAdapter
from src.contact_sync.contacts.storage.redis import RedisAdapter

__all__ = [
    "StorageAdapter",
    "PostgresAdapter",
    "RedisAdapter",
    "StorageType",
    "DEFAULT_STORAGE_TYPE",
    "get_storage_adapter",
    "register_storage_adapter",
    "resolve_storage_type",
    "POSTGRES_COLUMN_MAP",
    "postgres_row_to_internal",
    "internal_to_postgres_row",
    "redis_hash_to_internal",
    "internal_to_redis_hash",
]

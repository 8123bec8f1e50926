"""Redis contact store -- key layout and commands for contacts in Redis.

Key layout (all under the configured prefix):
- {prefix}:acme_contact:{id}                        JSON string, vendor shape
- {prefix}:internal_contact:{id}                    hash, one field per contact field
- {prefix}:internal_contact_source:{source}:{sid}   string, owning internal contact id

Internal contact writes and deletes run through Redis.transaction(): the keys
are WATCHed, read, and changed in one MULTI/EXEC so the hash and its
(source, sourceId) index key change together. When a concurrent write touches a
watched key, EXEC aborts with WatchError and the block is re-run on fresh state.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

import redis.asyncio as aioredis
from redis.asyncio.client import Pipeline

from src.contact_sync.contacts.schemas import format_timestamp, utc_now

CREATED_AT_FIELD = "createdAt"
UPDATED_AT_FIELD = "updatedAt"
VERSION_FIELD = "version"
SOURCE_FIELD = "source"
SOURCE_ID_FIELD = "sourceId"


class SourceIdConflictError(Exception):
    """(source, sourceId) already belongs to a different internal contact."""

    def __init__(self, source: str, source_id: str, owner_id: str) -> None:
        super().__init__(
            f"source {source!r} / sourceId {source_id!r} already belongs to contact {owner_id}"
        )
        self.source = source
        self.source_id = source_id
        self.owner_id = owner_id


class RedisContactStore:
    """Contact persistence over a redis.asyncio client.

    Args:
        redis_client: Client created with ``decode_responses=True``.
        key_prefix: Namespace for every key this store touches.
    """

    def __init__(self, redis_client: aioredis.Redis, key_prefix: str = "contact_sync") -> None:
        self._redis = redis_client
        self._prefix = key_prefix

    # ── Keys ────────────────────────────────────────────────────────────────

    def acme_key(self, contact_id: str) -> str:
        return f"{self._prefix}:acme_contact:{contact_id}"

    def internal_key(self, contact_id: str) -> str:
        return f"{self._prefix}:internal_contact:{contact_id}"

    def source_index_key(self, source: str, source_id: str) -> str:
        return f"{self._prefix}:internal_contact_source:{source}:{source_id}"

    # ── AcmeCRM contacts ────────────────────────────────────────────────────

    async def store_acme_contact(self, contact_id: str, contact: dict[str, Any]) -> dict[str, Any]:
        """Write the contact as JSON and return the stored document."""
        key = self.acme_key(contact_id)
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.set(key, json.dumps(contact))
            pipe.get(key)
            _, stored = await pipe.execute()
        return json.loads(stored)

    async def get_acme_contact(self, contact_id: str) -> dict[str, Any] | None:
        raw = await self._redis.get(self.acme_key(contact_id))
        if raw is None:
            return None
        return json.loads(raw)

    async def delete_acme_contact(self, contact_id: str) -> int:
        """Delete the contact. Returns the number of keys removed (0 or 1)."""
        return await self._redis.delete(self.acme_key(contact_id))

    # ── Internal contacts ───────────────────────────────────────────────────

    async def store_internal_contact(
        self,
        contact_id: str,
        fields: dict[str, str],
        *,
        clear: Iterable[str] = (),
    ) -> dict[str, str]:
        """Write an internal contact hash and return it as stored.

        ``updatedAt`` is set to now, ``createdAt`` is only written when the
        hash does not have one yet, and ``version`` is incremented atomically.
        Any ``version``/``updatedAt`` in ``fields`` is ignored. Concurrent
        writers to the same contact are serialized: a write that loses the
        WATCH race is re-run against the new state, so the last one wins.

        Args:
            contact_id: Internal contact ID.
            fields: Hash field -> encoded string value.
            clear: Hash fields to remove (attributes that are now null).

        Raises:
            SourceIdConflictError: The (source, sourceId) pair is indexed to
                another contact.
        """
        fields = dict(fields)
        now = format_timestamp(utc_now())
        created_at = fields.pop(CREATED_AT_FIELD, None) or now
        fields.pop(VERSION_FIELD, None)
        fields[UPDATED_AT_FIELD] = now
        stale = [
            name
            for name in clear
            if name not in fields and name not in (CREATED_AT_FIELD, VERSION_FIELD)
        ]

        key = self.internal_key(contact_id)
        source, source_id = fields.get(SOURCE_FIELD), fields.get(SOURCE_ID_FIELD)
        index_key = self.source_index_key(source, source_id) if source and source_id else None

        async def write(pipe: Pipeline) -> None:
            if index_key:
                owner = await pipe.get(index_key)
                if owner is not None and owner != contact_id:
                    raise SourceIdConflictError(source, source_id, owner)

            previous_source, previous_source_id = await pipe.hmget(
                key, SOURCE_FIELD, SOURCE_ID_FIELD
            )
            previous_index_key = (
                self.source_index_key(previous_source, previous_source_id)
                if previous_source and previous_source_id
                else None
            )
            moved = previous_index_key is not None and previous_index_key != index_key
            if moved:
                await pipe.watch(previous_index_key)

            pipe.multi()
            pipe.hset(key, mapping=fields)
            if stale:
                pipe.hdel(key, *stale)
            pipe.hsetnx(key, CREATED_AT_FIELD, created_at)
            pipe.hincrby(key, VERSION_FIELD, 1)
            if moved:
                pipe.delete(previous_index_key)
            if index_key:
                pipe.set(index_key, contact_id)
            pipe.hgetall(key)

        watched = [key] + ([index_key] if index_key else [])
        results = await self._redis.transaction(write, *watched)
        return results[-1]

    async def get_internal_contact(self, contact_id: str) -> dict[str, str] | None:
        fields = await self._redis.hgetall(self.internal_key(contact_id))
        return fields or None

    async def get_internal_contact_by_source_id(
        self, source: str, source_id: str
    ) -> dict[str, str] | None:
        """Resolve (source, sourceId) through the index key, then load the hash."""
        contact_id = await self._redis.get(self.source_index_key(source, source_id))
        if contact_id is None:
            return None
        return await self.get_internal_contact(contact_id)

    async def delete_internal_contact(self, contact_id: str) -> int:
        """Delete the hash and its source index key.

        Returns:
            Number of contact hashes removed (0 or 1).
        """
        key = self.internal_key(contact_id)

        async def remove(pipe: Pipeline) -> None:
            source, source_id = await pipe.hmget(key, SOURCE_FIELD, SOURCE_ID_FIELD)
            index_key = (
                self.source_index_key(source, source_id) if source and source_id else None
            )
            owned_index = False
            if index_key:
                await pipe.watch(index_key)
                owned_index = await pipe.get(index_key) == contact_id

            pipe.multi()
            pipe.delete(key)
            if owned_index:
                pipe.delete(index_key)

        results = await self._redis.transaction(remove, key)
        return results[0]

    async def close(self) -> None:
        await self._redis.aclose()

#!/usr/bin/env python3
"""CLI script to prepare contact storage.

Usage:
    python scripts/init_storage.py
    python scripts/init_storage.py --smoke
    python scripts/init_storage.py --storage-type redis --smoke

Connects using DATABASE_URL / REDIS_URL from environment or .env file.
Creates the contact tables (PostgreSQL) and, with --smoke, stores, reads back
and deletes one contact through the configured storage adapter.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

# Ensure project root is on sys.path so we can import src.contact_sync
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dotenv import load_dotenv  # noqa: E402

# Load .env from project root
load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))


async def smoke_check(storage_type: str | None) -> bool:
    """Round-trip one internal contact through the adapter. Returns True on success."""
    from src.contact_sync.contacts.schemas import ContactSource, InternalContact, new_contact_id
    from src.contact_sync.contacts.storage import get_storage_adapter

    adapter = get_storage_adapter(storage_type)
    contact_id = new_contact_id()
    try:
        stored = await adapter.store_internal_contact(
            contact_id,
            InternalContact(
                id=contact_id,
                first_name="Smoke",
                last_name="Check",
                source=ContactSource.MANUAL,
                source_id=f"smoke-{contact_id}",
            ),
        )
        print(f"  Stored:    {stored.id} (version {stored.version})")

        fetched = await adapter.get_internal_contact(contact_id)
        print(f"  Retrieved: {fetched is not None and fetched.id == contact_id}")

        deleted = await adapter.delete_internal_contact(contact_id)
        print(f"  Deleted:   {deleted}")
        return fetched is not None and deleted
    finally:
        await adapter.close()


async def init_storage(storage_type: str | None, smoke: bool) -> int:
    from src.contact_sync.contacts.storage import resolve_storage_type
    from src.contact_sync.config import get_settings
    from src.contact_sync.core.database import close_db, init_db
    from src.contact_sync.core.logging import configure_structlog

    configure_structlog()
    resolved = resolve_storage_type(storage_type, get_settings().STORAGE_TYPE)
    print(f"Storage backend: {resolved}")

    if resolved == "postgres":
        await init_db()
        print("Contact tables ready")
        await close_db()

    if smoke:
        print("Running smoke check:")
        if not await smoke_check(resolved):
            print("Smoke check FAILED")
            return 1
        print("Smoke check passed")

    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Prepare contact storage")
    parser.add_argument(
        "--storage-type",
        default=None,
        help="Backend to prepare (postgres, redis). Defaults to STORAGE_TYPE.",
    )
    parser.add_argument(
        "--smoke",
        action="store_true",
        help="Store, read back and delete one contact after setup",
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(init_storage(args.storage_type, args.smoke)))


if __name__ == "__main__":
    main()

"""Prometheus metrics for contact storage operations.

Provides:
- storage_operations_total / storage_operation_duration_seconds
- track_storage_operation(): Context manager recording both for one call
"""

from __future__ import annotations

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from prometheus_client import Counter, Histogram

# ── Storage Metrics ──────────────────────────────────────────────────────────

storage_operations_total = Counter(
    "storage_operations_total",
    "Total contact storage operations",
    ["backend", "operation", "status"],
)

storage_operation_duration_seconds = Histogram(
    "storage_operation_duration_seconds",
    "Contact storage operation duration in seconds",
    ["backend", "operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)


@asynccontextmanager
async def track_storage_operation(
    backend: str,
    operation: str,
) -> AsyncGenerator[None, None]:
    """Context manager that tracks storage operation metrics.

    Usage:
        async with track_storage_operation("postgres", "get_internal_contact"):
            row = await repository.get_internal_contact(contact_id)
    """
    start_time = time.perf_counter()
    status = "success"

    try:
        yield
    except Exception:
        status = "error"
        raise
    finally:
        duration = time.perf_counter() - start_time

        storage_operations_total.labels(
            backend=backend,
            operation=operation,
            status=status,
        ).inc()

        storage_operation_duration_seconds.labels(
            backend=backend,
            operation=operation,
        ).observe(duration)

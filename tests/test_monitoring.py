"""Tests for storage operation metrics."""

from __future__ import annotations

import pytest

from src.contact_sync.core.monitoring import (
    storage_operation_duration_seconds,
    storage_operations_total,
    track_storage_operation,
)


def _count(backend: str, operation: str, status: str) -> float:
    return storage_operations_total.labels(
        backend=backend, operation=operation, status=status
    )._value.get()


class TestTrackStorageOperation:
    """track_storage_operation records outcome and duration."""

    async def test_success_increments_counter(self):
        before = _count("test_backend", "success_op", "success")

        async with track_storage_operation("test_backend", "success_op"):
            pass

        assert _count("test_backend", "success_op", "success") == before + 1

    async def test_error_increments_error_counter_and_reraises(self):
        before = _count("test_backend", "failing_op", "error")

        with pytest.raises(RuntimeError):
            async with track_storage_operation("test_backend", "failing_op"):
                raise RuntimeError("backend down")

        assert _count("test_backend", "failing_op", "error") == before + 1

    async def test_duration_observed(self):
        histogram = storage_operation_duration_seconds.labels(
            backend="test_backend", operation="timed_op"
        )
        before = histogram._sum.get()

        async with track_storage_operation("test_backend", "timed_op"):
            pass

        assert histogram._sum.get() >= before


class TestAdapterMetrics:
    """Adapter operations are counted per backend."""

    async def test_postgres_get_is_counted(self, postgres_adapter):
        before = _count("postgres", "get_acme_contact", "success")

        await postgres_adapter.get_acme_contact("a1")

        assert _count("postgres", "get_acme_contact", "success") == before + 1

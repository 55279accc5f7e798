"""Shared test fixtures for all test groups."""

from datetime import UTC, datetime, timedelta

import pytest

from batchrules.schemas.snapshots import BatchSnapshot, LocationSnapshot

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for all date math."""
    return NOW


@pytest.fixture
def days_ago(now):
    """Return a timestamp N days before the fixed reference time."""

    def _days_ago(days: float) -> datetime:
        return now - timedelta(days=days)

    return _days_ago


@pytest.fixture
def make_batch():
    """Factory for cannabis batch snapshots with overridable fields."""

    def _make_batch(**overrides) -> BatchSnapshot:
        data = {
            "id": "batch-001",
            "domainType": "cannabis",
            "cultivarId": "cultivar-og",
            "stage": "vegetative",
            "status": "active",
            "quarantineStatus": "none",
            "startDate": "2026-01-01",
            "plantCount": 24,
        }
        data.update(overrides)
        return BatchSnapshot.model_validate(data)

    return _make_batch


@pytest.fixture
def room():
    """Flower room at 95 of 100 plants with 1000 sq ft, 500 in use."""
    return LocationSnapshot(
        id="loc-1",
        name="Flower Room A",
        capacity=100,
        current_plant_count=95,
        area=1000,
        used_area=500,
    )

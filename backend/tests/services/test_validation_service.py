"""Tests for ValidationService.

Tests use an injected clock so every date check is reproducible.
"""
import json

import pytest
from structlog.testing import capture_logs

from batchrules.core.config import Settings
from batchrules.core.exceptions import RulesetLoadError
from batchrules.domain.domains import Domain
from batchrules.schemas.snapshots import LocationSnapshot
from batchrules.services.validation_service import ValidationService

pytestmark = pytest.mark.unit


@pytest.fixture
def service(now):
    return ValidationService(clock=lambda: now)


class TestSingleChecks:
    def test_stage_transition_uses_injected_clock(self, service, make_batch, days_ago):
        batch = make_batch(stage="flowering", startDate=days_ago(95))
        result = service.validate_stage_transition("cannabis", "flowering", "harvest", batch)
        assert result.is_valid is True
        assert "95 days" in result.warnings[0]

    def test_stage_transition_is_idempotent(self, service, make_batch, days_ago):
        batch = make_batch(stage="propagation", startDate=days_ago(3))
        first = service.validate_stage_transition("cannabis", "propagation", "vegetative", batch)
        second = service.validate_stage_transition("cannabis", "propagation", "vegetative", batch)
        assert first.is_valid is False
        assert first.model_dump_json() == second.model_dump_json()

    def test_stage_transition_rejects_batch_of_other_domain(self, service, make_batch):
        batch = make_batch(id="p-7", domainType="produce", stage="harvest")
        result = service.validate_stage_transition("cannabis", "harvest", "drying", batch)
        assert result.error == "Batch p-7 is a produce batch, not cannabis"

    def test_quantity(self, service):
        assert service.validate_quantity("cannabis", "merge", 0.05, "grams").is_valid is False

    def test_harvest_date_future_relative_to_clock(self, service):
        assert service.validate_harvest_date("2026-03-02", "2026-01-01", "cannabis").is_valid is False
        assert service.validate_harvest_date("2026-02-28", "2025-11-15", "cannabis").is_valid is True

    def test_packaging_date(self, service):
        assert service.validate_packaging_date("2026-02-20", "2026-02-10").is_valid is True

    def test_storage_duration_defaults_to_clock(self, service):
        result = service.validate_storage_duration("2026-02-20", max_shelf_life=10)
        assert result.is_valid is True
        assert result.warnings == ("90% of shelf life used - prioritize for distribution",)

    def test_storage_duration_explicit_date(self, service):
        result = service.validate_storage_duration("2026-02-20", max_shelf_life=10, current_date="2026-02-21")
        assert result.warnings == ()

    def test_capacity(self, service, room):
        assert service.validate_location_capacity(room, 10).available_capacity == 5
        assert service.validate_area_capacity(room, 100).is_valid is True

    def test_merge_and_split(self, service, make_batch):
        assert service.validate_merge([make_batch(id="a"), make_batch(id="b")]).is_valid is True
        assert service.validate_split(make_batch(status="closed"), 3).error == "Cannot split closed batch"

    def test_batch_record_checks(self, service, now):
        assert service.validate_plant_count(3, "produce").warnings
        assert service.validate_harvest_data(500, 5, "2026-02-28").is_valid is True

    def test_rejection_is_logged(self, service):
        with capture_logs() as logs:
            service.validate_quantity("cannabis", "split", 5, "lbs")
        assert logs[0]["event"] == "validation_rejected"
        assert logs[0]["check"] == "quantity"
        assert logs[0]["errors"] == ["Unit mismatch: expected grams, got lbs"]


class TestOperations:
    def test_split_aggregates_independent_errors(self, service, make_batch):
        batch = make_batch(quarantineStatus="quarantined")
        result = service.check_split(batch, split_count=25, quantity=0.01, unit="grams")
        assert result.is_valid is False
        assert len(result.errors) == 2
        assert "more than 20" in result.errors[0]
        assert "below minimum 0.1grams" in result.errors[1]

    def test_valid_split(self, service, make_batch):
        result = service.check_split(make_batch(), split_count=4, quantity=250, unit="grams")
        assert result.is_valid is True

    def test_merge_checks_quantity_for_batch_domain(self, service, make_batch):
        batches = [
            make_batch(id="p1", domainType="produce", stage="harvest"),
            make_batch(id="p2", domainType="produce", stage="harvest"),
        ]
        result = service.check_merge(batches, quantity=1_000_000, unit="grams")
        assert result.is_valid is False
        assert result.errors == (
            "Quantity 1000000grams exceeds maximum 907185grams. Practical handling and storage limits",
        )

    def test_merge_with_no_batches(self, service):
        result = service.check_merge([], quantity=10, unit="grams")
        assert result.errors == ("At least 2 batches required for merge operation",)

    def test_waste(self, service, make_batch):
        assert service.check_waste(make_batch(), 0.2, "grams").is_valid is True
        assert service.check_waste(make_batch(domainType="produce"), 2, "grams").is_valid is False

    def test_transfer_uses_batch_plant_count(self, service, make_batch, room):
        result = service.check_transfer(make_batch(plantCount=4), room, quantity=10, unit="grams")
        assert result.is_valid is True
        assert any("99% capacity" in w for w in result.warnings)

    def test_transfer_collects_capacity_and_area(self, service, make_batch, room):
        result = service.check_transfer(
            make_batch(plantCount=24), room, quantity=10, unit="grams", area=800
        )
        assert result.is_valid is False
        assert len(result.errors) == 2
        assert "would exceed capacity" in result.errors[0]
        assert "area would exceed capacity" in result.errors[1]

    def test_transfer_without_area_tracking_warns(self, service, make_batch):
        field = LocationSnapshot(id="f", name="Field 9", capacity=10_000)
        result = service.check_transfer(
            make_batch(domainType="produce", plantCount=500), field, quantity=5000, unit="grams", area=40
        )
        assert result.is_valid is True
        assert "Location does not have area tracking configured" in result.warnings


class TestFromSettings:
    def test_builtin_rulesets_by_default(self):
        service = ValidationService.from_settings(Settings(_env_file=None, ruleset_path=""))
        assert service.validate_quantity("produce", "split", 5, "grams").is_valid is True

    def test_loads_override_file(self, tmp_path, now):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({
            "produce": {
                "stages": [{"stage": "seeding", "allowed_next_stages": ["closed"]}, {"stage": "closed"}],
                "quantity_rules": {"split": {"min_weight": 50}},
                "harvest_cycle": {
                    "short_days": 30,
                    "long_days": 90,
                    "short_message": "early",
                    "long_message": "late",
                },
            }
        }))
        service = ValidationService.from_settings(
            Settings(_env_file=None, ruleset_path=str(path)),
            clock=lambda: now,
        )
        assert service.rulesets[Domain.PRODUCE].quantity_rules["split"].min_weight == 50
        assert service.validate_quantity("produce", "split", 10, "grams").is_valid is False
        assert service.validate_stage_transition("produce", "seeding", "closed").is_valid is True

    def test_bad_override_file_raises(self, tmp_path):
        with pytest.raises(RulesetLoadError):
            ValidationService.from_settings(Settings(_env_file=None, ruleset_path=str(tmp_path / "nope.json")))

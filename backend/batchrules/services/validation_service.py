"""ValidationService: one entry point for every batch validation rule."""

from collections.abc import Callable
from datetime import datetime

import structlog

from batchrules.core.config import Settings, get_settings
from batchrules.domain.batch_rules import validate_batch_creation, validate_harvest_data, validate_plant_count
from batchrules.domain.capacity import validate_area_capacity, validate_location_capacity
from batchrules.domain.compatibility import (
    validate_batch_merge_compatibility,
    validate_batch_split_compatibility,
)
from batchrules.domain.dates import DateLike, utc_now
from batchrules.domain.quantities import QuantityOperation, validate_quantity
from batchrules.domain.results import ValidationResult, merge_results
from batchrules.domain.rulesets import RULESETS, Rulesets, load_rulesets
from batchrules.domain.timeline import (
    validate_harvest_date,
    validate_packaging_date,
    validate_storage_duration,
)
from batchrules.domain.transitions import validate_stage_transition
from batchrules.schemas.snapshots import BatchDraft, BatchSnapshot, LocationSnapshot

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


class ValidationService:
    """Facade over the domain validators used by the batch mutation layer.

    Holds the active rulesets and a clock. Every check is a pure function of
    its arguments plus ``clock()``, so one instance can be shared freely.
    """

    def __init__(self, rulesets: Rulesets | None = None, clock: Clock | None = None):
        """Initialize with dependency injection.

        Args:
            rulesets: Domain ruleset registry (defaults to the built-in tables)
            clock: Zero-argument callable returning the current time (defaults to UTC now)
        """
        self.rulesets = rulesets if rulesets is not None else RULESETS
        self.clock = clock or utc_now

    @classmethod
    def from_settings(cls, settings: Settings | None = None, clock: Clock | None = None) -> "ValidationService":
        """Build the service from settings, loading a ruleset override file if configured.

        Raises:
            RulesetLoadError: configured ruleset file is missing or invalid
        """
        settings = settings or get_settings()
        rulesets = load_rulesets(settings.ruleset_path) if settings.ruleset_path else RULESETS
        return cls(rulesets=rulesets, clock=clock)

    def _report(self, check: str, result: ValidationResult, **context) -> ValidationResult:
        if not result.is_valid:
            logger.info("validation_rejected", check=check, errors=list(result.errors), **context)
        elif result.warnings:
            logger.debug("validation_warned", check=check, warnings=list(result.warnings), **context)
        return result

    # ── Single checks ────────────────────────────────────────────────────────

    def validate_stage_transition(
        self,
        domain: str,
        current_stage: str,
        next_stage: str,
        batch: BatchSnapshot | None = None,
    ) -> ValidationResult:
        result = validate_stage_transition(
            domain,
            current_stage,
            next_stage,
            batch=batch,
            now=self.clock(),
            rulesets=self.rulesets,
        )
        return self._report(
            "stage_transition",
            result,
            domain=domain,
            from_stage=current_stage,
            to_stage=next_stage,
            batch_id=batch.id if batch else None,
        )

    def validate_quantity(self, domain: str, operation: str, quantity: float, unit: str) -> ValidationResult:
        result = validate_quantity(domain, operation, quantity, unit, rulesets=self.rulesets)
        return self._report("quantity", result, domain=domain, operation=str(operation))

    def validate_harvest_date(self, harvest_date: DateLike, start_date: DateLike, domain: str) -> ValidationResult:
        result = validate_harvest_date(harvest_date, start_date, domain, now=self.clock(), rulesets=self.rulesets)
        return self._report("harvest_date", result, domain=domain)

    def validate_packaging_date(
        self,
        packaging_date: DateLike,
        harvest_date: DateLike | None = None,
    ) -> ValidationResult:
        result = validate_packaging_date(packaging_date, harvest_date, now=self.clock())
        return self._report("packaging_date", result)

    def validate_storage_duration(
        self,
        entry_date: DateLike,
        max_shelf_life: int,
        current_date: DateLike | None = None,
    ) -> ValidationResult:
        """Check shelf life consumed; ``current_date`` defaults to the service clock."""
        current = current_date if current_date is not None else self.clock()
        result = validate_storage_duration(entry_date, current, max_shelf_life)
        return self._report("storage_duration", result)

    def validate_location_capacity(self, location: LocationSnapshot, additional_plant_count: int) -> ValidationResult:
        result = validate_location_capacity(location, additional_plant_count)
        return self._report("location_capacity", result, location_id=location.id)

    def validate_area_capacity(self, location: LocationSnapshot, additional_area: float) -> ValidationResult:
        result = validate_area_capacity(location, additional_area)
        return self._report("area_capacity", result, location_id=location.id)

    def validate_merge(self, batches: list[BatchSnapshot]) -> ValidationResult:
        result = validate_batch_merge_compatibility(batches)
        return self._report("merge_compatibility", result, batch_ids=[b.id for b in batches])

    def validate_split(self, batch: BatchSnapshot, split_count: int) -> ValidationResult:
        result = validate_batch_split_compatibility(batch, split_count)
        return self._report("split_compatibility", result, batch_id=batch.id, split_count=split_count)

    def validate_batch_creation(self, draft: BatchDraft, jurisdiction: str | None = None) -> ValidationResult:
        result = validate_batch_creation(draft, jurisdiction, rulesets=self.rulesets)
        return self._report("batch_creation", result, batch_number=draft.batch_number)

    def validate_plant_count(self, new_count: float, domain: str, jurisdiction: str | None = None) -> ValidationResult:
        result = validate_plant_count(new_count, domain, jurisdiction)
        return self._report("plant_count", result, domain=domain)

    def validate_harvest_data(self, wet_weight: float, plant_count: float, harvested_at: DateLike) -> ValidationResult:
        result = validate_harvest_data(wet_weight, plant_count, harvested_at, now=self.clock())
        return self._report("harvest_data", result)

    # ── Batch operations ─────────────────────────────────────────────────────
    # Each runs every independent check for the operation and merges the verdicts,
    # so the caller sees all blocking problems at once.

    def check_split(self, batch: BatchSnapshot, split_count: int, quantity: float, unit: str) -> ValidationResult:
        return merge_results(
            self.validate_split(batch, split_count),
            self.validate_quantity(batch.domain_type, QuantityOperation.SPLIT, quantity, unit),
        )

    def check_merge(self, batches: list[BatchSnapshot], quantity: float, unit: str) -> ValidationResult:
        results = [self.validate_merge(batches)]
        if batches:
            results.append(self.validate_quantity(batches[0].domain_type, QuantityOperation.MERGE, quantity, unit))
        return merge_results(*results)

    def check_waste(self, batch: BatchSnapshot, quantity: float, unit: str) -> ValidationResult:
        return self.validate_quantity(batch.domain_type, QuantityOperation.WASTE, quantity, unit)

    def check_transfer(
        self,
        batch: BatchSnapshot,
        location: LocationSnapshot,
        quantity: float,
        unit: str,
        plant_count: int | None = None,
        area: float | None = None,
    ) -> ValidationResult:
        """Validate moving a batch (or part of it) into a location.

        ``plant_count`` defaults to the batch's plant count; area is only
        checked when given.
        """
        plants = plant_count if plant_count is not None else (batch.plant_count or 0)
        results = [
            self.validate_quantity(batch.domain_type, QuantityOperation.TRANSFER, quantity, unit),
            self.validate_location_capacity(location, plants),
        ]
        if area is not None:
            results.append(self.validate_area_capacity(location, area))
        return merge_results(*results)

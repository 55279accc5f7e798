"""Batch record rules: creation, plant count updates and harvest data.

These checks collect every problem instead of stopping at the first, so a
form can show all of them at once.
"""
import re
from datetime import datetime

from batchrules.domain.catalog import is_domain_stage
from batchrules.domain.dates import DateLike, resolve_now, to_datetime
from batchrules.domain.domains import Domain, coerce_domain
from batchrules.domain.results import ValidationResult
from batchrules.domain.rulesets import Rulesets
from batchrules.schemas.snapshots import BatchDraft

BATCH_NUMBER_PATTERN = re.compile(r"^[A-Z0-9-]+$", re.IGNORECASE)

# Jurisdictions tracked plant-by-plant in METRC
METRC_JURISDICTIONS = frozenset({"oregon", "maryland"})

STANDARD_LIGHTING_SCHEDULES = ("18/6", "12/12", "24/0", "16/8", "20/4")
CANNABIS_SOURCE_TYPES = ("seed", "clone", "tissue_culture")
PRODUCE_GRADES = ("A", "B", "C", "culled")
PRODUCE_RIPENESS = ("unripe", "turning", "ripe", "overripe")
STANDARD_CERTIFICATIONS = ("organic", "gap", "primus_gfs", "other")

MIN_TYPICAL_PRODUCE_PLANTS = 5
HARVEST_RECORD_STALE_DAYS = 7
LOW_WEIGHT_PER_PLANT_G = 10
HIGH_WEIGHT_PER_PLANT_G = 1000


def _requires_metrc_plant(domain: Domain, jurisdiction: str | None) -> bool:
    return domain == Domain.CANNABIS and (jurisdiction or "").lower() in METRC_JURISDICTIONS


def validate_batch_creation(
    draft: BatchDraft,
    jurisdiction: str | None = None,
    rulesets: Rulesets | None = None,
) -> ValidationResult:
    """Validate the fields of a batch about to be registered."""
    errors: list[str] = []
    warnings: list[str] = []

    if not draft.batch_number:
        errors.append("Batch number is required")
    elif not BATCH_NUMBER_PATTERN.match(draft.batch_number):
        errors.append("Batch number must contain only letters, numbers, and hyphens")

    if not draft.stage:
        errors.append("Initial stage is required")
    elif not is_domain_stage(draft.domain_type, draft.stage, rulesets):
        errors.append(f"Unknown {draft.domain_type} stage: {draft.stage}")

    if draft.start_date is None:
        errors.append("Start date is required")

    if draft.plant_count is not None and draft.plant_count < 0:
        errors.append("Plant count cannot be negative")

    if draft.domain_type == Domain.CANNABIS:
        _check_cannabis_draft(draft, jurisdiction, errors, warnings)
    else:
        _check_produce_draft(draft, errors, warnings)

    return ValidationResult.from_messages(errors, warnings)


def _check_cannabis_draft(
    draft: BatchDraft,
    jurisdiction: str | None,
    errors: list[str],
    warnings: list[str],
) -> None:
    if draft.lighting_schedule and draft.lighting_schedule not in STANDARD_LIGHTING_SCHEDULES:
        warnings.append(
            f"Non-standard lighting schedule: {draft.lighting_schedule}. "
            f"Common schedules are {', '.join(STANDARD_LIGHTING_SCHEDULES)}"
        )

    if (
        draft.plant_count is not None
        and draft.plant_count < 1
        and _requires_metrc_plant(draft.domain_type, jurisdiction)
    ):
        errors.append("METRC jurisdictions require at least 1 plant for tracking")

    if draft.source_type and draft.source_type not in CANNABIS_SOURCE_TYPES:
        errors.append("Cannabis source type must be seed, clone, or tissue_culture")

    if draft.source_type == "clone" and not (draft.parent_batch_id or draft.source_batch_id):
        warnings.append("Clone batches should reference a parent or source batch for genealogy tracking")


def _check_produce_draft(draft: BatchDraft, errors: list[str], warnings: list[str]) -> None:
    if draft.grade and draft.grade not in PRODUCE_GRADES:
        errors.append("Produce grade must be A, B, C, or culled")

    if draft.ripeness and draft.ripeness not in PRODUCE_RIPENESS:
        errors.append("Produce ripeness must be unripe, turning, ripe, or overripe")

    if draft.certifications:
        unknown = [key for key in draft.certifications if key not in STANDARD_CERTIFICATIONS]
        if unknown:
            warnings.append(f"Non-standard certification keys: {', '.join(unknown)}")


def validate_plant_count(
    new_count: float,
    domain: Domain | str,
    jurisdiction: str | None = None,
) -> ValidationResult:
    resolved = coerce_domain(domain)
    if resolved is None:
        return ValidationResult.fail(f"Unknown domain: {domain}")

    errors: list[str] = []
    warnings: list[str] = []

    if new_count < 0:
        errors.append("Plant count cannot be negative")

    if not float(new_count).is_integer():
        errors.append("Plant count must be a whole number")

    if new_count < 1 and _requires_metrc_plant(resolved, jurisdiction):
        errors.append("METRC jurisdictions require at least 1 plant")

    if resolved == Domain.PRODUCE and new_count < MIN_TYPICAL_PRODUCE_PLANTS:
        warnings.append(f"Produce batches typically have at least {MIN_TYPICAL_PRODUCE_PLANTS} plants")

    return ValidationResult.from_messages(errors, warnings)


def validate_harvest_data(
    wet_weight: float,
    plant_count: float,
    harvested_at: DateLike,
    now: datetime | None = None,
) -> ValidationResult:
    """Validate a harvest record (wet weight in grams)."""
    errors: list[str] = []
    warnings: list[str] = []

    if wet_weight <= 0:
        errors.append("Harvest weight must be greater than 0")

    if plant_count <= 0:
        errors.append("Plant count must be greater than 0")

    if not float(plant_count).is_integer():
        errors.append("Plant count must be a whole number")

    try:
        harvested = to_datetime(harvested_at)
    except (TypeError, ValueError):
        errors.append("Invalid harvest date format")
    else:
        now = resolve_now(now)
        if harvested > now:
            errors.append("Harvest date cannot be in the future")
        elif (now - harvested).total_seconds() > HARVEST_RECORD_STALE_DAYS * 86400:
            warnings.append(
                f"Harvest date is more than {HARVEST_RECORD_STALE_DAYS} days old - ensure this is correct"
            )

    if wet_weight > 0 and plant_count > 0:
        per_plant = wet_weight / plant_count
        if per_plant < LOW_WEIGHT_PER_PLANT_G:
            warnings.append(f"Low average weight per plant: {per_plant:.2f}g")
        elif per_plant > HIGH_WEIGHT_PER_PLANT_G:
            warnings.append(f"High average weight per plant: {per_plant:.2f}g - verify measurements")

    return ValidationResult.from_messages(errors, warnings)

"""Harvest, packaging and storage date checks.

Dates in the future or before an earlier required date are errors.
Everything else is advisory and only produces warnings.
"""
from datetime import datetime

from batchrules.domain.dates import DateLike, days_between, resolve_now, to_datetime
from batchrules.domain.results import ValidationResult
from batchrules.domain.rulesets import Rulesets, get_ruleset

PACKAGING_DELAY_WARNING_DAYS = 60
SHELF_LIFE_WARNING_PERCENT = 75


def validate_harvest_date(
    harvest_date: DateLike,
    start_date: DateLike,
    domain: str,
    now: datetime | None = None,
    rulesets: Rulesets | None = None,
) -> ValidationResult:
    """Validate a recorded harvest date against the batch start.

    Rules:
        - harvest in the future: error
        - harvest before start: error
        - cycle shorter/longer than the domain's harvest window: warning
    """
    ruleset = get_ruleset(domain, rulesets)
    if ruleset is None:
        return ValidationResult.fail(f"Unknown domain: {domain}")

    try:
        harvest = to_datetime(harvest_date)
    except (TypeError, ValueError):
        return ValidationResult.fail("Invalid harvest date format")
    try:
        start = to_datetime(start_date)
    except (TypeError, ValueError):
        return ValidationResult.fail("Invalid start date format")

    if harvest > resolve_now(now):
        return ValidationResult.fail("Harvest date cannot be in the future")

    if harvest < start:
        return ValidationResult.fail("Harvest date cannot be before batch start date")

    cycle_days = days_between(start, harvest)
    window = ruleset.harvest_cycle
    warnings: list[str] = []
    if cycle_days < window.short_days:
        warnings.append(window.short_message)
    if cycle_days > window.long_days:
        warnings.append(window.long_message)

    return ValidationResult.ok(warnings)


def validate_packaging_date(
    packaging_date: DateLike,
    harvest_date: DateLike | None = None,
    now: datetime | None = None,
) -> ValidationResult:
    try:
        packaging = to_datetime(packaging_date)
    except (TypeError, ValueError):
        return ValidationResult.fail("Invalid packaging date format")

    if packaging > resolve_now(now):
        return ValidationResult.fail("Packaging date cannot be in the future")

    if harvest_date is None or harvest_date == "":
        return ValidationResult.ok()

    try:
        harvest = to_datetime(harvest_date)
    except (TypeError, ValueError):
        return ValidationResult.fail("Invalid harvest date format")
    if packaging < harvest:
        return ValidationResult.fail("Packaging date cannot be before harvest date")

    warnings: list[str] = []
    if days_between(harvest, packaging) > PACKAGING_DELAY_WARNING_DAYS:
        warnings.append(
            f"Packaging more than {PACKAGING_DELAY_WARNING_DAYS} days after harvest - verify shelf life"
        )

    return ValidationResult.ok(warnings)


def validate_storage_duration(
    entry_date: DateLike,
    current_date: DateLike,
    max_shelf_life: int,
) -> ValidationResult:
    """Check time in storage against a shelf life in days.

    Exceeding the shelf life is an error; using more than 75% of it warns.
    """
    if max_shelf_life <= 0:
        return ValidationResult.fail("Maximum shelf life must be a positive number of days")

    try:
        entry = to_datetime(entry_date)
    except (TypeError, ValueError):
        return ValidationResult.fail("Invalid storage entry date format")
    try:
        current = to_datetime(current_date)
    except (TypeError, ValueError):
        return ValidationResult.fail("Invalid current date format")

    stored_days = days_between(entry, current)

    if stored_days > max_shelf_life:
        return ValidationResult.fail(
            f"Storage duration of {stored_days} days exceeds maximum shelf life of {max_shelf_life} days"
        )

    warnings: list[str] = []
    percent_used = stored_days / max_shelf_life * 100
    if percent_used > SHELF_LIFE_WARNING_PERCENT:
        warnings.append(f"{percent_used:.0f}% of shelf life used - prioritize for distribution")

    return ValidationResult.ok(warnings)

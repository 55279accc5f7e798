"""Stage transition validation.

Pure domain logic: no I/O, deterministic for a given ``now``.
"""
from datetime import datetime

from batchrules.domain.dates import days_between, resolve_now
from batchrules.domain.domains import coerce_domain
from batchrules.domain.results import ValidationResult
from batchrules.domain.rulesets import Rulesets, get_ruleset
from batchrules.schemas.snapshots import BatchSnapshot


def _with_message(text: str, validation_message: str) -> str:
    if validation_message:
        return f"{text} {validation_message}"
    return text


def validate_stage_transition(
    domain: str,
    current_stage: str,
    next_stage: str,
    batch: BatchSnapshot | None = None,
    now: datetime | None = None,
    rulesets: Rulesets | None = None,
) -> ValidationResult:
    """Validate moving a batch from ``current_stage`` to ``next_stage``.

    Pure function -- no side effects, no DB access.

    Args:
        domain: Domain tag ("cannabis" or "produce")
        current_stage: Stage the batch is in now
        next_stage: Requested stage
        batch: Optional snapshot used for required-field and duration checks
        now: Current time (injectable for testing, defaults to datetime.now(UTC))
        rulesets: Optional ruleset registry overriding the built-in tables

    Returns:
        ValidationResult with the matched stage definition attached as ``rule``

    Rules (checked in order, first blocking failure wins):
        - A batch must belong to the requested domain
        - Stage without a definition passes with a warning
        - Target must be one of the stage's allowed next stages
        - Every required field must be truthy on the batch
        - Days since batch start must reach min_duration_days
        - Days past max_duration_days only warn
    """
    ruleset = get_ruleset(domain, rulesets)
    if ruleset is None:
        return ValidationResult.fail(f"Unknown domain: {domain}")

    if batch is not None and batch.domain_type != coerce_domain(domain):
        return ValidationResult.fail(f"Batch {batch.id} is a {batch.domain_type} batch, not {domain}")

    rule = ruleset.stage(current_stage)
    if rule is None:
        return ValidationResult.ok([f"No transition rules defined for stage: {current_stage}"])

    if next_stage not in rule.allowed_next_stages:
        allowed = ", ".join(rule.allowed_next_stages) or "none"
        return ValidationResult.fail(
            f"Cannot transition from {current_stage} to {next_stage}. Allowed stages: {allowed}",
            rule=rule,
        )

    if batch is None:
        return ValidationResult.ok(rule=rule)

    missing = batch.missing_fields(rule.required_fields)
    if missing:
        return ValidationResult.fail(
            _with_message(f"Missing required fields: {', '.join(missing)}.", rule.validation_message),
            rule=rule,
        )

    warnings: list[str] = []

    if batch.start_date is not None:
        elapsed = days_between(batch.start_date, resolve_now(now))

        if rule.min_duration_days and elapsed < rule.min_duration_days:
            return ValidationResult.fail(
                _with_message(
                    f"Batch has been in {current_stage} for {elapsed} days. "
                    f"Minimum {rule.min_duration_days} days required.",
                    rule.validation_message,
                ),
                rule=rule,
            )

        if rule.max_duration_days and elapsed > rule.max_duration_days:
            warnings.append(
                _with_message(
                    f"Batch has been in {current_stage} for {elapsed} days, "
                    f"exceeding typical duration of {rule.max_duration_days} days.",
                    rule.validation_message,
                )
            )

    return ValidationResult.ok(warnings, rule=rule)

"""Merge and split compatibility checks."""
from batchrules.domain.domains import BatchStatus, QuarantineStatus
from batchrules.domain.results import ValidationResult
from batchrules.schemas.snapshots import BatchSnapshot

MIN_SPLIT_COUNT = 2
MAX_SPLIT_COUNT = 20


def _distinct(values) -> list:
    """Unique values in first-seen order."""
    seen: list = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def validate_batch_merge_compatibility(batches: list[BatchSnapshot]) -> ValidationResult:
    """Check that a set of batches can be merged into one.

    Rules:
        - at least 2 batches
        - same domain, cultivar and stage
        - none quarantined
        - differing start dates only warn
    """
    if len(batches) < 2:
        return ValidationResult.fail("At least 2 batches required for merge operation")

    if len(_distinct(b.domain_type for b in batches)) > 1:
        return ValidationResult.fail("Cannot merge batches from different domains (cannabis/produce)")

    if len(_distinct(b.cultivar_id for b in batches)) > 1:
        return ValidationResult.fail("Cannot merge batches with different cultivars/varieties")

    stages = _distinct(b.stage for b in batches)
    if len(stages) > 1:
        return ValidationResult.fail(f"Cannot merge batches in different stages: {', '.join(stages)}")

    quarantined = [b for b in batches if b.quarantine_status == QuarantineStatus.QUARANTINED]
    if quarantined:
        return ValidationResult.fail(
            f"Cannot merge batches: {len(quarantined)} batch(es) are quarantined"
        )

    warnings: list[str] = []
    if len(_distinct(b.start_date for b in batches)) > 1:
        warnings.append("Batches have different start dates - verify this merge is intentional")

    return ValidationResult.ok(warnings)


def validate_batch_split_compatibility(batch: BatchSnapshot, split_count: int) -> ValidationResult:
    if split_count < MIN_SPLIT_COUNT:
        return ValidationResult.fail(
            f"Split operation requires at least {MIN_SPLIT_COUNT} resulting batches"
        )

    if split_count > MAX_SPLIT_COUNT:
        return ValidationResult.fail(
            f"Cannot split into more than {MAX_SPLIT_COUNT} batches - use multiple split operations if needed"
        )

    if batch.quarantine_status == QuarantineStatus.QUARANTINED:
        return ValidationResult.fail("Cannot split quarantined batch - release from quarantine first")

    if batch.status == BatchStatus.CLOSED:
        return ValidationResult.fail("Cannot split closed batch")

    return ValidationResult.ok()

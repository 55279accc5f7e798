"""Read-only projections of batches and locations handed to the validators.

Snapshots accept both snake_case and the camelCase keys used by the front end.
Fields not declared here are kept as extras so stage ``required_fields`` can
reference anything the caller records on a batch.
"""
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_snake

from batchrules.domain.dates import to_datetime
from batchrules.domain.domains import BatchStatus, Domain, QuarantineStatus


def _parse_optional_timestamp(value: Any) -> Any:
    if value == "":
        return None
    if isinstance(value, (str, date)):
        return to_datetime(value)
    return value


Timestamp = Annotated[datetime | None, BeforeValidator(_parse_optional_timestamp)]


class SnapshotModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BatchSnapshot(SnapshotModel):
    """The slice of a batch record the validators read."""

    model_config = ConfigDict(extra="allow")

    id: str
    domain_type: Domain
    cultivar_id: str | None = None
    stage: str
    status: BatchStatus = BatchStatus.ACTIVE
    quarantine_status: QuarantineStatus = QuarantineStatus.NONE
    start_date: Timestamp = None
    plant_count: int | None = None

    # Commonly required stage fields
    harvest_date: Timestamp = None
    packaging_date: Timestamp = None
    lighting_schedule: str | None = None
    test_results: Any = None
    metrc_package_tag: str | None = None
    seed_lot_number: str | None = None
    grade_assignment: str | None = None
    lot_number: str | None = None

    def field_value(self, name: str) -> Any:
        """Value of a named field, declared or extra, by snake_case or camelCase name."""
        snake = to_snake(name)
        if snake in type(self).model_fields:
            return getattr(self, snake)
        extras = self.model_extra or {}
        if name in extras:
            return extras[name]
        if snake in extras:
            return extras[snake]
        return extras.get(to_camel(snake))

    def missing_fields(self, names: tuple[str, ...] | list[str]) -> list[str]:
        """Names whose value is falsy (absent, None, empty, zero or False)."""
        return [name for name in names if not self.field_value(name)]


class LocationSnapshot(SnapshotModel):
    """Capacity view of a grow room, field block or storage location."""

    id: str
    name: str
    capacity: int = Field(ge=0)
    current_plant_count: int = 0
    area: float | None = None  # sq ft, None when area tracking is not configured
    used_area: float | None = None


class BatchDraft(SnapshotModel):
    """Fields supplied when registering a new batch."""

    domain_type: Domain
    batch_number: str = ""
    stage: str = ""
    start_date: Timestamp = None
    plant_count: int | None = None
    cultivar_id: str | None = None

    # Cannabis
    lighting_schedule: str | None = None
    source_type: str | None = None
    parent_batch_id: str | None = None
    source_batch_id: str | None = None

    # Produce
    grade: str | None = None
    ripeness: str | None = None
    certifications: dict[str, Any] | None = None

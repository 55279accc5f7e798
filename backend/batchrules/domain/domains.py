"""Domain, batch status and quarantine enums.

Pure domain definitions with no external dependencies.
"""
from enum import StrEnum


class Domain(StrEnum):
    """Cultivation vertical. Every rule table is keyed by domain."""

    CANNABIS = "cannabis"
    PRODUCE = "produce"


class BatchStatus(StrEnum):
    """Batch lifecycle status, orthogonal to stage."""

    ACTIVE = "active"
    QUARANTINED = "quarantined"
    COMPLETED = "completed"
    CLOSED = "closed"


class QuarantineStatus(StrEnum):
    NONE = "none"
    QUARANTINED = "quarantined"
    RELEASED = "released"


def coerce_domain(value: Domain | str | None) -> Domain | None:
    """Return the Domain for a tag, or None if the tag is not a known domain."""
    if isinstance(value, Domain):
        return value
    try:
        return Domain(value)
    except ValueError:
        return None

"""Timestamp parsing and whole-day arithmetic shared by the validators."""
from datetime import UTC, date, datetime

DateLike = str | date | datetime


def to_datetime(value: DateLike) -> datetime:
    """Normalize an ISO-8601 string, date or datetime to an aware UTC datetime.

    Date-only values become midnight UTC. Naive datetimes are taken as UTC.

    Raises:
        ValueError: if a string is not valid ISO-8601
        TypeError: if the value is not a string, date or datetime
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip())
    else:
        raise TypeError(f"Expected ISO-8601 string, date or datetime, got {type(value).__name__}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole days from start to end, floored (negative when end precedes start)."""
    return (to_datetime(end) - to_datetime(start)).days


def utc_now() -> datetime:
    return datetime.now(UTC)


def resolve_now(now: DateLike | None) -> datetime:
    """The injected "now" as aware UTC, or the current time when none is given."""
    if now is None:
        return utc_now()
    return to_datetime(now)

"""Instant and half-open interval helpers for appointment times."""

from datetime import UTC, datetime

from app.core.exceptions import InvalidInterval


def to_instant(value: datetime | str | None, field: str = "Appointment time") -> datetime:
    """
    Coerce a datetime or ISO-8601 string to an aware UTC datetime.

    Naive values are taken to be UTC.

    Raises:
        InvalidInterval: If the value is missing or cannot be parsed
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            raise InvalidInterval(f"{field} is invalid") from None

    if not isinstance(value, datetime):
        raise InvalidInterval(f"{field} is invalid")

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def intervals_overlap(
    start_a: datetime,
    end_a: datetime,
    start_b: datetime,
    end_b: datetime,
) -> bool:
    """Half-open intervals [start_a, end_a) and [start_b, end_b) intersect."""
    return start_a < end_b and start_b < end_a


def validate_interval(start: datetime, end: datetime) -> None:
    """Reject intervals whose end is not strictly after the start."""
    if end <= start:
        raise InvalidInterval("Appointment end time must be after start time")

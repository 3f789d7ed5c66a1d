"""UTC datetime utilities.

Store documents carry timestamps as ISO-8601 strings; these helpers are the
only place that converts between the two representations.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(UTC)


def to_iso(dt: datetime) -> str:
    """Serialize to ISO-8601; naive datetimes are assumed to be UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.isoformat()


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix accepted) into an aware datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt

from datetime import UTC, datetime, tzinfo
from typing import Annotated, Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic.functional_serializers import PlainSerializer


def _serialize_iso_datetime(v: datetime | None) -> str | None:
    if v is None:
        return None
    if v.tzinfo is None:
        v = v.replace(tzinfo=UTC)
    return v.isoformat()


IsoDatetime = Annotated[datetime, PlainSerializer(_serialize_iso_datetime)]


def coerce_timezone(name: str) -> tzinfo:
    """Return the named zone, or UTC when the name is unknown."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return UTC


def normalize_datetime(dt: datetime, tz: tzinfo | None) -> datetime:
    """Express ``dt`` in ``tz``.

    Naive values are assumed to already be wall-clock time in ``tz``. When
    ``tz`` is None the result is naive.
    """
    if tz is None:
        return dt.replace(tzinfo=None)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def parse_timestamp(value: Any, tz: tzinfo | None = None) -> datetime | None:
    """Parse an upstream ISO-8601 timestamp.

    Args:
        value: Raw value from a JSON payload (string or datetime).
        tz: Zone the result is expressed in.

    Returns:
        The normalized datetime, or None if the value is missing or unparseable.
    """
    if isinstance(value, datetime):
        return normalize_datetime(value, tz)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return normalize_datetime(parsed, tz)

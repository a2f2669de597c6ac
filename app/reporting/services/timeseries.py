"""Gapless day-bucketed series."""

from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from app.core.datetime_utils import normalize_datetime
from app.reporting.schemas.dashboard import DayBucket, VisitorDataPoint
from app.reporting.services.periods import DateInterval


def reconcile(timestamps: Iterable[datetime], interval: DateInterval) -> list[DayBucket]:
    """Count events per calendar day across the whole interval.

    Events outside ``[interval.start, interval.end]`` are discarded even if the
    upstream returned them, since some upstream filters only bound the start.

    Args:
        timestamps: Event instants. Naive values are read in the interval's zone.
        interval: Resolved reporting interval.

    Returns:
        Exactly ``interval.days`` buckets, ascending by date, zero-filled.
    """
    tz = interval.start.tzinfo
    counts: Counter[date] = Counter()
    for timestamp in timestamps:
        localized = normalize_datetime(timestamp, tz)
        if interval.start <= localized <= interval.end:
            counts[localized.date()] += 1

    return [DayBucket(date=day.isoformat(), count=counts[day]) for day in interval.iter_days()]


def pad_daily_points(
    points: Iterable[Mapping[str, Any]], interval: DateInterval
) -> list[VisitorDataPoint]:
    """Fill an analytics daily series so every day of the interval is present.

    Points with an unparseable ``date`` or outside the interval are dropped.
    When the provider repeats a day the values are summed.
    """
    by_day: dict[date, VisitorDataPoint] = {}
    for point in points:
        day = _point_day(point.get("date"))
        if day is None or not (interval.start_date <= day <= interval.end_date):
            continue
        existing = by_day.get(day)
        visitors = _as_count(point.get("visitors"))
        pageviews = _as_count(point.get("pageviews"))
        if existing is not None:
            visitors += existing.visitors
            pageviews += existing.pageviews
        by_day[day] = VisitorDataPoint(date=day.isoformat(), visitors=visitors, pageviews=pageviews)

    return [
        by_day.get(day) or VisitorDataPoint(date=day.isoformat())
        for day in interval.iter_days()
    ]


def _point_day(value: Any) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _as_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0
    return max(int(value), 0)

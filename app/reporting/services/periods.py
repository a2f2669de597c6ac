"""Reporting period resolution."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any

from app.core.datetime_utils import normalize_datetime
from app.reporting.schemas.dashboard import PeriodToken

logger = logging.getLogger(__name__)

DEFAULT_PERIOD = PeriodToken.LAST_7_DAYS

# (first day, last day) as offsets back from today, both inclusive
_WINDOWS: dict[PeriodToken, tuple[int, int]] = {
    PeriodToken.TODAY: (0, 0),
    PeriodToken.YESTERDAY: (1, 1),
    PeriodToken.LAST_7_DAYS: (6, 0),
    PeriodToken.LAST_14_DAYS: (13, 0),
    PeriodToken.LAST_30_DAYS: (29, 0),
    PeriodToken.LAST_90_DAYS: (89, 0),
    PeriodToken.LAST_YEAR: (364, 0),
}


@dataclass(frozen=True)
class DateInterval:
    """Closed range of calendar days.

    ``start`` is midnight of the first day and ``end`` the last instant of
    the final day, both in the timezone of the ``now`` they were resolved
    against.
    """

    period: PeriodToken
    start: datetime
    end: datetime

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    @property
    def days(self) -> int:
        """Number of calendar days in the interval, inclusive."""
        return (self.end_date - self.start_date).days + 1

    def iter_days(self) -> Iterator[date]:
        """Yield every calendar day from start to end, ascending."""
        current = self.start_date
        while current <= self.end_date:
            yield current
            current += timedelta(days=1)

    def contains(self, moment: datetime) -> bool:
        """Check whether ``moment`` falls inside the interval.

        Naive moments are read as wall-clock time in the interval's zone.
        """
        localized = normalize_datetime(moment, self.start.tzinfo)
        return self.start <= localized <= self.end


def parse_period(token: Any) -> PeriodToken:
    """Map a caller-supplied token onto the closed period enumeration.

    Unknown tokens resolve to the 7-day window instead of raising, so a
    stale or mistyped selector still renders a dashboard.
    """
    if isinstance(token, PeriodToken):
        return token
    if isinstance(token, str):
        try:
            return PeriodToken(token.strip().lower())
        except ValueError:
            pass
    logger.warning("Unknown period token %r, falling back to %s", token, DEFAULT_PERIOD.value)
    return DEFAULT_PERIOD


def resolve_period(token: Any, now: datetime | date) -> DateInterval:
    """Resolve a period token into concrete day boundaries.

    Args:
        token: Period token such as '7d' or 'yesterday'. Unknown values use '7d'.
        now: Current wall-clock time. Passed in on every call, never cached.

    Returns:
        DateInterval spanning whole calendar days, end inclusive.
    """
    period = parse_period(token)
    if isinstance(now, datetime):
        today = now.date()
        tz = now.tzinfo
    else:
        today = now
        tz = None

    first_offset, last_offset = _WINDOWS[period]
    start = datetime.combine(today - timedelta(days=first_offset), time.min, tzinfo=tz)
    end = datetime.combine(today - timedelta(days=last_offset), time.max, tzinfo=tz)
    return DateInterval(period=period, start=start, end=end)

"""Translate resolved intervals into each upstream provider's parameter shape.

The analytics provider speaks in symbolic periods (``day``, ``7d``, ``30d``)
and only takes explicit ranges through ``period=custom``. The records store
has no notion of periods at all and filters on a start timestamp, either as
flat bracket parameters or as one nested JSON ``filter`` parameter.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from app.core.constants import RECORDS_DATE_FIELD, RECORDS_TIMESTAMP_FORMAT
from app.reporting.schemas.dashboard import PeriodToken
from app.reporting.services.periods import DateInterval


class ProviderKind(str, Enum):
    ANALYTICS = "analytics"
    RECORDS = "records"


class FilterStyle(str, Enum):
    """How a records-store filter is encoded on the query string."""

    FLAT = "flat"
    NESTED = "nested"


# Periods the analytics provider understands natively, anchored on `date`
_ANALYTICS_NATIVE_PERIODS: dict[PeriodToken, str] = {
    PeriodToken.LAST_7_DAYS: "7d",
    PeriodToken.LAST_30_DAYS: "30d",
}

_SINGLE_DAY_PERIODS = frozenset({PeriodToken.TODAY, PeriodToken.YESTERDAY})


@dataclass(frozen=True)
class ProviderQuery:
    provider: ProviderKind
    params: dict[str, Any] = field(default_factory=dict)

    def with_params(self, **extra: Any) -> "ProviderQuery":
        """Return a copy with view-specific parameters merged in."""
        return ProviderQuery(provider=self.provider, params={**self.params, **extra})


def build_query(
    interval: DateInterval,
    provider: ProviderKind,
    *,
    filter_style: FilterStyle = FilterStyle.FLAT,
    date_field: str = RECORDS_DATE_FIELD,
    explicit_range: bool = False,
) -> ProviderQuery:
    """Build the period filter for one provider.

    Args:
        interval: Resolved reporting interval.
        provider: Target provider.
        filter_style: Records store only. Flat bracket or nested JSON filter.
        date_field: Records store only. Timestamp field to filter on.
        explicit_range: Analytics only. Skip native periods and always send
            a ``custom`` date range.

    Returns:
        ProviderQuery carrying the provider-native period parameters.
    """
    if provider == ProviderKind.ANALYTICS:
        return ProviderQuery(provider, _analytics_params(interval, explicit_range))
    return ProviderQuery(provider, _records_params(interval, filter_style, date_field))


def _analytics_params(interval: DateInterval, explicit_range: bool) -> dict[str, Any]:
    if not explicit_range:
        if interval.period in _SINGLE_DAY_PERIODS:
            return {"period": "day", "date": interval.start_date.isoformat()}
        native = _ANALYTICS_NATIVE_PERIODS.get(interval.period)
        if native is not None:
            return {"period": native, "date": interval.end_date.isoformat()}
    return {
        "period": "custom",
        "date": f"{interval.start_date.isoformat()},{interval.end_date.isoformat()}",
    }


def _records_params(
    interval: DateInterval, filter_style: FilterStyle, date_field: str
) -> dict[str, Any]:
    # End bound is enforced client-side; the upstream only sees the start
    start = interval.start.strftime(RECORDS_TIMESTAMP_FORMAT)
    if filter_style == FilterStyle.NESTED:
        return {"filter": json.dumps({date_field: {"_gte": start}})}
    return {f"filter[{date_field}][_gte]": start}

"""Dashboard views assembled from the analytics provider and the records store."""

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from app.core.config import settings
from app.core.constants import (
    AGGREGATE_METRICS,
    CUSTOMERS_COLLECTION,
    DEFAULT_RANKINGS_LIMIT,
    DEFAULT_RECENT_REGISTRATIONS_LIMIT,
    PINNED_UNITS_COLLECTION,
    RECORDS_DATE_FIELD,
    RECORDS_PAGE_LIMIT,
    RECORDS_UNLIMITED,
    TIMESERIES_INTERVAL,
    TIMESERIES_METRICS,
)
from app.core.datetime_utils import coerce_timezone, normalize_datetime, parse_timestamp
from app.core.exceptions import ValidationError
from app.reporting.schemas.dashboard import (
    AnalyticsMetrics,
    BreakdownProperty,
    BreakdownResponse,
    DashboardOverviewResponse,
    MetricsResponse,
    RankingsResponse,
    RecentRegistration,
    RecentRegistrationsResponse,
    RegistrationSummaryResponse,
    RegistrationTimeseriesResponse,
    UpstreamStatus,
    VisitorTimeseriesResponse,
)
from app.reporting.services.fetcher import (
    FetchCandidate,
    FetchQuery,
    FetchResult,
    MultiTierFetcher,
)
from app.reporting.services.periods import DateInterval, resolve_period
from app.reporting.services.providers import (
    ProviderConfig,
    analytics_provider,
    parse_analytics_aggregate,
    parse_analytics_rows,
    parse_records_items,
    records_provider,
)
from app.reporting.services.query_builder import FilterStyle, ProviderKind, build_query
from app.reporting.services.rankings import aggregate, rank
from app.reporting.services.registrations import financing_status, nautical_flag, summarize
from app.reporting.services.timeseries import pad_daily_points, reconcile

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _parse_metrics(body: Any) -> dict[str, Any]:
    values = {
        metric: value
        for metric, value in parse_analytics_aggregate(body).items()
        if metric in AGGREGATE_METRICS and value is not None
    }
    return AnalyticsMetrics.model_validate(values).model_dump()


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class DashboardService:
    """Service resolving each dashboard view for a reporting period.

    Every view resolves the period against the injected clock, asks the
    fetcher for the raw payload and reshapes it. Upstream failures degrade
    to fallback payloads; the returned response then has ``degraded=True``.
    """

    def __init__(
        self,
        fetcher: MultiTierFetcher | None = None,
        clock: Clock | None = None,
        analytics: ProviderConfig | None = None,
        records: ProviderConfig | None = None,
        timezone: str | None = None,
    ) -> None:
        self.fetcher = fetcher or MultiTierFetcher()
        self.timezone = coerce_timezone(timezone or settings.REPORTING_TIMEZONE)
        self.clock = clock or self._wall_clock
        self.analytics = analytics or analytics_provider()
        self.records = records or records_provider()

    def _wall_clock(self) -> datetime:
        return datetime.now(self.timezone)

    def resolve_interval(self, period: Any) -> DateInterval:
        """Resolve ``period`` against the current time of the service clock."""
        now = normalize_datetime(self.clock(), self.timezone)
        return resolve_period(period, now)

    # ============ Candidate builders ============

    def _analytics_candidates(
        self, interval: DateInterval, path: str, /, **extra: Any
    ) -> list[FetchCandidate]:
        """Native period first, then the same window as an explicit date range."""
        if not self.analytics.is_configured:
            logger.warning("Analytics provider not configured, skipping %s", path)
            return []

        native = build_query(interval, ProviderKind.ANALYTICS)
        explicit = build_query(interval, ProviderKind.ANALYTICS, explicit_range=True)
        tiers = [("native_period", native)]
        if explicit.params != native.params:
            tiers.append(("explicit_range", explicit))

        return [
            FetchCandidate(
                strategy=strategy,
                url=self.analytics.url(path),
                params=query.with_params(site_id=self.analytics.site_id, **extra).params,
                headers=self.analytics.headers(),
            )
            for strategy, query in tiers
        ]

    def _records_candidates(
        self,
        interval: DateInterval,
        collection: str,
        fields: Iterable[str],
        limit: int,
        sort: str | None = None,
        require_data: bool = False,
        include_legacy_path: bool = False,
    ) -> list[FetchCandidate]:
        """Both filter encodings on ``/items/<collection>``, optionally the bare path."""
        if not self.records.is_configured:
            logger.warning("Records store not configured, skipping %s", collection)
            return []

        items_url = self.records.url(f"/items/{collection}")
        tiers = [
            ("items_flat_filter", items_url, FilterStyle.FLAT),
            ("items_nested_filter", items_url, FilterStyle.NESTED),
        ]
        if include_legacy_path:
            # Deployments that proxy the records store under /items already
            legacy_url = self.records.url(f"/{collection}")
            tiers.append(("collection_nested_filter", legacy_url, FilterStyle.NESTED))

        extra: dict[str, Any] = {"fields": ",".join(fields), "limit": limit}
        if sort:
            extra["sort"] = sort

        return [
            FetchCandidate(
                strategy=strategy,
                url=url,
                params=build_query(interval, ProviderKind.RECORDS, filter_style=style)
                .with_params(**extra)
                .params,
                headers=self.records.headers(),
                require_data=require_data,
            )
            for strategy, url, style in tiers
        ]

    def _within_interval(
        self, records: Iterable[Mapping[str, Any]], interval: DateInterval
    ) -> list[Mapping[str, Any]]:
        """Drop records whose timestamp lies outside the interval.

        The records store only filters on the start, so anything created after
        ``interval.end`` (e.g. today's rows for 'yesterday') is removed here.
        Records without a readable timestamp are kept.
        """
        kept = []
        for record in records:
            created_at = parse_timestamp(record.get(RECORDS_DATE_FIELD), self.timezone)
            if created_at is None or interval.contains(created_at):
                kept.append(record)
        return kept

    @staticmethod
    def _report_fields(interval: DateInterval, result: FetchResult) -> dict[str, Any]:
        return {
            "period": interval.period,
            "start": interval.start,
            "end": interval.end,
            "degraded": result.degraded,
        }

    # ============ Analytics views ============

    async def resolve_metrics(self, period: Any) -> MetricsResponse:
        """Get aggregate traffic metrics (pageviews, visitors, bounce rate, duration).

        Args:
            period: Period token.

        Returns:
            MetricsResponse; all-zero metrics when the provider is unavailable.
        """
        interval = self.resolve_interval(period)
        result = await self.fetcher.fetch(
            FetchQuery(
                name="metrics",
                candidates=self._analytics_candidates(
                    interval, "/stats/aggregate", metrics=",".join(AGGREGATE_METRICS)
                ),
                parse=_parse_metrics,
            )
        )
        return MetricsResponse(
            **self._report_fields(interval, result),
            metrics=AnalyticsMetrics.model_validate(result.payload),
        )

    async def resolve_visitor_timeseries(self, period: Any) -> VisitorTimeseriesResponse:
        """Get daily visitors and pageviews, one point per day of the period."""
        interval = self.resolve_interval(period)
        result = await self.fetcher.fetch(
            FetchQuery(
                name="visitor_timeseries",
                candidates=self._analytics_candidates(
                    interval,
                    "/stats/timeseries",
                    metrics=",".join(TIMESERIES_METRICS),
                    # period=day would otherwise return hourly rows
                    interval=TIMESERIES_INTERVAL,
                ),
                parse=parse_analytics_rows,
            )
        )
        return VisitorTimeseriesResponse(
            **self._report_fields(interval, result),
            points=pad_daily_points(result.payload, interval),
        )

    async def resolve_breakdown(
        self,
        period: Any,
        dimension: BreakdownProperty,
        limit: int = DEFAULT_RANKINGS_LIMIT,
    ) -> BreakdownResponse:
        """Get visitors per value of a dimension (device type, browser, ...).

        Args:
            period: Period token.
            dimension: Analytics property to break down by.
            limit: Maximum number of entries.

        Returns:
            BreakdownResponse with entries ranked by visitors.
        """
        interval = self.resolve_interval(period)
        result = await self.fetcher.fetch(
            FetchQuery(
                name="breakdown",
                candidates=self._analytics_candidates(
                    interval, "/stats/breakdown", property=dimension.value, metrics="visitors"
                ),
                parse=parse_analytics_rows,
            )
        )

        pairs: list[tuple[str, int]] = []
        for row in result.payload:
            label = row.get(dimension.result_key)
            visitors = row.get("visitors")
            if label in (None, "") or not isinstance(visitors, int) or isinstance(visitors, bool):
                continue
            pairs.append((str(label), max(visitors, 0)))

        return BreakdownResponse(
            **self._report_fields(interval, result),
            dimension=dimension,
            entries=rank(pairs, limit),
        )

    # ============ Records views ============

    async def resolve_timeseries(self, period: Any) -> RegistrationTimeseriesResponse:
        """Get registrations per day, gapless across the period."""
        interval = self.resolve_interval(period)
        result = await self.fetcher.fetch(
            FetchQuery(
                name="registration_timeseries",
                candidates=self._records_candidates(
                    interval,
                    CUSTOMERS_COLLECTION,
                    fields=[RECORDS_DATE_FIELD],
                    limit=RECORDS_UNLIMITED,
                ),
                parse=parse_records_items,
            )
        )

        timestamps = [
            ts
            for record in result.payload
            if (ts := parse_timestamp(record.get(RECORDS_DATE_FIELD), self.timezone)) is not None
        ]
        points = reconcile(timestamps, interval)
        logger.debug(
            "Registration timeseries for %s: %d raw, %d days",
            interval.period.value,
            len(result.payload),
            len(points),
        )
        return RegistrationTimeseriesResponse(
            **self._report_fields(interval, result), points=points
        )

    async def resolve_rankings(
        self, period: Any, limit: int = DEFAULT_RANKINGS_LIMIT
    ) -> RankingsResponse:
        """Get the most pinned units in the period.

        An empty answer from a strategy counts as a failure, so the remaining
        strategies (and finally the sample ranking) are tried.

        Args:
            period: Period token.
            limit: Maximum number of units.

        Returns:
            RankingsResponse with units ranked by pin count.
        """
        if limit < 0:
            raise ValidationError("Ranking limit must not be negative", field="limit")

        interval = self.resolve_interval(period)
        result = await self.fetcher.fetch(
            FetchQuery(
                name="pinned_units",
                candidates=self._records_candidates(
                    interval,
                    PINNED_UNITS_COLLECTION,
                    fields=["unit_id", RECORDS_DATE_FIELD],
                    limit=RECORDS_PAGE_LIMIT,
                    require_data=True,
                    include_legacy_path=True,
                ),
                parse=parse_records_items,
            )
        )
        return RankingsResponse(
            **self._report_fields(interval, result),
            limit=limit,
            entries=aggregate(self._within_interval(result.payload, interval), limit),
        )

    async def resolve_registration_summary(self, period: Any) -> RegistrationSummaryResponse:
        """Get total registrations and how many of them are nautical."""
        interval = self.resolve_interval(period)
        result = await self.fetcher.fetch(
            FetchQuery(
                name="registrations",
                candidates=self._records_candidates(
                    interval,
                    CUSTOMERS_COLLECTION,
                    fields=["id", "nautical", RECORDS_DATE_FIELD],
                    limit=RECORDS_UNLIMITED,
                ),
                parse=parse_records_items,
            )
        )
        records = self._within_interval(result.payload, interval)
        return RegistrationSummaryResponse(
            **self._report_fields(interval, result),
            summary=summarize(records, nautical_flag),
        )

    async def resolve_recent_registrations(
        self, period: Any, limit: int = DEFAULT_RECENT_REGISTRATIONS_LIMIT
    ) -> RecentRegistrationsResponse:
        """Get the newest registrations of the period with normalized answers."""
        if limit < 0:
            raise ValidationError("Registration limit must not be negative", field="limit")

        interval = self.resolve_interval(period)
        result = await self.fetcher.fetch(
            FetchQuery(
                name="recent_registrations",
                candidates=self._records_candidates(
                    interval,
                    CUSTOMERS_COLLECTION,
                    fields=["*"],
                    limit=RECORDS_UNLIMITED,
                    sort=f"-{RECORDS_DATE_FIELD}",
                ),
                parse=parse_records_items,
            )
        )

        registrations = []
        for record in self._within_interval(result.payload, interval):
            if record.get("id") is None:
                continue
            favourites = record.get("favourites") or []
            registrations.append(
                RecentRegistration(
                    id=record["id"],
                    first_name=_text(record.get("first_name")),
                    last_name=_text(record.get("last_name")),
                    email=_text(record.get("email")),
                    phone_number=_text(record.get("phone_number")),
                    created_at=parse_timestamp(record.get(RECORDS_DATE_FIELD), self.timezone),
                    nautical=nautical_flag(record),
                    financing=financing_status(record.get("financing")),
                    favourites=[
                        f
                        for f in (favourites if isinstance(favourites, list) else [])
                        if isinstance(f, int | str) and not isinstance(f, bool)
                    ],
                )
            )
            if len(registrations) >= limit:
                break

        return RecentRegistrationsResponse(
            **self._report_fields(interval, result),
            registrations=registrations,
        )

    # ============ Aggregates ============

    async def resolve_overview(
        self, period: Any, limit: int = DEFAULT_RANKINGS_LIMIT
    ) -> DashboardOverviewResponse:
        """Resolve the views of one dashboard refresh concurrently.

        The views share no state, so they are dispatched together; each one
        still tries its own strategies sequentially.

        Raises:
            ValidationError: If ``limit`` is negative, before any view starts.
        """
        if limit < 0:
            raise ValidationError("Ranking limit must not be negative", field="limit")

        metrics, visitors, registrations, summary, rankings = await asyncio.gather(
            self.resolve_metrics(period),
            self.resolve_visitor_timeseries(period),
            self.resolve_timeseries(period),
            self.resolve_registration_summary(period),
            self.resolve_rankings(period, limit),
        )
        degraded = any(
            view.degraded for view in (metrics, visitors, registrations, summary, rankings)
        )
        return DashboardOverviewResponse(
            metrics=metrics,
            visitors=visitors,
            registrations=registrations,
            summary=summary,
            rankings=rankings,
            degraded=degraded,
        )

    async def check_upstreams(self) -> dict[str, UpstreamStatus]:
        """Probe both providers with a minimal request.

        Returns:
            Mapping of provider kind to its configuration and reachability.
        """
        probes = {
            ProviderKind.ANALYTICS: (
                self.analytics,
                FetchCandidate(
                    strategy="realtime_visitors",
                    url=self.analytics.url("/stats/realtime/visitors"),
                    params={"site_id": self.analytics.site_id},
                    headers=self.analytics.headers(),
                ),
                lambda body: body,
            ),
            ProviderKind.RECORDS: (
                self.records,
                FetchCandidate(
                    strategy="items_limit_1",
                    url=self.records.url(f"/items/{CUSTOMERS_COLLECTION}"),
                    params={"limit": 1},
                    headers=self.records.headers(),
                ),
                parse_records_items,
            ),
        }

        statuses: dict[str, UpstreamStatus] = {}
        for kind, (provider, candidate, parse) in probes.items():
            if not provider.is_configured:
                statuses[kind.value] = UpstreamStatus(configured=False, reachable=False)
                continue
            result = await self.fetcher.fetch(
                FetchQuery(name="probe", candidates=[candidate], parse=parse)
            )
            statuses[kind.value] = UpstreamStatus(
                configured=True,
                reachable=not result.degraded,
                strategy=result.strategy,
                error=result.attempts[-1].failure_reason if result.degraded else None,
            )
        return statuses

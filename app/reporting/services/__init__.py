"""Reporting pipeline from period token to UI-ready series.

This module is split into small single-purpose services:
- periods: Period token resolution into day boundaries
- query_builder: Provider-native period and filter parameters
- providers: Upstream endpoints and response envelopes
- fetcher: Ordered multi-strategy fetching with fallback payloads
- timeseries: Gapless day-bucketed series
- rankings: Top-N ranking of categorical keys
- registrations: Registration counts and answer normalization
- dashboard_service: One async view per dashboard widget
"""

from app.reporting.services.dashboard_service import DashboardService
from app.reporting.services.fetcher import (
    FetchAttempt,
    FetchCandidate,
    FetchQuery,
    FetchResult,
    MultiTierFetcher,
)
from app.reporting.services.periods import DateInterval, parse_period, resolve_period
from app.reporting.services.query_builder import (
    FilterStyle,
    ProviderKind,
    ProviderQuery,
    build_query,
)
from app.reporting.services.rankings import aggregate, rank
from app.reporting.services.registrations import make_flag_extractor, nautical_flag, summarize
from app.reporting.services.timeseries import pad_daily_points, reconcile

__all__ = [
    # Period resolution
    "DateInterval",
    "parse_period",
    "resolve_period",
    # Provider queries
    "FilterStyle",
    "ProviderKind",
    "ProviderQuery",
    "build_query",
    # Fetching
    "FetchAttempt",
    "FetchCandidate",
    "FetchQuery",
    "FetchResult",
    "MultiTierFetcher",
    # Reshaping
    "reconcile",
    "pad_daily_points",
    "aggregate",
    "rank",
    "make_flag_extractor",
    "nautical_flag",
    "summarize",
    # Views
    "DashboardService",
]

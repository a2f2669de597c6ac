"""Dashboard reporting routes."""

from fastapi import APIRouter, Depends, Query

from app.core.config import settings
from app.core.constants import (
    DEFAULT_RANKINGS_LIMIT,
    DEFAULT_RECENT_REGISTRATIONS_LIMIT,
    MAX_RANKINGS_LIMIT,
)
from app.reporting.dependencies import get_dashboard_service
from app.reporting.schemas.dashboard import (
    BreakdownProperty,
    BreakdownResponse,
    DashboardOverviewResponse,
    MetricsResponse,
    RankingsResponse,
    RecentRegistrationsResponse,
    RegistrationSummaryResponse,
    RegistrationTimeseriesResponse,
    VisitorTimeseriesResponse,
)
from app.reporting.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

# Free-form on purpose: unknown tokens fall back to the 7-day window
PERIOD_QUERY = Query(
    settings.DEFAULT_PERIOD,
    description="Period: today, yesterday, 7d, 14d, 30d, 90d or 1y",
)


@router.get("/overview", response_model=DashboardOverviewResponse)
async def get_overview(
    period: str = PERIOD_QUERY,
    limit: int = Query(
        DEFAULT_RANKINGS_LIMIT, ge=1, le=MAX_RANKINGS_LIMIT, description="Top units to return"
    ),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardOverviewResponse:
    """
    Get every view of one dashboard refresh.

    Returns:
    - Aggregate traffic metrics
    - Daily visitors and registrations
    - Registration summary
    - Top pinned units
    """
    return await service.resolve_overview(period, limit)


@router.get("/metrics", response_model=MetricsResponse)
async def get_metrics(
    period: str = PERIOD_QUERY,
    service: DashboardService = Depends(get_dashboard_service),
) -> MetricsResponse:
    """
    Get aggregate traffic metrics.

    Returns pageviews, visitors, bounce rate and average visit duration.
    """
    return await service.resolve_metrics(period)


@router.get("/timeseries/visitors", response_model=VisitorTimeseriesResponse)
async def get_visitor_timeseries(
    period: str = PERIOD_QUERY,
    service: DashboardService = Depends(get_dashboard_service),
) -> VisitorTimeseriesResponse:
    """Get visitors and pageviews per day, one point for every day of the period."""
    return await service.resolve_visitor_timeseries(period)


@router.get("/timeseries/registrations", response_model=RegistrationTimeseriesResponse)
async def get_registration_timeseries(
    period: str = PERIOD_QUERY,
    service: DashboardService = Depends(get_dashboard_service),
) -> RegistrationTimeseriesResponse:
    """Get registrations per day, zero-filled for days without registrations."""
    return await service.resolve_timeseries(period)


@router.get("/breakdown/{dimension}", response_model=BreakdownResponse)
async def get_breakdown(
    dimension: BreakdownProperty,
    period: str = PERIOD_QUERY,
    limit: int = Query(
        DEFAULT_RANKINGS_LIMIT, ge=1, le=MAX_RANKINGS_LIMIT, description="Entries to return"
    ),
    service: DashboardService = Depends(get_dashboard_service),
) -> BreakdownResponse:
    """
    Get visitors broken down by a dimension.

    Dimensions use the analytics property names, e.g. `visit:device` or
    `visit:browser`.
    """
    return await service.resolve_breakdown(period, dimension, limit)


@router.get("/rankings", response_model=RankingsResponse)
async def get_rankings(
    period: str = PERIOD_QUERY,
    limit: int = Query(
        DEFAULT_RANKINGS_LIMIT, ge=1, le=MAX_RANKINGS_LIMIT, description="Top units to return"
    ),
    service: DashboardService = Depends(get_dashboard_service),
) -> RankingsResponse:
    """Get the most pinned units in the period."""
    return await service.resolve_rankings(period, limit)


@router.get("/registrations/summary", response_model=RegistrationSummaryResponse)
async def get_registration_summary(
    period: str = PERIOD_QUERY,
    service: DashboardService = Depends(get_dashboard_service),
) -> RegistrationSummaryResponse:
    """Get total registrations and the number of nautical registrations."""
    return await service.resolve_registration_summary(period)


@router.get("/registrations/recent", response_model=RecentRegistrationsResponse)
async def get_recent_registrations(
    period: str = PERIOD_QUERY,
    limit: int = Query(
        DEFAULT_RECENT_REGISTRATIONS_LIMIT, ge=1, le=100, description="Rows to return"
    ),
    service: DashboardService = Depends(get_dashboard_service),
) -> RecentRegistrationsResponse:
    """Get the newest registrations of the period, newest first."""
    return await service.resolve_recent_registrations(period, limit)

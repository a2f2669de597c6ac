"""Schemas for dashboard reporting views."""

from enum import Enum

from pydantic import BaseModel, Field

from app.core.datetime_utils import IsoDatetime


class PeriodToken(str, Enum):
    """Symbolic reporting window selected in the dashboard."""

    TODAY = "today"
    YESTERDAY = "yesterday"
    LAST_7_DAYS = "7d"
    LAST_14_DAYS = "14d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    LAST_YEAR = "1y"


class BreakdownProperty(str, Enum):
    """Analytics dimensions available for categorical breakdowns."""

    DEVICE = "visit:device"
    BROWSER = "visit:browser"
    OS = "visit:os"
    SOURCE = "visit:source"
    PAGE = "event:page"

    @property
    def result_key(self) -> str:
        """Key under which the provider returns the dimension value."""
        return self.value.split(":", 1)[1]


class FinancingStatus(str, Enum):
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"


# ============ Series & Aggregates ============


class DayBucket(BaseModel):
    """Count for a single calendar day."""

    date: str = Field(description="Calendar day (YYYY-MM-DD)")
    count: int = Field(ge=0)


class VisitorDataPoint(BaseModel):
    """Single day of analytics traffic."""

    date: str = Field(description="Calendar day (YYYY-MM-DD)")
    visitors: int = Field(default=0, ge=0)
    pageviews: int = Field(default=0, ge=0)


class RankedEntry(BaseModel):
    """Key with its occurrence count in a top list."""

    key: str
    count: int = Field(ge=0)


class RegistrationSummary(BaseModel):
    total: int = Field(ge=0, description="Registrations in the period")
    flagged_count: int = Field(ge=0, description="Registrations with the flag set")


class AnalyticsMetrics(BaseModel):
    """Aggregate traffic metrics."""

    pageviews: int = 0
    visitors: int = 0
    bounce_rate: float = Field(default=0, description="Bounce rate percentage")
    visit_duration: float = Field(default=0, description="Average visit duration in seconds")


class RecentRegistration(BaseModel):
    """Customer registration row with normalized answer fields."""

    id: int | str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    created_at: IsoDatetime | None = None
    nautical: bool = False
    financing: FinancingStatus = FinancingStatus.MAYBE
    favourites: list[int | str] = Field(default_factory=list)


# ============ Responses ============


class ReportResponse(BaseModel):
    """Fields shared by every dashboard view."""

    period: PeriodToken
    start: IsoDatetime
    end: IsoDatetime
    degraded: bool = Field(
        default=False,
        description="True when every upstream strategy failed and a fallback payload was used",
    )


class MetricsResponse(ReportResponse):
    metrics: AnalyticsMetrics


class VisitorTimeseriesResponse(ReportResponse):
    points: list[VisitorDataPoint]


class RegistrationTimeseriesResponse(ReportResponse):
    points: list[DayBucket] = Field(description="One bucket per day, ascending, zero-filled")


class RankingsResponse(ReportResponse):
    limit: int
    entries: list[RankedEntry]


class BreakdownResponse(ReportResponse):
    dimension: BreakdownProperty
    entries: list[RankedEntry]


class RegistrationSummaryResponse(ReportResponse):
    summary: RegistrationSummary


class RecentRegistrationsResponse(ReportResponse):
    registrations: list[RecentRegistration]


class DashboardOverviewResponse(BaseModel):
    """All views of one dashboard refresh."""

    metrics: MetricsResponse
    visitors: VisitorTimeseriesResponse
    registrations: RegistrationTimeseriesResponse
    summary: RegistrationSummaryResponse
    rankings: RankingsResponse
    degraded: bool = Field(default=False, description="True if any view fell back")


class UpstreamStatus(BaseModel):
    configured: bool
    reachable: bool
    strategy: str | None = None
    error: str | None = None

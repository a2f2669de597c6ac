from pathlib import Path

from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / ".env.test"
load_dotenv(env_file)

from collections.abc import Callable  # noqa: E402
from datetime import datetime  # noqa: E402
from zoneinfo import ZoneInfo  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.main import app  # noqa: E402
from app.reporting.dependencies import get_dashboard_service  # noqa: E402
from app.reporting.services.dashboard_service import DashboardService  # noqa: E402
from app.reporting.services.fetcher import MultiTierFetcher  # noqa: E402
from app.reporting.services.providers import ProviderConfig  # noqa: E402
from app.reporting.services.query_builder import ProviderKind  # noqa: E402

AMSTERDAM = ZoneInfo("Europe/Amsterdam")
ANALYTICS_URL = "https://analytics.test/api/v1"
RECORDS_URL = "https://records.test"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 31, 12, 0, tzinfo=AMSTERDAM)


@pytest.fixture
def analytics_config() -> ProviderConfig:
    return ProviderConfig(
        kind=ProviderKind.ANALYTICS,
        base_url=ANALYTICS_URL,
        api_key="test-analytics-key",
        site_id="dashboard.test",
    )


@pytest.fixture
def records_config() -> ProviderConfig:
    return ProviderConfig(
        kind=ProviderKind.RECORDS,
        base_url=RECORDS_URL,
        api_key="test-records-key",
    )


@pytest.fixture
def make_service(fixed_now, analytics_config, records_config):
    """Build a DashboardService whose upstream traffic goes to ``handler``."""

    def factory(handler: Handler) -> DashboardService:
        return DashboardService(
            fetcher=MultiTierFetcher(timeout=2.0, transport=httpx.MockTransport(handler)),
            clock=lambda: fixed_now,
            analytics=analytics_config,
            records=records_config,
            timezone="Europe/Amsterdam",
        )

    return factory


@pytest.fixture
def unreachable_handler() -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    return handler


@pytest.fixture
async def test_app(make_service, unreachable_handler):
    app.dependency_overrides[get_dashboard_service] = lambda: make_service(unreachable_handler)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def test_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client

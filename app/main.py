from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.log_config import RequestLoggingMiddleware, setup_logging
from app.reporting.dependencies import get_dashboard_service
from app.reporting.routes import dashboard
from app.reporting.services.dashboard_service import DashboardService

setup_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    service = get_dashboard_service()
    logger.info(
        "dashboard_starting",
        analytics_configured=service.analytics.is_configured,
        records_configured=service.records.is_configured,
        timezone=settings.REPORTING_TIMEZONE,
    )
    if not (service.analytics.is_configured and service.records.is_configured):
        logger.warning("upstream_not_configured_serving_fallbacks")

    yield

    logger.info("dashboard_stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="Reporting backend for the operational dashboard",
    version="1.0.0",
)

register_exception_handlers(app, debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(dashboard.router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": settings.PROJECT_NAME, "version": "1.0.0", "status": "running"}


@app.get("/health")
async def health_check(
    service: DashboardService = Depends(get_dashboard_service),
) -> dict[str, object]:
    upstreams = await service.check_upstreams()
    all_healthy = all(status.reachable for status in upstreams.values())
    overall = "healthy" if all_healthy else "degraded"

    return {
        "status": overall,
        "upstreams": {name: status.model_dump() for name, status in upstreams.items()},
    }

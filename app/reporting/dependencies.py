from app.reporting.services.dashboard_service import DashboardService

_dashboard_service: DashboardService | None = None


def get_dashboard_service() -> DashboardService:
    """Get or create the dashboard service instance."""
    global _dashboard_service
    if _dashboard_service is None:
        _dashboard_service = DashboardService()
    return _dashboard_service

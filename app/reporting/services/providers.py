"""Upstream provider endpoints and response envelopes."""

from dataclasses import dataclass
from typing import Any

from app.core.config import settings
from app.core.exceptions import MalformedPayloadError
from app.reporting.services.query_builder import ProviderKind


@dataclass(frozen=True)
class ProviderConfig:
    """Connection details for one upstream provider."""

    kind: ProviderKind
    base_url: str
    api_key: str
    site_id: str = ""

    @property
    def is_configured(self) -> bool:
        """Check if the provider has enough settings to be called."""
        if not (self.base_url and self.api_key):
            return False
        if self.kind == ProviderKind.ANALYTICS:
            return bool(self.site_id)
        return True

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }


def analytics_provider() -> ProviderConfig:
    return ProviderConfig(
        kind=ProviderKind.ANALYTICS,
        base_url=settings.PLAUSIBLE_API_URL,
        api_key=settings.PLAUSIBLE_API_KEY,
        site_id=settings.PLAUSIBLE_SITE_ID,
    )


def records_provider() -> ProviderConfig:
    return ProviderConfig(
        kind=ProviderKind.RECORDS,
        base_url=settings.DIRECTUS_API_URL,
        api_key=settings.DIRECTUS_API_KEY,
    )


def parse_analytics_results(body: Any) -> Any:
    """Unwrap ``{"results": ...}`` from an analytics response."""
    if not isinstance(body, dict) or "results" not in body:
        raise MalformedPayloadError("Missing 'results' in analytics response", service="analytics")
    return body["results"]


def parse_analytics_rows(body: Any) -> list[dict[str, Any]]:
    """Unwrap a list of result rows (timeseries, breakdown)."""
    results = parse_analytics_results(body)
    if not isinstance(results, list) or not all(isinstance(row, dict) for row in results):
        raise MalformedPayloadError(
            "Analytics 'results' is not a list of rows", service="analytics"
        )
    return results


def parse_analytics_aggregate(body: Any) -> dict[str, Any]:
    """Flatten ``{"results": {"visitors": {"value": 3}}}`` into ``{"visitors": 3}``."""
    results = parse_analytics_results(body)
    if not isinstance(results, dict):
        raise MalformedPayloadError("Analytics aggregate is not an object", service="analytics")
    flattened: dict[str, Any] = {}
    for metric, entry in results.items():
        if not isinstance(entry, dict) or "value" not in entry:
            raise MalformedPayloadError(f"Metric '{metric}' has no value", service="analytics")
        flattened[metric] = entry["value"]
    return flattened


def parse_records_items(body: Any) -> list[dict[str, Any]]:
    """Unwrap ``{"data": [...]}`` from a records-store response."""
    if not isinstance(body, dict) or not isinstance(body.get("data"), list):
        raise MalformedPayloadError("Missing 'data' list in records response", service="records")
    items = body["data"]
    if not all(isinstance(item, dict) for item in items):
        raise MalformedPayloadError("Records 'data' contains non-object items", service="records")
    return items

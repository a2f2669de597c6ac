from datetime import date, timedelta
from typing import Any


def assert_report_response_valid(data: dict[str, Any]) -> None:
    assert "period" in data
    assert "start" in data
    assert "end" in data
    assert "degraded" in data


def assert_gapless_series(points: list[dict[str, Any]], expected_days: int) -> None:
    """Assert that a daily series has one ascending point per day, no gaps."""
    assert len(points) == expected_days

    days = [date.fromisoformat(point["date"]) for point in points]
    for previous, current in zip(days, days[1:], strict=False):
        assert current - previous == timedelta(days=1)

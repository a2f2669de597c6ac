"""Static payloads served when every upstream strategy for a query fails.

Each entry is shaped exactly like the parsed upstream payload of its query,
so the downstream reshaping code runs unchanged on it.
"""

import copy
from typing import Any

# Top pinned units shown while the records store is unreachable
_PINNED_UNITS_SAMPLE: tuple[tuple[str, int], ...] = (
    ("172", 4),
    ("10", 4),
    ("8", 4),
    ("165", 2),
    ("9", 2),
)

FALLBACK_PAYLOADS: dict[str, Any] = {
    "metrics": {
        "pageviews": 0,
        "visitors": 0,
        "bounce_rate": 0,
        "visit_duration": 0,
    },
    "visitor_timeseries": [],
    "breakdown": [],
    "registrations": [],
    "registration_timeseries": [],
    "recent_registrations": [],
    "pinned_units": [
        {"unit_id": unit_id} for unit_id, count in _PINNED_UNITS_SAMPLE for _ in range(count)
    ],
    "probe": [],
}


def fallback_payload(name: str) -> Any:
    """Return a fresh copy of the fallback payload declared for ``name``.

    Raises:
        KeyError: If no fallback is declared for the query.
    """
    return copy.deepcopy(FALLBACK_PAYLOADS[name])

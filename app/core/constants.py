"""Application-wide constants.

This module centralizes magic numbers and upstream vocabulary that are
used across multiple modules. For environment-specific configuration,
see config.py.
"""

# =============================================================================
# Rankings / Top Lists
# =============================================================================

# Default number of entries in top lists (pinned units, breakdowns)
DEFAULT_RANKINGS_LIMIT: int = 5

# Maximum number of entries a caller may request
MAX_RANKINGS_LIMIT: int = 50

# Default number of rows in the recent registrations table
DEFAULT_RECENT_REGISTRATIONS_LIMIT: int = 20

# =============================================================================
# Records Store (Directus)
# =============================================================================

# Timestamp layout expected by `_gte` filters
RECORDS_TIMESTAMP_FORMAT: str = "%Y-%m-%dT%H:%M:%S"

# Field used for period filtering on every collection
RECORDS_DATE_FIELD: str = "created_at"

# Page size for collections that are tallied client-side
RECORDS_PAGE_LIMIT: int = 1000

# `limit=-1` asks Directus for all matching rows
RECORDS_UNLIMITED: int = -1

CUSTOMERS_COLLECTION: str = "customers"
PINNED_UNITS_COLLECTION: str = "pinned_units"

# =============================================================================
# Registration Flags
# =============================================================================

# Free-text answers stored by the registration form
AFFIRMATIVE_ANSWER: str = "ja"
NEGATIVE_ANSWER: str = "nee"
UNDECIDED_ANSWER: str = "wellicht"

# =============================================================================
# Analytics Provider (Plausible)
# =============================================================================

AGGREGATE_METRICS: tuple[str, ...] = ("pageviews", "visitors", "bounce_rate", "visit_duration")
TIMESERIES_METRICS: tuple[str, ...] = ("visitors", "pageviews")

# Daily rows for every period, including single-day ones
TIMESERIES_INTERVAL: str = "date"

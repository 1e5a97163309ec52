"""Central configuration, constants, and tuning knobs for worklog reporting."""

from __future__ import annotations

from dataclasses import dataclass

# =============================================================================
# Jira Connection Settings
# =============================================================================
# Worklog timestamps are bucketed into calendar days in this zone.
TIMEZONE = "UTC"

# In-memory response cache of the Jira client (seconds)
CACHE_TTL_SECONDS: float = 300.0

# =============================================================================
# Search / Fetch Settings
# =============================================================================
# Issue search returns a single page; larger result sets are truncated.
DEFAULT_SEARCH_PAGE_SIZE: int = 150
VELOCITY_SEARCH_PAGE_SIZE: int = 50

# Page size used when walking an issue's worklog history
WORKLOG_PAGE_SIZE: int = 1000

# Parallel worklog fetch tuning
# Threads are used because jira client calls are I/O bound and synchronous.
# Keep the worker count low: the tracker rate-limits aggressive clients.
WORKLOG_FETCH_MAX_WORKERS: int = 4
WORKLOG_FETCH_MIN_PARALLEL: int = 4  # below this, stay sequential

# Sentinel resolved server-side in JQL and to "today" locally
NOW_SENTINEL = "now()"

# Author payload keys tried in order to derive a worklog author's identity
AUTHOR_IDENTITY_FIELDS: tuple[str, ...] = ("emailAddress", "accountId", "displayName")
UNKNOWN_AUTHOR = "Unknown"

# =============================================================================
# Chart Settings
# =============================================================================
CHART_WIDTH = "800px"

# Unit duration per reporting format
DEFAULT_CAPACITY_UNITS: dict[str, str] = {
    "Hours": "1h",
    "Days": "1d",
    "Mandays": "8h",
    "Percentage": "1d",
}

DEFAULT_STORY_POINT_FIELD = "aggregatetimeoriginalestimate"


@dataclass(slots=True)
class AppSettings:
    default_lookback_days: int = 14
    max_workers: int = WORKLOG_FETCH_MAX_WORKERS
    download_encoding: str = "utf-8"


SETTINGS = AppSettings()

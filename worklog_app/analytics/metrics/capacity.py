"""Capacity-based normalization of per-author worklog totals.

Raw totals (seconds) are rescaled into one of four reporting formats:

- ``Hours`` / ``Days`` / ``Mandays``: number of unit durations logged.
- ``Percentage``: share of each author's capacity, where capacity is counted
  in unit durations (``"1d"`` by default).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum

from worklog_app.core.config import DEFAULT_CAPACITY_UNITS
from worklog_app.core.timeutils import DateLike, parse_duration_seconds, window_day_count

logger = logging.getLogger(__name__)


class ChartFormat(str, Enum):
    HOURS = "Hours"
    DAYS = "Days"
    MANDAYS = "Mandays"
    PERCENTAGE = "Percentage"


class InvalidChartFormatError(ValueError):
    """Raised for a reporting format outside :class:`ChartFormat`."""


def resolve_format(value: ChartFormat | str) -> ChartFormat:
    if isinstance(value, ChartFormat):
        return value
    try:
        return ChartFormat(value)
    except ValueError as exc:
        raise InvalidChartFormatError(f"Invalid chart format: {value!r}") from exc


def default_capacity_unit(value: ChartFormat | str) -> str:
    return DEFAULT_CAPACITY_UNITS[resolve_format(value).value]


def default_max_capacity(start_date: DateLike, end_date: DateLike, *, tz=None) -> int:
    """Number of calendar days in the inclusive reporting window."""
    return window_day_count(start_date, end_date, tz)


def normalize(
    series: Mapping[str, float],
    format: ChartFormat | str,
    *,
    capacity: Mapping[str, float] | None = None,
    capacity_unit: str | None = None,
    max_capacity: float | None = None,
) -> dict[str, float]:
    """Rescale author totals (seconds) into `format` units.

    In ``Percentage`` mode with a `capacity` map, authors missing from the map
    (or with a non-positive capacity) are left out of the result. Without a
    map every author is divided by the same `max_capacity`.
    """
    fmt = resolve_format(format)
    unit = capacity_unit or DEFAULT_CAPACITY_UNITS[fmt.value]
    unit_seconds = parse_duration_seconds(unit)
    if unit_seconds <= 0:
        raise ValueError(f"Capacity unit must be a positive duration, got {unit!r}")

    if fmt in (ChartFormat.HOURS, ChartFormat.DAYS, ChartFormat.MANDAYS):
        return {author: seconds / unit_seconds for author, seconds in series.items()}

    out: dict[str, float] = {}
    if capacity is not None:
        for author, seconds in series.items():
            if author not in capacity:
                continue
            author_capacity = capacity[author]
            if not author_capacity or author_capacity <= 0:
                logger.warning("Skipping %s: capacity %r is not positive", author, author_capacity)
                continue
            out[author] = seconds / author_capacity / unit_seconds * 100
        return out

    if max_capacity is None:
        raise ValueError("max_capacity is required for Percentage without a capacity map")
    if max_capacity <= 0:
        raise ValueError(f"max_capacity must be positive, got {max_capacity!r}")
    for author, seconds in series.items():
        out[author] = seconds / max_capacity / unit_seconds * 100
    return out

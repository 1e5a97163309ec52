"""Per-author, per-day worklog aggregation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import tzinfo

from worklog_app.core.models import WorklogRecord
from worklog_app.core.timeutils import DateLike, day_range, normalize_timestamp, resolve_tz

logger = logging.getLogger(__name__)


def daily_labels(start_date: DateLike, end_date: DateLike, *, tz: str | tzinfo | None = None) -> list[str]:
    return day_range(start_date, end_date, tz)


def build_daily_series_by_author(
    worklogs: Iterable[WorklogRecord],
    start_date: DateLike,
    end_date: DateLike,
    authors: Iterable[str] | None = None,
    *,
    tz: str | tzinfo | None = None,
) -> dict[str, dict[str, float]]:
    """Bucket worklog seconds by author and calendar day.

    Every author with a worklog gets its own zero-filled copy of the day
    template (`start_date` to `end_date`, inclusive), created on first sight,
    so authors appear in order of their first worklog. Worklogs whose day
    falls outside the template are dropped.
    """
    zone = resolve_tz(tz)
    template: dict[str, float] = {day: 0 for day in day_range(start_date, end_date, zone)}
    allowed = set(authors) if authors is not None else None

    series: dict[str, dict[str, float]] = {}
    for worklog in worklogs:
        author = worklog.author
        if allowed is not None and author not in allowed:
            continue
        if author not in series:
            series[author] = dict(template)
        started = normalize_timestamp(worklog.started, zone)
        if started is None:
            logger.debug("Dropping worklog %s with unparseable start", worklog.worklog_id)
            continue
        day = started.strftime("%Y-%m-%d")
        if day not in template:
            logger.debug("Dropping worklog %s on %s outside the day range", worklog.worklog_id, day)
            continue
        series[author][day] += worklog.time_spent_seconds
    return series

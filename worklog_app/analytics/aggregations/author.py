"""Author-based worklog aggregations."""

from __future__ import annotations

from collections.abc import Iterable

from worklog_app.core.models import WorklogRecord
from worklog_app.core.timeutils import parse_duration_seconds

DURATION_SOURCES = ("seconds", "time_spent")


def worklog_seconds(worklog: WorklogRecord, source: str = "seconds") -> float:
    if source == "seconds":
        return worklog.time_spent_seconds
    if source == "time_spent":
        return parse_duration_seconds(worklog.time_spent)
    raise ValueError(f"Unknown duration source {source!r}; expected one of {DURATION_SOURCES}")


def build_totals_by_author(
    worklogs: Iterable[WorklogRecord],
    authors: Iterable[str] | None = None,
    *,
    source: str = "seconds",
) -> dict[str, float]:
    """Total logged seconds per author, in order of first appearance.

    ``source="seconds"`` sums ``time_spent_seconds``; ``source="time_spent"``
    re-derives each duration from the human string and raises
    ``DurationParseError`` on malformed input.
    """
    if source not in DURATION_SOURCES:
        raise ValueError(f"Unknown duration source {source!r}; expected one of {DURATION_SOURCES}")
    allowed = set(authors) if authors is not None else None
    totals: dict[str, float] = {}
    for worklog in worklogs:
        author = worklog.author
        if allowed is not None and author not in allowed:
            continue
        if author not in totals:
            totals[author] = 0
        totals[author] += worklog_seconds(worklog, source)
    return totals

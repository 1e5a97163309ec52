"""Pure helpers that turn collected worklogs into chart specs (no Streamlit)."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from worklog_app.analytics.aggregations.author import build_totals_by_author
from worklog_app.analytics.aggregations.daily import build_daily_series_by_author, daily_labels
from worklog_app.analytics.metrics.capacity import (
    ChartFormat,
    default_max_capacity,
    normalize,
    resolve_format,
)
from worklog_app.core.config import NOW_SENTINEL
from worklog_app.core.models import ChartSeries, ChartSpec, Sprint, WorklogRecord
from worklog_app.core.service import ProgressCallback, ProjectKeys, WorklogService, sprint_window
from worklog_app.core.timeutils import DateLike, pin_now
from worklog_app.visual.chart_spec import render_chart_spec


@dataclass(slots=True)
class WorklogReport:
    spec: ChartSpec
    series: dict
    worklogs: list[WorklogRecord] = field(default_factory=list)

    @property
    def text(self) -> str:
        return render_chart_spec(self.spec)


def build_daily_report(
    service: WorklogService,
    project_keys: ProjectKeys,
    start_date: DateLike,
    end_date: DateLike = NOW_SENTINEL,
    *,
    authors: Iterable[str] | None = None,
    progress: ProgressCallback | None = None,
) -> WorklogReport:
    """Line chart: one series per author, one point (seconds) per calendar day."""
    author_list = list(authors) if authors is not None else None
    # Pin "now()" once so the fetch window, labels and buckets share the same last day.
    end_local = pin_now(end_date, service.tz)
    worklogs = service.collect_worklogs(project_keys, start_date, end_local, author_list, progress=progress)
    labels = daily_labels(start_date, end_local, tz=service.tz)
    multi = build_daily_series_by_author(worklogs, start_date, end_local, author_list, tz=service.tz)
    spec = ChartSpec(
        type="line",
        labels=labels,
        series=[ChartSeries(title=author, data=list(days.values())) for author, days in multi.items()],
    )
    return WorklogReport(spec=spec, series=multi, worklogs=worklogs)


def build_user_report(
    service: WorklogService,
    project_keys: ProjectKeys,
    start_date: DateLike,
    end_date: DateLike = NOW_SENTINEL,
    *,
    format: ChartFormat | str = ChartFormat.PERCENTAGE,
    capacity: Mapping[str, float] | None = None,
    capacity_unit: str | None = None,
    max_capacity: float | None = None,
    progress: ProgressCallback | None = None,
) -> WorklogReport:
    """Bar chart: one point per author, normalized into `format` units."""
    fmt = resolve_format(format)
    end_local = pin_now(end_date, service.tz)
    if fmt is ChartFormat.PERCENTAGE and capacity is None and not max_capacity:
        max_capacity = default_max_capacity(start_date, end_local, tz=service.tz)
    worklogs = service.collect_worklogs(project_keys, start_date, end_local, progress=progress)
    totals = build_totals_by_author(worklogs)
    normalized = normalize(
        totals,
        fmt,
        capacity=capacity,
        capacity_unit=capacity_unit,
        max_capacity=max_capacity,
    )
    spec = ChartSpec(
        type="bar",
        labels=list(normalized.keys()),
        series=[ChartSeries(title=f"Time logged {fmt.value}", data=list(normalized.values()))],
    )
    return WorklogReport(spec=spec, series=normalized, worklogs=worklogs)


def worklog_per_day(
    service: WorklogService,
    project_keys: ProjectKeys,
    start_date: DateLike,
    end_date: DateLike = NOW_SENTINEL,
    *,
    authors: Iterable[str] | None = None,
) -> str:
    return build_daily_report(service, project_keys, start_date, end_date, authors=authors).text


def worklog_per_user(
    service: WorklogService,
    project_keys: ProjectKeys,
    start_date: DateLike,
    end_date: DateLike = NOW_SENTINEL,
    *,
    format: ChartFormat | str = ChartFormat.PERCENTAGE,
    capacity: Mapping[str, float] | None = None,
    capacity_unit: str | None = None,
    max_capacity: float | None = None,
) -> str:
    return build_user_report(
        service,
        project_keys,
        start_date,
        end_date,
        format=format,
        capacity=capacity,
        capacity_unit=capacity_unit,
        max_capacity=max_capacity,
    ).text


def sprint_worklog_per_day(
    service: WorklogService,
    project_keys: ProjectKeys,
    sprint: Sprint,
    *,
    authors: Iterable[str] | None = None,
) -> str:
    start, end = sprint_window(sprint)
    return worklog_per_day(service, project_keys, start, end, authors=authors)


def sprint_worklog_per_user(
    service: WorklogService,
    project_keys: ProjectKeys,
    sprint: Sprint,
    **options,
) -> str:
    start, end = sprint_window(sprint)
    return worklog_per_user(service, project_keys, start, end, **options)

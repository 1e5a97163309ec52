"""Domain data models for worklogs, sprints, and chart specifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class WorklogRecord:
    author: str
    started: datetime
    time_spent: str
    time_spent_seconds: int
    issue_key: str | None = None
    worklog_id: str | None = None


@dataclass(slots=True)
class Sprint:
    id: int | None
    name: str
    start_date: str | None
    end_date: str | None
    state: str | None = None


@dataclass(slots=True)
class ChartSeries:
    title: str
    data: list[float] = field(default_factory=list)


@dataclass(slots=True)
class ChartSpec:
    type: str
    labels: list[str] = field(default_factory=list)
    series: list[ChartSeries] = field(default_factory=list)

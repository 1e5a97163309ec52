"""Worklog report feature module: daily and per-author chart specs."""

from worklog_app.features.worklog_report.context import (
    WorklogReport,
    build_daily_report,
    build_user_report,
    sprint_worklog_per_day,
    sprint_worklog_per_user,
    worklog_per_day,
    worklog_per_user,
)

__all__ = [
    "WorklogReport",
    "build_daily_report",
    "build_user_report",
    "sprint_worklog_per_day",
    "sprint_worklog_per_user",
    "worklog_per_day",
    "worklog_per_user",
]

"""Mapping raw Jira worklog and sprint JSON into model instances."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict
from typing import Any

import pandas as pd

from .config import AUTHOR_IDENTITY_FIELDS, UNKNOWN_AUTHOR
from .models import Sprint, WorklogRecord


def author_identity(author: Any) -> str:
    """Identity string for a Jira user payload (email, else account id, else name)."""
    if isinstance(author, str):
        return author.strip() or UNKNOWN_AUTHOR
    if not isinstance(author, dict):
        return UNKNOWN_AUTHOR
    for field_name in AUTHOR_IDENTITY_FIELDS:
        value = author.get(field_name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return UNKNOWN_AUTHOR


def parse_dt(val):
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def map_worklog(raw: dict[str, Any], issue_key: str | None = None) -> WorklogRecord | None:
    """Map one raw worklog; returns None when ``started`` is missing or unparseable."""
    started = parse_dt(raw.get("started"))
    if started is None:
        return None
    try:
        seconds = int(raw.get("timeSpentSeconds") or 0)
    except (TypeError, ValueError):
        seconds = 0
    worklog_id = raw.get("id")
    return WorklogRecord(
        author=author_identity(raw.get("author")),
        started=started,
        time_spent=str(raw.get("timeSpent") or ""),
        time_spent_seconds=seconds,
        issue_key=issue_key or raw.get("issueKey") or raw.get("issueId"),
        worklog_id=str(worklog_id) if worklog_id is not None else None,
    )


def map_sprint(raw: dict[str, Any]) -> Sprint:
    sprint_id = raw.get("id")
    return Sprint(
        id=int(sprint_id) if sprint_id is not None else None,
        name=raw.get("name") or "",
        start_date=raw.get("startDate"),
        end_date=raw.get("endDate"),
        state=raw.get("state"),
    )


def worklogs_to_dataframe(worklogs: Iterable[WorklogRecord]) -> pd.DataFrame:
    rows = [asdict(w) for w in worklogs]
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    df["started"] = pd.to_datetime(df["started"], utc=True, errors="coerce")
    return df.sort_values(by="started", na_position="last").reset_index(drop=True)

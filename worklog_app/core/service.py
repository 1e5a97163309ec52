"""WorklogService: issue search, per-issue worklog fetch, and collection pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import tzinfo

from .config import (
    DEFAULT_SEARCH_PAGE_SIZE,
    DEFAULT_STORY_POINT_FIELD,
    NOW_SENTINEL,
    TIMEZONE,
    VELOCITY_SEARCH_PAGE_SIZE,
    WORKLOG_FETCH_MAX_WORKERS,
    WORKLOG_FETCH_MIN_PARALLEL,
)
from .jira_client import JiraAPI
from .mappers import map_sprint, map_worklog
from .models import Sprint, WorklogRecord
from .timeutils import DateLike, day_window, normalize_timestamp, pin_now, resolve_tz, to_query_date

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int | None, int | None], None]
ProjectKeys = str | Sequence[str]


def _author_set(authors: Iterable[str] | None) -> set[str] | None:
    if authors is None:
        return None
    return {a for a in authors if a}


def format_project_keys(project_keys: ProjectKeys) -> str:
    if isinstance(project_keys, str):
        return ",".join(k.strip() for k in project_keys.split(",") if k.strip())
    return ",".join(str(k).strip() for k in project_keys if str(k).strip())


def _jql_date(value: DateLike, tz: tzinfo) -> str:
    text = to_query_date(value, tz)
    if text[:1].isdigit():
        return f'"{text}"'
    return text


def _jql_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_worklog_jql(
    project_keys: ProjectKeys,
    start_date: DateLike,
    end_date: DateLike = NOW_SENTINEL,
    authors: Iterable[str] | None = None,
    *,
    tz: str | tzinfo | None = None,
) -> str:
    """JQL for issues in `project_keys` with worklogs dated within ``[start, end]``."""
    zone = resolve_tz(tz)
    jql = (
        f"project IN ({format_project_keys(project_keys)})"
        f" AND worklogDate >= {_jql_date(start_date, zone)}"
        f" AND worklogDate <= {_jql_date(end_date, zone)}"
    )
    if authors:
        names = ", ".join(_jql_string(a) for a in authors)
        jql += f" AND worklogAuthor IN ({names})"
    return jql


def sprint_window(sprint: Sprint) -> tuple[str, str]:
    """Resolve a sprint into the ``(start, end)`` pair used by the date-range path."""
    if not sprint.start_date:
        raise ValueError(f"Sprint {sprint.name or sprint.id!r} has no start date")
    return sprint.start_date, sprint.end_date or NOW_SENTINEL


class WorklogService:
    def __init__(
        self,
        api: JiraAPI,
        *,
        tz: str | tzinfo = TIMEZONE,
        max_workers: int = WORKLOG_FETCH_MAX_WORKERS,
    ):
        self.api = api
        self._tz = resolve_tz(tz)
        self.max_workers = max(int(max_workers), 1)

    @property
    def tz(self) -> tzinfo:
        return self._tz

    # ------------------ Search ------------------
    def find_issues_with_worklog_in_range(
        self,
        project_keys: ProjectKeys,
        start_date: DateLike,
        end_date: DateLike = NOW_SENTINEL,
        authors: Iterable[str] | None = None,
        *,
        limit: int = DEFAULT_SEARCH_PAGE_SIZE,
    ) -> list[str]:
        """Keys of issues with worklogs in the window (first result page only).

        Any failure talking to Jira is logged and reported as "no issues".
        """
        allowed = _author_set(authors)
        if allowed is not None and not allowed:
            return []
        jql = build_worklog_jql(
            project_keys,
            start_date,
            end_date,
            sorted(allowed) if allowed is not None else None,
            tz=self._tz,
        )
        try:
            result = self.api.search(jql, limit=limit, fields=["key"])
            issues = result.get("issues") or []
        except Exception as exc:
            logger.warning("Worklog issue search failed for %s: %s", project_keys, exc)
            return []
        keys: list[str] = []
        seen: set[str] = set()
        for issue in issues:
            key = issue.get("key") if isinstance(issue, dict) else None
            if key and key not in seen:
                keys.append(key)
                seen.add(key)
        return keys

    # ------------------ Fetch ------------------
    def fetch_worklogs_for_issue(
        self,
        issue_key: str,
        start_date: DateLike,
        end_date: DateLike = NOW_SENTINEL,
        authors: Iterable[str] | None = None,
    ) -> list[WorklogRecord]:
        """Worklogs of one issue started between the start of `start_date` and the end of `end_date`."""
        allowed = _author_set(authors)
        lo, hi = day_window(start_date, end_date, self._tz)
        raw = self.api.get_worklogs_of_issue(
            issue_key,
            authors=sorted(allowed) if allowed is not None else None,
        )
        out: list[WorklogRecord] = []
        for item in raw:
            record = map_worklog(item, issue_key=issue_key)
            if record is None:
                continue
            if allowed is not None and record.author not in allowed:
                continue
            started = normalize_timestamp(record.started, self._tz)
            if started is None or started < lo or started > hi:
                continue
            out.append(record)
        return out

    def collect_worklogs(
        self,
        project_keys: ProjectKeys,
        start_date: DateLike,
        end_date: DateLike = NOW_SENTINEL,
        authors: Iterable[str] | None = None,
        *,
        progress: ProgressCallback | None = None,
    ) -> list[WorklogRecord]:
        """Search once, fetch every matched issue, and concatenate in issue order.

        Fetches run one at a time when ``max_workers`` is 1 or the issue set is
        small; otherwise a bounded thread pool is used. Results are reassembled
        by issue position so the output order never depends on scheduling.
        A `now()` end date is resolved once, so every issue shares one window.
        """
        author_list = sorted(_author_set(authors)) if authors is not None else None
        fetch_end = pin_now(end_date, self._tz)
        if progress:
            progress("Searching issues with worklogs in range", None, None)
        issue_keys = self.find_issues_with_worklog_in_range(project_keys, start_date, end_date, author_list)
        if not issue_keys:
            return []

        total = len(issue_keys)
        results: list[list[WorklogRecord]] = [[] for _ in issue_keys]

        if self.max_workers <= 1 or total < WORKLOG_FETCH_MIN_PARALLEL:
            if progress:
                progress("Loading worklogs", 0, total)
            for idx, key in enumerate(issue_keys):
                results[idx] = self._fetch_issue_safely(key, start_date, fetch_end, author_list)
                if progress:
                    progress("Loading worklogs", idx + 1, total)
        else:
            if progress:
                progress("Loading worklogs", 0, total)
            completed = 0
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                futures = {
                    pool.submit(self._fetch_issue_safely, key, start_date, fetch_end, author_list): idx
                    for idx, key in enumerate(issue_keys)
                }
                for fut in as_completed(futures):
                    results[futures[fut]] = fut.result()
                    completed += 1
                    if progress:
                        progress("Loading worklogs", completed, total)

        return [record for chunk in results for record in chunk]

    def _fetch_issue_safely(
        self,
        issue_key: str,
        start_date: DateLike,
        end_date: DateLike,
        authors: list[str] | None,
    ) -> list[WorklogRecord]:
        try:
            return self.fetch_worklogs_for_issue(issue_key, start_date, end_date, authors)
        except Exception as exc:
            logger.warning("Failed to fetch worklogs for %s: %s", issue_key, exc)
            return []

    # ------------------ Sprints ------------------
    def get_active_sprint(self, project_key: str) -> Sprint | None:
        boards = self.api.get_boards(project_key, limit=1)
        if not boards:
            return None
        sprints = self.api.get_sprints(boards[0]["id"], state=("active",), limit=1)
        if not sprints:
            return None
        return map_sprint(sprints[0])

    def get_active_sprint_name(self, project_key: str) -> str:
        sprint = self.get_active_sprint(project_key)
        return sprint.name if sprint else ""

    def get_sprint(self, sprint_id: int) -> Sprint:
        return map_sprint(self.api.get_sprint(sprint_id))

    def collect_worklogs_by_sprint(
        self,
        project_keys: ProjectKeys,
        sprint: Sprint,
        authors: Iterable[str] | None = None,
        *,
        progress: ProgressCallback | None = None,
    ) -> list[WorklogRecord]:
        start, end = sprint_window(sprint)
        return self.collect_worklogs(project_keys, start, end, authors, progress=progress)

    def collect_worklogs_by_sprint_id(
        self,
        project_keys: ProjectKeys,
        sprint_id: int,
        authors: Iterable[str] | None = None,
        *,
        progress: ProgressCallback | None = None,
    ) -> list[WorklogRecord]:
        return self.collect_worklogs_by_sprint(
            project_keys, self.get_sprint(sprint_id), authors, progress=progress
        )

    def get_velocity(
        self,
        project_key: str,
        sprint_id: int,
        story_point_field: str = DEFAULT_STORY_POINT_FIELD,
    ) -> float:
        """Sum of `story_point_field` over issues resolved Done in the sprint."""
        jql = f"project = {_jql_string(project_key)} AND sprint = {int(sprint_id)} AND resolution = Done"
        result = self.api.search(jql, limit=VELOCITY_SEARCH_PAGE_SIZE, fields=[story_point_field])
        velocity = 0.0
        for issue in result.get("issues") or []:
            value = (issue.get("fields") or {}).get(story_point_field)
            if isinstance(value, (int, float)):
                velocity += value
        return velocity

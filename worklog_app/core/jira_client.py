"""Jira API client wrapper (REST v3 search + worklogs, Agile boards/sprints)."""

from __future__ import annotations

import hashlib
import json
import time
from collections.abc import Iterable, Sequence
from typing import Any

from jira import JIRA, JIRAError

from .config import CACHE_TTL_SECONDS, DEFAULT_SEARCH_PAGE_SIZE, WORKLOG_PAGE_SIZE
from .mappers import author_identity


class ResponseCache:
    """Fingerprint-keyed in-memory cache: {fingerprint: (timestamp, data)}."""

    def __init__(self, ttl: float = CACHE_TTL_SECONDS):
        self.ttl = float(ttl)
        self._entries: dict[str, tuple[float, Any]] = {}

    @staticmethod
    def fingerprint(payload: dict[str, Any]) -> str:
        return hashlib.sha256(json.dumps(payload, sort_keys=True, default=str).encode()).hexdigest()

    def get(self, key: str) -> Any | None:
        cached = self._entries.get(key)
        if cached and (time.time() - cached[0]) < self.ttl:
            return cached[1]
        return None

    def put(self, key: str, data: Any) -> None:
        self._entries[key] = (time.time(), data)

    def invalidate(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class JiraAPI:
    def __init__(self, server: str, email: str, token: str, *, cache_ttl: float = CACHE_TTL_SECONDS):
        self.server = server.rstrip("/")
        self.client = JIRA(
            basic_auth=(email, token), options={"server": self.server, "rest_api_version": "3"}
        )
        self.cache = ResponseCache(ttl=cache_ttl)

    def clear_cache(self) -> None:
        """Reset the in-memory response cache."""
        cache = getattr(self, "cache", None)
        if isinstance(cache, ResponseCache):
            cache.invalidate()

    def _get_json(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        session = getattr(self.client, "_session", None)
        if session is None:
            raise RuntimeError("JIRA session unavailable")
        cache = getattr(self, "cache", None)
        key = ResponseCache.fingerprint({"path": path, "params": params or {}})
        if cache is not None:
            cached = cache.get(key)
            if cached is not None:
                return cached
        url = f"{self.server}{path}"
        try:
            resp = session.get(url, params=params)
        except JIRAError as exc:
            raise RuntimeError(f"Jira request failed for {path}: {exc}") from exc
        if resp.status_code >= 400:
            raise RuntimeError(f"Jira request failed {resp.status_code}: {resp.text[:200]}")
        data = resp.json()
        if cache is not None:
            cache.put(key, data)
        return data

    def search(
        self,
        jql: str,
        limit: int = DEFAULT_SEARCH_PAGE_SIZE,
        fields: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        """Run a JQL search and return the first page only."""
        params: dict[str, Any] = {"jql": jql, "maxResults": int(limit)}
        if fields:
            params["fields"] = ",".join(fields)
        data = self._get_json("/rest/api/3/search/jql", params)
        return {"issues": list(data.get("issues") or [])}

    def get_worklogs_of_issue(
        self,
        issue_key: str,
        authors: Iterable[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Return the full worklog history of an issue, optionally limited to `authors`."""
        out: list[dict[str, Any]] = []
        start_at = 0
        while True:
            data = self._get_json(
                f"/rest/api/3/issue/{issue_key}/worklog",
                {"startAt": start_at, "maxResults": WORKLOG_PAGE_SIZE},
            )
            page = data.get("worklogs") or []
            out.extend(page)
            start_at += len(page)
            total = data.get("total")
            if not page or not isinstance(total, int) or start_at >= total:
                break
        if authors is not None:
            allowed = set(authors)
            out = [w for w in out if author_identity(w.get("author")) in allowed]
        return out

    def get_boards(self, project_key_or_id: str, limit: int = 1) -> list[dict[str, Any]]:
        data = self._get_json(
            "/rest/agile/1.0/board",
            {"projectKeyOrId": project_key_or_id, "maxResults": int(limit)},
        )
        return list(data.get("values") or [])

    def get_sprints(
        self,
        board_id: int,
        state: Sequence[str] = ("active",),
        limit: int = 1,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"maxResults": int(limit)}
        if state:
            params["state"] = ",".join(state)
        data = self._get_json(f"/rest/agile/1.0/board/{board_id}/sprint", params)
        return list(data.get("values") or [])

    def get_sprint(self, sprint_id: int) -> dict[str, Any]:
        return self._get_json(f"/rest/agile/1.0/sprint/{sprint_id}")

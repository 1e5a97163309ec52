from datetime import UTC, datetime

from worklog_app.core.mappers import author_identity, map_sprint, map_worklog, worklogs_to_dataframe
from worklog_app.core.models import WorklogRecord


def test_author_identity_fallbacks():
    assert author_identity({"emailAddress": "a@x.io", "accountId": "123"}) == "a@x.io"
    assert author_identity({"emailAddress": "", "accountId": "123", "displayName": "Al"}) == "123"
    assert author_identity({"displayName": "Al"}) == "Al"
    assert author_identity(None) == "Unknown"


def test_map_worklog():
    raw = {
        "id": 10001,
        "author": {"emailAddress": "a@x.io"},
        "started": "2024-01-02T10:30:00.000+0100",
        "timeSpent": "1h 30m",
        "timeSpentSeconds": 5400,
    }
    record = map_worklog(raw, issue_key="ABC-1")
    assert record == WorklogRecord(
        author="a@x.io",
        started=datetime(2024, 1, 2, 9, 30, tzinfo=UTC),
        time_spent="1h 30m",
        time_spent_seconds=5400,
        issue_key="ABC-1",
        worklog_id="10001",
    )


def test_map_worklog_without_start_is_skipped():
    assert map_worklog({"author": {"emailAddress": "a@x.io"}, "timeSpentSeconds": 60}) is None
    assert map_worklog({"started": "not a date"}) is None


def test_map_sprint():
    sprint = map_sprint({"id": 5, "name": "S5", "startDate": "2024-01-01", "state": "active"})
    assert sprint.id == 5
    assert sprint.end_date is None
    assert sprint.state == "active"


def test_worklogs_to_dataframe_sorted_by_start():
    df = worklogs_to_dataframe(
        [
            WorklogRecord("b", datetime(2024, 1, 2, tzinfo=UTC), "1h", 3600, "ABC-2"),
            WorklogRecord("a", datetime(2024, 1, 1, tzinfo=UTC), "1h", 3600, "ABC-1"),
        ]
    )
    assert list(df["author"]) == ["a", "b"]
    assert "time_spent_seconds" in df.columns
    assert worklogs_to_dataframe([]).empty

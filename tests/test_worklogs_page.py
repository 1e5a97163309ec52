import pytest

from worklog_app.pages import worklogs as worklogs_page


def test_parse_authors():
    assert worklogs_page.parse_authors("") is None
    assert worklogs_page.parse_authors("a@x.io, b@x.io\nc@x.io\n") == ["a@x.io", "b@x.io", "c@x.io"]


def test_parse_capacity():
    text = "# team\nalice@x.io = 10\nbob@x.io=2.5\n\n"
    assert worklogs_page.parse_capacity(text) == {"alice@x.io": 10.0, "bob@x.io": 2.5}
    assert worklogs_page.parse_capacity("  ") is None


def test_parse_capacity_rejects_bad_lines():
    with pytest.raises(ValueError, match="Line 1"):
        worklogs_page.parse_capacity("alice 10")
    with pytest.raises(ValueError, match="not a number"):
        worklogs_page.parse_capacity("alice = ten")

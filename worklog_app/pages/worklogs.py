"""Worklog report page.

Collects worklogs for the selected projects and window, then shows either the
per-day timeline per author or the capacity-normalized totals per author, as a
chart and as the ``chart`` text block.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import streamlit as st

from worklog_app.analytics.metrics.capacity import ChartFormat, default_capacity_unit
from worklog_app.app import register_page
from worklog_app.core.config import SETTINGS
from worklog_app.core.mappers import worklogs_to_dataframe
from worklog_app.core.service import WorklogService
from worklog_app.features.worklog_report import WorklogReport, build_daily_report, build_user_report
from worklog_app.visual.charts import chart_spec_to_altair
from worklog_app.visual.progress import WorklogProgress

REPORT_DAILY = "Per day (line)"
REPORT_USER = "Per author (bar)"


def parse_authors(text: str | None) -> list[str] | None:
    """Comma/newline separated author identities; None when blank."""
    if not text:
        return None
    names = [part.strip() for chunk in text.splitlines() for part in chunk.split(",")]
    names = [n for n in names if n]
    return names or None


def parse_capacity(text: str | None) -> dict[str, float] | None:
    """Parse ``author = capacity`` lines into a capacity map; None when blank."""
    if not text or not text.strip():
        return None
    out: dict[str, float] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        author, sep, value = line.rpartition("=")
        if not sep or not author.strip():
            raise ValueError(f"Line {lineno}: expected 'author = capacity', got {line!r}")
        try:
            out[author.strip()] = float(value)
        except ValueError as exc:
            raise ValueError(f"Line {lineno}: capacity {value.strip()!r} is not a number") from exc
    return out


def render_report(report: WorklogReport, *, value_title: str) -> None:
    chart = chart_spec_to_altair(report.spec, value_title=value_title)
    if chart is None:
        st.info("No worklogs found in the selected window.")
    else:
        st.altair_chart(chart, use_container_width=True)
    st.code(report.text, language="markdown")
    table = worklogs_to_dataframe(report.worklogs)
    if not table.empty:
        with st.expander(f"Worklogs ({len(table)})"):
            st.dataframe(table, hide_index=True)
            csv = table.to_csv(index=False).encode(SETTINGS.download_encoding)
            st.download_button("Download Worklogs CSV", data=csv, file_name="worklogs.csv", mime="text/csv")


@register_page("Worklog Report")
def worklog_page():
    st.title("Worklog Report")
    service: WorklogService | None = st.session_state.get("worklog_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    projects = st.text_input("Project keys or ids (comma separated)", value=st.session_state.get("project_keys", ""))
    today = datetime.now(service.tz).date()
    col_start, col_end = st.columns(2)
    start = col_start.date_input("Start date", value=today - timedelta(days=SETTINGS.default_lookback_days))
    end = col_end.date_input("End date (inclusive)", value=today)

    if st.button("Use active sprint") and projects:
        first_project = projects.split(",")[0].strip()
        sprint = service.get_active_sprint(first_project)
        if sprint is None:
            st.info(f"No active sprint for {first_project}.")
        else:
            st.caption(f"Active sprint: {sprint.name} ({sprint.start_date} → {sprint.end_date})")
            st.session_state["worklog_window"] = (sprint.start_date, sprint.end_date or "now()")

    kind = st.radio("Report", [REPORT_DAILY, REPORT_USER], horizontal=True)
    authors_text = capacity_text = capacity_unit = None
    fmt = ChartFormat.PERCENTAGE
    max_capacity = 0.0
    if kind == REPORT_DAILY:
        authors_text = st.text_area("Authors (optional, one per line)")
    else:
        fmt = ChartFormat(st.selectbox("Format", [f.value for f in ChartFormat], index=3))
        capacity_unit = st.text_input("Capacity unit", value=default_capacity_unit(fmt))
        capacity_text = st.text_area("Capacity per author (optional, 'author = days')")
        max_capacity = st.number_input("Max capacity (0 = days in window)", min_value=0.0, value=0.0)

    if not st.button("Fetch Worklogs", type="primary"):
        return
    if not projects.strip():
        st.error("Enter at least one project.")
        return
    st.session_state["project_keys"] = projects
    window = st.session_state.pop("worklog_window", None) or (start, end)

    service.api.clear_cache()
    reporter = WorklogProgress(f"Collecting worklogs for {projects}")
    try:
        if kind == REPORT_DAILY:
            report = build_daily_report(
                service,
                projects,
                window[0],
                window[1],
                authors=parse_authors(authors_text),
                progress=reporter.callback,
            )
            value_title = "Seconds"
        else:
            report = build_user_report(
                service,
                projects,
                window[0],
                window[1],
                format=fmt,
                capacity=parse_capacity(capacity_text),
                capacity_unit=capacity_unit or None,
                max_capacity=max_capacity or None,
                progress=reporter.callback,
            )
            value_title = fmt.value
        reporter.complete(f"Collected {len(report.worklogs)} worklog(s).")
    except ValueError as exc:
        reporter.error(str(exc))
        return
    except Exception as exc:  # pragma: no cover
        reporter.error(f"Failed to build worklog report: {exc}")
        raise
    render_report(report, value_title=value_title)

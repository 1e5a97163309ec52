"""Connection setup page: collect Jira credentials and initialize WorklogService."""

from __future__ import annotations

import streamlit as st

from worklog_app.app import register_page
from worklog_app.core.config import CACHE_TTL_SECONDS, SETTINGS, TIMEZONE
from worklog_app.core.jira_client import JiraAPI
from worklog_app.core.service import WorklogService


def secret_credentials() -> tuple[str | None, str | None, str | None]:
    """Read server, email, and token from a ``[jira]`` secrets section or top level."""
    jira_secrets = st.secrets.get("jira", {})
    server = jira_secrets.get("JIRA_SERVER") or st.secrets.get("JIRA_SERVER")
    email = jira_secrets.get("JIRA_EMAIL") or st.secrets.get("JIRA_EMAIL")
    token = (
        jira_secrets.get("JIRA_API_TOKEN")
        or st.secrets.get("JIRA_API_TOKEN")
        or jira_secrets.get("JIRA_TOKEN")
        or st.secrets.get("JIRA_TOKEN")
    )
    return server, email, token


@register_page("Setup / Connection")
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Enter credentials (use secrets manager in production).")

    secret_server, secret_email, secret_token = secret_credentials()
    server = st.text_input(
        "Jira Server URL",
        value=st.session_state.get("jira_server") or secret_server or "",
    )
    email = st.text_input(
        "Email / Username",
        value=st.session_state.get("jira_email") or secret_email or "",
    )
    token = st.text_input("API Token", type="password", value=secret_token or "")
    tz_name = st.text_input("Time zone for daily buckets", value=st.session_state.get("jira_tz") or TIMEZONE)
    ttl = st.number_input(
        "Client cache TTL (seconds)", min_value=60, max_value=3600, value=int(CACHE_TTL_SECONDS)
    )
    workers = st.number_input(
        "Parallel worklog fetches (1 = sequential)", min_value=1, max_value=16, value=SETTINGS.max_workers
    )
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        if not (server and email and token):
            st.error("All fields required.")
            return
        try:
            api = JiraAPI(server, email, token, cache_ttl=float(ttl))
            st.session_state["jira_server"] = server
            st.session_state["jira_email"] = email
            st.session_state["jira_tz"] = tz_name
            st.session_state["worklog_service"] = WorklogService(api, tz=tz_name, max_workers=int(workers))
            st.success("Connection initialized.")
        except Exception as e:  # pragma: no cover
            st.error(f"Failed to initialize Jira client: {e}")

    if "worklog_service" in st.session_state:
        st.info("WorklogService ready.")

"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``worklog_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from worklog_app.app import main

st.set_page_config(layout="wide")
logger = logging.getLogger("worklog_app")


def _auto_init_worklog_service():
    """Initialize the worklog service from Streamlit secrets if available."""
    if "worklog_service" in st.session_state:
        return

    from worklog_app.pages.setup import secret_credentials

    server, email, token = secret_credentials()
    if server and email and token:
        st.sidebar.info("Secrets found, attempting to connect to Jira...")
        try:
            from worklog_app.core.jira_client import JiraAPI
            from worklog_app.core.service import WorklogService

            api = JiraAPI(server, email, token)
            st.session_state["jira_server"] = server
            st.session_state["worklog_service"] = WorklogService(api)
            st.sidebar.success("Jira connection successful!")
        except Exception as e:
            st.sidebar.error(f"Jira connection failed: {e}")
            if "worklog_service" in st.session_state:
                del st.session_state["worklog_service"]
    else:
        st.sidebar.warning("Jira secrets not found. Please use the Setup page.")


PAGES_DIR = Path(__file__).parent / "worklog_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"worklog_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover
        logger.error("Failed importing page %s: %s", mod_name, e)

_auto_init_worklog_service()

if __name__ == "__main__":
    main()

"""Progress banner for Streamlit pages while worklogs are being collected."""

from __future__ import annotations

import streamlit as st


class WorklogProgress:
    """Info banner + progress bar driven by WorklogService progress callbacks."""

    def __init__(self, title: str):
        self._container = st.container()
        self._container.info(title)
        self._message = self._container.empty()
        self._bar = self._container.progress(0.0)
        self._done = False

    def callback(self, message: str, current: int | None = None, total: int | None = None) -> None:
        if self._done:
            return
        if total:
            current = max(current or 0, 0)
            self._message.write(f"{message} ({current}/{total} issues)")
            self._bar.progress(min(current / total, 1.0))
        else:
            # Unknown total (search phase)
            self._message.write(message)
            self._bar.progress(0.0)

    def complete(self, message: str) -> None:
        if self._done:
            return
        self._bar.progress(1.0)
        self._container.success(message)
        self._done = True

    def error(self, message: str) -> None:
        if self._done:
            return
        self._container.error(message)
        self._done = True

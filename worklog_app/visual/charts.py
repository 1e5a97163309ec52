"""Chart builders (Altair) for rendering a ChartSpec."""

from __future__ import annotations

import altair as alt
import pandas as pd

from worklog_app.core.models import ChartSpec


def chart_spec_frame(spec: ChartSpec) -> pd.DataFrame:
    """Long-format frame (one row per label/series point) for a chart spec."""
    rows = []
    for s in spec.series:
        for position, (label, value) in enumerate(zip(spec.labels, s.data)):
            rows.append({"label": str(label), "position": position, "series": s.title, "value": value})
    return pd.DataFrame(rows, columns=["label", "position", "series", "value"])


def chart_spec_to_altair(spec: ChartSpec, *, value_title: str = "Value") -> alt.Chart | None:
    chart_df = chart_spec_frame(spec)
    if chart_df.empty:
        return None
    label_order = [str(label) for label in spec.labels]
    x = alt.X("label:N", sort=label_order, title=None)
    tooltip = [
        alt.Tooltip("label:N", title="Label"),
        alt.Tooltip("series:N", title="Series"),
        alt.Tooltip("value:Q", title=value_title, format=",.2f"),
    ]
    if spec.type == "bar":
        chart = (
            alt.Chart(chart_df)
            .mark_bar(color="#1f77b4")
            .encode(x=x, y=alt.Y("value:Q", title=value_title), tooltip=tooltip)
        )
    else:
        chart = (
            alt.Chart(chart_df)
            .mark_line(point=True)
            .encode(
                x=x,
                y=alt.Y("value:Q", title=value_title),
                color=alt.Color("series:N", legend=alt.Legend(title="Author")),
                tooltip=tooltip,
            )
        )
    return chart.properties(height=300)

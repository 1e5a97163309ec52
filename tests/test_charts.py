from worklog_app.core.models import ChartSeries, ChartSpec
from worklog_app.visual.charts import chart_spec_frame, chart_spec_to_altair


def _sample_spec(chart_type="line"):
    return ChartSpec(
        type=chart_type,
        labels=["2024-01-01", "2024-01-02", "2024-01-03"],
        series=[ChartSeries("A", [3600, 7200, 0]), ChartSeries("B", [0, 0, 1800])],
    )


def test_chart_spec_frame_shape():
    frame = chart_spec_frame(_sample_spec())
    assert len(frame) == 6
    assert list(frame.columns) == ["label", "position", "series", "value"]
    b_rows = frame[frame["series"] == "B"]
    assert list(b_rows["value"]) == [0, 0, 1800]


def test_line_and_bar_charts_render():
    assert chart_spec_to_altair(_sample_spec("line")) is not None
    bar = ChartSpec(type="bar", labels=["A", "B"], series=[ChartSeries("Time logged Hours", [3, 0.5])])
    assert chart_spec_to_altair(bar, value_title="Hours") is not None


def test_empty_spec_has_no_chart():
    assert chart_spec_to_altair(ChartSpec(type="line", labels=["2024-01-01"], series=[])) is None

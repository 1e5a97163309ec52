from worklog_app.core.models import ChartSeries, ChartSpec
from worklog_app.visual.chart_spec import create_chart, format_number, render_chart_spec


def test_create_chart_layout():
    text = create_chart(
        "line",
        ["2024-01-01", "2024-01-02", "2024-01-03"],
        [ChartSeries("A", [3600, 7200, 0]), ChartSeries("B", [0, 0, 1800])],
    )
    assert text == (
        "```chart\n"
        "type: line\n"
        "width: 800px\n"
        "labels: [2024-01-01,2024-01-02,2024-01-03]\n"
        "series:\n"
        "  - title: A\n"
        "    data: [3600,7200,0]\n"
        "  - title: B\n"
        "    data: [0,0,1800]\n"
        "```"
    )


def test_create_chart_preserves_caller_order():
    text = create_chart("bar", ["z", "a"], [ChartSeries("second", [2, 1]), ChartSeries("first", [1, 2])])
    assert text.index("title: second") < text.index("title: first")
    assert "labels: [z,a]" in text


def test_number_formatting():
    assert format_number(2.0) == "2"
    assert format_number(0.5) == "0.5"
    assert format_number(100 / 3) == repr(100 / 3)
    assert format_number(float("nan")) == "NaN"
    assert format_number(float("-inf")) == "-Infinity"


def test_render_chart_spec_without_series():
    spec = ChartSpec(type="bar", labels=[], series=[])
    assert render_chart_spec(spec) == "```chart\ntype: bar\nwidth: 800px\nlabels: []\nseries:\n\n```"


def test_number_formatting_follows_javascript_notation():
    assert format_number(1e-7) == "1e-7"
    assert format_number(1.5e-7) == "1.5e-7"
    assert format_number(0.000001) == "0.000001"
    assert format_number(0.00001) == "0.00001"
    assert format_number(1e16) == "10000000000000000"
    assert format_number(1e20) == "100000000000000000000"
    assert format_number(1e21) == "1e+21"
    assert format_number(1.25e22) == "1.25e+22"
    assert format_number(-2.5) == "-2.5"
    assert format_number(-0.0) == "0"

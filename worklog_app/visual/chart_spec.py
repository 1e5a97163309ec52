"""Serializer for the fenced ``chart`` text block consumed by chart renderers."""

from __future__ import annotations

import math
from collections.abc import Iterable
from decimal import Decimal

from worklog_app.core.config import CHART_WIDTH
from worklog_app.core.models import ChartSeries, ChartSpec


def format_number(value) -> str:
    """Format a number the way JavaScript's ``String(number)`` does.

    Shortest round-trip digits, in plain notation from 1e-6 up to (but not
    including) 1e21 and as ``1e-7`` / ``1e+21`` outside that range.
    """
    number = float(value)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == 0:
        return "0"
    sign = "-" if number < 0 else ""
    parsed = Decimal(repr(abs(number))).normalize().as_tuple()
    digits = "".join(str(d) for d in parsed.digits)
    k = len(digits)
    n = parsed.exponent + k  # value == 0.<digits> * 10**n
    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits
    exponent = n - 1
    mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
    return f"{sign}{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"


def create_chart(chart_type: str, labels: Iterable[str], series: Iterable[ChartSeries]) -> str:
    """Render a chart block; labels and series are echoed in the given order."""
    rows = [
        f"  - title: {s.title}\n    data: [{','.join(format_number(v) for v in s.data)}]"
        for s in series
    ]
    return (
        "```chart\n"
        f"type: {chart_type}\n"
        f"width: {CHART_WIDTH}\n"
        f"labels: [{','.join(str(label) for label in labels)}]\n"
        "series:\n"
        + "\n".join(rows)
        + "\n```"
    )


def render_chart_spec(spec: ChartSpec) -> str:
    return create_chart(spec.type, spec.labels, spec.series)

"""Final report: terminal line charts and per-series summaries."""

from __future__ import annotations

import logging
import math
import statistics
from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence

import asciichartpy

from .config import ChartConfig
from .derive import REPORT_ORDER
from .session import Session

logger = logging.getLogger(__name__)

ReportSink = Callable[[str], None]


@dataclass
class SeriesSummary:
    """Summary statistics for one derived series."""

    name: str
    count: int = 0
    minimum: float = 0.0
    maximum: float = 0.0
    mean: float = 0.0
    last: float = 0.0


@dataclass
class Report:
    """The rendered report and what went into it."""

    text: str
    missing: list[str] = field(default_factory=list)
    summaries: list[SeriesSummary] = field(default_factory=list)


def resample(series: Sequence[float], width: int) -> list[float]:
    """Linearly interpolate *series* onto *width* evenly spaced points.

    The first and last values are kept as-is.
    """
    data = [float(v) for v in series]
    if width < 2 or not data:
        return data
    if len(data) == 1:
        return data * width
    step = (len(data) - 1) / (width - 1)
    out = [data[0]]
    for i in range(1, width - 1):
        pos = i * step
        lo = math.floor(pos)
        hi = math.ceil(pos)
        frac = pos - lo
        out.append(data[lo] + (data[hi] - data[lo]) * frac)
    out.append(data[-1])
    return out


def plot(series: Sequence[float], caption: str = "", chart: ChartConfig | None = None) -> str:
    """Render *series* as a line chart with *caption* underneath."""
    chart = chart or ChartConfig()
    data = resample(series, chart.width)
    if not data:
        return caption
    # every label shares one width so the axis column stays straight
    label_width = max(len(f"{min(data):.2f}"), len(f"{max(data):.2f}"))
    text = asciichartpy.plot(
        data,
        {
            "height": chart.height,
            "offset": chart.offset,
            "format": "{:" + str(label_width) + ".2f} ",
        },
    )
    if caption:
        pad = chart.offset + max(0, (chart.width - len(caption)) // 2)
        text += "\n" + " " * pad + caption
    return text


def summarize_series(name: str, series: Sequence[float]) -> SeriesSummary:
    summary = SeriesSummary(name=name, count=len(series))
    if series:
        summary.minimum = min(series)
        summary.maximum = max(series)
        summary.mean = statistics.mean(series)
        summary.last = series[-1]
    return summary


def format_params(params: Mapping[str, object]) -> str:
    return "Test params: " + " ".join(f"{k}={v}" for k, v in params.items())


def build_report(
    session: Session,
    params: Mapping[str, object] | None = None,
    chart: ChartConfig | None = None,
) -> Report:
    """Render every tracked series of *session* into one report.

    Series with no samples are listed in ``missing`` and get no chart.
    """
    report = Report(text=format_params(params or {}))
    for name in REPORT_ORDER:
        series = session.series(name)
        report.summaries.append(summarize_series(name, series))
        if not series:
            report.missing.append(name)
            continue
        report.text += "\n" + plot(series, caption=name, chart=chart)
    return report


def _log_report(message: str) -> None:
    if message.startswith("WARNING:"):
        logger.warning(message)
    else:
        logger.info(message)


class Reporter:
    """Builds the final report and emits it through *sink*.

    Warnings for missing series are emitted first, followed by the report
    text as a single message.
    """

    def __init__(self, chart: ChartConfig | None = None, sink: ReportSink | None = None) -> None:
        self._chart = chart or ChartConfig()
        self._sink = sink or _log_report

    def render(self, session: Session, params: Mapping[str, object] | None = None) -> Report:
        return build_report(session, params, self._chart)

    def report(self, session: Session, params: Mapping[str, object] | None = None) -> Report:
        report = self.render(session, params)
        for name in report.missing:
            self._sink(f"WARNING: No metrics for {name}!")
        self._sink(report.text)
        return report


def print_summary(summaries: list[SeriesSummary]) -> None:
    """Pretty-print series summaries to the terminal using Rich."""
    from rich.console import Console
    from rich.table import Table

    table = Table(title="Resource Summary")
    table.add_column("Metric", style="green", width=20)
    table.add_column("Samples", justify="right", width=8)
    table.add_column("Min", justify="right", width=14)
    table.add_column("Max", justify="right", width=14)
    table.add_column("Mean", justify="right", width=14)
    table.add_column("Last", justify="right", width=14)

    for s in summaries:
        if not s.count:
            table.add_row(s.name, "0", "-", "-", "-", "-")
            continue
        table.add_row(
            s.name,
            str(s.count),
            f"{s.minimum:.2f}",
            f"{s.maximum:.2f}",
            f"{s.mean:.2f}",
            f"{s.last:.2f}",
        )

    Console().print(table)

"""Start/stop handle tying a sampler to its final report."""

from __future__ import annotations

import logging
import threading
from typing import Mapping

from .config import ResourceSamplerConfig
from .report import Report, Reporter, ReportSink
from .sampler import Sampler, SnapshotError
from .session import Session
from .sink.base import TelemetrySink
from .source.base import BaseMetricSource

logger = logging.getLogger(__name__)


class Measurement:
    """A running sampling session.

    Call :meth:`stop_and_report` once the workload is done; the report is
    built and emitted exactly once.
    """

    def __init__(self, sampler: Sampler, reporter: Reporter, params: Mapping[str, object]) -> None:
        self._sampler = sampler
        self._reporter = reporter
        self._params = dict(params)
        self._report: Report | None = None
        self._lock = threading.Lock()

    @property
    def session(self) -> Session:
        return self._sampler.session

    @property
    def error(self) -> SnapshotError | None:
        return self._sampler.error

    def stop_and_report(self) -> Report:
        """Stop sampling, then render and emit the report."""
        with self._lock:
            if self._report is None:
                self._sampler.stop()
                self._report = self._reporter.report(self._sampler.session, self._params)
            return self._report


def start_measure(
    source: BaseMetricSource,
    sink: TelemetrySink,
    params: Mapping[str, object] | None = None,
    config: ResourceSamplerConfig | None = None,
    report_sink: ReportSink | None = None,
) -> Measurement:
    """Start sampling CPU, active memory and network bytes every interval.

    Live values go to *sink* while sampling; :meth:`Measurement.stop_and_report`
    renders the collected series as line charts.
    """
    config = config or ResourceSamplerConfig()
    sampler = Sampler(source, sink, Session(), config.sampler)
    reporter = Reporter(config.chart, report_sink)
    measurement = Measurement(sampler, reporter, params if params is not None else config.params)
    sampler.start()
    return measurement

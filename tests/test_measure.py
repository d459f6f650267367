"""Tests for the start/stop measurement handle."""

import time

from fakes import RecordingSink, ScriptedSource, cpu_family, memory_family

from resource_sampler.config import ResourceSamplerConfig, SamplerConfig
from resource_sampler.derive import METRIC_CPU, METRIC_MEMORY
from resource_sampler.measure import start_measure


def test_stop_immediately_reports_four_warnings():
    messages = []
    source = ScriptedSource([[cpu_family(100, 10)]])
    measurement = start_measure(source, RecordingSink(), {"case": "empty"}, report_sink=messages.append)
    report = measurement.stop_and_report()

    assert source.calls == 0
    assert len(report.missing) == 4
    assert sum(m.startswith("WARNING:") for m in messages) == 4
    assert messages[-1] == "Test params: case=empty"


def test_stop_twice_reports_once():
    messages = []
    measurement = start_measure(ScriptedSource([[]]), RecordingSink(), {}, report_sink=messages.append)
    first = measurement.stop_and_report()
    second = measurement.stop_and_report()

    assert first is second
    assert len(messages) == 5


def test_measurement_collects_and_renders():
    messages = []
    source = ScriptedSource([
        [cpu_family(100, 10), memory_family(1048576)],
        [cpu_family(110, 10), memory_family(2 * 1048576)],
        [cpu_family(125, 10), memory_family(2 * 1048576)],
    ])
    sink = RecordingSink()
    config = ResourceSamplerConfig(sampler=SamplerConfig(interval_seconds=0.02))
    measurement = start_measure(source, sink, {"n": 1}, config, report_sink=messages.append)

    deadline = time.monotonic() + 5
    while source.calls < 3 and time.monotonic() < deadline:
        time.sleep(0.01)
    report = measurement.stop_and_report()

    assert measurement.error is None
    assert measurement.session.series(METRIC_CPU)[:2] == [10.0, 15.0]
    assert measurement.session.series(METRIC_MEMORY)[:2] == [1.0, 2.0]
    assert METRIC_CPU in report.text
    assert METRIC_MEMORY in report.text
    assert sink.values(METRIC_CPU)[:2] == [10.0, 15.0]


def test_params_default_to_config():
    messages = []
    config = ResourceSamplerConfig(params={"suite": "smoke"})
    measurement = start_measure(ScriptedSource([[]]), RecordingSink(), config=config, report_sink=messages.append)
    measurement.stop_and_report()
    assert messages[-1] == "Test params: suite=smoke"

"""Scripted metric sources and recording sinks shared by the tests."""

from __future__ import annotations

from resource_sampler.sink.base import Gauge, TelemetrySink
from resource_sampler.source.base import (
    CPU_SECONDS_TOTAL,
    MEMORY_ACTIVE_BYTES,
    NETWORK_RECEIVE_BYTES_TOTAL,
    NETWORK_TRANSMIT_BYTES_TOTAL,
    BaseMetricSource,
    LabeledMetricPoint,
    MetricFamily,
)


def cpu_family(busy: float, idle: float, steal: float = 0.0) -> MetricFamily:
    return MetricFamily(CPU_SECONDS_TOTAL, "counter", [
        LabeledMetricPoint(busy, {"cpu": "0", "mode": "user"}),
        LabeledMetricPoint(idle, {"cpu": "0", "mode": "idle"}),
        LabeledMetricPoint(steal, {"cpu": "0", "mode": "steal"}),
    ])


def memory_family(active_bytes: float) -> MetricFamily:
    return MetricFamily(MEMORY_ACTIVE_BYTES, "gauge", [LabeledMetricPoint(active_bytes)])


def net_family(name: str, eth0: float, lo0: float) -> MetricFamily:
    return MetricFamily(name, "counter", [
        LabeledMetricPoint(eth0, {"device": "eth0"}),
        LabeledMetricPoint(lo0, {"device": "lo0"}),
    ])


def recv_family(eth0: float, lo0: float) -> MetricFamily:
    return net_family(NETWORK_RECEIVE_BYTES_TOTAL, eth0, lo0)


def transmit_family(eth0: float, lo0: float) -> MetricFamily:
    return net_family(NETWORK_TRANSMIT_BYTES_TOTAL, eth0, lo0)


class ScriptedSource(BaseMetricSource):
    """Returns one pre-built snapshot per call, repeating the last one."""

    def __init__(self, snapshots: list[list[MetricFamily]]) -> None:
        self._snapshots = snapshots
        self.calls = 0

    def gather(self) -> list[MetricFamily]:
        idx = min(self.calls, len(self._snapshots) - 1)
        self.calls += 1
        return self._snapshots[idx]


class FailingSource(BaseMetricSource):
    def __init__(self) -> None:
        self.calls = 0

    def gather(self) -> list[MetricFamily]:
        self.calls += 1
        raise OSError("collector unavailable")


class _RecordingGauge(Gauge):
    def __init__(self, sink: RecordingSink, name: str) -> None:
        self._sink = sink
        self._name = name

    def update(self, value: float) -> None:
        self._sink.updates.append((self._name, value))


class RecordingSink(TelemetrySink):
    def __init__(self) -> None:
        self.updates: list[tuple[str, float]] = []

    def gauge(self, name: str) -> Gauge:
        return _RecordingGauge(self, name)

    def values(self, name: str) -> list[float]:
        return [v for n, v in self.updates if n == name]


class BrokenSink(TelemetrySink):
    def gauge(self, name: str) -> Gauge:
        raise ConnectionError("sink down")

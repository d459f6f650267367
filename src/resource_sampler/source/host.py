"""Host metric source backed by psutil."""

from __future__ import annotations

import psutil

from .base import (
    CPU_SECONDS_TOTAL,
    MEMORY_ACTIVE_BYTES,
    NETWORK_RECEIVE_BYTES_TOTAL,
    NETWORK_TRANSMIT_BYTES_TOTAL,
    BaseMetricSource,
    LabeledMetricPoint,
    MetricFamily,
)

# already counted inside "user" and "nice"
_GUEST_MODES = frozenset({"guest", "guest_nice"})


class HostMetricSource(BaseMetricSource):
    """Exposes CPU time, active memory and NIC byte counters for this host.

    Families are named after their node exporter counterparts so the
    derivation rules stay independent of psutil.
    """

    def gather(self) -> list[MetricFamily]:
        return [
            self._cpu_seconds(),
            self._active_memory(),
            *self._network_bytes(),
        ]

    def _cpu_seconds(self) -> MetricFamily:
        family = MetricFamily(name=CPU_SECONDS_TOTAL, kind="counter")
        for idx, times in enumerate(psutil.cpu_times(percpu=True)):
            for mode, seconds in times._asdict().items():
                if mode in _GUEST_MODES:
                    continue
                family.points.append(LabeledMetricPoint(
                    value=float(seconds),
                    labels={"cpu": str(idx), "mode": mode},
                ))
        return family

    def _active_memory(self) -> MetricFamily:
        mem = psutil.virtual_memory()
        # Windows exposes no "active" field
        active = getattr(mem, "active", mem.used)
        return MetricFamily(
            name=MEMORY_ACTIVE_BYTES,
            kind="gauge",
            points=[LabeledMetricPoint(value=float(active))],
        )

    def _network_bytes(self) -> tuple[MetricFamily, MetricFamily]:
        recv = MetricFamily(name=NETWORK_RECEIVE_BYTES_TOTAL, kind="counter")
        sent = MetricFamily(name=NETWORK_TRANSMIT_BYTES_TOTAL, kind="counter")
        for device, nio in psutil.net_io_counters(pernic=True).items():
            labels = {"device": device}
            recv.points.append(LabeledMetricPoint(value=float(nio.bytes_recv), labels=labels))
            sent.points.append(LabeledMetricPoint(value=float(nio.bytes_sent), labels=dict(labels)))
        return recv, sent

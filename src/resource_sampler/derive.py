"""Derivation rules that turn raw metric families into series values.

Counter families are summed over their non-excluded points and converted
into per-interval deltas against the previous cumulative total.  The first
cumulative total seen for a counter only establishes the baseline and is
never recorded.  Gauge families are recorded on every sample.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterable

from .config import SamplerConfig
from .session import Session
from .source.base import (
    CPU_SECONDS_TOTAL,
    MEMORY_ACTIVE_BYTES,
    NETWORK_RECEIVE_BYTES_TOTAL,
    NETWORK_TRANSMIT_BYTES_TOTAL,
    LabeledMetricPoint,
)

METRIC_CPU = "cpu-seconds"
METRIC_MEMORY = "active-memory-mibs"
METRIC_RECV_BYTES = "receive-bytes"
METRIC_TRANSMIT_BYTES = "transmit-bytes"

REPORT_ORDER = (METRIC_CPU, METRIC_MEMORY, METRIC_RECV_BYTES, METRIC_TRANSMIT_BYTES)

BYTES_PER_MIB = 1048576.0


@dataclass(frozen=True)
class ExclusionRule:
    """Drops points whose *label* carries one of *values*."""

    label: str = ""
    values: frozenset[str] = field(default_factory=frozenset)

    def excludes(self, point: LabeledMetricPoint) -> bool:
        if not self.label:
            return False
        value = point.labels.get(self.label)
        return value is not None and value in self.values


def sum_points(points: Iterable[LabeledMetricPoint], exclusion: ExclusionRule) -> float:
    """Sum the values of all points not dropped by *exclusion*."""
    return sum((p.value for p in points if not exclusion.excludes(p)), 0.0)


@dataclass(frozen=True)
class CounterRule:
    """Per-interval delta of a summed counter family."""

    kind: ClassVar[str] = "counter"

    name: str
    family: str
    exclusion: ExclusionRule = ExclusionRule()

    def apply(self, points: list[LabeledMetricPoint], session: Session) -> float | None:
        """Update *session* and return the recorded delta, if any.

        Counter resets are not detected and produce a negative delta.
        """
        total = sum_points(points, self.exclusion)
        previous = session.previous(self.name)
        session.update_cumulative(self.name, total)
        if previous > 0:
            delta = total - previous
            session.record_delta(self.name, delta)
            return delta
        return None


@dataclass(frozen=True)
class GaugeRule:
    """Records a single gauge point scaled by *divisor*.

    The returned value is the raw reading, unscaled.
    """

    kind: ClassVar[str] = "gauge"

    name: str
    family: str
    divisor: float = 1.0

    def apply(self, points: list[LabeledMetricPoint], session: Session) -> float | None:
        if not points:
            return None
        value = points[0].value
        session.record_delta(self.name, value / self.divisor)
        return value


def default_rules(config: SamplerConfig | None = None) -> list[CounterRule | GaugeRule]:
    """Build the CPU, memory, receive and transmit rules."""
    config = config or SamplerConfig()
    loopback = ExclusionRule("device", frozenset(config.loopback_devices))
    return [
        CounterRule(
            name=METRIC_CPU,
            family=CPU_SECONDS_TOTAL,
            exclusion=ExclusionRule("mode", frozenset(config.cpu_excluded_modes)),
        ),
        GaugeRule(name=METRIC_MEMORY, family=MEMORY_ACTIVE_BYTES, divisor=BYTES_PER_MIB),
        CounterRule(name=METRIC_RECV_BYTES, family=NETWORK_RECEIVE_BYTES_TOTAL, exclusion=loopback),
        CounterRule(name=METRIC_TRANSMIT_BYTES, family=NETWORK_TRANSMIT_BYTES_TOTAL, exclusion=loopback),
    ]

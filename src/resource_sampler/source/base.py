"""Base interface for raw metric sources."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field

CPU_SECONDS_TOTAL = "node_cpu_seconds_total"
MEMORY_ACTIVE_BYTES = "node_memory_active_bytes"
NETWORK_RECEIVE_BYTES_TOTAL = "node_network_receive_bytes_total"
NETWORK_TRANSMIT_BYTES_TOTAL = "node_network_transmit_bytes_total"


@dataclass
class LabeledMetricPoint:
    """One raw counter or gauge reading with its classification labels."""

    value: float
    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class MetricFamily:
    """A named group of points sharing one metric type."""

    name: str
    kind: str  # "counter" | "gauge"
    points: list[LabeledMetricPoint] = field(default_factory=list)


class BaseMetricSource(abc.ABC):
    """Abstract base class for point-in-time metric snapshots."""

    @abc.abstractmethod
    def gather(self) -> list[MetricFamily]:
        """Read every tracked metric family once."""

"""Base interface for live telemetry sinks."""

from __future__ import annotations

import abc


class Gauge(abc.ABC):
    """A named scalar that accepts live updates."""

    @abc.abstractmethod
    def update(self, value: float) -> None:
        """Push the latest reading."""


class TelemetrySink(abc.ABC):
    """Abstract base for sinks that receive live gauge updates."""

    @abc.abstractmethod
    def gauge(self, name: str) -> Gauge:
        """Return the gauge registered under *name*, creating it if needed."""

    def shutdown(self) -> None:
        """Flush and release resources."""


class _NullGauge(Gauge):
    def update(self, value: float) -> None:
        pass


class NullSink(TelemetrySink):
    """Discards every update."""

    _gauge = _NullGauge()

    def gauge(self, name: str) -> Gauge:
        return self._gauge

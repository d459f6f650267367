"""Periodic collection loop feeding a session and a live telemetry sink."""

from __future__ import annotations

import logging
import threading
import time

from .config import SamplerConfig
from .derive import CounterRule, GaugeRule, default_rules
from .session import Session
from .sink.base import TelemetrySink
from .source.base import BaseMetricSource

logger = logging.getLogger(__name__)


class SamplerError(Exception):
    """Base class for sampling failures."""


class SnapshotError(SamplerError):
    """The metric source could not produce a snapshot."""


class Sampler:
    """Samples a metric source on a fixed interval in a background thread.

    Each tick gathers one snapshot, applies the derivation rule matching
    every known family and forwards the derived values to *sink*.  The stop
    request is only observed between ticks, so a tick is always applied in
    full.  :meth:`stop` returns once the worker thread has exited, after
    which the session may be read without locking.

    A snapshot failure ends sampling for good: the exception is kept in
    :attr:`error` and no further ticks run.
    """

    def __init__(
        self,
        source: BaseMetricSource,
        sink: TelemetrySink,
        session: Session,
        config: SamplerConfig | None = None,
        rules: list[CounterRule | GaugeRule] | None = None,
    ) -> None:
        self._config = config or SamplerConfig()
        self._source = source
        self._sink = sink
        self._session = session
        self._rules = {r.family: r for r in (rules if rules is not None else default_rules(self._config))}
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._stopped = False
        self.error: SnapshotError | None = None
        self.ticks = 0

    @property
    def session(self) -> Session:
        return self._session

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> None:
        """Collect one snapshot and apply it to the session."""
        try:
            families = self._source.gather()
        except Exception as exc:
            raise SnapshotError(f"failed to gather metrics: {exc}") from exc

        for family in families:
            rule = self._rules.get(family.name)
            if rule is None:
                continue
            if family.kind != rule.kind:
                logger.warning(
                    "Skipping %s: expected a %s family, got %s", family.name, rule.kind, family.kind,
                )
                continue
            value = rule.apply(family.points, self._session)
            if value is not None:
                self._push(rule.name, value)
        self.ticks += 1

    def _push(self, name: str, value: float) -> None:
        try:
            self._sink.gauge(name).update(value)
        except Exception:
            logger.warning("Sink update failed for %s", name, exc_info=True)

    def _run(self) -> None:
        """Background thread loop."""
        interval = self._config.interval_seconds
        deadline = time.monotonic() + interval
        while not self._stop_event.wait(max(0.0, deadline - time.monotonic())):
            try:
                self.tick()
            except SnapshotError as exc:
                self.error = exc
                logger.critical("Resource sampling aborted", exc_info=True)
                return
            deadline += interval
            now = time.monotonic()
            if deadline < now:
                deadline = now

    def start(self) -> None:
        """Start sampling in the background."""
        with self._lock:
            if self._thread is not None or self._stopped:
                return
            self._thread = threading.Thread(target=self._run, name="resource-sampler", daemon=True)
            self._thread.start()
        logger.info("Sampler started (interval=%.1fs)", self._config.interval_seconds)

    def stop(self) -> None:
        """Stop sampling and wait for the worker thread to exit."""
        with self._lock:
            first = not self._stopped
            self._stopped = True
            self._stop_event.set()
            thread = self._thread
        if thread is not None:
            thread.join()
        if first:
            logger.info("Sampler stopped after %d ticks", self.ticks)

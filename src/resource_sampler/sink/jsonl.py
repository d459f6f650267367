"""Local file sink – appends gauge updates to JSONL files."""

from __future__ import annotations

import json
import logging
import threading
import time
from datetime import datetime, timezone
from pathlib import Path

from .base import Gauge, TelemetrySink

logger = logging.getLogger(__name__)


class _JsonlGauge(Gauge):
    def __init__(self, sink: JsonlSink, name: str) -> None:
        self._sink = sink
        self._name = name

    def update(self, value: float) -> None:
        self._sink.write({"name": self._name, "value": value, "timestamp": time.time()})


class JsonlSink(TelemetrySink):
    """Writes gauge updates to JSONL files on disk.

    One file per day is created inside *output_dir*.
    """

    def __init__(self, output_dir: str | Path = "./sampler_data") -> None:
        self._output_dir = Path(output_dir)
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._fh = None
        self._current_date: str | None = None
        self._gauges: dict[str, _JsonlGauge] = {}
        self._lock = threading.Lock()
        logger.info("JsonlSink initialized → %s", self._output_dir)

    def _ensure_file(self) -> None:
        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        if self._current_date != today or self._fh is None:
            if self._fh is not None:
                self._fh.close()
            filepath = self._output_dir / f"gauges-{today}.jsonl"
            self._fh = open(filepath, "a", encoding="utf-8")  # noqa: SIM115
            self._current_date = today

    def gauge(self, name: str) -> Gauge:
        if name not in self._gauges:
            self._gauges[name] = _JsonlGauge(self, name)
        return self._gauges[name]

    def write(self, record: dict) -> None:
        with self._lock:
            self._ensure_file()
            assert self._fh is not None
            self._fh.write(json.dumps(record) + "\n")
            self._fh.flush()

    def shutdown(self) -> None:
        with self._lock:
            if self._fh is not None:
                self._fh.close()
                self._fh = None
        logger.info("JsonlSink shut down")

"""Build the configured telemetry sink."""

from __future__ import annotations

from ..config import ResourceSamplerConfig
from .base import NullSink, TelemetrySink


def create_sink(config: ResourceSamplerConfig) -> TelemetrySink:
    """Return the sink selected by ``config.sink.kind``."""
    kind = config.sink.kind
    if kind == "none":
        return NullSink()
    if kind == "jsonl":
        from .jsonl import JsonlSink
        return JsonlSink(config.sink.output_dir)
    if kind == "otel":
        from .otel import OtelSink
        return OtelSink(config.otel)
    raise ValueError(f"Unknown sink kind: {kind!r}")

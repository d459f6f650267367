"""OpenTelemetry sink – pushes live gauge readings via OTLP/HTTP."""

from __future__ import annotations

import logging
from typing import Any

from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource, SERVICE_NAME

from ..config import OtelExporterConfig
from .base import Gauge, TelemetrySink

logger = logging.getLogger(__name__)


class _OtelGauge(Gauge):
    def __init__(self, instrument: Any) -> None:
        self._instrument = instrument

    def update(self, value: float) -> None:
        self._instrument.set(value)


class OtelSink(TelemetrySink):
    """Records gauge updates through the OTel SDK.

    By default the SDK's ``PeriodicExportingMetricReader`` flushes them to the
    configured OTLP/HTTP endpoint.  Passing *reader* replaces that exporter.
    The meter provider is owned by the sink and never installed globally.
    """

    def __init__(self, config: OtelExporterConfig, reader: MetricReader | None = None) -> None:
        self._config = config
        resource = Resource.create({SERVICE_NAME: config.service_name})

        if reader is None:
            exporter_kwargs: dict[str, Any] = {
                "endpoint": f"{config.endpoint.rstrip('/')}/v1/metrics",
            }
            if config.headers:
                exporter_kwargs["headers"] = config.headers
            reader = PeriodicExportingMetricReader(
                OTLPMetricExporter(**exporter_kwargs),
                export_interval_millis=config.export_interval_ms,
            )

        self._provider = MeterProvider(resource=resource, metric_readers=[reader])
        self._meter = self._provider.get_meter("resource_sampler")
        self._gauges: dict[str, _OtelGauge] = {}

        logger.info(
            "OtelSink initialized → %s (service=%s)",
            config.endpoint,
            config.service_name,
        )

    def gauge(self, name: str) -> Gauge:
        if name not in self._gauges:
            self._gauges[name] = _OtelGauge(self._meter.create_gauge(name=name))
        return self._gauges[name]

    def shutdown(self) -> None:
        self._provider.shutdown()
        logger.info("OtelSink shut down")

"""Configuration loading and validation for resource_sampler."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass
class OtelExporterConfig:
    """OpenTelemetry exporter settings."""

    endpoint: str = "http://localhost:4318"
    service_name: str = "resource-sampler"
    headers: dict[str, str] = field(default_factory=dict)
    export_interval_ms: int = 10000


@dataclass
class SamplerConfig:
    """Collection loop settings."""

    interval_seconds: float = 1.0
    cpu_excluded_modes: list[str] = field(default_factory=lambda: ["idle", "steal"])
    loopback_devices: list[str] = field(default_factory=lambda: ["lo", "lo0"])


@dataclass
class ChartConfig:
    """Terminal line-chart dimensions."""

    width: int = 100
    height: int = 10
    offset: int = 10


@dataclass
class SinkConfig:
    """Live telemetry sink selection."""

    kind: str = "none"
    output_dir: str = "./sampler_data"


@dataclass
class ResourceSamplerConfig:
    """Top-level resource_sampler configuration."""

    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    chart: ChartConfig = field(default_factory=ChartConfig)
    sink: SinkConfig = field(default_factory=SinkConfig)
    otel: OtelExporterConfig = field(default_factory=OtelExporterConfig)
    params: dict[str, str] = field(default_factory=dict)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides using RESOURCE_SAMPLER_ prefix."""
    env_map = {
        "RESOURCE_SAMPLER_INTERVAL": ("sampler", "interval_seconds"),
        "RESOURCE_SAMPLER_SINK": ("sink", "kind"),
        "RESOURCE_SAMPLER_OUTPUT_DIR": ("sink", "output_dir"),
        "RESOURCE_SAMPLER_OTEL_ENDPOINT": ("otel", "endpoint"),
        "RESOURCE_SAMPLER_OTEL_SERVICE_NAME": ("otel", "service_name"),
    }
    for env_key, path in env_map.items():
        value = os.environ.get(env_key)
        if value is not None:
            obj = data
            for part in path[:-1]:
                obj = obj.setdefault(part, {})
            final_key = path[-1]
            # coerce numeric values
            if final_key == "interval_seconds":
                obj[final_key] = float(value)
            else:
                obj[final_key] = value
    return data


def _section(cls: type, data: dict[str, Any]) -> Any:
    return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def _dict_to_config(data: dict[str, Any]) -> ResourceSamplerConfig:
    """Convert a raw dictionary to a ResourceSamplerConfig dataclass."""
    params = data.get("params") or {}
    return ResourceSamplerConfig(
        sampler=_section(SamplerConfig, data.get("sampler", {})),
        chart=_section(ChartConfig, data.get("chart", {})),
        sink=_section(SinkConfig, data.get("sink", {})),
        otel=_section(OtelExporterConfig, data.get("otel", {})),
        params={str(k): str(v) for k, v in params.items()},
    )


def load_config(path: str | Path | None = None) -> ResourceSamplerConfig:
    """Load configuration from a YAML file with environment overrides.

    Looks for ``resource_sampler.yaml`` in the current directory if *path* is None.
    """
    data: dict[str, Any] = {}
    if path is None:
        path = Path("resource_sampler.yaml")
    else:
        path = Path(path)

    if path.exists():
        with open(path, encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh)
            if isinstance(loaded, dict):
                data = loaded

    data = _apply_env_overrides(data)
    return _dict_to_config(data)

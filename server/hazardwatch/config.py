"""HazardWatch configuration.

Loads from config.yaml if present, with environment variable overrides.
Environment variables use the pattern: HAZ_<SECTION>_<KEY> (uppercase).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


class ConfigError(ValueError):
    """Configuration values that the engine cannot run with."""


@dataclass
class HotspotConfig:
    min_reports: int = 5
    cluster_radius_m: float = 1000.0
    geofence_radius_m: float = 500.0  # around each hotspot center

    def validate(self) -> None:
        if self.min_reports < 1:
            raise ConfigError(f"hotspots.min_reports must be >= 1, got {self.min_reports}")
        if self.cluster_radius_m <= 0:
            raise ConfigError(f"hotspots.cluster_radius_m must be > 0, got {self.cluster_radius_m}")
        if self.geofence_radius_m <= 0:
            raise ConfigError(f"hotspots.geofence_radius_m must be > 0, got {self.geofence_radius_m}")


@dataclass
class MonitorConfig:
    poll_interval_seconds: float = 30.0
    location_queue_size: int = 100


@dataclass
class StorageConfig:
    reports_file: str = "data/reports.jsonl"


@dataclass
class LoggingConfig:
    level: str = "info"
    format: str = "console"  # "console" or "json"
    file: str = ""


@dataclass
class AppConfig:
    hotspots: HotspotConfig = field(default_factory=HotspotConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _apply_env_overrides(config: AppConfig) -> None:
    """Override config values from environment variables."""
    mapping = {
        "HAZ_HOTSPOTS_MIN_REPORTS": lambda v: setattr(config.hotspots, "min_reports", int(v)),
        "HAZ_HOTSPOTS_CLUSTER_RADIUS": lambda v: setattr(config.hotspots, "cluster_radius_m", float(v)),
        "HAZ_HOTSPOTS_GEOFENCE_RADIUS": lambda v: setattr(config.hotspots, "geofence_radius_m", float(v)),
        "HAZ_MONITOR_POLL_INTERVAL": lambda v: setattr(config.monitor, "poll_interval_seconds", float(v)),
        "HAZ_MONITOR_QUEUE_SIZE": lambda v: setattr(config.monitor, "location_queue_size", int(v)),
        "HAZ_STORAGE_REPORTS_FILE": lambda v: setattr(config.storage, "reports_file", v),
        "HAZ_LOG_LEVEL": lambda v: setattr(config.logging, "level", v),
        "HAZ_LOG_FORMAT": lambda v: setattr(config.logging, "format", v),
        "HAZ_LOG_FILE": lambda v: setattr(config.logging, "file", v),
    }
    for env_key, setter in mapping.items():
        val = os.environ.get(env_key)
        if val is not None:
            try:
                setter(val)
            except ValueError:
                raise ConfigError(f"{env_key}={val!r} is not a valid value") from None


def _coerce(section: str, key: str, default: object, value: object) -> object:
    """Cast a YAML value to the type of the field's default."""
    try:
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
        if isinstance(default, str):
            return "" if value is None else str(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{section}.{key}={value!r} is not a valid value") from None
    return value


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load configuration from YAML file + environment overrides."""
    config = AppConfig()

    # Try to load YAML
    if config_path is None:
        config_path = Path("config.yaml")
    else:
        config_path = Path(config_path)

    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        for section in ("hotspots", "monitor", "storage", "logging"):
            target = getattr(config, section)
            for k, v in (raw.get(section) or {}).items():
                if hasattr(target, k):
                    setattr(target, k, _coerce(section, k, getattr(target, k), v))

    # Environment overrides always win
    _apply_env_overrides(config)
    config.hotspots.validate()
    return config

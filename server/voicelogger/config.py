"""Service configuration.

Loads from config.yaml if present, with environment variable overrides.
Environment variables use the pattern: VOICELOG_<SECTION>_<KEY> (uppercase).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    env: str = "dev"  # "dev" or "prod"


@dataclass
class StorageConfig:
    base_dir: str = "data"
    audio_subdir: str = "audio"


@dataclass
class RoadsConfig:
    base_url: str = "https://roads.googleapis.com/v1/snapToRoads"
    api_key: str = ""
    timeout_seconds: float = 10.0
    interpolate: bool = True
    probe_host: str = "roads.googleapis.com"
    probe_port: int = 443
    probe_timeout_seconds: float = 2.0


@dataclass
class LocationConfig:
    interval_ms: int = 3000
    fastest_interval_ms: int = 2000
    priority: str = "high_accuracy"
    queue_size: int = 20


@dataclass
class LoggingConfig:
    level: str = "info"
    format: str = "console"  # "console" or "json"


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    roads: RoadsConfig = field(default_factory=RoadsConfig)
    location: LocationConfig = field(default_factory=LocationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _apply_env_overrides(config: AppConfig) -> None:
    """Override config values from environment variables."""
    mapping = {
        "VOICELOG_SERVER_HOST": lambda v: setattr(config.server, "host", v),
        "VOICELOG_SERVER_PORT": lambda v: setattr(config.server, "port", int(v)),
        "VOICELOG_SERVER_ENV": lambda v: setattr(config.server, "env", v),
        "VOICELOG_STORAGE_BASE_DIR": lambda v: setattr(config.storage, "base_dir", v),
        "VOICELOG_ROADS_BASE_URL": lambda v: setattr(config.roads, "base_url", v),
        "VOICELOG_ROADS_API_KEY": lambda v: setattr(config.roads, "api_key", v),
        "VOICELOG_ROADS_TIMEOUT": lambda v: setattr(config.roads, "timeout_seconds", float(v)),
        "VOICELOG_ROADS_INTERPOLATE": lambda v: setattr(config.roads, "interpolate", _parse_bool(v)),
        "VOICELOG_ROADS_PROBE_HOST": lambda v: setattr(config.roads, "probe_host", v),
        "VOICELOG_ROADS_PROBE_PORT": lambda v: setattr(config.roads, "probe_port", int(v)),
        "VOICELOG_ROADS_PROBE_TIMEOUT": lambda v: setattr(config.roads, "probe_timeout_seconds", float(v)),
        "VOICELOG_LOCATION_INTERVAL_MS": lambda v: setattr(config.location, "interval_ms", int(v)),
        "VOICELOG_LOCATION_FASTEST_INTERVAL_MS": lambda v: setattr(config.location, "fastest_interval_ms", int(v)),
        "VOICELOG_LOCATION_QUEUE_SIZE": lambda v: setattr(config.location, "queue_size", int(v)),
        "VOICELOG_LOG_LEVEL": lambda v: setattr(config.logging, "level", v),
        "VOICELOG_LOG_FORMAT": lambda v: setattr(config.logging, "format", v),
    }
    for env_key, setter in mapping.items():
        val = os.environ.get(env_key)
        if val is not None:
            setter(val)


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load configuration from YAML file + environment overrides."""
    config = AppConfig()

    if config_path is None:
        config_path = Path(os.environ.get("VOICELOG_CONFIG", "config.yaml"))
    else:
        config_path = Path(config_path)

    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        for section in ("server", "storage", "roads", "location", "logging"):
            target = getattr(config, section)
            for k, v in (raw.get(section) or {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)

    # Environment overrides always win
    _apply_env_overrides(config)
    return config

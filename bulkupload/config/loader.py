from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML (default ``config/upload.yml``)
- Validate it against the bundled JSON schema
- Apply defaults
- Apply environment overrides (``BULKUPLOAD_API_URL``, ``BULKUPLOAD_ACCESS_TOKEN``),
  which take precedence over the file. ``.env`` is loaded by the CLI beforehand.
"""

__all__ = [
    "ConfigError",
    "ApiConfig",
    "PollingConfig",
    "UploadConfig",
    "DEFAULT_CONFIG_PATH",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/upload.yml")

ENV_API_URL = "BULKUPLOAD_API_URL"
ENV_ACCESS_TOKEN = "BULKUPLOAD_ACCESS_TOKEN"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ApiConfig:
    base_url: str
    timeout_seconds: float = 30.0
    access_token: str | None = None


@dataclass(frozen=True)
class PollingConfig:
    interval_seconds: float = 2.0
    max_polls: int = 150


@dataclass(frozen=True)
class UploadConfig:
    api: ApiConfig
    endpoints: dict[str, str] = field(default_factory=dict)  # profile name -> endpoint override
    polling: PollingConfig = field(default_factory=PollingConfig)
    logs_directory: str = "./logs"

    def endpoint_for(self, profile_name: str, default: str) -> str:
        return self.endpoints.get(profile_name, default)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> UploadConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    api_raw = data["api"]
    api = ApiConfig(
        base_url=os.getenv(ENV_API_URL) or api_raw["base_url"],
        timeout_seconds=float(api_raw.get("timeout_seconds", 30.0)),
        access_token=os.getenv(ENV_ACCESS_TOKEN) or api_raw.get("access_token"),
    )
    endpoints = {
        name: entry["endpoint"]
        for name, entry in (data.get("profiles") or {}).items()
        if entry and entry.get("endpoint")
    }
    polling_raw = data.get("invoice_polling") or {}
    polling = PollingConfig(
        interval_seconds=float(polling_raw.get("interval_seconds", 2.0)),
        max_polls=int(polling_raw.get("max_polls", 150)),
    )
    return UploadConfig(
        api=api,
        endpoints=endpoints,
        polling=polling,
        logs_directory=data.get("logs_directory", "./logs"),
    )

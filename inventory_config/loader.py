"""
Configuration Loader (``inventory_config.loader``).

Responsibility
--------------
Loads a YAML configuration file, parses it into a ``ServiceConfig`` and
applies environment-variable overrides.  Services never call this
directly; the runtime entry point is ``inventory_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``data_file`` key  -> ``KeyError`` propagates.
* Bad port / log level  -> ``ValueError``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from inventory_config.schema import ServiceConfig

# environment variable -> ServiceConfig field
ENV_OVERRIDES: dict[str, str] = {
    "INVENTORY_DATA_FILE": "data_file",
    "ADMIN_TOKEN": "admin_token",
    "HOST": "host",
    "PORT": "port",
    "INVENTORY_LOG_LEVEL": "log_level",
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_service_config(data: Mapping[str, Any], base_dir: Path) -> ServiceConfig:
    """
    Parse a ServiceConfig from a dict.

    Relative ``data_file`` paths are resolved against ``base_dir`` (the
    directory of the YAML file they came from).
    """
    section = data.get("service", data)
    return ServiceConfig(
        data_file=_resolve_path(section["data_file"], base_dir),
        admin_token=section.get("admin_token") or None,
        default_admin_token=str(section.get("default_admin_token", "dev-token")),
        host=str(section.get("host", "0.0.0.0")),
        port=int(section.get("port", 3000)),
        log_level=str(section.get("log_level", "INFO")).upper(),
        api_prefix=str(section.get("api_prefix", "/api/v1")),
    )


def apply_env_overrides(config: ServiceConfig, env: Mapping[str, str]) -> ServiceConfig:
    """Return a copy of ``config`` with any set environment overrides applied."""
    changes: dict[str, Any] = {}
    for var, field_name in ENV_OVERRIDES.items():
        value = env.get(var)
        if not value:
            continue
        if field_name == "data_file":
            changes[field_name] = _resolve_path(value, Path.cwd())
        elif field_name == "port":
            changes[field_name] = int(value)
        elif field_name == "log_level":
            changes[field_name] = value.upper()
        else:
            changes[field_name] = value
    return dataclasses.replace(config, **changes) if changes else config


def _resolve_path(value: Any, base_dir: Path) -> Path:
    path = Path(str(value)).expanduser()
    return path if path.is_absolute() else (base_dir / path).resolve()

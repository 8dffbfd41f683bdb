"""
ServiceConfig schema.

The parsed, validated form of the service configuration.  YAML files are
parsed into this type by the loader; environment overrides produce a new
instance via ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ServiceConfig:
    """Runtime settings for the inventory service."""

    data_file: Path
    admin_token: str | None = None  # None -> app_meta.ADMIN_TOKEN, then default
    default_admin_token: str = "dev-token"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError(f"port out of range: {self.port}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}")
        if not self.api_prefix.startswith("/"):
            raise ValueError(f"api_prefix must start with '/', got {self.api_prefix!r}")

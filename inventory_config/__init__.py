"""
inventory_config -- single public entrypoint for service configuration.

Responsibility:
    ``get_active_config()`` is the only way runtime code obtains settings.
    It reads the packaged defaults (``sets/default.yaml``) or the file named
    by ``INVENTORY_CONFIG``, then applies environment overrides.

Failure modes:
    - ``FileNotFoundError`` -- the requested YAML file does not exist.
    - ``ValueError`` -- invalid port, log level or API prefix.

Audit relevance:
    Every call emits a ``config_loaded`` log entry naming the source file
    and the data file the service will write.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from inventory_config.loader import apply_env_overrides, load_yaml_file, parse_service_config
from inventory_config.schema import ServiceConfig

_logger = logging.getLogger("inventory_kernel.config")

_DEFAULT_CONFIG_FILE = Path(__file__).parent / "sets" / "default.yaml"

__all__ = ["ServiceConfig", "get_active_config"]


def get_active_config(
    config_path: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> ServiceConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: YAML file to read.  Defaults to ``$INVENTORY_CONFIG``
            or the packaged ``sets/default.yaml``.
        env: Environment mapping for overrides (defaults to ``os.environ``).
    """
    env = os.environ if env is None else env
    path = Path(config_path or env.get("INVENTORY_CONFIG") or _DEFAULT_CONFIG_FILE)
    data = load_yaml_file(path)
    base_dir = path.parent if path != _DEFAULT_CONFIG_FILE else Path.cwd()
    config = apply_env_overrides(parse_service_config(data, base_dir), env)

    _logger.info(
        "config_loaded",
        extra={
            "config_source": str(path),
            "data_file": str(config.data_file),
            "port": config.port,
            "admin_token_configured": config.admin_token is not None,
        },
    )
    return config

"""
Configuration management for soundcloud-client.

This module loads the client configuration from an optional config.yaml
and from environment variables. Environment variables take precedence so
that the API credential does not have to be stored in a file.

Example config.yaml:
    soundcloud:
      client_id: "your_client_id_here"
      api_host: "api.soundcloud.com"   # optional
      timeout: 30                      # optional, seconds

Environment Variables:
    SOUNDCLOUD_CLIENT_ID: API credential (overrides soundcloud.client_id)
    SOUNDCLOUD_API_HOST: API host (overrides soundcloud.api_host)
    SOUNDCLOUD_TIMEOUT: Request timeout in seconds (overrides soundcloud.timeout)

A .env file in the current directory is loaded before the environment is
read.
"""

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv

from soundcloud_client.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

# Host of the remote API
API_HOST = "api.soundcloud.com"

ENV_CLIENT_ID = "SOUNDCLOUD_CLIENT_ID"
ENV_API_HOST = "SOUNDCLOUD_API_HOST"
ENV_TIMEOUT = "SOUNDCLOUD_TIMEOUT"


@dataclass(frozen=True)
class ClientConfig:
    """
    Settings needed to build a Client.

    Attributes:
        client_id: The application credential sent as ``client_id`` with
                   every request.
        api_host: Host name of the API, without scheme.
        timeout: Timeout in seconds applied to every request, or None to
                 wait indefinitely.
    """
    client_id: str
    api_host: str = API_HOST
    timeout: float | None = None


def load_config(config_path: Path | None = None) -> ClientConfig:
    """
    Load and validate the client configuration.

    Args:
        config_path: Optional explicit path to a config file. If None,
                     config.yaml in the current working directory is used
                     when it exists.

    Returns:
        ClientConfig: A frozen dataclass with the resolved settings.

    Raises:
        ConfigError: If an explicit config file is missing, the YAML is
                     invalid, a value has the wrong type, or no client_id
                     is available from either source.

    Behavior:
        1. Load .env into the process environment (existing vars win)
        2. Read the 'soundcloud' section of the YAML file, if any
        3. Apply environment variable overrides
        4. Validate and return a frozen ClientConfig
    """
    load_dotenv(find_dotenv(usecwd=True))

    explicit = config_path is not None
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    section: dict[str, Any] = {}
    if config_path.exists():
        section = _read_section(config_path)
    elif explicit:
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    client_id = os.getenv(ENV_CLIENT_ID) or section.get("client_id")
    api_host = os.getenv(ENV_API_HOST) or section.get("api_host") or API_HOST
    raw_timeout = os.getenv(ENV_TIMEOUT) or section.get("timeout")

    if not isinstance(client_id, str) or not client_id.strip():
        raise ConfigError(
            f"'soundcloud.client_id' must be a non-empty string "
            f"(or set {ENV_CLIENT_ID})",
            details={"field": "soundcloud.client_id"}
        )

    if not isinstance(api_host, str) or not api_host.strip():
        raise ConfigError(
            "'soundcloud.api_host' must be a non-empty string",
            details={"field": "soundcloud.api_host"}
        )

    return ClientConfig(
        client_id=client_id.strip(),
        api_host=api_host.strip(),
        timeout=_parse_timeout(raw_timeout)
    )


def _read_section(config_path: Path) -> dict[str, Any]:
    """
    Read the 'soundcloud' section from a YAML file.

    An empty file or a file without the section yields an empty dict.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    if raw_config is None:
        return {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    section = raw_config.get("soundcloud") or {}
    if not isinstance(section, dict):
        raise ConfigError(
            "Section 'soundcloud' must be a dictionary",
            details={"file_path": str(config_path), "section": "soundcloud"}
        )
    return section


def _parse_timeout(raw: Any) -> float | None:
    """Validate a timeout value coming from YAML or the environment."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ConfigError(
            "'soundcloud.timeout' must be a positive number",
            details={"field": "soundcloud.timeout", "value": raw}
        )
    try:
        timeout = float(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(
            "'soundcloud.timeout' must be a positive number",
            details={"field": "soundcloud.timeout", "value": raw}
        ) from e
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigError(
            "'soundcloud.timeout' must be a positive number",
            details={"field": "soundcloud.timeout", "value": raw}
        )
    return timeout

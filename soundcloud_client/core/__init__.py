"""
Core module for soundcloud-client.

This module provides the foundational components used by the API layer:
    - exceptions: Error taxonomy shared by every operation
    - config: Configuration loading (YAML + environment)
    - logger: Logging setup helpers

Usage:
    from soundcloud_client.core import (
        ClientConfig, load_config,
        setup_logging, get_logger,
        SoundCloudError, ErrorKind
    )
"""

from soundcloud_client.core.config import API_HOST, ClientConfig, load_config
from soundcloud_client.core.exceptions import (
    ApiProtocolError,
    ConfigError,
    ErrorKind,
    InvalidFilterError,
    IoFailureError,
    NotFoundError,
    SerializationError,
    SoundCloudError,
    TrackNotDownloadableError,
    TrackNotStreamableError,
    TransportError,
)
from soundcloud_client.core.logger import get_logger, setup_logging, shutdown_logging

__all__ = [
    # Config
    "API_HOST",
    "ClientConfig",
    "load_config",
    # Exceptions
    "ErrorKind",
    "SoundCloudError",
    "TransportError",
    "SerializationError",
    "ApiProtocolError",
    "NotFoundError",
    "InvalidFilterError",
    "IoFailureError",
    "TrackNotDownloadableError",
    "TrackNotStreamableError",
    "ConfigError",
    # Logger
    "setup_logging",
    "get_logger",
    "shutdown_logging",
]

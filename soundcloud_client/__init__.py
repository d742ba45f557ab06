"""
soundcloud-client: Typed client for the SoundCloud HTTP API.

This package lets an application authenticated with a client_id:
    - resolve public soundcloud.com URLs to canonical API URLs
    - search tracks with a fluent query builder
    - fetch a single track by id
    - download or stream a track's audio to any byte sink

Modules:
    core/       - Configuration, logging, exceptions
    api/        - Client, request builders, records, media transfer
    cli.py      - Command-line interface

Usage:
    Command Line:
        soundcloud resolve "https://soundcloud.com/artist/track"
        soundcloud search --query "ambient" --filter public
        soundcloud download 262681089 --output track.mp3

    Python API:
        from soundcloud_client import Client, Filter, NO_RESULTS

        client = Client("your_client_id")
        tracks = client.tracks().query("ambient").filter(Filter.PUBLIC).get()
        if tracks is not NO_RESULTS:
            with open("first.mp3", "wb") as f:
                client.stream(tracks[0], f)

Configuration:
    The CLI (and load_config()) read the credential from the
    SOUNDCLOUD_CLIENT_ID environment variable or from config.yaml:

        soundcloud:
          client_id: "your_client_id"

Dependencies:
    - requests: HTTP transport
    - pyyaml: Configuration file parsing
    - python-dotenv: .env support for the credential
    - click / rich-click: CLI framework and colors
    - tqdm: Progress bars
"""

__version__ = "0.1.0"
__license__ = "MIT"

from soundcloud_client.api import (
    NO_RESULTS,
    App,
    Client,
    Comment,
    Filter,
    NoResults,
    SingleTrackRequest,
    Track,
    TrackRequestBuilder,
    User,
)
from soundcloud_client.core import (
    ApiProtocolError,
    ClientConfig,
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
    get_logger,
    load_config,
    setup_logging,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "ClientConfig",
    "load_config",
    "setup_logging",
    "get_logger",
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
    # API
    "Client",
    "TrackRequestBuilder",
    "SingleTrackRequest",
    "NoResults",
    "NO_RESULTS",
    # Models
    "Track",
    "User",
    "App",
    "Comment",
    "Filter",
]

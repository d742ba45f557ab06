"""
SoundCloud API client for soundcloud-client.

This module provides Client, the entry point of the library. A Client owns
the API credential and an HTTP session; every request builder borrows it.

Redirects:
    The underlying session is never allowed to follow redirects on its own.
    Two operations depend on seeing the redirect response itself:
    - resolve() reads the canonical URL from the Location header
    - download()/stream() follow the asset host's redirect exactly once

Usage:
    from soundcloud_client import Client

    client = Client("your_client_id")

    url = client.resolve("https://soundcloud.com/artist/track-slug")
    tracks = client.tracks().query("ambient").filter("public").get()
    track = client.track(18201932)

    with open("track.mp3", "wb") as f:
        size = client.download(track, f)

Thread Safety:
    A Client is never mutated after construction and may be shared by
    several threads, each using its own request builders.
"""

import re
from collections.abc import Callable, Iterable
from os import PathLike
from typing import Any, BinaryIO
from urllib.parse import ParseResult, urlencode, urlparse, urlsplit, urlunsplit

import requests

from soundcloud_client.api import transfer
from soundcloud_client.api.models import Track
from soundcloud_client.api.tracks import SingleTrackRequest, TrackRequestBuilder
from soundcloud_client.core.config import API_HOST, ClientConfig
from soundcloud_client.core.exceptions import (
    ApiProtocolError,
    ConfigError,
    NotFoundError,
    SerializationError,
    TransportError,
)
from soundcloud_client.core.logger import get_logger


logger = get_logger(__name__)

# Name of the query parameter carrying the credential
CREDENTIAL_PARAM = "client_id"

USER_AGENT = "soundcloud-client/0.1.0"

_TRACK_PATH = re.compile(r"/tracks/(\d+)/?")

Params = Iterable[tuple[str, str]]


class Client:
    """
    Authenticated access to the SoundCloud API.

    Attributes:
        client_id: The application credential (read-only).
        api_host: Host the API requests are sent to (read-only).
        timeout: Per-request timeout passed to requests, or None.

    Example:
        client = Client("abc123", timeout=30)
        track = client.tracks().id(262681089).get()
    """

    def __init__(
        self,
        client_id: str,
        *,
        api_host: str = API_HOST,
        timeout: float | tuple[float, float] | None = None,
        session: requests.Session | None = None
    ) -> None:
        """
        Initialize the client.

        Args:
            client_id: API credential identifying the calling application.
            api_host: API host name without scheme.
            timeout: Timeout applied to every request, including the asset
                     redirect hop. Anything requests accepts as ``timeout``.
            session: Optional pre-built requests.Session (useful for custom
                     adapters or tests). A new session is created otherwise.

        Raises:
            ConfigError: If client_id is empty.
        """
        if not client_id:
            raise ConfigError("client_id must be a non-empty string")

        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": USER_AGENT})

        self._client_id = client_id
        self._api_host = api_host
        self._timeout = timeout
        self._session = session

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        session: requests.Session | None = None
    ) -> "Client":
        """Build a Client from a loaded ClientConfig."""
        return cls(
            config.client_id,
            api_host=config.api_host,
            timeout=config.timeout,
            session=session
        )

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def api_host(self) -> str:
        return self._api_host

    @property
    def timeout(self) -> float | tuple[float, float] | None:
        return self._timeout

    def __repr__(self) -> str:
        return f"Client(api_host={self._api_host!r})"

    # =========================================================================
    # Transport
    # =========================================================================

    def api_url(self, path: str) -> str:
        """Return the absolute URL of an API path, without credential."""
        return f"https://{self._api_host}{path}"

    def get(
        self,
        path: str,
        params: Params | None = None,
        *,
        stream: bool = False
    ) -> requests.Response:
        """
        Send an authenticated GET request to the API.

        Args:
            path: API path starting with '/', e.g. '/tracks'.
            params: Ordered (key, value) pairs appended to the query after
                    the credential. Keys equal to 'client_id' are sent as
                    well; nothing is de-duplicated.
            stream: Leave the body unread so it can be consumed in chunks.

        Returns:
            requests.Response: The raw response. Redirects are NOT followed.

        Raises:
            TransportError: If the request could not be completed.
        """
        url = self.api_url(path)
        query = [(CREDENTIAL_PARAM, self._client_id)]
        if params is not None:
            query.extend(params)

        logger.debug("get %s %s", url, query[1:])
        return self._send(url, query, stream=stream, log_url=url)

    def fetch(self, url: str, *, stream: bool = False, log_url: str | None = None) -> requests.Response:
        """
        GET an absolute URL as-is, without following redirects.

        Used for asset URLs, which already carry the credential.

        Args:
            url: Absolute URL to request.
            stream: Leave the body unread so it can be consumed in chunks.
            log_url: URL to report in logs and errors instead of `url`
                     (so the credential does not leak into them).
        """
        logger.debug("fetch %s", log_url or url)
        return self._send(url, None, stream=stream, log_url=log_url)

    def authenticate_url(self, url: str) -> str:
        """Append the credential to an absolute URL, keeping its query."""
        parts = urlsplit(url)
        credential = urlencode([(CREDENTIAL_PARAM, self._client_id)])
        # Signed asset URLs must reach the host byte for byte.
        query = f"{parts.query}&{credential}" if parts.query else credential
        return urlunsplit(parts._replace(query=query))

    def get_json(self, path: str, params: Params | None = None) -> Any:
        """
        GET an API path and decode the body as a generic JSON value.

        The value is returned undecoded into records so callers can inspect
        its shape (e.g., array vs. object) before building records.

        Raises:
            TransportError: If the request could not be completed.
            NotFoundError: If the API answered 404. The body is not decoded.
            ApiProtocolError: If the API answered any other non-2xx status.
            SerializationError: If the body is not valid JSON.
        """
        response = self.get(path, params)
        try:
            status = response.status_code
            if status == 404:
                raise NotFoundError(
                    f"Resource not found: {path}",
                    details={"path": path, "status_code": status}
                )
            if not 200 <= status < 300:
                raise ApiProtocolError(
                    f"Unexpected HTTP status {status} for {path}",
                    details={"path": path, "status_code": status}
                )
            try:
                return response.json()
            except ValueError as e:
                raise SerializationError.from_json_error(e) from e
        finally:
            response.close()

    def _send(
        self,
        url: str,
        params: list[tuple[str, str]] | None,
        *,
        stream: bool,
        log_url: str | None
    ) -> requests.Response:
        try:
            return self._session.get(
                url,
                params=params,
                allow_redirects=False,
                timeout=self._timeout,
                stream=stream
            )
        except requests.RequestException as e:
            raise TransportError.from_request_exception(
                e, url=log_url, secret=self._client_id
            ) from e

    # =========================================================================
    # Resolver
    # =========================================================================

    def resolve(self, url: str) -> ParseResult:
        """
        Resolve a public SoundCloud URL to its canonical API URL.

        Args:
            url: Any public resource URL, e.g.
                 "https://soundcloud.com/isqa/tree-eater-1".

        Returns:
            ParseResult: The parsed Location the API redirected to, e.g.
                         path '/tracks/262976655'.

        Raises:
            TransportError: If the request could not be completed.
            NotFoundError: If the API answered 404 without a Location.
            ApiProtocolError: If the response carries no Location header, or
                              the header is not an absolute URL.
        """
        response = self.get("/resolve", [("url", url)])
        try:
            status = response.status_code
            location = response.headers.get("Location")
        finally:
            response.close()

        if not location:
            if status == 404:
                raise NotFoundError(
                    f"Nothing to resolve at {url}",
                    details={"url": url, "status_code": status}
                )
            raise ApiProtocolError(
                "expected location header",
                details={"url": url, "status_code": status}
            )

        try:
            parsed = urlparse(location)
        except ValueError as e:
            raise ApiProtocolError(
                f"invalid location header: {location!r}",
                details={"url": url, "location": location}
            ) from e

        if not parsed.scheme or not parsed.netloc:
            raise ApiProtocolError(
                f"invalid location header: {location!r}",
                details={"url": url, "location": location}
            )

        logger.debug("resolved %s to %s", url, parsed.path)
        return parsed

    def resolve_track(self, url: str) -> Track:
        """
        Resolve a public track URL and fetch the track it points to.

        Raises:
            ApiProtocolError: If the URL resolves to something other than a
                              track (user, playlist, ...).
            Any error raised by resolve() or SingleTrackRequest.get().
        """
        parsed = self.resolve(url)
        match = _TRACK_PATH.fullmatch(parsed.path)
        if match is None:
            raise ApiProtocolError(
                f"{url} does not resolve to a track",
                details={"url": url, "resolved_path": parsed.path}
            )
        return self.track(int(match.group(1)))

    # =========================================================================
    # Tracks
    # =========================================================================

    def tracks(self) -> TrackRequestBuilder:
        """Start a track search with no filters set."""
        return TrackRequestBuilder(self)

    def track(self, track_id: int) -> Track:
        """Fetch a single track by id. See SingleTrackRequest.get()."""
        return SingleTrackRequest(self, track_id).get()

    # =========================================================================
    # Media transfer
    # =========================================================================

    def download(
        self,
        track: Track,
        destination: str | PathLike | BinaryIO | Callable[[bytes], Any],
        progress: Callable[[int], Any] | None = None
    ) -> int:
        """Download a track's original file. See transfer.download()."""
        return transfer.download(self, track, destination, progress)

    def stream(
        self,
        track: Track,
        sink: BinaryIO | Callable[[bytes], Any],
        progress: Callable[[int], Any] | None = None
    ) -> int:
        """Stream a track's audio to a sink. See transfer.stream()."""
        return transfer.stream(self, track, sink, progress)

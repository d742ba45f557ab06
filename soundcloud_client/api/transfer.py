"""
Media transfer (download / stream) for soundcloud-client.

Both operations share one algorithm:
    1. Check the track allows the operation (no request is sent otherwise)
    2. GET the asset URL with the credential appended
    3. If that response has a Location header, GET it once more; a Location
       on the second response is ignored (no redirect loops)
    4. Copy the body to the sink in CHUNK_SIZE pieces and return the total

The body is never held in memory as a whole; a slow sink slows the copy
down because writes block.

Sinks:
    - Any object with a write(bytes) method (open file, BytesIO, socket file)
    - Any callable taking a bytes chunk
    - download() additionally accepts a filesystem path
"""

import os
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, BinaryIO
from urllib.parse import urljoin, urlsplit, urlunsplit

import requests

from soundcloud_client.api.models import Track
from soundcloud_client.core.exceptions import (
    ApiProtocolError,
    IoFailureError,
    SoundCloudError,
    TrackNotDownloadableError,
    TrackNotStreamableError,
    TransportError,
)
from soundcloud_client.core.logger import get_logger

if TYPE_CHECKING:
    from soundcloud_client.api.client import Client


logger = get_logger(__name__)

CHUNK_SIZE = 16384

Sink = BinaryIO | Callable[[bytes], Any]
Progress = Callable[[int], Any]


def download(
    client: "Client",
    track: Track,
    destination: str | os.PathLike | Sink,
    progress: Progress | None = None
) -> int:
    """
    Download the original file of a track.

    Args:
        client: Client providing the credential and transport.
        track: Track to download. Must have downloadable=True and a
               download_url.
        destination: Filesystem path (created/truncated, and removed again
                     if the transfer fails) or a sink.
        progress: Optional callback receiving the size of each chunk.

    Returns:
        int: Number of bytes written.

    Raises:
        TrackNotDownloadableError: Before any I/O, if the track can't be
                                   downloaded.
        IoFailureError: If the destination can't be opened or written.
        TransportError: If either GET or the body read fails.
        ApiProtocolError: If the asset host answers with an error status.
    """
    if not track.downloadable or not track.download_url:
        raise TrackNotDownloadableError(
            f"Track {track.id} is not downloadable",
            details={"track_id": track.id}
        )

    if isinstance(destination, (str, os.PathLike)):
        path = os.fspath(destination)
        try:
            file = open(path, "wb")
        except OSError as e:
            raise IoFailureError.from_os_error(e, path=path) from e
        try:
            with file:
                return _transfer(client, track.download_url, file.write, progress, path)
        except SoundCloudError:
            _discard(path)
            raise

    return _transfer(client, track.download_url, _writer(destination), progress)


def stream(
    client: "Client",
    track: Track,
    sink: Sink,
    progress: Progress | None = None
) -> int:
    """
    Stream the audio of a track to a sink.

    Args:
        client: Client providing the credential and transport.
        track: Track to stream. Must have streamable=True and a stream_url.
        sink: Writable binary object or callable receiving each chunk.
        progress: Optional callback receiving the size of each chunk.

    Returns:
        int: Number of bytes passed to the sink.

    Raises:
        TrackNotStreamableError: Before any request, if the track can't be
                                 streamed.
        IoFailureError: If the sink raises OSError or is closed.
        TransportError: If either GET or the body read fails.
        ApiProtocolError: If the asset host answers with an error status.
    """
    if not track.streamable or not track.stream_url:
        raise TrackNotStreamableError(
            f"Track {track.id} is not streamable",
            details={"track_id": track.id}
        )

    return _transfer(client, track.stream_url, _writer(sink), progress)


def _writer(sink: Sink) -> Callable[[bytes], Any]:
    write = getattr(sink, "write", None)
    if callable(write):
        return write
    if callable(sink):
        return sink
    raise TypeError(f"sink must be writable or callable, got {type(sink).__name__}")


def _transfer(
    client: "Client",
    asset_url: str,
    write: Callable[[bytes], Any],
    progress: Progress | None,
    path: str | None = None
) -> int:
    response = client.fetch(
        client.authenticate_url(asset_url),
        stream=True,
        log_url=asset_url
    )
    try:
        location = response.headers.get("Location")
        if location:
            # Follow the redirect just this once.
            target = urljoin(asset_url, location)
            response.close()
            response = client.fetch(target, stream=True, log_url=_without_query(target))

        status = response.status_code
        if status >= 400:
            raise ApiProtocolError(
                f"Asset request failed with HTTP status {status}",
                details={"url": asset_url, "status_code": status}
            )

        total = _copy(response, write, progress, path, client.client_id)
    finally:
        response.close()

    logger.debug("transferred %d bytes from %s", total, asset_url)
    return total


def _copy(
    response: requests.Response,
    write: Callable[[bytes], Any],
    progress: Progress | None,
    path: str | None,
    secret: str
) -> int:
    total = 0
    chunks = response.iter_content(chunk_size=CHUNK_SIZE)
    while True:
        try:
            chunk = next(chunks, None)
        except requests.RequestException as e:
            raise TransportError.from_request_exception(e, secret=secret) from e

        if chunk is None:
            return total
        if not chunk:
            continue

        try:
            write(chunk)
        except (OSError, ValueError) as e:
            # ValueError: write to a closed file object
            raise IoFailureError.from_os_error(e, path=path) from e

        total += len(chunk)
        if progress is not None:
            progress(len(chunk))


def _without_query(url: str) -> str:
    """Drop the query string (CDN URLs carry signatures) for logging."""
    return urlunsplit(urlsplit(url)._replace(query=""))


def _discard(path: str) -> None:
    """Remove a partially written download."""
    try:
        os.remove(path)
    except OSError as e:
        logger.warning("could not remove partial download %s: %s", path, e)

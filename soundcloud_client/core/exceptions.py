"""
Exception classes for soundcloud-client.

This module defines the closed set of failures the library can raise.
Every exception carries a human-readable message, an optional details
dictionary, and a ``kind`` tag so callers can branch on the failure
without relying on isinstance chains.

Exception Hierarchy:
    SoundCloudError (base)
        TransportError - Network, TLS or connection failures
        SerializationError - JSON decoding and record shape mismatches
        ApiProtocolError - Server response violates the expected contract
        NotFoundError - The API reported the resource as absent (404)
        InvalidFilterError - Unparseable track filter token
        IoFailureError - Writing to the byte sink failed
        TrackNotDownloadableError - Download precondition failed
        TrackNotStreamableError - Stream precondition failed
        ConfigError - Configuration file or environment issues

Conversion helpers turn lower-level failures into this taxonomy:
    TransportError.from_request_exception(exc)
    SerializationError.from_json_error(exc)
    IoFailureError.from_os_error(exc)
"""

from enum import Enum
from urllib.parse import quote, quote_plus

import requests


class ErrorKind(Enum):
    """Tag identifying the kind of a SoundCloudError."""
    TRANSPORT = "transport"
    SERIALIZATION = "serialization"
    API_PROTOCOL = "api_protocol"
    NOT_FOUND = "not_found"
    INVALID_FILTER = "invalid_filter"
    IO_FAILURE = "io_failure"
    TRACK_NOT_DOWNLOADABLE = "track_not_downloadable"
    TRACK_NOT_STREAMABLE = "track_not_streamable"
    CONFIG = "config"


class SoundCloudError(Exception):
    """
    Base exception for all soundcloud-client errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch every library failure with a single
    except clause.

    Attributes:
        kind: The ErrorKind tag of this failure.
        message: Human-readable error description.
        details: Dictionary with additional context (e.g., url, track_id,
                 status_code).

    Example:
        try:
            client.download(track, "song.mp3")
        except SoundCloudError as e:
            if e.kind is ErrorKind.TRACK_NOT_DOWNLOADABLE:
                ...
            logger.error(f"Operation failed: {e.message}")
    """

    kind: ErrorKind

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional context about
                     the error. Common keys include:
                     - 'url': URL of the request that failed
                     - 'track_id': Track involved in the error
                     - 'status_code': HTTP status of the offending response
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message

    @property
    def cause(self) -> BaseException | None:
        """The lower-level exception this error was converted from, if any."""
        return self.__cause__


class TransportError(SoundCloudError):
    """
    Raised when the HTTP request itself fails.

    Common causes:
        - DNS resolution failure
        - TLS handshake failure
        - Connection refused or reset
        - Timeout (when a timeout is configured)
        - Connection dropped while reading a response body

    The library never retries; callers may.
    """

    kind = ErrorKind.TRANSPORT

    @classmethod
    def from_request_exception(
        cls,
        exc: requests.RequestException,
        url: str | None = None,
        secret: str | None = None
    ) -> "TransportError":
        """
        Build a TransportError from a ``requests`` exception.

        Args:
            exc: The exception raised by requests.
            url: The URL being requested, when known. Must not contain the
                 credential.
            secret: Credential to mask wherever requests echoed it (it puts
                    the full request URL into its messages).

        Returns:
            TransportError with the original error recorded in details.
            The caller is expected to raise it ``from exc``.
        """
        text = _redact(str(exc), secret)
        details: dict = {"original_error": text}
        if url is not None:
            details["url"] = url
        return cls(f"Request failed: {text}", details=details)


class SerializationError(SoundCloudError):
    """
    Raised when a response body cannot be decoded into the expected shape.

    Attributes:
        field: Name of the record field that failed to decode, if known.
        index: Position of the failing element inside a list response.
        position: Character offset inside the JSON document, if known.

    Example:
        raise SerializationError(
            "Field 'id' must be an integer",
            field="id"
        )
    """

    kind = ErrorKind.SERIALIZATION

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        field: str | None = None,
        index: int | None = None,
        position: int | None = None
    ) -> None:
        super().__init__(message, details)
        self.field = field
        self.index = index
        self.position = position
        if field is not None:
            self.details.setdefault("field", field)
        if index is not None:
            self.details.setdefault("index", index)
        if position is not None:
            self.details.setdefault("position", position)

    @classmethod
    def from_json_error(cls, exc: ValueError) -> "SerializationError":
        """
        Build a SerializationError from a JSON decoding failure.

        ``requests`` raises a subclass of ``json.JSONDecodeError`` which
        carries ``pos``, ``lineno`` and ``colno``; those are copied over
        when present.
        """
        position = getattr(exc, "pos", None)
        details: dict = {"original_error": str(exc)}
        lineno = getattr(exc, "lineno", None)
        colno = getattr(exc, "colno", None)
        if lineno is not None:
            details["line"] = lineno
        if colno is not None:
            details["column"] = colno
        return cls(f"JSON error: {exc}", details=details, position=position)

    def at_index(self, index: int) -> "SerializationError":
        """Return a copy of this error keyed to a list element position."""
        return SerializationError(
            f"Invalid element at index {index}: {self.message}",
            details=dict(self.details),
            field=self.field,
            index=index,
            position=self.position
        )


class ApiProtocolError(SoundCloudError):
    """
    Raised when the server answers in a way that breaks the API contract.

    This is a server-side violation, not a client bug.

    Common causes:
        - /resolve answered without a Location header
        - /tracks answered with something other than a JSON array
        - Unexpected HTTP status (4xx/5xx other than 404)
    """

    kind = ErrorKind.API_PROTOCOL


class NotFoundError(SoundCloudError):
    """Raised when an API endpoint answers 404 for the requested resource."""

    kind = ErrorKind.NOT_FOUND


class InvalidFilterError(SoundCloudError):
    """
    Raised when a filter token is not one of 'all', 'public', 'private'.

    Attributes:
        value: The rejected input.
    """

    kind = ErrorKind.INVALID_FILTER

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid filter: {value!r}", details={"value": value})
        self.value = value


class IoFailureError(SoundCloudError):
    """
    Raised when writing transferred bytes to the sink fails.

    Common causes:
        - Destination file cannot be created (permission denied, missing dir)
        - Disk full
        - Caller-supplied sink raised OSError
        - Caller-supplied file object was already closed
    """

    kind = ErrorKind.IO_FAILURE

    @classmethod
    def from_os_error(cls, exc: OSError | ValueError, path: str | None = None) -> "IoFailureError":
        """Build an IoFailureError from an OSError (or closed-file ValueError) raised by the sink."""
        details: dict = {"original_error": str(exc)}
        if path is not None:
            details["path"] = path
        return cls(f"I/O error: {exc}", details=details)


class TrackNotDownloadableError(SoundCloudError):
    """
    Raised when download is requested for a track that does not allow it.

    Checked client-side before any request: the track must have
    ``downloadable`` set and a ``download_url``.
    """

    kind = ErrorKind.TRACK_NOT_DOWNLOADABLE


class TrackNotStreamableError(SoundCloudError):
    """
    Raised when streaming is requested for a track that does not allow it.

    Checked client-side before any request: the track must have
    ``streamable`` set and a ``stream_url``.
    """

    kind = ErrorKind.TRACK_NOT_STREAMABLE


class ConfigError(SoundCloudError):
    """
    Raised when there's an issue with the configuration.

    Common causes:
        - config.yaml has invalid YAML syntax
        - No client_id in config.yaml nor in SOUNDCLOUD_CLIENT_ID
        - Invalid field values (e.g., non-positive timeout)

    Example:
        raise ConfigError(
            "Missing required field 'client_id'",
            details={'file_path': '/path/to/config.yaml'}
        )
    """

    kind = ErrorKind.CONFIG


def _redact(text: str, secret: str | None) -> str:
    """Mask every plain or URL-encoded occurrence of secret in text."""
    if not secret:
        return text
    for form in {secret, quote(secret, safe=""), quote_plus(secret)}:
        text = text.replace(form, "***")
    return text

"""
Data models for SoundCloud API entities.

This module defines immutable dataclasses mirroring the JSON objects the
API returns, plus the Filter enum used by track searches.

Design Decisions:
    - All dataclasses are frozen (immutable)
    - Field names match the API's JSON keys, except where the wire key is
      not a valid identifier ('discogs-name' -> discogs_name, ...)
    - Decoding validates types field by field and raises SerializationError
      naming the field instead of failing later with an AttributeError
    - Two Track objects are equal when their ids are equal, whatever the
      other fields say

Usage:
    from soundcloud_client.api.models import Track, Filter

    track = Track.from_api(response.json())
    payload = track.to_api_dict()
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from soundcloud_client.core.exceptions import InvalidFilterError, SerializationError


class Filter(Enum):
    """
    Visibility filter for track searches.

    Renders to (and parses from) the lowercase token the API expects.

    Example:
        Filter.parse("public")   # Filter.PUBLIC
        str(Filter.PRIVATE)      # "private"
    """
    ALL = "all"
    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: str) -> "Filter":
        """
        Parse a filter token.

        Raises:
            InvalidFilterError: If value is not 'all', 'public' or 'private'.
        """
        for member in cls:
            if member.value == value:
                return member
        raise InvalidFilterError(value)

    def __str__(self) -> str:
        return self.value


_TYPE_NAMES = {
    int: "an integer",
    str: "a string",
    bool: "a boolean",
    dict: "an object",
    list: "an array",
}


def _expect_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise SerializationError(f"Expected {what} to be a JSON object")
    return data


def _get(data: dict[str, Any], key: str, expected: type, optional: bool = False) -> Any:
    """
    Read one field and check its JSON type.

    Missing keys and explicit nulls are both treated as absent. Booleans are
    rejected where integers are expected (bool is a subclass of int).
    """
    value = data.get(key)
    if value is None:
        if optional:
            return None
        raise SerializationError(f"Missing required field '{key}'", field=key)

    if expected is int and isinstance(value, bool):
        valid = False
    else:
        valid = isinstance(value, expected)

    if not valid:
        raise SerializationError(
            f"Field '{key}' must be {_TYPE_NAMES.get(expected, expected.__name__)}",
            field=key
        )
    return value


def _get_record(data: dict[str, Any], key: str, record: type, optional: bool = False) -> Any:
    """Decode a nested record, prefixing the failing field with `key`."""
    value = data.get(key)
    if value is None:
        if optional:
            return None
        raise SerializationError(f"Missing required field '{key}'", field=key)
    try:
        return record.from_api(value)
    except SerializationError as e:
        field = f"{key}.{e.field}" if e.field else key
        raise SerializationError(
            f"Invalid '{key}': {e.message}",
            field=field
        ) from e


def _get_bytes(data: dict[str, Any], key: str) -> bytes | None:
    """Decode an optional byte array sent as a JSON list of integers."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise SerializationError(f"Field '{key}' must be an array", field=key)
    try:
        return bytes(value)
    except (TypeError, ValueError) as e:
        raise SerializationError(
            f"Field '{key}' must contain integers in 0..255",
            field=key
        ) from e


def _to_wire(record: Any, renames: dict[str, str] | None = None) -> dict[str, Any]:
    """Encode a record to its JSON shape, applying wire key renames."""
    renames = renames or {}
    payload: dict[str, Any] = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if hasattr(value, "to_api_dict"):
            value = value.to_api_dict()
        elif isinstance(value, bytes):
            value = list(value)
        payload[renames.get(f.name, f.name)] = value
    return payload


@dataclass(frozen=True)
class App:
    """
    The application a track was created with.

    Attributes:
        id: Application id.
        uri: API URI of the application.
        permalink_url: Public page of the application.
        external_url: Home page of the application.
        creator: Name of the application's author, if published.
    """
    id: int
    uri: str
    permalink_url: str
    external_url: str
    creator: str | None = None

    @classmethod
    def from_api(cls, data: Any) -> "App":
        data = _expect_object(data, "app")
        return cls(
            id=_get(data, "id", int),
            uri=_get(data, "uri", str),
            permalink_url=_get(data, "permalink_url", str),
            external_url=_get(data, "external_url", str),
            creator=_get(data, "creator", str, optional=True),
        )

    def to_api_dict(self) -> dict[str, Any]:
        return _to_wire(self)


@dataclass(frozen=True)
class User:
    """
    A SoundCloud user as embedded in tracks and comments.

    The API uses hyphenated keys for three fields; they are renamed on
    decode and restored by to_api_dict():
        discogs-name  -> discogs_name
        myspace-name  -> myspace_name
        website-title -> website_title
    """
    id: int
    permalink: str
    username: str
    uri: str
    permalink_url: str
    avatar_url: str
    country: str | None = None
    city: str | None = None
    description: str | None = None
    discogs_name: str | None = None
    myspace_name: str | None = None
    website: str | None = None
    website_title: str | None = None
    online: bool | None = None
    track_count: int | None = None
    playlist_count: int | None = None
    followers_count: int | None = None
    followings_count: int | None = None
    public_favorites_count: int | None = None

    WIRE_NAMES = {
        "discogs_name": "discogs-name",
        "myspace_name": "myspace-name",
        "website_title": "website-title",
    }

    @classmethod
    def from_api(cls, data: Any) -> "User":
        data = _expect_object(data, "user")
        return cls(
            id=_get(data, "id", int),
            permalink=_get(data, "permalink", str),
            username=_get(data, "username", str),
            uri=_get(data, "uri", str),
            permalink_url=_get(data, "permalink_url", str),
            avatar_url=_get(data, "avatar_url", str),
            country=_get(data, "country", str, optional=True),
            city=_get(data, "city", str, optional=True),
            description=_get(data, "description", str, optional=True),
            discogs_name=_get(data, "discogs-name", str, optional=True),
            myspace_name=_get(data, "myspace-name", str, optional=True),
            website=_get(data, "website", str, optional=True),
            website_title=_get(data, "website-title", str, optional=True),
            online=_get(data, "online", bool, optional=True),
            track_count=_get(data, "track_count", int, optional=True),
            playlist_count=_get(data, "playlist_count", int, optional=True),
            followers_count=_get(data, "followers_count", int, optional=True),
            followings_count=_get(data, "followings_count", int, optional=True),
            public_favorites_count=_get(data, "public_favorites_count", int, optional=True),
        )

    def to_api_dict(self) -> dict[str, Any]:
        return _to_wire(self, self.WIRE_NAMES)


@dataclass(frozen=True)
class Comment:
    """A comment on a track. Read-only: comments are never posted."""
    id: int
    uri: str
    created_at: str
    body: str
    user_id: int
    user: User
    track_id: int
    timestamp: int | None = None

    @classmethod
    def from_api(cls, data: Any) -> "Comment":
        data = _expect_object(data, "comment")
        return cls(
            id=_get(data, "id", int),
            uri=_get(data, "uri", str),
            created_at=_get(data, "created_at", str),
            body=_get(data, "body", str),
            user_id=_get(data, "user_id", int),
            user=_get_record(data, "user", User),
            track_id=_get(data, "track_id", int),
            timestamp=_get(data, "timestamp", int, optional=True),
        )

    def to_api_dict(self) -> dict[str, Any]:
        return _to_wire(self)


@dataclass(frozen=True, eq=False)
class Track:
    """
    Immutable representation of a SoundCloud track.

    Equality:
        Two tracks compare equal when their ``id`` values are equal, even if
        other fields differ (e.g., a track fetched twice with a different
        playback_count). Hashing follows the same rule, so tracks can be
        de-duplicated in sets and used as dict keys.

    Transfer fields:
        streamable/stream_url gate Client.stream();
        downloadable/download_url gate Client.download().

    Example:
        track = Track.from_api(payload)
        print(f"{track.title} by {track.user.username}")
        print(f"Duration: {track.duration // 1000} seconds")
    """

    # Required fields (always present in API responses)
    id: int
    created_at: str
    user_id: int
    user: User
    title: str
    permalink: str
    permalink_url: str
    uri: str
    sharing: str
    embeddable_by: str
    duration: int
    streamable: bool
    downloadable: bool
    state: str
    license: str
    waveform_url: str
    commentable: bool
    comment_count: int
    download_count: int
    playback_count: int
    favoritings_count: int
    original_format: str
    original_content_size: int

    # Optional fields
    purchase_url: str | None = None
    artwork_url: str | None = None
    description: str | None = None
    label: Any = None
    genre: str | None = None
    tags: str | None = None
    label_id: int | None = None
    label_name: str | None = None
    release: str | None = None
    release_day: int | None = None
    release_month: int | None = None
    release_year: int | None = None
    purchase_title: str | None = None
    track_type: str | None = None
    download_url: str | None = None
    stream_url: str | None = None
    video_url: str | None = None
    bpm: int | None = None
    isrc: str | None = None
    key_signature: str | None = None
    created_with: App | None = None
    asset_data: bytes | None = None
    artwork_data: bytes | None = None
    user_favorite: bool | None = None
    likes_count: int | None = None

    @classmethod
    def from_api(cls, data: Any) -> "Track":
        """
        Create a Track from a decoded JSON object.

        Args:
            data: The value produced by decoding a track JSON object.

        Returns:
            Track: A new frozen Track.

        Raises:
            SerializationError: If data is not an object, a required field is
                                missing, or a field has the wrong JSON type.
                                ``field`` names the offending key (nested keys
                                are dotted, e.g. 'user.username').
        """
        data = _expect_object(data, "track")
        return cls(
            id=_get(data, "id", int),
            created_at=_get(data, "created_at", str),
            user_id=_get(data, "user_id", int),
            user=_get_record(data, "user", User),
            title=_get(data, "title", str),
            permalink=_get(data, "permalink", str),
            permalink_url=_get(data, "permalink_url", str),
            uri=_get(data, "uri", str),
            sharing=_get(data, "sharing", str),
            embeddable_by=_get(data, "embeddable_by", str),
            duration=_get(data, "duration", int),
            streamable=_get(data, "streamable", bool),
            downloadable=_get(data, "downloadable", bool),
            state=_get(data, "state", str),
            license=_get(data, "license", str),
            waveform_url=_get(data, "waveform_url", str),
            commentable=_get(data, "commentable", bool),
            comment_count=_get(data, "comment_count", int),
            download_count=_get(data, "download_count", int),
            playback_count=_get(data, "playback_count", int),
            favoritings_count=_get(data, "favoritings_count", int),
            original_format=_get(data, "original_format", str),
            original_content_size=_get(data, "original_content_size", int),
            purchase_url=_get(data, "purchase_url", str, optional=True),
            artwork_url=_get(data, "artwork_url", str, optional=True),
            description=_get(data, "description", str, optional=True),
            label=data.get("label"),
            genre=_get(data, "genre", str, optional=True),
            tags=_get(data, "tags", str, optional=True),
            label_id=_get(data, "label_id", int, optional=True),
            label_name=_get(data, "label_name", str, optional=True),
            release=_get(data, "release", str, optional=True),
            release_day=_get(data, "release_day", int, optional=True),
            release_month=_get(data, "release_month", int, optional=True),
            release_year=_get(data, "release_year", int, optional=True),
            purchase_title=_get(data, "purchase_title", str, optional=True),
            track_type=_get(data, "track_type", str, optional=True),
            download_url=_get(data, "download_url", str, optional=True),
            stream_url=_get(data, "stream_url", str, optional=True),
            video_url=_get(data, "video_url", str, optional=True),
            bpm=_get(data, "bpm", int, optional=True),
            isrc=_get(data, "isrc", str, optional=True),
            key_signature=_get(data, "key_signature", str, optional=True),
            created_with=_get_record(data, "created_with", App, optional=True),
            asset_data=_get_bytes(data, "asset_data"),
            artwork_data=_get_bytes(data, "artwork_data"),
            user_favorite=_get(data, "user_favorite", bool, optional=True),
            likes_count=_get(data, "likes_count", int, optional=True),
        )

    def to_api_dict(self) -> dict[str, Any]:
        """Encode back to the JSON shape accepted by from_api()."""
        return _to_wire(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Track):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

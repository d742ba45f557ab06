"""
Track request builders for soundcloud-client.

TrackRequestBuilder accumulates search filters and sends them as a single
GET /tracks request. SingleTrackRequest fetches one track by id.

Builder semantics:
    - Every setter returns the builder, so calls can be chained
    - Calling a setter again replaces the previous value (last write wins)
    - Passing None clears the field; unset fields are never sent
    - get() rebuilds the parameters from the current state each time, so it
      can be called more than once

Usage:
    tracks = (
        client.tracks()
        .query("field recordings")
        .tags(["ambient", "drone"])
        .filter(Filter.PUBLIC)
        .duration(60_000, 600_000)
        .get()
    )

    if tracks is NO_RESULTS:
        print("nothing found")
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from soundcloud_client.api.models import Filter, Track
from soundcloud_client.core.exceptions import ApiProtocolError, SerializationError
from soundcloud_client.core.logger import get_logger

if TYPE_CHECKING:
    from soundcloud_client.api.client import Client


logger = get_logger(__name__)


class NoResults:
    """
    Marker returned by TrackRequestBuilder.get() when the API found nothing.

    There is a single instance, NO_RESULTS. It is falsy, so both
    ``if not tracks`` and ``tracks is NO_RESULTS`` work.
    """

    _instance: "NoResults | None" = None

    def __new__(cls) -> "NoResults":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_RESULTS"


NO_RESULTS = NoResults()

Range = tuple[int | None, int | None]


class TrackRequestBuilder:
    """
    Accumulates criteria for a track search.

    Obtained from Client.tracks(). Holds a reference to the client; the
    client is never modified by the builder.

    Serialized parameters, in order:
        q, tags, filter, license, ids, duration[from], duration[to],
        bpm[from], bpm[to], genres, types
    List values are joined with commas.
    """

    def __init__(self, client: "Client") -> None:
        self._client = client
        self._query: str | None = None
        self._tags: tuple[str, ...] | None = None
        self._filter: Filter | None = None
        self._license: str | None = None
        self._ids: tuple[int, ...] | None = None
        self._duration: Range | None = None
        self._bpm: Range | None = None
        self._genres: tuple[str, ...] | None = None
        self._types: tuple[str, ...] | None = None

    def query(self, query: str | None) -> "TrackRequestBuilder":
        """Only return tracks matching a free-text query."""
        self._query = query
        return self

    def tags(self, tags: Iterable[str] | None) -> "TrackRequestBuilder":
        """Only return tracks with one of the given tags."""
        self._tags = None if tags is None else tuple(tags)
        return self

    def filter(self, filter: Filter | str | None) -> "TrackRequestBuilder":
        """
        Filter private or public tracks.

        Args:
            filter: A Filter, or its token ('all', 'public', 'private').

        Raises:
            InvalidFilterError: If a string token is not recognised.
        """
        if isinstance(filter, str):
            filter = Filter.parse(filter)
        self._filter = filter
        return self

    def license(self, license: str | None) -> "TrackRequestBuilder":
        """Only return tracks with the given license, e.g. 'cc-by'."""
        self._license = license
        return self

    def ids(self, ids: Iterable[int] | None) -> "TrackRequestBuilder":
        """Look up an explicit list of track ids."""
        self._ids = None if ids is None else tuple(int(i) for i in ids)
        return self

    def duration(self, low: int | None = None, high: int | None = None) -> "TrackRequestBuilder":
        """
        Only return tracks whose duration (milliseconds) is in [low, high].

        Either side may be None to leave it open; both None clears the range.
        """
        self._duration = None if low is None and high is None else (low, high)
        return self

    def bpm(self, low: int | None = None, high: int | None = None) -> "TrackRequestBuilder":
        """Only return tracks whose tempo is in [low, high]. See duration()."""
        self._bpm = None if low is None and high is None else (low, high)
        return self

    def genres(self, genres: Iterable[str] | None) -> "TrackRequestBuilder":
        """Only return tracks of one of the given genres."""
        self._genres = None if genres is None else tuple(genres)
        return self

    def types(self, types: Iterable[str] | None) -> "TrackRequestBuilder":
        """Only return tracks of one of the given track types."""
        self._types = None if types is None else tuple(types)
        return self

    def id(self, track_id: int) -> "SingleTrackRequest":
        """Return a request for a single track, sharing this builder's client."""
        return SingleTrackRequest(self._client, track_id)

    def request_params(self) -> list[tuple[str, str]]:
        """Serialize the set fields into ordered query parameters."""
        params: list[tuple[str, str]] = []

        if self._query is not None:
            params.append(("q", self._query))

        if self._tags is not None:
            params.append(("tags", ",".join(self._tags)))

        if self._filter is not None:
            params.append(("filter", self._filter.value))

        if self._license is not None:
            params.append(("license", self._license))

        if self._ids is not None:
            params.append(("ids", ",".join(str(i) for i in self._ids)))

        if self._duration is not None:
            params.extend(_range_params("duration", self._duration))

        if self._bpm is not None:
            params.extend(_range_params("bpm", self._bpm))

        if self._genres is not None:
            params.append(("genres", ",".join(self._genres)))

        if self._types is not None:
            params.append(("types", ",".join(self._types)))

        return params

    def get(self) -> list[Track] | NoResults:
        """
        Send the search and return the matching tracks.

        Returns:
            list[Track]: The decoded tracks, in response order.
            NO_RESULTS: If the API answered with an empty array.

        Raises:
            TransportError: If the request could not be completed.
            NotFoundError / ApiProtocolError: On an error HTTP status.
            SerializationError: If the body is not JSON, or an element is not
                                a valid track (``index`` tells which one).
            ApiProtocolError: If the body is JSON but not an array.
        """
        payload = self._client.get_json("/tracks", self.request_params())

        if not isinstance(payload, list):
            raise ApiProtocolError(
                "expected response to be an array",
                details={"path": "/tracks", "type": type(payload).__name__}
            )

        if not payload:
            logger.debug("track search returned no results")
            return NO_RESULTS

        tracks: list[Track] = []
        for index, item in enumerate(payload):
            try:
                tracks.append(Track.from_api(item))
            except SerializationError as e:
                raise e.at_index(index) from e

        logger.debug("track search returned %d tracks", len(tracks))
        return tracks


class SingleTrackRequest:
    """
    Request for one track by id.

    Attributes:
        id: The track id this request targets.
    """

    def __init__(self, client: "Client", track_id: int) -> None:
        self._client = client
        self.id = track_id

    def request_url(self) -> str:
        """Canonical API URL of the track, without credential."""
        return self._client.api_url(f"/tracks/{self.id}")

    def get(self) -> Track:
        """
        Fetch and decode the track.

        Raises:
            TransportError: If the request could not be completed.
            NotFoundError: If the API answered 404.
            ApiProtocolError: On any other non-2xx status.
            SerializationError: If the body is not a valid track object.
        """
        payload = self._client.get_json(f"/tracks/{self.id}")
        return Track.from_api(payload)


def _range_params(name: str, bounds: Range) -> list[tuple[str, str]]:
    low, high = bounds
    params = []
    if low is not None:
        params.append((f"{name}[from]", str(low)))
    if high is not None:
        params.append((f"{name}[to]", str(high)))
    return params

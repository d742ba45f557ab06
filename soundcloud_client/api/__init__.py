"""
SoundCloud API module for soundcloud-client.

Modules:
    client: Client (transport, resolver, transfer entry points)
    models: Track, User, App, Comment records and the Filter enum
    tracks: TrackRequestBuilder, SingleTrackRequest, NO_RESULTS
    transfer: download() / stream() with the one-hop asset redirect
"""

from soundcloud_client.api.client import Client
from soundcloud_client.api.models import App, Comment, Filter, Track, User
from soundcloud_client.api.tracks import (
    NO_RESULTS,
    NoResults,
    SingleTrackRequest,
    TrackRequestBuilder,
)

__all__ = [
    "Client",
    "Track",
    "User",
    "App",
    "Comment",
    "Filter",
    "TrackRequestBuilder",
    "SingleTrackRequest",
    "NoResults",
    "NO_RESULTS",
]

"""Test configuration and fixtures"""

import copy
import io
import json
from unittest.mock import Mock

import pytest
import requests

from soundcloud_client.api import Client, Track


USER_PAYLOAD = {
    'id': 3207,
    'permalink': 'isqa',
    'username': 'isqa',
    'uri': 'https://api.soundcloud.com/users/3207',
    'permalink_url': 'https://soundcloud.com/isqa',
    'avatar_url': 'https://i1.sndcdn.com/avatars-000-large.jpg',
    'country': 'Denmark',
    'city': None,
    'discogs-name': 'ISQA',
    'myspace-name': None,
    'website-title': 'Home',
    'track_count': 12,
}

TRACK_PAYLOAD = {
    'id': 42,
    'created_at': '2016/05/18 21:22:01 +0000',
    'user_id': 3207,
    'user': USER_PAYLOAD,
    'title': 'Tree Eater',
    'permalink': 'tree-eater-1',
    'permalink_url': 'https://soundcloud.com/isqa/tree-eater-1',
    'uri': 'https://api.soundcloud.com/tracks/42',
    'sharing': 'public',
    'embeddable_by': 'all',
    'duration': 215000,
    'genre': 'Electronic',
    'tags': 'ambient drone',
    'streamable': True,
    'downloadable': True,
    'state': 'finished',
    'license': 'cc-by',
    'waveform_url': 'https://w1.sndcdn.com/abc_m.png',
    'download_url': 'https://api.soundcloud.com/tracks/42/download',
    'stream_url': 'https://api.soundcloud.com/tracks/42/stream',
    'bpm': 120,
    'commentable': True,
    'comment_count': 3,
    'download_count': 10,
    'playback_count': 1500,
    'favoritings_count': 25,
    'original_format': 'mp3',
    'original_content_size': 16384,
    'created_with': {
        'id': 64,
        'uri': 'https://api.soundcloud.com/apps/64',
        'permalink_url': 'https://soundcloud.com/apps/web',
        'external_url': 'https://soundcloud.com',
        'creator': None,
    },
}


def build_response(status=200, body=b'', headers=None, json_body=None):
    """Build a real requests.Response whose body is read from memory"""
    if json_body is not None:
        body = json.dumps(json_body).encode('utf-8')
    response = requests.Response()
    response.status_code = status
    response.headers.update(headers or {})
    response.raw = io.BytesIO(body)
    response.encoding = 'utf-8'
    return response


@pytest.fixture
def make_response():
    """Factory building in-memory responses, see build_response"""
    return build_response


@pytest.fixture
def track_payload():
    """Fresh copy of a complete track JSON object"""
    return copy.deepcopy(TRACK_PAYLOAD)


@pytest.fixture
def user_payload():
    """Fresh copy of a user JSON object with hyphenated keys"""
    return copy.deepcopy(USER_PAYLOAD)


@pytest.fixture
def track(track_payload):
    """Decoded Track for transfer tests"""
    return Track.from_api(track_payload)


@pytest.fixture
def session():
    """Mock requests session; set session.get.return_value / side_effect"""
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    """Client wired to the mock session"""
    return Client('X', session=session)

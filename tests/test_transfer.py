"""Test media transfer: download and stream"""

import dataclasses
import io
from unittest.mock import Mock

import pytest
import requests

from soundcloud_client.api import Client
from soundcloud_client.api.transfer import CHUNK_SIZE
from soundcloud_client.core.exceptions import (
    ApiProtocolError,
    IoFailureError,
    TrackNotDownloadableError,
    TrackNotStreamableError,
    TransportError,
)


AUDIO = bytes(range(256)) * 64  # 16 KiB


class TestPreconditions:
    """No request is sent when the track does not allow the transfer"""

    def test_not_downloadable(self, client, session, track):
        track = dataclasses.replace(track, downloadable=False)

        with pytest.raises(TrackNotDownloadableError):
            client.download(track, io.BytesIO())
        assert session.get.call_count == 0

    def test_missing_download_url(self, client, session, track, tmp_path):
        track = dataclasses.replace(track, download_url=None)
        destination = tmp_path / "never.mp3"

        with pytest.raises(TrackNotDownloadableError):
            client.download(track, destination)
        assert session.get.call_count == 0
        assert not destination.exists()

    def test_not_streamable(self, client, session, track):
        track = dataclasses.replace(track, streamable=False)

        with pytest.raises(TrackNotStreamableError):
            client.stream(track, io.BytesIO())
        assert session.get.call_count == 0

    def test_missing_stream_url(self, client, session, track):
        track = dataclasses.replace(track, stream_url=None)

        with pytest.raises(TrackNotStreamableError):
            client.stream(track, io.BytesIO())
        assert session.get.call_count == 0


class TestStream:
    """Test Client.stream"""

    def test_copies_whole_body(self, client, session, track, make_response):
        session.get.return_value = make_response(200, AUDIO)
        sink = io.BytesIO()

        size = client.stream(track, sink)

        assert size == 16384
        assert sink.getvalue() == AUDIO

    def test_credential_appended_to_asset_url(self, client, session, track, make_response):
        session.get.return_value = make_response(200, b"abc")

        client.stream(track, io.BytesIO())

        args, kwargs = session.get.call_args
        assert args == ("https://api.soundcloud.com/tracks/42/stream?client_id=X",)
        assert kwargs["allow_redirects"] is False
        assert kwargs["stream"] is True

    def test_callable_sink_receives_chunks(self, client, session, track, make_response):
        body = b"x" * (CHUNK_SIZE * 2 + 10)
        session.get.return_value = make_response(200, body)
        chunks = []

        size = client.stream(track, chunks.append)

        assert size == len(body)
        assert [len(c) for c in chunks] == [CHUNK_SIZE, CHUNK_SIZE, 10]

    def test_progress_callback(self, client, session, track, make_response):
        session.get.return_value = make_response(200, AUDIO)
        progress = Mock()

        client.stream(track, io.BytesIO(), progress=progress)

        assert sum(call.args[0] for call in progress.call_args_list) == len(AUDIO)

    def test_follows_location_once(self, client, session, track, make_response):
        session.get.side_effect = [
            make_response(302, headers={"Location": "https://cdn.example/audio.mp3?sig=1"}),
            make_response(200, AUDIO, headers={"Location": "https://cdn.example/elsewhere"}),
        ]
        sink = io.BytesIO()

        size = client.stream(track, sink)

        assert size == len(AUDIO)
        assert session.get.call_count == 2
        assert session.get.call_args_list[1].args == ("https://cdn.example/audio.mp3?sig=1",)
        assert session.get.call_args_list[1].kwargs["allow_redirects"] is False

    def test_second_redirect_is_not_followed(self, client, session, track, make_response):
        session.get.side_effect = [
            make_response(302, headers={"Location": "https://cdn.example/a"}),
            make_response(302, b"", headers={"Location": "https://cdn.example/b"}),
            make_response(200, AUDIO),
        ]

        size = client.stream(track, io.BytesIO())

        assert size == 0
        assert session.get.call_count == 2

    def test_relative_location(self, client, session, track, make_response):
        session.get.side_effect = [
            make_response(302, headers={"Location": "/media/42.mp3"}),
            make_response(200, b"abc"),
        ]

        client.stream(track, io.BytesIO())

        assert session.get.call_args.args == ("https://api.soundcloud.com/media/42.mp3",)

    def test_timeout_applies_to_redirect_hop(self, session, track, make_response):
        client = Client("X", timeout=5, session=session)
        session.get.side_effect = [
            make_response(302, headers={"Location": "https://cdn.example/a"}),
            make_response(200, b"abc"),
        ]

        client.stream(track, io.BytesIO())

        assert [call.kwargs["timeout"] for call in session.get.call_args_list] == [5, 5]

    def test_error_status(self, client, session, track, make_response):
        session.get.return_value = make_response(401, b"unauthorized")
        sink = io.BytesIO()

        with pytest.raises(ApiProtocolError) as excinfo:
            client.stream(track, sink)
        assert excinfo.value.details["status_code"] == 401
        assert sink.getvalue() == b""

    def test_transport_error_on_redirect_hop(self, client, session, track, make_response):
        session.get.side_effect = [
            make_response(302, headers={"Location": "https://cdn.example/a"}),
            requests.ConnectionError("reset"),
        ]

        with pytest.raises(TransportError):
            client.stream(track, io.BytesIO())

    def test_transport_error_while_reading(self, client, session, track, make_response):
        response = make_response(200)
        response.raw = Mock(spec=["read", "close"])
        response.raw.read.side_effect = requests.ConnectionError("connection reset")
        session.get.return_value = response

        with pytest.raises(TransportError):
            client.stream(track, io.BytesIO())

    def test_sink_failure(self, client, session, track, make_response):
        session.get.return_value = make_response(200, AUDIO)
        sink = Mock()
        sink.write.side_effect = OSError(28, "No space left on device")

        with pytest.raises(IoFailureError) as excinfo:
            client.stream(track, sink)
        assert isinstance(excinfo.value.cause, OSError)

    def test_closed_sink(self, client, session, track, make_response):
        session.get.return_value = make_response(200, b"abc")
        sink = io.BytesIO()
        sink.close()

        with pytest.raises(IoFailureError) as excinfo:
            client.stream(track, sink)
        assert isinstance(excinfo.value.cause, ValueError)

    def test_transport_error_while_reading_hides_credential(self, client, session, track, make_response):
        response = make_response(200)
        response.raw = Mock(spec=["read", "close"])
        response.raw.read.side_effect = requests.ConnectionError("reset reading /tracks/42/stream?client_id=X")
        session.get.return_value = response

        with pytest.raises(TransportError) as excinfo:
            client.stream(track, io.BytesIO())
        assert "client_id=X" not in excinfo.value.message

    def test_invalid_sink(self, client, session, track, make_response):
        session.get.return_value = make_response(200, AUDIO)

        with pytest.raises(TypeError):
            client.stream(track, 42)


class TestDownload:
    """Test Client.download"""

    def test_download_to_path(self, client, session, track, make_response, tmp_path):
        session.get.return_value = make_response(200, AUDIO)
        destination = tmp_path / "tree-eater.mp3"

        size = client.download(track, destination)

        assert size == len(AUDIO)
        assert destination.read_bytes() == AUDIO
        assert session.get.call_args.args == (
            "https://api.soundcloud.com/tracks/42/download?client_id=X",
        )

    def test_download_to_string_path(self, client, session, track, make_response, tmp_path):
        session.get.return_value = make_response(200, b"abc")
        destination = tmp_path / "a.mp3"

        assert client.download(track, str(destination)) == 3
        assert destination.read_bytes() == b"abc"

    def test_download_to_file_object(self, client, session, track, make_response):
        session.get.return_value = make_response(200, AUDIO)
        sink = io.BytesIO()

        assert client.download(track, sink) == len(AUDIO)
        assert sink.getvalue() == AUDIO

    def test_unwritable_destination(self, client, session, track, tmp_path):
        destination = tmp_path / "missing-dir" / "a.mp3"

        with pytest.raises(IoFailureError) as excinfo:
            client.download(track, destination)
        assert excinfo.value.details["path"] == str(destination)
        assert session.get.call_count == 0

    def test_failed_download_removes_partial_file(self, client, session, track, make_response, tmp_path):
        session.get.return_value = make_response(500, b"oops")
        destination = tmp_path / "a.mp3"

        with pytest.raises(ApiProtocolError):
            client.download(track, destination)
        assert not destination.exists()

    def test_interrupted_download_removes_partial_file(self, client, session, track, make_response, tmp_path):
        response = make_response(200)
        response.raw = Mock(spec=["read", "close"])
        response.raw.read.side_effect = [b"a" * CHUNK_SIZE, requests.ConnectionError("reset")]
        session.get.return_value = response
        destination = tmp_path / "a.mp3"

        with pytest.raises(TransportError):
            client.download(track, destination)
        assert not destination.exists()

    def test_failed_download_to_file_object_leaves_it_open(self, client, session, track, make_response):
        session.get.return_value = make_response(500, b"oops")
        sink = io.BytesIO()

        with pytest.raises(ApiProtocolError):
            client.download(track, sink)
        assert not sink.closed

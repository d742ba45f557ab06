"""Test the transport primitive and the resource resolver"""

import pytest
import requests

from soundcloud_client.api import Client
from soundcloud_client.core import ClientConfig
from soundcloud_client.core.exceptions import (
    ApiProtocolError,
    ConfigError,
    NotFoundError,
    SerializationError,
    TransportError,
)


class TestTransport:
    """Test Client.get / get_json"""

    def test_credential_first_then_params_in_order(self, client, session, make_response):
        session.get.return_value = make_response()

        client.get("/tracks", [("q", "x"), ("client_id", "Y"), ("tags", "a,b")])

        args, kwargs = session.get.call_args
        assert args == ("https://api.soundcloud.com/tracks",)
        assert kwargs["params"] == [
            ("client_id", "X"), ("q", "x"), ("client_id", "Y"), ("tags", "a,b")
        ]

    def test_never_follows_redirects(self, client, session, make_response):
        session.get.return_value = make_response()

        client.get("/tracks")

        assert session.get.call_args.kwargs["allow_redirects"] is False

    def test_timeout_is_passed(self, session, make_response):
        client = Client("X", timeout=12.5, session=session)
        session.get.return_value = make_response()

        client.get("/tracks")

        assert session.get.call_args.kwargs["timeout"] == 12.5

    def test_transport_failure(self, client, session):
        session.get.side_effect = requests.ConnectionError("dns failure")

        with pytest.raises(TransportError) as excinfo:
            client.get("/tracks")

        assert isinstance(excinfo.value.cause, requests.ConnectionError)
        assert excinfo.value.details["url"] == "https://api.soundcloud.com/tracks"
        assert session.get.call_count == 1

    def test_transport_failure_hides_credential(self, session):
        client = Client("SECRETCRED", session=session)
        session.get.side_effect = requests.ConnectionError(
            "Max retries exceeded with url: /tracks?client_id=SECRETCRED&q=x"
        )

        with pytest.raises(TransportError) as excinfo:
            client.get("/tracks", [("q", "x")])

        assert "SECRETCRED" not in excinfo.value.message
        assert "SECRETCRED" not in str(excinfo.value.details)
        assert "client_id=***" in excinfo.value.message

    def test_get_json_404(self, client, session, make_response):
        session.get.return_value = make_response(404, b"<html>gone</html>")

        with pytest.raises(NotFoundError):
            client.get_json("/tracks/1")

    def test_get_json_server_error(self, client, session, make_response):
        session.get.return_value = make_response(503, b"")

        with pytest.raises(ApiProtocolError) as excinfo:
            client.get_json("/tracks")
        assert excinfo.value.details["status_code"] == 503

    def test_get_json_invalid_body(self, client, session, make_response):
        session.get.return_value = make_response(200, b"{not json")

        with pytest.raises(SerializationError):
            client.get_json("/tracks")

    def test_authenticate_url_keeps_query(self, client):
        url = client.authenticate_url("https://api.soundcloud.com/tracks/42/stream?secret_token=s-1")
        assert url == "https://api.soundcloud.com/tracks/42/stream?secret_token=s-1&client_id=X"

    def test_authenticate_url_keeps_query_text_verbatim(self, client):
        url = client.authenticate_url("https://cdn.example/a.mp3?secret_token=s%201&flag")
        assert url == "https://cdn.example/a.mp3?secret_token=s%201&flag&client_id=X"

    def test_authenticate_url_without_query(self, client):
        url = client.authenticate_url("https://cdn.example/a.mp3")
        assert url == "https://cdn.example/a.mp3?client_id=X"

    def test_empty_client_id(self):
        with pytest.raises(ConfigError):
            Client("")

    def test_from_config(self, session):
        client = Client.from_config(
            ClientConfig(client_id="abc", api_host="api.example", timeout=3.0),
            session=session
        )
        assert client.client_id == "abc"
        assert client.api_url("/tracks") == "https://api.example/tracks"
        assert client.timeout == 3.0

    def test_own_session_sets_user_agent(self):
        client = Client("X")
        assert client._session.headers["User-Agent"].startswith("soundcloud-client/")


class TestResolve:
    """Test Client.resolve"""

    def test_resolve_track_url(self, client, session, make_response):
        session.get.return_value = make_response(
            302, headers={"Location": "https://api.example/tracks/12345?client_id=X"}
        )

        result = client.resolve("https://service.example/user/track-slug")

        assert result.path == "/tracks/12345"
        assert result.netloc == "api.example"
        args, kwargs = session.get.call_args
        assert args == ("https://api.soundcloud.com/resolve",)
        assert kwargs["params"] == [
            ("client_id", "X"), ("url", "https://service.example/user/track-slug")
        ]

    def test_missing_location(self, client, session, make_response):
        session.get.return_value = make_response(200, b"{}")

        with pytest.raises(ApiProtocolError) as excinfo:
            client.resolve("https://soundcloud.com/a/b")
        assert excinfo.value.message == "expected location header"

    def test_not_found(self, client, session, make_response):
        session.get.return_value = make_response(404)

        with pytest.raises(NotFoundError):
            client.resolve("https://soundcloud.com/a/missing")

    def test_relative_location_is_rejected(self, client, session, make_response):
        session.get.return_value = make_response(302, headers={"Location": "/tracks/1"})

        with pytest.raises(ApiProtocolError):
            client.resolve("https://soundcloud.com/a/b")

    def test_transport_error_is_not_protocol_error(self, client, session):
        session.get.side_effect = requests.Timeout("slow")

        with pytest.raises(TransportError):
            client.resolve("https://soundcloud.com/a/b")


class TestResolveTrack:
    """Test Client.resolve_track"""

    def test_fetches_resolved_track(self, client, session, track_payload, make_response):
        session.get.side_effect = [
            make_response(302, headers={"Location": "https://api.soundcloud.com/tracks/42"}),
            make_response(200, json_body=track_payload),
        ]

        track = client.resolve_track("https://soundcloud.com/isqa/tree-eater-1")

        assert track.id == 42
        assert session.get.call_args.args == ("https://api.soundcloud.com/tracks/42",)

    def test_non_track_resource(self, client, session, make_response):
        session.get.return_value = make_response(
            302, headers={"Location": "https://api.soundcloud.com/users/3207"}
        )

        with pytest.raises(ApiProtocolError):
            client.resolve_track("https://soundcloud.com/isqa")
        assert session.get.call_count == 1


class TestConcurrentUse:
    """A client is shared read-only by its builders"""

    def test_builders_do_not_modify_client(self, client, session, make_response):
        session.get.side_effect = lambda *a, **kw: make_response(200, json_body=[])

        first = client.tracks().query("a")
        second = client.tracks().query("b")
        first.get()
        second.get()

        queries = [call.kwargs["params"][1] for call in session.get.call_args_list]
        assert queries == [("q", "a"), ("q", "b")]
        assert client.client_id == "X"


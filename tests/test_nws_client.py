import pytest
import requests

import config
from utils.nws_client import NwsClient, NwsError


class FakeResponse:
    def __init__(self, payload=None, status=200, bad_json=False):
        self.payload = payload
        self.status = status
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value")
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def test_client_sets_nws_headers():
    session = FakeSession(FakeResponse({"features": []}))
    NwsClient(user_agent="test-agent", session=session)

    assert session.headers["User-Agent"] == "test-agent"
    assert session.headers["Accept"] == config.NWS_ACCEPT


def test_get_stations_passes_limit():
    session = FakeSession(FakeResponse({"features": []}))
    client = NwsClient(base_url="https://example.test/", timeout=5, session=session)

    assert client.get_stations(500) == {"features": []}
    assert session.calls == [("https://example.test/stations", {"limit": 500}, 5)]


def test_get_latest_observation_url():
    session = FakeSession(FakeResponse({"properties": {}}))
    client = NwsClient(base_url="https://example.test", session=session)

    client.get_latest_observation("KJFK")

    assert session.calls[0][0] == "https://example.test/stations/KJFK/observations/latest"


def test_transport_error_raises_nws_error():
    session = FakeSession(error=requests.ConnectionError("refused"))
    client = NwsClient(session=session)

    with pytest.raises(NwsError):
        client.get_stations(10)


def test_http_error_raises_nws_error():
    client = NwsClient(session=FakeSession(FakeResponse(status=503)))

    with pytest.raises(NwsError):
        client.get_latest_observation("KJFK")


def test_bad_json_raises_nws_error():
    client = NwsClient(session=FakeSession(FakeResponse(bad_json=True)))

    with pytest.raises(NwsError):
        client.get_stations(10)


def test_non_object_payload_raises_nws_error():
    client = NwsClient(session=FakeSession(FakeResponse(["not", "a", "dict"])))

    with pytest.raises(NwsError):
        client.get_stations(10)

import json
import logging

import pytest
import requests

from event_client import DirectTransport, EventClient, RelayTransport, build_client
from event_errors import InvalidResponseError, NetworkError, ProxyError
from viewer_config import ViewerConfig

BASE_URL = "https://api.example.com/event_details?event_id="

PAYLOAD = {
    "success": True,
    "data": {
        "event": {"name": "Quiz", "is_team": False},
        "participants": [{"user_participants": {"name": "Asha"}, "created_at": "2024-03-15T14:30:00"}],
    },
}


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        return json.loads(self.text)


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def test_direct_fetch_event():
    session = FakeSession(FakeResponse(body=PAYLOAD))
    client = EventClient(BASE_URL, transport=DirectTransport(session=session, timeout=5))

    view = client.fetch_event("42")

    assert session.calls[0][0] == BASE_URL + "42"
    assert session.calls[0][1]["timeout"] == 5
    assert view.card.name == "Quiz"
    assert view.rows[0].registered == "Mar 15, 2024, 02:30 PM"


def test_http_error_status_raises_network_error():
    client = EventClient(BASE_URL, transport=DirectTransport(session=FakeSession(FakeResponse(status_code=503, text=""))))
    with pytest.raises(NetworkError, match="HTTP error! status: 503"):
        client.fetch_event("1")


def test_connection_failure_raises_network_error():
    session = FakeSession(error=requests.ConnectionError("connection refused"))
    client = EventClient(BASE_URL, transport=DirectTransport(session=session))
    with pytest.raises(NetworkError, match="connection refused"):
        client.fetch_payload("1")


def test_non_json_body_is_invalid_response():
    client = EventClient(BASE_URL, transport=DirectTransport(session=FakeSession(FakeResponse(text="<html>"))))
    with pytest.raises(InvalidResponseError):
        client.fetch_payload("1")


def test_unsuccessful_payload_is_invalid_response():
    body = {"success": False, "message": "Event not found"}
    client = EventClient(BASE_URL, transport=DirectTransport(session=FakeSession(FakeResponse(body=body))))
    with pytest.raises(InvalidResponseError):
        client.fetch_event("1")


def test_relay_double_encodes_and_unwraps_contents():
    wrapper = {"contents": json.dumps(PAYLOAD), "status": {"http_code": 200}}
    session = FakeSession(FakeResponse(body=wrapper))
    transport = RelayTransport("https://relay.example.com/get?url=", session=session)
    client = EventClient("https://x.io/e?event_id=", transport=transport)

    view = client.fetch_event("5")

    assert session.calls[0][0] == "https://relay.example.com/get?url=https%253A%252F%252Fx.io%252Fe%253Fevent_id%253D5"
    assert view.rows[0].name == "Asha"


def test_relay_without_contents_raises_proxy_error():
    transport = RelayTransport("https://relay.example.com/get?url=", session=FakeSession(FakeResponse(body={"contents": None})))
    with pytest.raises(ProxyError):
        EventClient(BASE_URL, transport=transport).fetch_payload("1")


def test_relay_with_garbled_contents_is_invalid_response():
    transport = RelayTransport("https://relay.example.com/get?url=", session=FakeSession(FakeResponse(body={"contents": "{oops"})))
    with pytest.raises(InvalidResponseError):
        EventClient(BASE_URL, transport=transport).fetch_payload("1")


def test_build_client_picks_transport_from_config():
    direct = build_client(ViewerConfig(api_base_url=BASE_URL, timeout=3))
    assert isinstance(direct.transport, DirectTransport)
    assert not isinstance(direct.transport, RelayTransport)
    assert direct.transport.timeout == 3
    assert direct.event_url("9") == BASE_URL + "9"

    relayed = build_client(ViewerConfig(use_relay=True, display_timezone="UTC"))
    assert isinstance(relayed.transport, RelayTransport)
    assert relayed.tz is not None


def test_relay_with_object_contents_is_invalid_response():
    transport = RelayTransport("https://relay.example.com/get?url=", session=FakeSession(FakeResponse(body={"contents": {"success": True}})))
    with pytest.raises(InvalidResponseError):
        EventClient(BASE_URL, transport=transport).fetch_event("1")


def test_unsuccessful_payload_is_logged(caplog):
    client = EventClient(BASE_URL, transport=DirectTransport(session=FakeSession(FakeResponse(body={"success": False}))))
    with caplog.at_level(logging.ERROR, logger="event_client"):
        with pytest.raises(InvalidResponseError):
            client.fetch_event("9")

    records = [r for r in caplog.records if r.name == "event_client"]
    assert len(records) == 1
    message = records[0].getMessage()
    assert BASE_URL + "9" in message
    assert "Invalid Response" in message


def test_network_failure_is_logged(caplog):
    client = EventClient(BASE_URL, transport=DirectTransport(session=FakeSession(FakeResponse(status_code=404, text=""))))
    with caplog.at_level(logging.ERROR, logger="event_client"):
        with pytest.raises(NetworkError):
            client.fetch_event("3")

    assert "HTTP error! status: 404" in caplog.records[0].getMessage()

import json
import logging
from datetime import datetime, timezone
from urllib.parse import quote

import requests

from event_errors import EventFetchError, InvalidResponseError, NetworkError, ProxyError
from event_rows import normalize_payload

logger = logging.getLogger(__name__)


# ============================================================
# TRANSPORTS
# ============================================================

class DirectTransport:
    """GET the event endpoint straight from the API."""

    def __init__(self, session=None, timeout=15):
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_json(self, url):
        logger.debug("Fetching from: %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout, headers={"Accept": "application/json"})
        except requests.RequestException as exc:
            raise NetworkError(str(exc)) from exc

        if not response.ok:
            raise NetworkError(f"HTTP error! status: {response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            raise InvalidResponseError("Invalid Response: body is not JSON") from exc


class RelayTransport(DirectTransport):
    """
    Route the request through a public CORS relay.

    The relay wants the target URL encoded twice and answers with
    `{"contents": "<original body>"}`, so the body is parsed again.
    """

    def __init__(self, relay_url, session=None, timeout=15):
        super().__init__(session=session, timeout=timeout)
        self.relay_url = relay_url

    def relay_target(self, url):
        return f"{self.relay_url}{quote(quote(url, safe=''), safe='')}"

    def get_json(self, url):
        wrapper = super().get_json(self.relay_target(url))
        contents = wrapper.get("contents") if isinstance(wrapper, dict) else None
        if not contents:
            raise ProxyError("Proxy returned no contents")
        if not isinstance(contents, str):
            raise InvalidResponseError("Invalid Response: relayed contents are not a JSON string")
        try:
            return json.loads(contents)
        except ValueError as exc:
            raise InvalidResponseError("Invalid Response: relayed contents are not JSON") from exc


# ============================================================
# CLIENT
# ============================================================

class EventClient:
    def __init__(self, base_url, transport=None, tz=None):
        self.base_url = base_url
        self.transport = transport or DirectTransport()
        self.tz = tz

    def event_url(self, event_id):
        return f"{self.base_url}{event_id}"

    def fetch_payload(self, event_id):
        return self.transport.get_json(self.event_url(event_id))

    def fetch_event(self, event_id):
        try:
            return normalize_payload(self.fetch_payload(event_id), tz=self.tz)
        except EventFetchError as exc:
            logger.error(
                "Error fetching event data: %s",
                {
                    "eventId": event_id,
                    "apiUrl": self.event_url(event_id),
                    "error": str(exc),
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
            )
            raise


def build_client(config, session=None):
    if config.use_relay:
        transport = RelayTransport(config.relay_url, session=session, timeout=config.timeout)
    else:
        transport = DirectTransport(session=session, timeout=config.timeout)
    return EventClient(config.api_base_url, transport=transport, tz=config.tzinfo)

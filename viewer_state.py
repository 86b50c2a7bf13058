import logging
from enum import Enum

from event_errors import EventFetchError

logger = logging.getLogger(__name__)


class ViewerStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def error_message(reason) -> str:
    return f"Error loading event data: {reason}. Please try again."


class ViewerSession:
    """
    Page state for one browser session: which event is selected, where the
    load cycle stands, and the last good EventView.

    Every selection bumps `generation`; results carrying an older token are
    dropped so a slow response can't overwrite a newer selection.
    """

    def __init__(self):
        self.status = ViewerStatus.IDLE
        self.event_id = None
        self.generation = 0
        self.view = None
        self.error = None

    def select(self, event_id):
        if not event_id:
            self.clear()
            return self.generation
        self.generation += 1
        self.event_id = str(event_id)
        self.status = ViewerStatus.LOADING
        self.view = None
        self.error = None
        return self.generation

    def clear(self):
        self.generation += 1
        self.event_id = None
        self.status = ViewerStatus.IDLE
        self.view = None
        self.error = None

    def is_current(self, token) -> bool:
        return token == self.generation and self.status == ViewerStatus.LOADING

    def complete(self, token, view) -> bool:
        if not self.is_current(token):
            logger.info("Dropping stale result for generation %s (current %s)", token, self.generation)
            return False
        self.view = view
        self.status = ViewerStatus.SUCCESS
        return True

    def fail(self, token, message) -> bool:
        if not self.is_current(token):
            logger.info("Dropping stale failure for generation %s (current %s)", token, self.generation)
            return False
        self.error = message
        self.status = ViewerStatus.ERROR
        return True


def load_event(session: ViewerSession, client, event_id):
    """Run one select -> fetch -> normalize cycle and settle the session."""
    token = session.select(event_id)
    if session.status == ViewerStatus.IDLE:
        return session.status

    try:
        view = client.fetch_event(session.event_id)
    except EventFetchError as exc:
        session.fail(token, error_message(exc))
    except Exception as exc:
        # Last resort: anything unexpected still leaves the page in ERROR.
        logger.exception("Unhandled failure loading event %s", event_id)
        session.fail(token, error_message(exc))
    else:
        session.complete(token, view)
    return session.status

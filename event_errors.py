class EventFetchError(Exception):
    """Base class for failures loading an event's registration data."""


class NetworkError(EventFetchError):
    pass


class InvalidResponseError(EventFetchError):
    pass


class ProxyError(EventFetchError):
    pass

class TrafficTrackError(Exception):
    """Base exception for all traffictrack errors."""
    pass


class ProviderError(TrafficTrackError):
    """Raised when the upstream traffic provider fails (transport, status or payload)."""
    pass


class ProviderNotConfiguredError(ProviderError):
    """Raised by the placeholder provider when no real provider is wired in."""
    pass


class StoreError(TrafficTrackError):
    """Raised when the record store cannot be read or written."""
    pass


class QueryCancelledError(TrafficTrackError):
    """Raised when a query or refresh runs past its timeout."""
    pass


class InvalidQueryError(TrafficTrackError):
    """Raised by the API boundary when query parameters are rejected."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

"""
Exception hierarchy for the Grok search pipeline.

Validation problems surface immediately and are never retried. Transport
problems (ApiError, NetworkError, RequestTimeoutError) are retried by the
client where the status allows it and reach callers wrapped in SearchError.
"""


class GrokSearchError(Exception):
    """Base class for every error raised by the search pipeline."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GrokSearchError):
    """Bad query text, date, bound or mode. Raised before any network call."""


class ApiError(GrokSearchError):
    """Non-success HTTP response from the provider."""

    def __init__(self, status: int, body: str):
        super().__init__(f"API request failed: {status} - {body}")
        self.status = status
        self.body = body

    @property
    def retryable(self) -> bool:
        return self.status >= 500 or self.status == 429


class NetworkError(GrokSearchError):
    """Connection-level failure that never produced an HTTP response."""


class RequestTimeoutError(NetworkError):
    """The outbound call exceeded the configured timeout and was cancelled."""


class ServiceUnavailableError(GrokSearchError):
    """The API client is unhealthy (no credential) and refuses to call out."""


class SearchError(GrokSearchError):
    """Failure while executing or interpreting a search request."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause

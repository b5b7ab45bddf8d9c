"""Custom exception hierarchy for the Linode API client."""

from __future__ import annotations


class LinodeClientError(Exception):
    """Base exception for all recoverable client errors."""


class ConfigError(LinodeClientError):
    """Invalid or missing configuration."""


class RequestError(LinodeClientError):
    """The request never produced an HTTP response (network, DNS, TLS)."""


class CancelledError(LinodeClientError):
    """The caller cancelled the call while its request was in flight."""


class DecodeError(LinodeClientError):
    """The response body did not parse into the expected shape."""

    def __init__(self, message: str, response_body: str | None = None):
        super().__init__(message)
        self.response_body = response_body


class SerializationError(LinodeClientError):
    """An option set could not be encoded as JSON."""


class APIError(LinodeClientError):
    """The API answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        errors: list[dict] | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []
        self.response_body = response_body

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class NotFoundError(APIError):
    """HTTP 404: the resource does not exist (or no longer exists)."""

    def __init__(self, message: str = "Not found", errors: list[dict] | None = None, response_body: str | None = None):
        super().__init__(message, status_code=404, errors=errors, response_body=response_body)


class EndpointResolutionError(RuntimeError):
    """A resource family's endpoint could not be built.

    Deliberately not a LinodeClientError: it means the client itself is
    malformed, so callers catching client errors must not swallow it.
    """


def is_not_found(exc: BaseException) -> bool:
    """True when *exc* is an API error carrying HTTP 404."""
    return isinstance(exc, APIError) and exc.is_not_found


def is_api_error(exc: BaseException) -> bool:
    """True when *exc* came from a non-2xx API response."""
    return isinstance(exc, APIError)

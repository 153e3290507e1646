"""Client error types for Matrix client-server API dispatch."""

from __future__ import annotations


class MatrixClientError(Exception):
    """Base error for Matrix client failures."""


class AuthenticationRequired(MatrixClientError):
    """An authenticated endpoint was called without an active session."""

    def __init__(self, message: str = "Endpoint requires an active session") -> None:
        super().__init__(message)


class RequestConstructionError(MatrixClientError):
    """A typed request could not be turned into an HTTP request."""


class UrlConstructionError(MatrixClientError):
    """The resolved request URL is malformed."""


class TransportError(MatrixClientError):
    """The underlying HTTP transport failed."""


class TransportTimeout(TransportError):
    """Timeout while communicating with the homeserver."""


class TransportConnectionError(TransportError):
    """Network connection to the homeserver failed."""


class ResponseDecodingError(MatrixClientError):
    """HTTP response could not be decoded into the endpoint's response type.

    Server-reported API errors land here as well; ``errcode`` carries the
    Matrix error code (e.g. ``M_FORBIDDEN``) when the body provided one.
    """

    def __init__(
        self,
        status: int,
        message: str,
        *,
        errcode: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.errcode = errcode

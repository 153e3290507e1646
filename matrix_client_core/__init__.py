"""Session-aware request dispatch for the Matrix client-server API."""

__version__ = "0.1.0"

from .client import Client
from .config import ClientConfig, ConfigLoadError, load_config
from .dispatch import ACCESS_TOKEN_PARAM, dispatch
from .endpoint import Endpoint, HttpRequest, HttpResponse, Metadata
from .errors import (
    AuthenticationRequired,
    MatrixClientError,
    RequestConstructionError,
    ResponseDecodingError,
    TransportConnectionError,
    TransportError,
    TransportTimeout,
    UrlConstructionError,
)
from .session import Session, SessionStore
from .sync import SyncSettings, SyncStream
from .transport import AiohttpTransport, PreparedRequest, Transport

__all__ = [
    "ACCESS_TOKEN_PARAM",
    "AiohttpTransport",
    "AuthenticationRequired",
    "Client",
    "ClientConfig",
    "ConfigLoadError",
    "Endpoint",
    "HttpRequest",
    "HttpResponse",
    "MatrixClientError",
    "Metadata",
    "PreparedRequest",
    "RequestConstructionError",
    "ResponseDecodingError",
    "Session",
    "SessionStore",
    "SyncSettings",
    "SyncStream",
    "Transport",
    "TransportConnectionError",
    "TransportError",
    "TransportTimeout",
    "UrlConstructionError",
    "__version__",
    "dispatch",
    "load_config",
]

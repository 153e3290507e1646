"""Request dispatch: typed endpoint call to HTTP round trip and back."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar
from urllib.parse import quote

from yarl import URL

from .endpoint import Endpoint, HttpRequest
from .errors import (
    AuthenticationRequired,
    RequestConstructionError,
    ResponseDecodingError,
    TransportConnectionError,
    TransportError,
    TransportTimeout,
    UrlConstructionError,
)
from .transport.base import PreparedRequest

if TYPE_CHECKING:
    from .client import Client
    from .session import SessionStore

_LOGGER = logging.getLogger(__name__)

ACCESS_TOKEN_PARAM = "access_token"

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")

_ALLOWED_SCHEMES = ("http", "https")

# Characters left as-is when escaping an endpoint path; existing percent
# escapes are kept.
_PATH_SAFE = "/?&=%:@!$'()*+,;~"


def build_http_request(
    endpoint: type[Endpoint[RequestT, ResponseT]], request: RequestT
) -> HttpRequest:
    """Run the endpoint's request conversion, normalizing its failures."""
    try:
        return endpoint.build_request(request)
    except RequestConstructionError:
        raise
    except (ValueError, TypeError, KeyError) as err:
        raise RequestConstructionError(
            f"Invalid request for {endpoint.METADATA.name}: {err}"
        ) from err


def resolve_url(
    homeserver_url: URL,
    http_request: HttpRequest,
    *,
    requires_authentication: bool,
    store: SessionStore,
) -> str:
    """Overlay the request path and query onto the homeserver origin.

    When authentication is required the session is read exactly once and its
    token appended as the ``access_token`` query parameter.

    Raises:
        AuthenticationRequired: If authentication is required and no session
            is stored.
        UrlConstructionError: If the resolved URL is not a valid absolute
            http(s) URL.
    """
    if not http_request.path.startswith("/"):
        raise UrlConstructionError(
            f"Request path '{http_request.path}' is not absolute"
        )
    path = quote(http_request.path, safe=_PATH_SAFE)
    try:
        url = URL(f"{homeserver_url.origin()}{path}", encoded=True)
    except ValueError as err:
        raise UrlConstructionError(
            f"Cannot resolve '{http_request.path}' against {homeserver_url}"
        ) from err

    if requires_authentication:
        session = store.get()
        if session is None:
            raise AuthenticationRequired()
        url = url.extend_query({ACCESS_TOKEN_PARAM: session.access_token})

    resolved = str(url)
    try:
        check = URL(resolved, encoded=True)
        valid = check.scheme in _ALLOWED_SCHEMES and bool(check.host)
    except ValueError as err:
        raise UrlConstructionError(f"Malformed request URL for {url.path}") from err
    if not valid:
        raise UrlConstructionError(f"Malformed request URL for {url.path}")
    return resolved


async def dispatch(
    client: Client,
    endpoint: type[Endpoint[RequestT, ResponseT]],
    request: RequestT,
) -> ResponseT:
    """Execute one endpoint call and decode its typed response.

    The session store is only read, never written. No network IO happens
    before the authentication precondition has been checked. Failures of
    the transport that are not already ``TransportError`` are wrapped.
    """
    metadata = endpoint.METADATA
    http_request = build_http_request(endpoint, request)
    url = resolve_url(
        client.homeserver_url,
        http_request,
        requires_authentication=metadata.requires_authentication,
        store=client.session_store,
    )

    _LOGGER.debug(
        "Dispatching %s: %s %s", metadata.name, http_request.method, metadata.path
    )
    prepared = PreparedRequest(url=url, request=http_request)
    try:
        http_response = await client.transport.send(prepared)
    except TransportError:
        raise
    except TimeoutError as err:
        raise TransportTimeout(f"{metadata.name} request timed out") from err
    except Exception as err:
        raise TransportConnectionError(
            f"{metadata.name} request failed: {err}"
        ) from err
    _LOGGER.debug("%s returned HTTP %s", metadata.name, http_response.status)

    try:
        return endpoint.parse_response(http_response)
    except ResponseDecodingError:
        raise
    except (ValueError, TypeError, KeyError) as err:
        raise ResponseDecodingError(
            http_response.status,
            f"Invalid response for {metadata.name}: {err}",
        ) from err


"""Endpoint contract shared by every Matrix API operation.

Each concrete API operation subclasses ``Endpoint`` once, declaring its
static ``METADATA`` and the two conversions between typed values and the
wire-level ``HttpRequest``/``HttpResponse``. The dispatcher depends only on
this contract.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, TypeVar
from urllib.parse import quote, urlencode

from .errors import RequestConstructionError, ResponseDecodingError

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")

JSON_HEADERS: Mapping[str, str] = {"Content-Type": "application/json"}


@dataclass(frozen=True)
class Metadata:
    """Static description of one endpoint.

    Attributes:
        method: HTTP method.
        path: Path template; parameters are written as ``{name}``.
        name: Short machine name of the endpoint.
        description: Human readable summary.
        requires_authentication: Whether the session credential is injected.
        rate_limited: Whether the server may rate-limit this endpoint.
    """

    method: str
    path: str
    name: str
    description: str
    requires_authentication: bool
    rate_limited: bool = False


@dataclass(frozen=True)
class HttpRequest:
    """Transport-level request relative to the homeserver origin.

    ``path`` may carry a query string.
    """

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True)
class HttpResponse:
    """Transport-level response."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            ValueError: If the body is not valid UTF-8 JSON.
        """
        return json.loads(self.body.decode("utf-8"))


class Endpoint(ABC, Generic[RequestT, ResponseT]):
    """A single Matrix API operation."""

    METADATA: ClassVar[Metadata]

    @classmethod
    @abstractmethod
    def build_request(cls, request: RequestT) -> HttpRequest:
        """Convert a typed request into a transport-level request."""

    @classmethod
    @abstractmethod
    def parse_response(cls, response: HttpResponse) -> ResponseT:
        """Convert a transport-level response into the typed response."""


def render_path(template: str, **params: str) -> str:
    """Substitute percent-encoded path parameters into a path template."""
    try:
        return template.format(
            **{key: quote(value, safe="") for key, value in params.items()}
        )
    except (KeyError, IndexError) as err:
        raise RequestConstructionError(
            f"Missing path parameter for '{template}'"
        ) from err


def json_request(
    metadata: Metadata,
    *,
    path: str | None = None,
    body: Mapping[str, Any] | None = None,
    query: Mapping[str, str] | None = None,
) -> HttpRequest:
    """Build an ``HttpRequest`` with an optional JSON body and query string."""
    target = path if path is not None else metadata.path
    if query:
        target = f"{target}?{urlencode(query)}"

    if body is None:
        return HttpRequest(method=metadata.method, path=target)

    try:
        payload = json.dumps(body).encode("utf-8")
    except (TypeError, ValueError) as err:
        raise RequestConstructionError(
            f"Request body for {metadata.name} is not serializable"
        ) from err

    return HttpRequest(
        method=metadata.method,
        path=target,
        headers=dict(JSON_HEADERS),
        body=payload,
    )


def decode_json_body(response: HttpResponse) -> dict[str, Any]:
    """Return the JSON object of a successful response.

    Non-2xx responses are turned into ``ResponseDecodingError`` carrying
    the Matrix ``errcode`` and ``error`` message when the server sent them.
    """
    try:
        data = response.json()
    except ValueError as err:
        if not response.ok:
            raise ResponseDecodingError(
                response.status, f"Request failed with HTTP {response.status}"
            ) from err
        raise ResponseDecodingError(
            response.status, "Response body is not valid JSON"
        ) from err

    if not response.ok:
        errcode = None
        message = f"Request failed with HTTP {response.status}"
        if isinstance(data, dict):
            if isinstance(data.get("errcode"), str):
                errcode = data["errcode"]
            if isinstance(data.get("error"), str):
                message = data["error"]
        raise ResponseDecodingError(response.status, message, errcode=errcode)

    if not isinstance(data, dict):
        raise ResponseDecodingError(
            response.status, "Response body is not a JSON object"
        )
    return data


def require_str(data: Mapping[str, Any], key: str, status: int) -> str:
    """Fetch a required string field from a decoded body."""
    value = data.get(key)
    if not isinstance(value, str):
        raise ResponseDecodingError(status, f"Response field '{key}' is missing")
    return value

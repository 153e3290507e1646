"""[POST /_matrix/client/r0/login] Log in to the homeserver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ....endpoint import (
    Endpoint,
    HttpRequest,
    HttpResponse,
    Metadata,
    decode_json_body,
    json_request,
    require_str,
)

if TYPE_CHECKING:
    from ....client import Client


class LoginType(Enum):
    """Supported authentication mechanisms."""

    PASSWORD = "m.login.password"


class Medium(Enum):
    """Third party identifier media."""

    EMAIL = "email"


@dataclass(frozen=True)
class Request:
    """Login request.

    Attributes:
        user: Localpart or fully-qualified user ID.
        password: The user's password.
        login_type: Authentication mechanism.
        device_id: Device to log in with; the server generates one if omitted.
        address: Third party identifier, used together with ``medium``.
        medium: Medium of ``address``.
    """

    user: str
    password: str
    login_type: LoginType = LoginType.PASSWORD
    device_id: str | None = None
    address: str | None = None
    medium: Medium | None = None


@dataclass(frozen=True)
class Response:
    """Login response."""

    access_token: str
    device_id: str
    user_id: str
    home_server: str | None = None


class Login(Endpoint[Request, Response]):
    METADATA = Metadata(
        method="POST",
        path="/_matrix/client/r0/login",
        name="login",
        description="Login to the homeserver.",
        requires_authentication=False,
        rate_limited=True,
    )

    @classmethod
    def build_request(cls, request: Request) -> HttpRequest:
        body: dict[str, Any] = {
            "type": request.login_type.value,
            "user": request.user,
            "password": request.password,
        }
        if request.device_id is not None:
            body["device_id"] = request.device_id
        if request.address is not None:
            body["address"] = request.address
        if request.medium is not None:
            body["medium"] = request.medium.value
        return json_request(cls.METADATA, body=body)

    @classmethod
    def parse_response(cls, response: HttpResponse) -> Response:
        data = decode_json_body(response)
        home_server = data.get("home_server")
        return Response(
            access_token=require_str(data, "access_token", response.status),
            device_id=require_str(data, "device_id", response.status),
            user_id=require_str(data, "user_id", response.status),
            home_server=home_server if isinstance(home_server, str) else None,
        )


async def call(client: Client, request: Request) -> Response:
    """Log in without storing the resulting session in ``client``."""
    return await client.request(Login, request)

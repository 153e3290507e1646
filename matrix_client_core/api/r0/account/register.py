"""[POST /_matrix/client/r0/register] Register an account on this homeserver."""

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


class RegistrationKind(Enum):
    """The kind of account to register."""

    GUEST = "guest"
    USER = "user"


@dataclass(frozen=True)
class Request:
    """Registration request.

    Attributes:
        kind: Account kind, sent as the ``kind`` query parameter.
        username: Desired localpart; the server generates one if omitted.
        password: Desired password.
        device_id: Device to register; the server generates one if omitted.
        initial_device_display_name: Display name for the new device.
        bind_email: Whether to bind a supplied email to the account.
        auth: Interactive authentication data, when the server asks for it.
    """

    kind: RegistrationKind | None = None
    username: str | None = None
    password: str | None = None
    device_id: str | None = None
    initial_device_display_name: str | None = None
    bind_email: bool | None = None
    auth: dict[str, Any] | None = None


@dataclass(frozen=True)
class Response:
    """Registration response."""

    access_token: str
    device_id: str
    user_id: str
    home_server: str | None = None


class Register(Endpoint[Request, Response]):
    METADATA = Metadata(
        method="POST",
        path="/_matrix/client/r0/register",
        name="register",
        description="Register an account on this homeserver.",
        requires_authentication=False,
        rate_limited=True,
    )

    @classmethod
    def build_request(cls, request: Request) -> HttpRequest:
        body: dict[str, Any] = {}
        for name in (
            "username",
            "password",
            "device_id",
            "initial_device_display_name",
            "bind_email",
            "auth",
        ):
            value = getattr(request, name)
            if value is not None:
                body[name] = value

        query = {"kind": request.kind.value} if request.kind is not None else None
        return json_request(cls.METADATA, body=body, query=query)

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
    """Register without storing the resulting session in ``client``."""
    return await client.request(Register, request)

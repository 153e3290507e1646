"""[POST /_matrix/client/r0/logout] Invalidate the current access token."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ....endpoint import (
    Endpoint,
    HttpRequest,
    HttpResponse,
    Metadata,
    decode_json_body,
    json_request,
)

if TYPE_CHECKING:
    from ....client import Client


@dataclass(frozen=True)
class Request:
    """Logout request; carries no fields."""


@dataclass(frozen=True)
class Response:
    """Logout response; carries no fields."""


class Logout(Endpoint[Request, Response]):
    METADATA = Metadata(
        method="POST",
        path="/_matrix/client/r0/logout",
        name="logout",
        description="Log out of the homeserver.",
        requires_authentication=True,
    )

    @classmethod
    def build_request(cls, request: Request) -> HttpRequest:
        return json_request(cls.METADATA, body={})

    @classmethod
    def parse_response(cls, response: HttpResponse) -> Response:
        decode_json_body(response)
        return Response()


async def call(client: Client, request: Request | None = None) -> Response:
    return await client.request(Logout, request or Request())

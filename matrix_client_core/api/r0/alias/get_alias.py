"""[GET /_matrix/client/r0/directory/room/{roomAlias}] Resolve a room alias."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ....endpoint import (
    Endpoint,
    HttpRequest,
    HttpResponse,
    Metadata,
    decode_json_body,
    json_request,
    render_path,
    require_str,
)
from ....errors import ResponseDecodingError

if TYPE_CHECKING:
    from ....client import Client


@dataclass(frozen=True)
class Request:
    room_alias: str


@dataclass(frozen=True)
class Response:
    room_id: str
    servers: tuple[str, ...] = field(default_factory=tuple)


class GetAlias(Endpoint[Request, Response]):
    METADATA = Metadata(
        method="GET",
        path="/_matrix/client/r0/directory/room/{room_alias}",
        name="get_alias",
        description="Resolve a room alias to a room ID.",
        requires_authentication=False,
    )

    @classmethod
    def build_request(cls, request: Request) -> HttpRequest:
        if not request.room_alias.startswith("#") or ":" not in request.room_alias:
            raise ValueError(f"'{request.room_alias}' is not a room alias")
        path = render_path(cls.METADATA.path, room_alias=request.room_alias)
        return json_request(cls.METADATA, path=path)

    @classmethod
    def parse_response(cls, response: HttpResponse) -> Response:
        data = decode_json_body(response)
        servers = data.get("servers", [])
        if not isinstance(servers, list) or not all(
            isinstance(server, str) for server in servers
        ):
            raise ResponseDecodingError(
                response.status, "Response field 'servers' is malformed"
            )
        return Response(
            room_id=require_str(data, "room_id", response.status),
            servers=tuple(servers),
        )


async def call(client: Client, request: Request) -> Response:
    return await client.request(GetAlias, request)

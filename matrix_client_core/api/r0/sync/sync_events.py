"""[GET /_matrix/client/r0/sync] Get all new events since the last sync."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
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
from ....errors import ResponseDecodingError

if TYPE_CHECKING:
    from ....client import Client


class SetPresence(Enum):
    """Presence the client asks the server to assume while syncing."""

    OFFLINE = "offline"


# A filter is either the ID of a filter uploaded earlier or an inline
# filter definition.
Filter = str | Mapping[str, Any]


@dataclass(frozen=True)
class Request:
    """Sync request.

    Attributes:
        filter: Filter ID or inline filter definition.
        since: ``next_batch`` token of a previous response.
        full_state: Return the full state of every room even when ``since``
            is given.
        set_presence: Presence to assume while this request is open.
        timeout: Long-poll timeout in milliseconds.
    """

    filter: Filter | None = None
    since: str | None = None
    full_state: bool | None = None
    set_presence: SetPresence | None = None
    timeout: int | None = None


@dataclass(frozen=True)
class Response:
    """Sync response.

    Event payloads are kept as decoded JSON; the core only interprets
    ``next_batch``.
    """

    next_batch: str
    rooms: dict[str, Any] = field(default_factory=dict)
    presence: dict[str, Any] = field(default_factory=dict)
    account_data: dict[str, Any] = field(default_factory=dict)
    to_device: dict[str, Any] = field(default_factory=dict)
    device_lists: dict[str, Any] = field(default_factory=dict)
    device_one_time_keys_count: dict[str, int] = field(default_factory=dict)


def _encode_query(request: Request) -> dict[str, str]:
    query: dict[str, str] = {}
    if request.filter is not None:
        if isinstance(request.filter, str):
            query["filter"] = request.filter
        else:
            query["filter"] = json.dumps(dict(request.filter), separators=(",", ":"))
    if request.since is not None:
        query["since"] = request.since
    if request.full_state is not None:
        query["full_state"] = "true" if request.full_state else "false"
    if request.set_presence is not None:
        query["set_presence"] = request.set_presence.value
    if request.timeout is not None:
        if request.timeout < 0:
            raise ValueError("Sync timeout must not be negative")
        query["timeout"] = str(request.timeout)
    return query


class SyncEvents(Endpoint[Request, Response]):
    METADATA = Metadata(
        method="GET",
        path="/_matrix/client/r0/sync",
        name="sync",
        description="Get all new events from all rooms since the last sync or a given point of time.",
        requires_authentication=True,
    )

    @classmethod
    def build_request(cls, request: Request) -> HttpRequest:
        return json_request(cls.METADATA, query=_encode_query(request))

    @classmethod
    def parse_response(cls, response: HttpResponse) -> Response:
        data = decode_json_body(response)
        sections: dict[str, Any] = {}
        for name in (
            "rooms",
            "presence",
            "account_data",
            "to_device",
            "device_lists",
            "device_one_time_keys_count",
        ):
            value = data.get(name, {})
            if not isinstance(value, dict):
                raise ResponseDecodingError(
                    response.status, f"Response field '{name}' is not an object"
                )
            sections[name] = value
        return Response(
            next_batch=require_str(data, "next_batch", response.status),
            **sections,
        )


async def call(client: Client, request: Request) -> Response:
    return await client.request(SyncEvents, request)

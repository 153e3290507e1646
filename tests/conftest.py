"""Pytest configuration and fixtures for matrix_client_core tests."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from matrix_client_core import Client, HttpResponse, PreparedRequest, Session

HOMESERVER = "https://example.com"


class ScriptedTransport:
    """In-memory transport replaying scripted responses in order.

    Script entries are either ``HttpResponse`` objects or exceptions to raise.
    Every prepared request is recorded in ``sent``.
    """

    def __init__(self, *script: HttpResponse | Exception) -> None:
        self._script = list(script)
        self.sent: list[PreparedRequest] = []
        self.closed = False

    def push(self, *script: HttpResponse | Exception) -> None:
        self._script.extend(script)

    async def send(self, request: PreparedRequest) -> HttpResponse:
        self.sent.append(request)
        if not self._script:
            raise AssertionError(f"Unexpected request to {request.url}")
        item = self._script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


def json_response(status: int = 200, data: Any = None) -> HttpResponse:
    """Build an ``HttpResponse`` with a JSON body."""
    return HttpResponse(
        status=status,
        headers={"Content-Type": "application/json"},
        body=json.dumps(data if data is not None else {}).encode("utf-8"),
    )


def session_response(
    access_token: str = "token-1",
    device_id: str = "DEVICE1",
    user_id: str = "@alice:example.com",
) -> HttpResponse:
    """Successful login/registration response."""
    return json_response(
        data={
            "access_token": access_token,
            "device_id": device_id,
            "user_id": user_id,
            "home_server": "example.com",
        }
    )


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def session() -> Session:
    return Session(
        access_token="stored-token",
        device_id="DEVICE1",
        user_id="@alice:example.com",
    )


@pytest.fixture
def client(transport: ScriptedTransport) -> Client:
    """Client without a session over the scripted transport."""
    return Client.custom(transport, HOMESERVER)


@pytest.fixture
def logged_in_client(transport: ScriptedTransport, session: Session) -> Client:
    """Client restored from a stored session over the scripted transport."""
    return Client.custom(transport, HOMESERVER, session)


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


def create_mock_response(
    status: int = 200,
    read_data: bytes | None = None,
    headers: dict[str, str] | None = None,
) -> AsyncMock:
    """Create a configured mock aiohttp response.

    Args:
        status: HTTP status code
        read_data: Data to return from read() call
        headers: Response headers

    Returns:
        Configured AsyncMock response
    """
    response = AsyncMock()
    response.status = status
    response.headers = headers or {}
    response.read.return_value = read_data if read_data is not None else b""

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response

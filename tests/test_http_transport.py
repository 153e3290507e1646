"""Test AiohttpTransport against a mocked aiohttp ClientSession."""

from __future__ import annotations

from unittest.mock import MagicMock

import aiohttp
import pytest

from matrix_client_core import (
    AiohttpTransport,
    HttpRequest,
    PreparedRequest,
    TransportConnectionError,
    TransportTimeout,
)

from .conftest import create_mock_response


def prepared(
    url: str = "https://example.com/_matrix/client/r0/sync?access_token=abc",
    method: str = "GET",
    body: bytes | None = None,
) -> PreparedRequest:
    headers = {"Content-Type": "application/json"} if body is not None else {}
    return PreparedRequest(
        url=url,
        request=HttpRequest(
            method=method,
            path="/_matrix/client/r0/sync",
            headers=headers,
            body=body,
        ),
    )


class TestAiohttpTransportSend:
    """Tests for AiohttpTransport.send()."""

    async def test_send_returns_response(self, mock_session: MagicMock) -> None:
        """Test status, headers and body are read from the response."""
        transport = AiohttpTransport(mock_session)
        mock_session.request.return_value = create_mock_response(
            status=200,
            read_data=b'{"next_batch": "t1"}',
            headers={"Content-Type": "application/json"},
        )

        response = await transport.send(prepared())

        assert response.status == 200
        assert response.body == b'{"next_batch": "t1"}'
        assert response.headers == {"Content-Type": "application/json"}
        assert response.json() == {"next_batch": "t1"}

    async def test_send_passes_request_through(self, mock_session: MagicMock) -> None:
        """Test method, URL, headers and body reach aiohttp unchanged."""
        transport = AiohttpTransport(mock_session, timeout=45)
        mock_session.request.return_value = create_mock_response(read_data=b"{}")

        await transport.send(
            prepared(
                url="https://example.com/_matrix/client/r0/login",
                method="POST",
                body=b'{"type": "m.login.password"}',
            )
        )

        mock_session.request.assert_called_once()
        call_args = mock_session.request.call_args
        assert call_args.args[0] == "POST"
        assert str(call_args.args[1]) == "https://example.com/_matrix/client/r0/login"
        assert call_args.kwargs["data"] == b'{"type": "m.login.password"}'
        assert call_args.kwargs["headers"] == {"Content-Type": "application/json"}
        assert call_args.kwargs["timeout"].total == 45

    async def test_send_keeps_encoded_query(self, mock_session: MagicMock) -> None:
        """Test the resolved URL is not re-encoded."""
        transport = AiohttpTransport(mock_session)
        mock_session.request.return_value = create_mock_response(read_data=b"{}")
        url = "https://example.com/_matrix/client/r0/sync?access_token=a%26b"

        await transport.send(prepared(url=url))

        assert str(mock_session.request.call_args.args[1]) == url

    async def test_non_2xx_is_returned_not_raised(
        self, mock_session: MagicMock
    ) -> None:
        """Test error statuses are left for the endpoint to decode."""
        transport = AiohttpTransport(mock_session)
        mock_session.request.return_value = create_mock_response(
            status=403, read_data=b'{"errcode": "M_FORBIDDEN"}'
        )

        response = await transport.send(prepared())

        assert response.status == 403
        assert response.ok is False

    async def test_timeout_raises_transport_timeout(
        self, mock_session: MagicMock
    ) -> None:
        """Test timeouts surface as TransportTimeout."""
        transport = AiohttpTransport(mock_session)
        mock_session.request.side_effect = TimeoutError("Request timed out")

        with pytest.raises(TransportTimeout, match="timed out") as excinfo:
            await transport.send(prepared())

        assert isinstance(excinfo.value.__cause__, TimeoutError)

    async def test_client_error_raises_connection_error(
        self, mock_session: MagicMock
    ) -> None:
        """Test aiohttp ClientError surfaces as TransportConnectionError."""
        transport = AiohttpTransport(mock_session)
        mock_session.request.side_effect = aiohttp.ClientError("Connection refused")

        with pytest.raises(TransportConnectionError, match="Connection refused"):
            await transport.send(prepared())

    async def test_plain_transport_refuses_https(
        self, mock_session: MagicMock
    ) -> None:
        """Test a transport without TLS never sends to an https URL."""
        transport = AiohttpTransport(mock_session, tls=False)

        with pytest.raises(TransportConnectionError, match="TLS"):
            await transport.send(prepared())

        mock_session.request.assert_not_called()

    async def test_verify_ssl_disabled(self, mock_session: MagicMock) -> None:
        """Test certificate verification can be turned off."""
        transport = AiohttpTransport(mock_session, verify_ssl=False)
        mock_session.request.return_value = create_mock_response(read_data=b"{}")

        await transport.send(prepared())

        assert mock_session.request.call_args.kwargs["ssl"] is False


class TestAiohttpTransportClose:
    """Tests for AiohttpTransport.close()."""

    async def test_close_leaves_caller_session_open(
        self, mock_session: MagicMock
    ) -> None:
        """Test sessions supplied by the caller are not closed."""
        transport = AiohttpTransport(mock_session)

        await transport.close()

        mock_session.close.assert_not_called()

    async def test_close_without_session(self) -> None:
        """Test closing a transport that never sent anything."""
        transport = AiohttpTransport()

        await transport.close()

"""HTTP transport for Matrix homeservers backed by aiohttp."""

from __future__ import annotations

import logging

import aiohttp
from yarl import URL

from ..endpoint import HttpResponse
from ..errors import TransportConnectionError, TransportTimeout
from .base import PreparedRequest

_LOGGER = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 60.0


class AiohttpTransport:
    """Transport wrapper around an ``aiohttp.ClientSession``.

    A session passed in by the caller is used as-is and left open on
    ``close()``; otherwise one is created lazily and owned by the transport.

    With ``tls=False`` the transport only speaks plain HTTP and refuses
    ``https`` URLs.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        tls: bool = True,
        verify_ssl: bool = True,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._tls = tls
        self._verify_ssl = verify_ssl
        self._timeout = timeout

    @property
    def tls(self) -> bool:
        return self._tls

    def _client_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def send(self, request: PreparedRequest) -> HttpResponse:
        """Send a prepared request and read the whole response body."""
        url = URL(request.url, encoded=True)
        if url.scheme == "https" and not self._tls:
            raise TransportConnectionError("TLS is not enabled on this transport")

        session = self._client_session()
        try:
            async with session.request(
                request.method,
                url,
                headers=dict(request.request.headers),
                data=request.request.body,
                ssl=self._verify_ssl,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                body = await resp.read()
                return HttpResponse(
                    status=resp.status,
                    headers=dict(resp.headers),
                    body=body,
                )
        except TimeoutError as err:
            raise TransportTimeout(
                f"{request.method} {url.path} timed out"
            ) from err
        except aiohttp.ClientError as err:
            raise TransportConnectionError(
                f"{request.method} {url.path} failed: {err}"
            ) from err

    async def close(self) -> None:
        """Close the owned client session, if any."""
        if self._owns_session and self._session is not None:
            _LOGGER.debug("Closing HTTP client session")
            await self._session.close()
            self._session = None

"""Transport protocol consumed by the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ..endpoint import HttpRequest, HttpResponse


@dataclass(frozen=True)
class PreparedRequest:
    """An ``HttpRequest`` bound to its fully resolved absolute URL."""

    url: str
    request: HttpRequest

    @property
    def method(self) -> str:
        return self.request.method


@runtime_checkable
class Transport(Protocol):
    """Executes prepared requests against the network."""

    async def send(self, request: PreparedRequest) -> HttpResponse:
        """Send the request and return the full response.

        Raises:
            TransportError: On connectivity, timeout or TLS failures.
        """
        ...

    async def close(self) -> None:
        """Release any network resources held by the transport."""
        ...

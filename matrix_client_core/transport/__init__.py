"""Transport layer for the Matrix client core.

This package contains all network IO. The dispatcher only relies on the
``Transport`` protocol, so any object with matching ``send``/``close``
coroutines can stand in for the bundled aiohttp implementation.

Components:
- base: Transport protocol and the prepared request it receives
- http: aiohttp-backed HTTP/HTTPS transport
"""

from .base import PreparedRequest, Transport
from .http import AiohttpTransport

__all__ = [
    "AiohttpTransport",
    "PreparedRequest",
    "Transport",
]

"""Matrix client-server API endpoints.

Each leaf module under ``r0`` holds the types for one endpoint: a
``Request`` and ``Response`` dataclass, the ``Endpoint`` implementation and
a ``call(client, request)`` coroutine dispatching it through a client.
"""

from . import r0

__all__ = ["r0"]

"""Continuous synchronization as an unbounded async stream of responses."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .api.r0.sync import sync_events

if TYPE_CHECKING:
    from .client import Client

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncSettings:
    """Options for a sync stream.

    Attributes:
        filter: Filter ID or inline filter definition applied to every poll.
        since: Cursor to start from. Without one the first response carries
            the full initial state of the account, which may be large and
            slow to arrive.
        set_presence: When False, every poll asks the server to treat the
            client as offline; when True the server default applies.
        full_state: Passed through unchanged; left unset by default.
        timeout: Long-poll timeout in milliseconds; left unset by default.
    """

    filter: sync_events.Filter | None = None
    since: str | None = None
    set_presence: bool = True
    full_state: bool | None = None
    timeout: int | None = None


class SyncStream:
    """Repeated sync calls, each resuming from the previous ``next_batch``.

    Usage:
        async for response in client.sync(set_presence=False):
            handle(response)

    The stream never ends by itself. It stops when the consumer stops
    iterating, or with the first dispatch error, after which it is
    exhausted. Only one request is in flight at a time: a stream has a
    single consumer, and calling ``__anext__`` while a previous call is still
    waiting raises ``RuntimeError``.
    """

    def __init__(self, client: Client, settings: SyncSettings) -> None:
        self._client = client
        self._settings = settings
        self._next_batch = settings.since
        self._iterator: AsyncGenerator[sync_events.Response, None] | None = None
        self._closed = False
        self._polling = False

    @property
    def next_batch(self) -> str | None:
        """Cursor the next poll will resume from."""
        return self._next_batch

    def _build_request(self) -> sync_events.Request:
        settings = self._settings
        return sync_events.Request(
            filter=settings.filter,
            since=self._next_batch,
            full_state=settings.full_state,
            set_presence=None if settings.set_presence else sync_events.SetPresence.OFFLINE,
            timeout=settings.timeout,
        )

    async def _poll(self) -> AsyncGenerator[sync_events.Response, None]:
        while True:
            request = self._build_request()
            _LOGGER.debug("Sync poll since=%s", request.since)
            try:
                response = await self._client.request(sync_events.SyncEvents, request)
            except Exception as err:
                _LOGGER.warning("Sync poll failed: %s", err)
                raise
            self._next_batch = response.next_batch
            yield response

    def __aiter__(self) -> AsyncIterator[sync_events.Response]:
        return self

    async def __anext__(self) -> sync_events.Response:
        if self._closed:
            raise StopAsyncIteration
        if self._polling:
            raise RuntimeError(
                "SyncStream is already waiting for a response; "
                "only one consumer may iterate it"
            )
        if self._iterator is None:
            self._iterator = self._poll()
        self._polling = True
        try:
            return await self._iterator.__anext__()
        finally:
            self._polling = False

    async def aclose(self) -> None:
        """Stop the stream; no further requests are issued."""
        self._closed = True
        if self._iterator is not None:
            await self._iterator.aclose()

"""Client handle for the Matrix client-server API.

All endpoint calls flow through a ``Client``. Clones made with ``clone()``
share the homeserver URL, the transport and the session store, so logging
in through one clone is immediately visible through every other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from yarl import URL

from .api.r0.account import register
from .api.r0.session import login
from .dispatch import dispatch
from .errors import UrlConstructionError
from .session import Session, SessionStore
from .sync import SyncSettings, SyncStream
from .transport.http import DEFAULT_REQUEST_TIMEOUT, AiohttpTransport

if TYPE_CHECKING:
    from types import TracebackType

    from .api.r0.sync.sync_events import Filter
    from .config import ClientConfig
    from .endpoint import Endpoint
    from .transport.base import Transport

_LOGGER = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


@dataclass(eq=False)
class _ClientData:
    """State shared by every clone of a client."""

    homeserver_url: URL
    transport: Transport
    store: SessionStore
    owns_transport: bool
    sync_timeout_ms: int | None = None


def _parse_homeserver_url(homeserver_url: str | URL) -> URL:
    try:
        url = URL(homeserver_url)
        valid = url.scheme in ("http", "https") and bool(url.host)
    except (ValueError, TypeError) as err:
        raise UrlConstructionError(
            f"Invalid homeserver URL: {homeserver_url}"
        ) from err
    if not valid:
        raise UrlConstructionError(f"Invalid homeserver URL: {homeserver_url}")
    return url


class Client:
    """A client for the Matrix client-server API.

    Usage:
        async with Client.https("https://example.com") as client:
            session = await client.log_in("@alice:example.com", "secret")
            async for response in client.sync(set_presence=False):
                ...

    Pass a previously saved ``Session`` to any constructor to restore it
    instead of logging in again.
    """

    def __init__(
        self,
        homeserver_url: str | URL,
        transport: Transport,
        session: Session | None = None,
        *,
        owns_transport: bool = False,
        sync_timeout_ms: int | None = None,
    ) -> None:
        self._data = _ClientData(
            homeserver_url=_parse_homeserver_url(homeserver_url),
            transport=transport,
            store=SessionStore(session),
            owns_transport=owns_transport,
            sync_timeout_ms=sync_timeout_ms,
        )

    @classmethod
    def http(
        cls,
        homeserver_url: str | URL,
        session: Session | None = None,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> Client:
        """Create a client speaking plain HTTP to the homeserver."""
        return cls(
            homeserver_url,
            AiohttpTransport(tls=False, timeout=timeout),
            session,
            owns_transport=True,
        )

    @classmethod
    def https(
        cls,
        homeserver_url: str | URL,
        session: Session | None = None,
        *,
        verify_ssl: bool = True,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> Client:
        """Create a client able to make HTTPS requests to the homeserver."""
        return cls(
            homeserver_url,
            AiohttpTransport(tls=True, verify_ssl=verify_ssl, timeout=timeout),
            session,
            owns_transport=True,
        )

    @classmethod
    def custom(
        cls,
        transport: Transport,
        homeserver_url: str | URL,
        session: Session | None = None,
        *,
        owns_transport: bool = False,
    ) -> Client:
        """Create a client over a caller-configured transport.

        The transport is left open by ``close()`` unless ``owns_transport``.
        """
        return cls(homeserver_url, transport, session, owns_transport=owns_transport)

    @classmethod
    def from_config(
        cls, config: ClientConfig, session: Session | None = None
    ) -> Client:
        """Create a client from a loaded ``ClientConfig``."""
        transport = AiohttpTransport(
            tls=config.uses_tls,
            verify_ssl=config.verify_ssl,
            timeout=config.request_timeout,
        )
        return cls(
            config.homeserver_url,
            transport,
            session,
            owns_transport=True,
            sync_timeout_ms=config.sync_timeout_ms,
        )

    def clone(self) -> Client:
        """Return another handle onto the same shared client state."""
        clone = object.__new__(type(self))
        clone._data = self._data
        return clone

    __copy__ = clone

    @property
    def homeserver_url(self) -> URL:
        return self._data.homeserver_url

    @property
    def transport(self) -> Transport:
        return self._data.transport

    @property
    def session_store(self) -> SessionStore:
        return self._data.store

    @property
    def session(self) -> Session | None:
        """The current session, if any.

        Useful for persisting the session to restore it later.
        """
        return self._data.store.get()

    def clear_session(self) -> None:
        """Forget the current session without contacting the server."""
        self._data.store.clear()

    async def request(
        self,
        endpoint: type[Endpoint[RequestT, ResponseT]],
        request: RequestT,
    ) -> ResponseT:
        """Make a request to a Matrix API endpoint."""
        return await dispatch(self, endpoint, request)

    def _store_session(
        self, response: login.Response | register.Response
    ) -> Session:
        session = Session(
            access_token=response.access_token,
            device_id=response.device_id,
            user_id=response.user_id,
        )
        self._data.store.set(session)
        return session

    async def log_in(
        self,
        user: str,
        password: str,
        device_id: str | None = None,
    ) -> Session:
        """Log in with a username and password.

        In contrast to ``api.r0.session.login.call``, the returned session is
        also stored in this client.
        """
        response = await self.request(
            login.Login,
            login.Request(
                user=user,
                password=password,
                login_type=login.LoginType.PASSWORD,
                device_id=device_id,
            ),
        )
        return self._store_session(response)

    async def register_guest(self) -> Session:
        """Register as a guest and store the resulting session."""
        response = await self.request(
            register.Register,
            register.Request(kind=register.RegistrationKind.GUEST),
        )
        return self._store_session(response)

    async def register_user(
        self, username: str | None, password: str
    ) -> Session:
        """Register a new user on this server and store the resulting session.

        The username is the localpart of the returned user ID; if omitted the
        server generates one.
        """
        response = await self.request(
            register.Register,
            register.Request(
                kind=register.RegistrationKind.USER,
                username=username,
                password=password,
            ),
        )
        return self._store_session(response)

    def sync(
        self,
        filter: Filter | None = None,
        since: str | None = None,
        set_presence: bool | None = None,
        *,
        settings: SyncSettings | None = None,
    ) -> SyncStream:
        """Represent repeated calls to the sync endpoint as an async stream.

        Without ``since`` the first response may take a significant time to
        arrive, as it contains all events visible to the user over the whole
        lifetime of the account. Presence is reported unless ``set_presence``
        is False.

        Raises:
            TypeError: If ``settings`` is combined with any of the individual
                options.
        """
        if settings is not None:
            if filter is not None or since is not None or set_presence is not None:
                raise TypeError("Pass either sync options or settings, not both")
        else:
            settings = SyncSettings(
                filter=filter,
                since=since,
                set_presence=True if set_presence is None else set_presence,
                timeout=self._data.sync_timeout_ms,
            )
        return SyncStream(self, settings)

    async def close(self) -> None:
        """Close the transport if this client owns it."""
        if self._data.owns_transport:
            await self._data.transport.close()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"Client(homeserver_url={str(self._data.homeserver_url)!r})"

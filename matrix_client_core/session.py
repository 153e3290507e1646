"""Authenticated session value and the shared store holding it."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

_LOGGER = logging.getLogger(__name__)

_SESSION_FIELDS: tuple[str, ...] = ("access_token", "device_id", "user_id")


@dataclass(frozen=True)
class Session:
    """Credential and identity returned by login or registration.

    Attributes:
        access_token: Opaque credential sent with authenticated requests.
        device_id: Device identifier, assigned by the server if not requested.
        user_id: Fully-qualified Matrix user ID (e.g. "@alice:example.com").
    """

    access_token: str
    device_id: str
    user_id: str

    def to_dict(self) -> dict[str, str]:
        """Return the persistable shape of this session."""
        return {
            "access_token": self.access_token,
            "device_id": self.device_id,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        """Restore a session previously produced by ``to_dict``.

        Raises:
            ValueError: If a field is missing or is not a string.
        """
        values: dict[str, str] = {}
        for name in _SESSION_FIELDS:
            value = data.get(name)
            if not isinstance(value, str):
                raise ValueError(f"Session field '{name}' must be a string")
            values[name] = value
        return cls(**values)

    def __repr__(self) -> str:
        return f"Session(user_id={self.user_id!r}, device_id={self.device_id!r})"


class SessionStore:
    """Single mutable slot holding the current session.

    Every read and write is one short critical section under a lock that is
    never held across an ``await``, so any number of tasks (or threads)
    sharing a client may use it.
    """

    def __init__(self, session: Session | None = None) -> None:
        self._lock = threading.Lock()
        self._session = session

    def get(self) -> Session | None:
        """Return the current session, if any."""
        with self._lock:
            return self._session

    def set(self, session: Session) -> None:
        """Replace the current session."""
        with self._lock:
            self._session = session
        _LOGGER.info("Session set for %s", session.user_id)

    def clear(self) -> None:
        """Drop the current session."""
        with self._lock:
            self._session = None
        _LOGGER.info("Session cleared")

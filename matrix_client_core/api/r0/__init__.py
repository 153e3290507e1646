"""Endpoints of the r0 client-server API."""

from . import account, alias, session, sync

__all__ = ["account", "alias", "session", "sync"]

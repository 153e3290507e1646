"""Session management endpoints."""

from . import login, logout

__all__ = ["login", "logout"]

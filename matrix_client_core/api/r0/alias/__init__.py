"""Room alias directory endpoints."""

from . import get_alias

__all__ = ["get_alias"]

"""Account registration endpoints."""

from . import register

__all__ = ["register"]

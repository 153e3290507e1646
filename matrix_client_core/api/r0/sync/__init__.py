"""Event synchronization endpoints."""

from . import sync_events

__all__ = ["sync_events"]

"""Event definitions for the bootstrap framework.

This module provides the event values published on the event bus during the
application lifecycle.
"""

from app_bootstrap.events.types import Event, EventType

__all__ = [
    "Event",
    "EventType",
]

"""Event type definitions for the bootstrap framework.

Events are immutable values created at the moment of publication and
discarded once every subscriber has processed them.
"""

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class EventType(StrEnum):
    """Kinds of application lifecycle events."""

    APPLICATION_READY = "APPLICATION_READY"
    APPLICATION_SHUTDOWN = "APPLICATION_SHUTDOWN"


class Event(BaseModel):
    """Event published on the bus.

    Carries the kind of event and a free-form descriptive payload.
    """

    model_config = ConfigDict(frozen=True)

    kind: EventType
    payload: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

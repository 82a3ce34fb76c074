"""Core Event Bus Components.

This module contains the fundamental abstractions for the event bus system.

## Key Components

- **Observer**: Base class for class-based subscribers
- **EventBusError**: Base exception for all event bus related errors
- **HandlerRegistrationError**: Raised when subscriber registration fails
- **EventEmissionError**: Raised when an invalid event is published
- **EventDeliveryError**: Raised after a publish pass in which subscribers failed

## Usage Example

```python
from app_bootstrap.event_bus.core import Observer
from app_bootstrap.events.types import Event, EventType


class ReadyLogger(Observer):
    def update(self, event: Event) -> None:
        if event.kind is EventType.APPLICATION_READY:
            logger.info(event.payload)


bus.subscribe(ReadyLogger())
```

"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app_bootstrap.events.types import Event

Subscriber = Callable[["Event"], Any]


class Observer(ABC):
    """Base class for class-based subscribers.

    Any callable accepting a single event can be subscribed; this class gives
    subscribers with state a named ``update`` method. Identity is by
    reference, so the same instance subscribed twice is notified twice.
    """

    @abstractmethod
    def update(self, event: "Event") -> Any:
        """React to a published event.

        Args:
            event: The published event. Subscribers receive every event and
                decide themselves which kinds they care about.

        Returns:
            Optional result, collected by the bus in subscription order.
        """

    def __call__(self, event: "Event") -> Any:
        """Make the observer callable so the bus can treat it like a function."""
        return self.update(event)


class EventBusError(Exception):
    """Base exception for all event bus related errors."""


class HandlerRegistrationError(EventBusError):
    """Raised when a subscriber cannot be registered (e.g. it is not callable)."""


class EventEmissionError(EventBusError):
    """Raised when the object passed to ``publish`` is not an ``Event``."""


class EventDeliveryError(EventBusError):
    """Raised after a publish pass in which one or more subscribers failed.

    Every subscriber was still notified; ``failures`` lists each failing
    subscriber with its exception, in subscription order. The first exception
    is chained as ``__cause__``.
    """

    def __init__(self, event: "Event", failures: list[tuple[Subscriber, BaseException]]):
        self.event = event
        self.failures = failures
        summary = "; ".join(f"{subscriber!r}: {error}" for subscriber, error in failures)
        super().__init__(f"{len(failures)} subscriber(s) failed handling {event.kind}: {summary}")

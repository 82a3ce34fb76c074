"""Event Bus Implementation.

This module provides the EventBus class that handles subscriber registration
and synchronous event delivery.

## Delivery Model

- **Synchronous fan-out**: ``publish`` runs every subscriber on the calling
  thread, in subscription order, and returns once all have finished
- **Copy-on-write subscribers**: ``subscribe``/``unsubscribe`` replace the
  subscriber list under a lock, so a publish pass iterating the previous list
  is never disturbed by concurrent mutation from another thread
- **Error isolation**: a failing subscriber never prevents delivery to the
  remaining ones; failures are reported after the pass
- **Explicit lifecycle**: the bus is created by the application, passed to
  the components that need it, and shut down with the application

## Usage

```python
bus = EventBus()
bus.subscribe(schema_initializer)
bus.publish(Event(kind=EventType.APPLICATION_READY, payload="Application is ready"))
```

"""

import threading
from typing import Any

from loguru import logger

from app_bootstrap.events.types import Event

from .core import EventDeliveryError, EventEmissionError, HandlerRegistrationError, Subscriber


class EventBus:
    """In-process publish/subscribe bus with synchronous delivery.

    Example:
        ```python
        bus = EventBus()
        bus.subscribe(lambda event: print(event.payload))
        bus.publish(Event(kind=EventType.APPLICATION_READY, payload="ready"))
        ```
    """

    def __init__(self, raise_errors: bool = True) -> None:
        """Initialize a new EventBus instance.

        Args:
            raise_errors: If True, ``publish`` raises ``EventDeliveryError``
                after a pass in which any subscriber failed. If False, the
                exceptions are returned in the results list instead.
                Can be overridden per ``publish`` call. Default is True.
        """
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()
        self._raise_errors = raise_errors
        logger.debug(f"EventBus initialized (raise_errors={raise_errors})")

    def subscribe(self, observer: Subscriber) -> None:
        """Append a subscriber.

        Subscribing the same object twice is allowed; it is then notified
        twice per event.

        Raises:
            HandlerRegistrationError: If observer is not callable
        """
        if not callable(observer):
            raise HandlerRegistrationError(f"Subscriber must be callable: {observer!r}")

        with self._lock:
            self._subscribers = [*self._subscribers, observer]
        logger.debug(f"Subscribed {observer!r}")

    def unsubscribe(self, observer: Subscriber) -> bool:
        """Remove the first subscription of ``observer``, matched by identity.

        Returns:
            True if a subscription was removed, False if observer was not subscribed
        """
        with self._lock:
            for index, subscriber in enumerate(self._subscribers):
                if subscriber is observer:
                    self._subscribers = self._subscribers[:index] + self._subscribers[index + 1 :]
                    break
            else:
                return False
        logger.debug(f"Unsubscribed {observer!r}")
        return True

    @property
    def subscribers(self) -> tuple[Subscriber, ...]:
        """Snapshot of the current subscribers in subscription order."""
        return tuple(self._subscribers)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def clear_subscribers(self) -> None:
        """Remove all subscribers."""
        with self._lock:
            self._subscribers = []
        logger.debug("Cleared all subscribers")

    def publish(self, event: Event, raise_errors: bool | None = None) -> list[Any]:
        """Deliver an event to every subscriber and wait for all of them.

        Subscribers run one after another in subscription order. The pass uses
        the subscriber list as it was when ``publish`` started; subscriptions
        added or removed meanwhile take effect from the next publish.

        Args:
            event: The event to deliver
            raise_errors: Overrides the bus-level setting for this call

        Returns:
            Results from all subscribers in subscription order. When errors
            are not raised, a failed subscriber's slot holds its exception.

        Raises:
            EventEmissionError: If event is not an ``Event`` instance
            EventDeliveryError: If any subscriber failed and errors are raised
        """
        if not isinstance(event, Event):
            raise EventEmissionError(f"Event must be an Event instance, got: {type(event).__name__}")

        subscribers = self._subscribers
        if not subscribers:
            logger.debug(f"No subscribers for {event.kind}")
            return []

        logger.debug(f"Publishing {event.kind} to {len(subscribers)} subscribers")

        results: list[Any] = []
        failures: list[tuple[Subscriber, BaseException]] = []
        for i, subscriber in enumerate(subscribers):
            logger.trace(f"Notifying subscriber {i + 1}/{len(subscribers)}: {subscriber!r}")
            try:
                results.append(subscriber(event))
            except Exception as e:  # noqa: BLE001
                logger.error(f"Subscriber {subscriber!r} failed handling {event.kind}: {e}")
                results.append(e)
                failures.append((subscriber, e))

        if failures:
            logger.warning(f"Event {event.kind}: {len(results) - len(failures)} successful, {len(failures)} failed subscribers")
        else:
            logger.debug(f"Event {event.kind} processed by {len(results)} subscribers")

        should_raise = raise_errors if raise_errors is not None else self._raise_errors
        if failures and should_raise:
            raise EventDeliveryError(event, failures) from failures[0][1]

        return results

    def shutdown(self) -> None:
        """Shut the bus down, dropping every subscription.

        Later publishes are accepted but reach no subscriber.
        """
        self.clear_subscribers()
        logger.debug("EventBus shutdown complete")

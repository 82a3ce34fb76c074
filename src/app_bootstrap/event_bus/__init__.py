"""Event Bus System for Startup Coordination.

This package provides the in-process event bus that lets components react to
application lifecycle events without knowing about each other. It supports:

- **Pydantic Events**: Immutable ``Event`` values with a kind and a payload
- **Synchronous Delivery**: Subscribers run in order on the publishing thread
- **Thread-Safe Subscription**: Copy-on-write subscriber list
- **Error Isolation**: A failing subscriber doesn't stop delivery to the others

## Quick Start

```python
from app_bootstrap.event_bus import EventBus
from app_bootstrap.events.types import Event, EventType

bus = EventBus()
bus.subscribe(lambda event: print(f"got {event.kind}"))
bus.publish(Event(kind=EventType.APPLICATION_READY, payload="Application is Ready"))
```

For class-based subscribers, see `core.py`.

"""

from .bus import EventBus
from .core import EventDeliveryError, Observer

__all__ = [
    "EventBus",
    "EventDeliveryError",
    "Observer",
]

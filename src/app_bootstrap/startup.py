"""Startup registration of event subscribers.

Known subscribers are listed explicitly as factories and registered, in
order, before the first event is published. A factory that fails aborts
startup.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from loguru import logger

from app_bootstrap.database.connection import ConnectionPool
from app_bootstrap.database.schema_initializer import SchemaInitializer
from app_bootstrap.event_bus import EventBus
from app_bootstrap.event_bus.core import Subscriber
from app_bootstrap.exceptions import StartupError
from app_bootstrap.settings import Settings


@dataclass(frozen=True)
class ApplicationContext:
    """Shared components handed to subscriber factories."""

    settings: Settings
    pool: ConnectionPool
    bus: EventBus


SubscriberFactory = Callable[[ApplicationContext], Subscriber]


def create_schema_initializer(context: ApplicationContext) -> SchemaInitializer:
    return SchemaInitializer(context.settings, context.pool)


def default_subscriber_factories() -> tuple[SubscriberFactory, ...]:
    """Return the subscribers every application registers, in registration order."""
    return (create_schema_initializer,)


class StartupRegistrar:
    """Registers the startup subscribers on the bus exactly once."""

    def __init__(self, bus: EventBus, factories: Sequence[SubscriberFactory] | None = None):
        """Initialize the registrar.

        Args:
            bus: Bus to subscribe on
            factories: Subscriber factories; defaults to ``default_subscriber_factories()``
        """
        self._bus = bus
        self._factories = tuple(factories) if factories is not None else default_subscriber_factories()
        self._registered: list[Subscriber] | None = None

    @property
    def is_registered(self) -> bool:
        return self._registered is not None

    @property
    def registered(self) -> tuple[Subscriber, ...]:
        """Subscribers registered by this registrar."""
        return tuple(self._registered or ())

    def register_all(self, context: ApplicationContext) -> tuple[Subscriber, ...]:
        """Create and subscribe every startup subscriber.

        Calling this again is a no-op.

        Returns:
            The subscribers registered, in order

        Raises:
            StartupError: If a factory fails or returns something unsubscribable
        """
        if self._registered is not None:
            logger.debug("Startup subscribers already registered")
            return self.registered

        logger.debug(f"Registering {len(self._factories)} startup subscribers")
        registered: list[Subscriber] = []
        for factory in self._factories:
            name = getattr(factory, "__name__", repr(factory))
            try:
                subscriber = factory(context)
                self._bus.subscribe(subscriber)
            except Exception as e:
                raise StartupError(f"Failed to register startup subscriber {name}: {e}") from e
            registered.append(subscriber)
            logger.debug(f"Registered startup subscriber {name}")

        self._registered = registered
        logger.info("Startup subscribers registered successfully")
        return self.registered

"""Application lifecycle: wiring, startup and shutdown.

``Application`` owns the event bus and the connection pool for the lifetime
of the process. Startup registers the known subscribers and publishes
APPLICATION_READY; shutdown, run from a single ``atexit`` hook, publishes
APPLICATION_SHUTDOWN and then drains the pool.
"""

import atexit
import threading
from collections.abc import Sequence
from typing import Any

from loguru import logger

from app_bootstrap.database.connection import ConnectionPool
from app_bootstrap.event_bus import EventBus
from app_bootstrap.events.types import Event, EventType
from app_bootstrap.exceptions import StartupError
from app_bootstrap.settings import Settings
from app_bootstrap.startup import ApplicationContext, StartupRegistrar, SubscriberFactory

READY_PAYLOAD = "Application is Ready"
SHUTDOWN_PAYLOAD = "Application is shutting down"


class Application:
    """The bootstrapped application."""

    def __init__(
        self,
        settings: Settings,
        bus: EventBus | None = None,
        pool: ConnectionPool | None = None,
        factories: Sequence[SubscriberFactory] | None = None,
    ):
        """Wire the application components.

        Args:
            settings: Settings snapshot shared by every component
            bus: Event bus; a new one is created if omitted
            pool: Connection pool; a new one is created if omitted
            factories: Startup subscriber factories; defaults to the known subscribers
        """
        self.settings = settings
        self.bus = bus if bus is not None else EventBus()
        self.pool = pool if pool is not None else ConnectionPool(settings)
        self.context = ApplicationContext(settings=settings, pool=self.pool, bus=self.bus)
        self.registrar = StartupRegistrar(self.bus, factories)
        self._started = False
        self._shut_down = False
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._started and not self._shut_down

    def start(self, install_shutdown_hook: bool = True) -> list[Any]:
        """Start the application.

        Installs the shutdown hook, registers the startup subscribers and
        publishes APPLICATION_READY.

        Returns:
            Subscriber results for the ready event

        Raises:
            StartupError: If the application was already started or a
                subscriber cannot be registered
            EventDeliveryError: If a subscriber failed handling the ready event
        """
        with self._lock:
            if self._started:
                raise StartupError("Application already started")
            self._started = True

        if install_shutdown_hook:
            atexit.register(self.shutdown)
            logger.debug("Shutdown hook installed")

        self.registrar.register_all(self.context)

        logger.info("Publishing application ready event")
        return self.bus.publish(Event(kind=EventType.APPLICATION_READY, payload=READY_PAYLOAD))

    def shutdown(self) -> None:
        """Shut the application down.

        Subscriber failures on the shutdown event are logged and never keep
        the pool from being drained. Only the first call has any effect.
        """
        with self._lock:
            if self._shut_down:
                return
            self._shut_down = True

        logger.info("Closing connection pool and data sources")
        try:
            self.bus.publish(Event(kind=EventType.APPLICATION_SHUTDOWN, payload=SHUTDOWN_PAYLOAD), raise_errors=False)
        finally:
            self.pool.shutdown()
            self.bus.shutdown()
            atexit.unregister(self.shutdown)
        logger.info("Application shut down")

    def __enter__(self) -> "Application":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

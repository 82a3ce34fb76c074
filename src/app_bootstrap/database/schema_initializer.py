"""Event-driven schema bootstrap.

``SchemaInitializer`` subscribes to the event bus and, on the first
APPLICATION_READY event, runs the schema script against a pooled connection
when ``database_init_schema`` is enabled.

States::

    IDLE -> CHECK_FLAG -> SKIPPED
                       -> EXECUTING -> DONE
                                    -> FAILED
"""

import threading
from enum import StrEnum

import arrow
from loguru import logger
from pydantic import BaseModel, Field

from app_bootstrap.constants import DATABASE_INIT_SCHEMA
from app_bootstrap.database.connection import ConnectionPool
from app_bootstrap.database.script import execute_statements, split_statements
from app_bootstrap.event_bus.core import Observer
from app_bootstrap.events.types import Event, EventType
from app_bootstrap.exceptions import ResourceNotFoundError, SchemaReadError
from app_bootstrap.settings import Settings
from app_bootstrap.utils.resources import locate_resource


class SchemaInitState(StrEnum):
    """Lifecycle of the schema initializer."""

    IDLE = "idle"
    CHECK_FLAG = "check_flag"
    SKIPPED = "skipped"
    EXECUTING = "executing"
    DONE = "done"
    FAILED = "failed"


class SchemaInitResult(BaseModel):
    """Outcome of a schema initialization run."""

    model_config = {"use_enum_values": True}

    state: SchemaInitState
    message: str
    script: str | None = None
    statements_executed: int = 0
    executed_at: str = Field(default_factory=lambda: arrow.utcnow().isoformat())  # ISO 8601 UTC timestamp
    execution_time_ms: float | None = None


class SchemaInitializer(Observer):
    """Subscriber running the schema script once the application is ready.

    Only the first APPLICATION_READY event triggers a run; every other event
    is ignored.
    """

    def __init__(self, settings: Settings, pool: ConnectionPool):
        """Initialize the schema initializer.

        Args:
            settings: Settings snapshot providing the init flag and script location
            pool: Connection pool to borrow the bootstrap connection from
        """
        self._settings = settings
        self._pool = pool
        self._state = SchemaInitState.IDLE
        self._lock = threading.Lock()

    @property
    def state(self) -> SchemaInitState:
        return self._state

    def update(self, event: Event) -> SchemaInitResult | None:
        """Handle a published event.

        Returns:
            The run's result for the first ready event, otherwise None

        Raises:
            SchemaExecutionError: If a statement fails
            SchemaReadError: If the script cannot be read and the policy is ``fail``
            ConnectionUnavailableError: If no connection can be borrowed
        """
        if event.kind is not EventType.APPLICATION_READY:
            return None

        with self._lock:
            if self._state is not SchemaInitState.IDLE:
                logger.debug(f"Schema initialization already handled (state={self._state}), ignoring event")
                return None
            self._state = SchemaInitState.CHECK_FLAG

        try:
            return self._initialize()
        except Exception:
            self._state = SchemaInitState.FAILED
            raise

    def _initialize(self) -> SchemaInitResult:
        if not self._settings.database_init_schema:
            logger.info(f"Schema initialization disabled ({DATABASE_INIT_SCHEMA} is off), skipping")
            return self._skip("Schema initialization disabled")

        location = self._settings.database_schema_script
        script = self._read_script(location)
        if script is None:
            return self._skip(f"Schema script unavailable: {location}", location)

        self._state = SchemaInitState.EXECUTING
        logger.info(f"Initializing database schema from {location}")
        start_time = arrow.utcnow().float_timestamp

        with self._pool.borrow_connection() as connection:
            executed = execute_statements(connection, split_statements(script.splitlines()))

        self._state = SchemaInitState.DONE
        logger.info(f"Database schema initialized: {executed} statements executed")
        return SchemaInitResult(
            state=SchemaInitState.DONE,
            message="Database schema initialized",
            script=location,
            statements_executed=executed,
            execution_time_ms=(arrow.utcnow().float_timestamp - start_time) * 1000,
        )

    def _read_script(self, location: str) -> str | None:
        """Read the schema script.

        A missing script is never fatal. Read failures follow the
        ``database_schema_read_errors`` setting.
        """
        try:
            return locate_resource(location, "Schema script").read_text(encoding="utf-8")
        except ResourceNotFoundError as e:
            logger.warning(f"Could not read db schemas: {e}")
            return None
        except (OSError, UnicodeDecodeError) as e:
            if self._settings.database_schema_read_errors == "fail":
                raise SchemaReadError(f"Unable to read schema script {location}: {e}") from e
            logger.warning(f"Unable to read schema script {location}, skipping: {e}")
            return None

    def _skip(self, message: str, script: str | None = None) -> SchemaInitResult:
        self._state = SchemaInitState.SKIPPED
        return SchemaInitResult(state=SchemaInitState.SKIPPED, message=message, script=script)

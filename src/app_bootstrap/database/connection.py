"""Pooled database connections.

The SQLAlchemy engine (and with it the connection pool) is created lazily, on
the first request for a connection, from the settings snapshot handed to the
``ConnectionPool``. It is configured exactly once and never re-read. After
``shutdown`` the pool refuses new connections instead of silently recreating
the engine.
"""

import threading
from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Connection, Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, OperationalError, SQLAlchemyError
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential

from app_bootstrap.constants import DATABASE_URL
from app_bootstrap.exceptions import ConfigurationError, ConnectionUnavailableError
from app_bootstrap.settings import Settings


class ConnectionPool:
    """Owner of the single pooled connection source.

    Connections handed out by ``get_connection`` must be closed by the
    caller; prefer ``borrow_connection`` which does that on every exit path.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._engine: Engine | None = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        """Whether the engine has been created."""
        return self._engine is not None

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _build_engine(self) -> Engine:
        """Create and return a new engine from the settings snapshot.

        Raises:
            ConfigurationError: if the database URL is missing or malformed.
        """
        settings = self._settings
        if not settings.database_url:
            raise ConfigurationError(f"Database URL missing: set {DATABASE_URL} or APP_DATABASE_URL")

        try:
            url = make_url(settings.database_url)
        except ArgumentError as e:
            raise ConfigurationError(f"Invalid database URL: {e}") from e

        if settings.database_username:
            url = url.set(username=settings.database_username)
        if settings.database_password:
            url = url.set(password=settings.database_password)

        engine = create_engine(
            url,
            pool_pre_ping=True,
            pool_size=settings.database_pool_size,
            max_overflow=0,
            pool_timeout=settings.database_pool_timeout,
            echo=settings.sql_log,
        )
        logger.info(f"Connection pool configured for {url.render_as_string(hide_password=True)} (size={settings.database_pool_size})")
        logger.info(f"SQL echo is {'enabled' if settings.sql_log else 'disabled'}")
        return engine

    def get_engine(self) -> Engine:
        """Return the engine, creating it on first use.

        Raises:
            ConnectionUnavailableError: If the pool has been shut down or the
                engine cannot be configured.
        """
        with self._lock:
            if self._closed:
                raise ConnectionUnavailableError("Connection pool has been shut down")
            if self._engine is None:
                try:
                    self._engine = self._build_engine()
                except ConfigurationError as e:
                    raise ConnectionUnavailableError(str(e)) from e
            return self._engine

    def get_connection(self) -> Connection:
        """Return a pooled connection.

        Unreachable-database errors are retried with exponential backoff up to
        ``database_connect_attempts`` times. Pool exhaustion is not retried;
        the pool already waited ``database_pool_timeout`` seconds.

        Raises:
            ConnectionUnavailableError: If the pool is shut down, exhausted,
                or the database cannot be reached.
        """
        engine = self.get_engine()
        retrying = Retrying(
            stop=stop_after_attempt(self._settings.database_connect_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(OperationalError),
            reraise=True,
            before_sleep=before_sleep_log(logger, "DEBUG"),
        )
        try:
            connection = retrying(engine.connect)
        except SQLAlchemyError as e:
            logger.error(f"Failed to acquire database connection: {e}")
            raise ConnectionUnavailableError(f"Unable to acquire database connection: {e}") from e

        logger.trace(f"Database connection {id(connection)} acquired")
        return connection

    @contextmanager
    def borrow_connection(self) -> Generator[Connection, None, None]:
        """Context manager lending a pooled connection.

        The connection is returned to the pool on every exit path, including
        exceptions raised inside the block.

        Example:
            with pool.borrow_connection() as connection:
                connection.exec_driver_sql("SELECT 1")
        """
        connection = self.get_connection()
        connection_id = id(connection)

        try:
            yield connection
        except Exception as e:  # noqa: BLE001
            logger.error(f"Error during database connection {connection_id}: {e}")
            raise
        finally:
            connection.close()
            logger.trace(f"Database connection {connection_id} released")

    def shutdown(self) -> None:
        """Drain and close the pool.

        Safe to call more than once; only the first call does anything.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            engine, self._engine = self._engine, None

        if engine is not None:
            logger.info("Closing database connection pool")
            engine.dispose()
        logger.debug("Connection pool shut down")

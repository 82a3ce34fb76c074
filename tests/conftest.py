"""Shared fixtures for the test suite."""

from pathlib import Path

import pytest

from app_bootstrap.database.connection import ConnectionPool
from app_bootstrap.properties import get_application_properties
from app_bootstrap.settings import Settings


@pytest.fixture(autouse=True)
def isolated_properties(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the properties source at a file that doesn't exist.

    Keeps the bundled application.properties (and any developer .env values)
    out of the settings built by tests. Tests that need properties write
    their own file and set ``APP_PROPERTIES_FILE`` again.
    """
    monkeypatch.setenv("APP_PROPERTIES_FILE", str(tmp_path / "missing.properties"))
    monkeypatch.chdir(tmp_path)
    get_application_properties.cache_clear()
    yield
    get_application_properties.cache_clear()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
def settings(database_url: str) -> Settings:
    return Settings(database_url=database_url, database_init_schema=True, database_connect_attempts=1)


@pytest.fixture
def pool(settings: Settings):
    connection_pool = ConnectionPool(settings)
    yield connection_pool
    connection_pool.shutdown()


@pytest.fixture
def table_names():
    """Return a helper listing the tables present in a pool's SQLite database."""

    def _table_names(connection_pool: ConnectionPool) -> set[str]:
        with connection_pool.borrow_connection() as connection:
            rows = connection.exec_driver_sql("SELECT name FROM sqlite_master WHERE type = 'table'").all()
        return {row[0] for row in rows}

    return _table_names

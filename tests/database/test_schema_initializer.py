"""Tests for the event-driven schema initializer."""

from pathlib import Path

import pytest

from app_bootstrap.database.connection import ConnectionPool
from app_bootstrap.database.schema_initializer import SchemaInitializer, SchemaInitState
from app_bootstrap.event_bus import EventBus, EventDeliveryError
from app_bootstrap.events.types import Event, EventType
from app_bootstrap.exceptions import SchemaExecutionError, SchemaReadError
from app_bootstrap.settings import Settings

TWO_STATEMENTS = "CREATE TABLE t(id int);\n-- comment\nINSERT INTO t VALUES (1);\n"

READY = Event(kind=EventType.APPLICATION_READY, payload="Application is Ready")


def write_script(tmp_path: Path, text: str, name: str = "schema.sql") -> str:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def make_initializer(settings: Settings, **overrides) -> tuple[SchemaInitializer, ConnectionPool]:
    settings = settings.model_copy(update=overrides)
    pool = ConnectionPool(settings)
    return SchemaInitializer(settings, pool), pool


class TestSchemaInitializer:
    """Test cases for SchemaInitializer."""

    def test_disabled_runs_nothing(self, settings: Settings):
        """Test that a disabled flag executes no SQL and borrows no connection."""
        initializer, pool = make_initializer(settings, database_init_schema=False)

        result = initializer.update(READY)

        assert result.state == SchemaInitState.SKIPPED
        assert result.statements_executed == 0
        assert initializer.state is SchemaInitState.SKIPPED
        assert pool.is_initialized is False

    def test_executes_script(self, settings: Settings, tmp_path: Path):
        """Test a two-statement script runs both statements in order."""
        initializer, pool = make_initializer(settings, database_schema_script=write_script(tmp_path, TWO_STATEMENTS))

        result = initializer.update(READY)

        assert result.state == SchemaInitState.DONE
        assert result.statements_executed == 2
        assert result.execution_time_ms is not None
        assert initializer.state is SchemaInitState.DONE
        with pool.borrow_connection() as connection:
            assert connection.exec_driver_sql("SELECT id FROM t").scalar() == 1
        assert pool.get_engine().pool.checkedout() == 0
        pool.shutdown()

    def test_failure_stops_script(self, settings: Settings, tmp_path: Path, table_names):
        """Test that a failing first statement prevents the second."""
        script = "CREATE TABLE broken(id int;\nCREATE TABLE u(id int);\n"
        initializer, pool = make_initializer(settings, database_schema_script=write_script(tmp_path, script))

        with pytest.raises(SchemaExecutionError) as exc_info:
            initializer.update(READY)

        assert exc_info.value.statement == "CREATE TABLE broken(id int"
        assert initializer.state is SchemaInitState.FAILED
        assert pool.get_engine().pool.checkedout() == 0
        assert table_names(pool) == set()
        pool.shutdown()

    def test_ignores_other_events(self, settings: Settings, tmp_path: Path):
        """Test that only the ready event triggers the initializer."""
        initializer, pool = make_initializer(settings, database_schema_script=write_script(tmp_path, TWO_STATEMENTS))

        result = initializer.update(Event(kind=EventType.APPLICATION_SHUTDOWN, payload="bye"))

        assert result is None
        assert initializer.state is SchemaInitState.IDLE
        assert pool.is_initialized is False

    def test_runs_only_once(self, settings: Settings, tmp_path: Path):
        """Test that a second ready event is ignored."""
        initializer, pool = make_initializer(settings, database_schema_script=write_script(tmp_path, TWO_STATEMENTS))

        first = initializer.update(READY)
        second = initializer.update(READY)

        assert first.statements_executed == 2
        assert second is None
        with pool.borrow_connection() as connection:
            assert connection.exec_driver_sql("SELECT COUNT(*) FROM t").scalar() == 1
        pool.shutdown()

    def test_missing_script_is_not_fatal(self, settings: Settings, tmp_path: Path):
        """Test that a missing script is skipped."""
        initializer, pool = make_initializer(settings, database_schema_script=str(tmp_path / "absent.sql"))

        result = initializer.update(READY)

        assert result.state == SchemaInitState.SKIPPED
        assert pool.is_initialized is False

    def test_unreadable_script_ignored_by_default(self, settings: Settings, tmp_path: Path):
        """Test that read failures are skipped with the default policy."""
        path = tmp_path / "binary.sql"
        path.write_bytes(b"\xff\xfe\x00 not utf-8")
        initializer, pool = make_initializer(settings, database_schema_script=str(path))

        result = initializer.update(READY)

        assert result.state == SchemaInitState.SKIPPED
        assert pool.is_initialized is False

    def test_unreadable_script_fails_when_configured(self, settings: Settings, tmp_path: Path):
        """Test that read failures escalate with the fail policy."""
        path = tmp_path / "binary.sql"
        path.write_bytes(b"\xff\xfe\x00 not utf-8")
        initializer, _ = make_initializer(settings, database_schema_script=str(path), database_schema_read_errors="fail")

        with pytest.raises(SchemaReadError):
            initializer.update(READY)

        assert initializer.state is SchemaInitState.FAILED

    def test_bundled_schema(self, settings: Settings, table_names):
        """Test the bundled schema script against SQLite."""
        initializer, pool = make_initializer(settings)

        result = initializer.update(READY)

        assert result.state == SchemaInitState.DONE
        assert result.statements_executed == 3
        assert {"addresses", "customers"} <= table_names(pool)
        pool.shutdown()


class TestSchemaInitializerOnBus:
    """Test cases for the initializer subscribed to an event bus."""

    def test_publish_ready_runs_script(self, settings: Settings, tmp_path: Path, table_names):
        """Test publishing the ready event bootstraps the schema."""
        initializer, pool = make_initializer(settings, database_schema_script=write_script(tmp_path, TWO_STATEMENTS))
        bus = EventBus()
        bus.subscribe(initializer)

        results = bus.publish(READY)

        assert results[0].statements_executed == 2
        assert "t" in table_names(pool)
        pool.shutdown()

    def test_publish_ready_surfaces_schema_failure(self, settings: Settings, tmp_path: Path):
        """Test that a schema failure reaches the publisher."""
        script = "INSERT INTO missing VALUES (1);\nCREATE TABLE u(id int);\n"
        initializer, pool = make_initializer(settings, database_schema_script=write_script(tmp_path, script))
        bus = EventBus()
        bus.subscribe(initializer)

        with pytest.raises(EventDeliveryError) as exc_info:
            bus.publish(READY)

        cause = exc_info.value.__cause__
        assert isinstance(cause, SchemaExecutionError)
        assert cause.statement == "INSERT INTO missing VALUES (1)"
        pool.shutdown()

    def test_publish_ready_disabled(self, settings: Settings):
        """Test that a disabled flag means zero statements when published."""
        initializer, pool = make_initializer(settings, database_init_schema=False)
        bus = EventBus()
        bus.subscribe(initializer)

        results = bus.publish(READY)

        assert results[0].state == SchemaInitState.SKIPPED
        assert pool.is_initialized is False

"""SQL script splitting and execution.

The splitter is intentionally naive: it works line by line and does not
understand statement terminators inside string literals or multi-line
comments. A ``;`` must end the last line of each statement.
"""

from collections.abc import Iterable, Iterator

from loguru import logger
from sqlalchemy import Connection
from sqlalchemy.exc import SQLAlchemyError

from app_bootstrap.constants import SQL_COMMENT_PREFIXES, SQL_STATEMENT_TERMINATOR
from app_bootstrap.exceptions import SchemaExecutionError


def split_statements(lines: Iterable[str]) -> Iterator[str]:
    """Yield the complete statements of a SQL script.

    Blank lines and lines starting with ``--``, ``//`` or ``/*`` (after
    trimming) are skipped. Other lines accumulate until a line ends with
    ``;``; the buffer is then emitted without its terminator and reset.
    Statements that end up empty are dropped, and a trailing statement with
    no terminator is never emitted.

    Args:
        lines: Script lines, with or without line endings

    Examples:
        >>> list(split_statements(["CREATE TABLE t(id int);", "-- note", "INSERT INTO t VALUES (1);"]))
        ['CREATE TABLE t(id int)', 'INSERT INTO t VALUES (1)']
    """
    buffer: list[str] = []
    for line in lines:
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(SQL_COMMENT_PREFIXES):
            continue

        buffer.append(line.rstrip("\r\n"))
        if trimmed.endswith(SQL_STATEMENT_TERMINATOR):
            sql = "\n".join(buffer).strip()
            statement = sql[: sql.rfind(SQL_STATEMENT_TERMINATOR)].strip()
            buffer.clear()
            if statement:
                yield statement

    leftover = "\n".join(buffer).strip()
    if leftover:
        logger.warning(f"Ignoring unterminated statement at end of script: {leftover[:80]}")


def execute_statements(connection: Connection, statements: Iterable[str]) -> int:
    """Execute statements in order, committing after each one.

    Execution stops at the first failing statement; it is rolled back and
    the remaining statements are not run.

    Returns:
        Number of statements executed

    Raises:
        SchemaExecutionError: If a statement fails
    """
    executed = 0
    for statement in statements:
        logger.debug(f"Executing SQL: {statement}")
        try:
            connection.exec_driver_sql(statement)
            connection.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error executing SQL: {statement}")
            connection.rollback()
            raise SchemaExecutionError(statement, e) from e
        executed += 1
    return executed

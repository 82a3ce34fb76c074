"""Database package for the bootstrap framework.

This package provides the connection pool manager and the event-driven
schema bootstrap.
"""

from .connection import ConnectionPool
from .schema_initializer import SchemaInitializer, SchemaInitResult, SchemaInitState
from .script import execute_statements, split_statements

__all__ = [
    "ConnectionPool",
    "SchemaInitializer",
    "SchemaInitResult",
    "SchemaInitState",
    "execute_statements",
    "split_statements",
]

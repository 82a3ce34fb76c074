"""Application bootstrap framework: event bus, connection pool and schema bootstrap."""

from .settings import Settings, load_settings  # noqa: F401

__all__ = ["load_settings", "Settings"]

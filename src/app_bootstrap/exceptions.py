"""Common exceptions for the bootstrap framework.

Low-level failures (I/O, SQL, driver errors) are wrapped into these domain
errors at component boundaries so callers never have to handle raw driver
exceptions.
"""

from uuid import UUID


class BootstrapError(Exception):
    """Base class for all application errors."""


class ConfigurationError(BootstrapError):
    """Raised when a required configuration resource or key is missing or invalid."""


class ResourceNotFoundError(BootstrapError):
    """Raised when a resource doesn't exist.

    Generic exception for any resource that cannot be found by its identifier,
    e.g. the bundled schema script or the properties file.
    """

    def __init__(self, resource_type: str, identifier: str | UUID | int):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found: {identifier}")


class ConnectionUnavailableError(BootstrapError):
    """Raised when no database connection can be handed out.

    This happens when the pool has been shut down, is exhausted, or the
    backing database cannot be reached.
    """


class SchemaReadError(BootstrapError):
    """Raised when the schema script exists but cannot be read."""


class SchemaExecutionError(BootstrapError):
    """Raised when a schema statement fails during bootstrap.

    The remaining statements of the script are not executed, so the database
    may be left partially initialized.
    """

    def __init__(self, statement: str, cause: Exception):
        self.statement = statement
        self.cause = cause
        super().__init__(f"Error executing SQL: {statement} ({cause})")


class PersistenceError(BootstrapError):
    """Raised when a repository operation fails."""


class StartupError(BootstrapError):
    """Raised when startup cannot proceed (e.g. a subscriber cannot be registered)."""

"""Resource lookup for bundled and on-disk text files."""

from importlib.resources import files
from importlib.resources.abc import Traversable
from pathlib import Path

from loguru import logger

from app_bootstrap.constants import RESOURCES_PACKAGE
from app_bootstrap.exceptions import ResourceNotFoundError


def locate_resource(name: str | Path, resource_type: str = "Resource") -> Traversable:
    """Locate a text resource by name.

    An existing filesystem path wins; otherwise the name is looked up inside
    the bundled ``app_bootstrap.resources`` package.

    Args:
        name: File path or bundled resource name (e.g. ``schema.sql``)
        resource_type: Human-readable type used in the error message

    Returns:
        A traversable handle that can be opened for reading

    Raises:
        ResourceNotFoundError: If neither a file nor a bundled resource exists
    """
    path = Path(name)
    if path.is_file():
        logger.trace(f"Resolved {resource_type.lower()} '{name}' to file {path.resolve()}")
        return path

    bundled = files(RESOURCES_PACKAGE).joinpath(str(name))
    if bundled.is_file():
        logger.trace(f"Resolved {resource_type.lower()} '{name}' to bundled resource")
        return bundled

    raise ResourceNotFoundError(resource_type, str(name))

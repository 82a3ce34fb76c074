"""Key/value configuration source backed by ``application.properties``.

The properties file is read once, at first access, and cached for the lifetime
of the process. Its location defaults to the bundled resource and can be
redirected with the ``APP_PROPERTIES_FILE`` environment variable.

The source also plugs into pydantic-settings (see ``PropertiesSettingsSource``)
so that ``Settings`` picks up values from the file below environment
variables. Property keys map to setting fields by swapping dots for
underscores, e.g. ``database.init.schema`` -> ``database_init_schema``.
"""

import os
from functools import lru_cache
from typing import Any, TypeVar

from loguru import logger
from pydantic import TypeAdapter, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from app_bootstrap.constants import PROPERTIES_FILE_ENV, PROPERTIES_RESOURCE
from app_bootstrap.exceptions import ResourceNotFoundError
from app_bootstrap.utils.resources import locate_resource

T = TypeVar("T")

_COMMENT_PREFIXES = ("#", "!")
_SEPARATORS = ("=", ":")


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties text into a dictionary.

    Supports ``key=value`` and ``key: value`` lines. Blank lines and lines
    starting with ``#`` or ``!`` are ignored. Later keys override earlier ones.

    Examples:
        >>> parse_properties("# db\\ndatabase.url = sqlite:///app.db\\n")
        {'database.url': 'sqlite:///app.db'}
    """
    properties: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(_COMMENT_PREFIXES):
            continue

        positions = [stripped.find(sep) for sep in _SEPARATORS if sep in stripped]
        if not positions:
            # A bare key is a key with an empty value
            properties[stripped] = ""
            continue

        split_at = min(positions)
        key = stripped[:split_at].strip()
        value = stripped[split_at + 1 :].strip()
        properties[key] = value
    return properties


class ApplicationProperties:
    """Read-only view over the loaded key/value settings."""

    def __init__(self, values: dict[str, str] | None = None, source: str | None = None):
        self._values = dict(values or {})
        self.source = source

    @classmethod
    def load(cls, location: str | None = None) -> "ApplicationProperties":
        """Load properties from a file path or bundled resource.

        A missing file is not fatal: a warning is logged and an empty source
        is returned, so every setting falls back to its default.
        """
        location = location or PROPERTIES_RESOURCE
        try:
            resource = locate_resource(location, "Properties file")
            text = resource.read_text(encoding="utf-8")
        except ResourceNotFoundError as e:
            logger.warning(f"Unable to find application properties: {e}")
            return cls({}, source=None)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Unable to read application properties from {location}: {e}")
            return cls({}, source=None)

        values = parse_properties(text)
        logger.debug(f"Loaded {len(values)} properties from {location}")
        return cls(values, source=str(location))

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get_setting(self, key: str, default: str | None = "") -> str | None:
        """Return the raw string value for ``key``, or ``default`` if absent."""
        return self._values.get(key, default)

    def get_typed_setting(self, key: str, type_: type[T] | Any) -> T | None:
        """Return the value for ``key`` converted to ``type_``.

        Conversion follows pydantic's lax rules, so ``"true"``, ``"1"`` and
        ``"yes"`` all read as ``True`` for a ``bool``.

        Returns:
            The converted value, or None if the key is absent or the value
            cannot be converted (a warning is logged in that case).
        """
        raw = self._values.get(key)
        if raw is None:
            return None

        try:
            return TypeAdapter(type_).validate_python(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid value for property '{key}': {raw!r} ({e.errors()[0]['msg']})")
            return None

    def as_dict(self) -> dict[str, str]:
        return dict(self._values)


@lru_cache(maxsize=1)
def get_application_properties() -> ApplicationProperties:
    """Return the process-wide properties, loading them on first access.

    The file named by ``APP_PROPERTIES_FILE`` takes precedence over the
    bundled ``application.properties``.
    """
    return ApplicationProperties.load(os.environ.get(PROPERTIES_FILE_ENV))


def property_key(field_name: str) -> str:
    """Map a settings field name to its property key."""
    return field_name.replace("_", ".")


class PropertiesSettingsSource(PydanticBaseSettingsSource):
    """pydantic-settings source reading values from ``ApplicationProperties``."""

    def __init__(self, settings_cls: type[BaseSettings], properties: ApplicationProperties | None = None):
        super().__init__(settings_cls)
        self._properties = properties if properties is not None else get_application_properties()

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        key = property_key(field_name)
        return self._properties.get_typed_setting(key, field.annotation), key, False

    def __call__(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, _, _ = self.get_field_value(field, field_name)
            if value is not None:
                data[field_name] = value
        return data


__all__ = [
    "ApplicationProperties",
    "PropertiesSettingsSource",
    "get_application_properties",
    "parse_properties",
    "property_key",
]

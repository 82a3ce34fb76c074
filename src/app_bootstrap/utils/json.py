"""JSON serialization helpers backed by pydantic.

Dates and datetimes are written as ISO 8601 strings and parsed back into
their Python types.
"""

from typing import Any, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")


def stringify(data: Any) -> str:
    """Serialize ``data`` to a JSON string.

    Examples:
        >>> from datetime import date
        >>> stringify({"born": date(1990, 4, 7)})
        '{"born":"1990-04-07"}'
    """
    return TypeAdapter(type(data)).dump_json(data).decode()


def parse(data: str | bytes, type_: type[T] | Any) -> T:
    """Parse a JSON string into ``type_``.

    Raises:
        pydantic.ValidationError: If the JSON does not match ``type_``
    """
    return TypeAdapter(type_).validate_json(data)

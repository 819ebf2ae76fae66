"""
JSON encoding for rendered error records.

GraphQL clients expect camelCase names, so keys of rendered maps and the
segments of field paths are converted with graphene's ``to_camel_case``.
"""

from collections.abc import Mapping
from enum import Enum
from importlib import import_module
from typing import Any, Optional

from graphene.utils.str_converters import to_camel_case

from .conf import get_settings
from .serializer import to_jsonable
from .utils.transform import deep_transform


def camelize(value: Any) -> str:
    """
    Convert a name to lower camelCase.

    Examples:
        >>> camelize("some_name")
        'someName'
    """
    if isinstance(value, Enum):
        value = value.value
    return to_camel_case(str(value))


def camelize_keys(data: Any) -> Any:
    """Convert every mapping key in ``data`` to camelCase, leaving values alone."""
    return deep_transform(data, lambda key, value: (camelize(key), value))


def to_json(data: Any, camelize_names: bool = True) -> Any:
    """
    Return a JSON-safe version of ``data``.

    Strings and lists of strings are treated as names (a field path) and are
    camelCased. Mappings keep their values but get camelCased keys.

    Examples:
        >>> to_json(["some_name"])
        ['someName']
        >>> to_json({"request_id": "abc_def"})
        {'requestId': 'abc_def'}
    """
    if isinstance(data, (list, tuple)):
        return [to_json(item, camelize_names) for item in data]
    if isinstance(data, Mapping):
        jsonable = to_jsonable(data)
        return camelize_keys(jsonable) if camelize_names else jsonable
    if isinstance(data, (str, Enum)) and camelize_names:
        return camelize(data)
    return to_jsonable(data)


def get_json_adapter(json_adapter: Optional[Any] = None) -> Any:
    """Return the adapter module, resolving dotted paths from settings."""
    adapter = json_adapter or get_settings().json_adapter
    if isinstance(adapter, str):
        adapter = import_module(adapter)
    if not callable(getattr(adapter, "dumps", None)):
        raise TypeError(f"JSON adapter {adapter!r} does not expose dumps()")
    return adapter


def dumps(data: Any, json_adapter: Optional[Any] = None, **kwargs: Any) -> str:
    """Encode ``data`` to a JSON string with the configured adapter."""
    return get_json_adapter(json_adapter).dumps(to_jsonable(data), **kwargs)


__all__ = ["camelize", "camelize_keys", "dumps", "get_json_adapter", "to_json"]

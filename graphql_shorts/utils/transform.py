"""
Structure helpers for graphql-shorts.

This module provides functions for walking nested mappings and lists the way
resolver arguments and error trees are shaped.
"""

from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional, Tuple

DELETE = object()


def deep_transform(data: Any, transform_fn: Callable[[Any, Any], Any]) -> Any:
    """
    Deeply transform the key/value pairs of nested mappings.

    ``transform_fn`` receives ``(key, value)`` and returns a new ``(key, value)``
    pair or ``DELETE`` to drop the entry. Lists are walked element-wise and
    other values are returned untouched.

    Examples:
        >>> deep_transform({"test": {"item": 2, "d": 3}},
        ...     lambda k, v: DELETE if k == "d" else (k.upper(), v))
        {'TEST': {'ITEM': 2}}
    """
    if isinstance(data, Mapping):
        result = {}
        for key, value in data.items():
            transformed = transform_fn(key, value)
            if transformed is DELETE:
                continue
            new_key, new_value = transformed
            result[new_key] = deep_transform(new_value, transform_fn)
        return result
    if isinstance(data, (list, tuple)):
        return [deep_transform(item, transform_fn) for item in data]
    return data


def get_in(data: Any, path: Iterable[Any], default: Optional[Any] = None) -> Any:
    """
    Fetch a nested value by following ``path`` through mappings.

    Examples:
        >>> get_in({"input": {"title": ""}}, ["input", "title"])
        ''
        >>> get_in({"input": None}, ["input", "title"]) is None
        True
    """
    value = data
    for key in path:
        if isinstance(value, Mapping) and key in value:
            value = value[key]
        else:
            return default
    return value


def as_path(value: Any) -> Tuple[Any, ...]:
    """Wrap a single segment or a sequence of segments into a tuple path."""
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


__all__ = ["DELETE", "as_path", "deep_transform", "get_in"]

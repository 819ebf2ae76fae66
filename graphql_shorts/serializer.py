"""
Conversion of arbitrary values into JSON-safe structures.

Error extensions often carry whatever the application had at hand (model
classes, datetimes, decimals, enums, lazy translations). ``to_jsonable``
turns them into values any JSON adapter can encode.
"""

import dataclasses
import datetime
import decimal
import uuid
from collections.abc import Mapping
from enum import Enum
from typing import Any

from django.core.serializers.json import DjangoJSONEncoder
from django.utils.functional import Promise

_django_encoder = DjangoJSONEncoder()

_ENCODER_TYPES = (
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    decimal.Decimal,
    uuid.UUID,
    Promise,
)


def dotted_name(cls: type) -> str:
    """Return ``module.QualName`` for a class."""
    module = getattr(cls, "__module__", None)
    qualname = getattr(cls, "__qualname__", getattr(cls, "__name__", repr(cls)))
    if not module or module == "builtins":
        return qualname
    return f"{module}.{qualname}"


def to_jsonable(value: Any) -> Any:
    """
    Return ``value`` with every nested part converted to a JSON-safe value.

    Examples:
        >>> to_jsonable({"params": {"id": 1, "inserted_at": datetime.date(2025, 2, 24)}})
        {'params': {'id': 1, 'inserted_at': '2025-02-24'}}
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return to_jsonable(value.value)
    if isinstance(value, type):
        return dotted_name(value)
    if isinstance(value, _ENCODER_TYPES):
        return _django_encoder.default(value)
    if dataclasses.is_dataclass(value):
        return {
            "struct": dotted_name(type(value)),
            "data": {
                f.name: to_jsonable(getattr(value, f.name))
                for f in dataclasses.fields(value)
            },
        }
    if isinstance(value, Mapping):
        return {_jsonable_key(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    return str(value)


def _jsonable_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    jsonable = to_jsonable(key)
    return jsonable if isinstance(jsonable, str) else str(jsonable)


__all__ = ["dotted_name", "to_jsonable"]

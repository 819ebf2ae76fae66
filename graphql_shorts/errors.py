"""
Error records produced by graphql-shorts.

Every classified error is exactly one of:

- ``TopLevelError``: the whole operation failed. Rendered at the response
  root with ``extensions.code`` and no data.
- ``UserError``: a field-scoped failure rendered inside the mutation payload
  next to any partially successful data.
"""

import dataclasses
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .encoder import camelize_keys, to_json
from .serializer import to_jsonable


def _coerce_field(field: Any) -> Tuple[str, ...]:
    if isinstance(field, str):
        segments = (field,)
    elif isinstance(field, (list, tuple)):
        segments = tuple(field)
    else:
        segments = ()
    if not segments or not all(isinstance(segment, str) for segment in segments):
        raise ValueError(
            f"Expected field to be a string or a list of strings, got: {field!r}"
        )
    return segments


def _code_to_string(code: Union[str, Enum]) -> str:
    if isinstance(code, Enum):
        code = code.value if isinstance(code.value, str) else code.name
    return str(code).upper()


@dataclasses.dataclass(frozen=True)
class TopLevelError:
    """An operation-wide failure."""

    # extensions is a dict, so records are compared but never hashed
    __hash__ = None

    code: Union[str, Enum]
    message: str
    extensions: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    field: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if self.extensions is None:
            object.__setattr__(self, "extensions", {})
        if self.field is not None:
            object.__setattr__(self, "field", _coerce_field(self.field))

    @classmethod
    def create(cls, params: Mapping[str, Any] = None, **kwargs: Any) -> "TopLevelError":
        """Build a record from a mapping and/or keyword arguments."""
        return cls(**{**dict(params or {}), **kwargs})

    def to_jsonable_map(
        self,
        request_id: Optional[str] = None,
        timestamp: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Return the GraphQL error shape.

        ``request_id`` and ``timestamp`` are defaults: caller extensions
        override them, ``code`` always wins.

        Examples:
            >>> TopLevelError("not_found", "no records found",
            ...     {"request_id": "abc", "timestamp": "now"}).to_jsonable_map()
            {'message': 'no records found', 'extensions': {'request_id': 'abc', 'timestamp': 'now', 'code': 'NOT_FOUND'}}
        """
        extensions = {
            "request_id": request_id,
            "timestamp": timestamp or datetime.now(timezone.utc).isoformat(),
        }
        extensions.update(to_jsonable(dict(self.extensions)))
        extensions["code"] = _code_to_string(self.code)
        if self.field is not None:
            extensions.setdefault("field", list(self.field))
        return {"message": str(self.message), "extensions": extensions}

    def to_json(
        self,
        request_id: Optional[str] = None,
        timestamp: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Like ``to_jsonable_map`` with camelCased extension keys and field segments."""
        data = self.to_jsonable_map(request_id=request_id, timestamp=timestamp)
        extensions = camelize_keys(data["extensions"])
        if "field" in extensions and isinstance(extensions["field"], list):
            extensions["field"] = to_json(extensions["field"])
        return {"message": data["message"], "extensions": extensions}


@dataclasses.dataclass(frozen=True)
class UserError:
    """A field-scoped failure; ``field`` locates the offending input value."""

    field: Tuple[str, ...]
    message: str

    def __post_init__(self):
        object.__setattr__(self, "field", _coerce_field(self.field))

    @classmethod
    def create(cls, params: Mapping[str, Any] = None, **kwargs: Any) -> "UserError":
        """Build a record from a mapping and/or keyword arguments."""
        return cls(**{**dict(params or {}), **kwargs})

    def to_jsonable_map(self) -> Dict[str, Any]:
        """
        Examples:
            >>> UserError(("input", "email"), "cannot be blank").to_jsonable_map()
            {'message': 'cannot be blank', 'field': ['input', 'email']}
        """
        return {"message": str(self.message), "field": list(self.field)}

    def to_json(self) -> Dict[str, Any]:
        return {"message": str(self.message), "field": to_json(list(self.field))}


ErrorRecord = Union[TopLevelError, UserError]


def is_error_record(value: Any) -> bool:
    return isinstance(value, (TopLevelError, UserError))


__all__ = ["ErrorRecord", "TopLevelError", "UserError", "is_error_record"]

"""
Bridge for ``code``/``message``/``details`` shaped errors.

Services frequently report failures as an error carrying an HTTP-like
``code`` (``not_found``, ``conflict``...), a human message and a ``details``
mapping. ``translate_error`` sorts those codes into GraphQL error types per
operation.

Mutations:

- top-level: ``internal_server_error``, ``service_unavailable``,
  ``too_many_requests``, ``unauthorized``
- user errors: ``bad_request``, ``conflict``, ``forbidden``, ``gone``,
  ``not_found``, ``precondition_failed``, ``unprocessable_entity``

Queries return no user errors: ``conflict``, ``forbidden``, ``gone``,
``not_found`` and ``unprocessable_entity`` are field-specific and rendered
as top-level errors next to the operation-wide codes.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from graphql.language import OperationType

from ..errors import ErrorRecord, TopLevelError, UserError
from ..handler import build_fallback_error
from ..mapper import map_arguments
from ..matching import MISSING, lookup

logger = logging.getLogger(__name__)

TOP_LEVEL_ERROR_CODES = frozenset(
    {
        "internal_server_error",
        "service_unavailable",
        "too_many_requests",
        "unauthorized",
    }
)

MUTATION_USER_ERROR_CODES = frozenset(
    {
        "bad_request",
        "conflict",
        "forbidden",
        "gone",
        "not_found",
        "precondition_failed",
        "unprocessable_entity",
    }
)

QUERY_FIELD_ERROR_CODES = frozenset(
    {
        "conflict",
        "forbidden",
        "gone",
        "not_found",
        "unprocessable_entity",
    }
)

UNKNOWN_FIELD = ("unknown",)


class ErrorMessage(Exception):
    """
    An application error with an HTTP-like code.

    Attributes:
        code: Error code such as ``not_found``.
        message: Human readable message.
        details: Optional structured data (``params`` is used for field mapping).
    """

    def __init__(self, code: Any, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)

    def __repr__(self) -> str:
        return f"ErrorMessage(code={self.code!r}, message={self.message!r}, details={self.details!r})"


def _fetch(error: Any, key: str, default: Any = None) -> Any:
    value = lookup(error, key)
    return default if value is MISSING else value


def _normalize_code(code: Any) -> str:
    if isinstance(code, Enum):
        code = code.value if isinstance(code.value, str) else code.name
    return str(code).lower()


def _normalize_operation(operation: Any) -> str:
    if isinstance(operation, OperationType):
        return operation.value
    return str(operation).lower()


def translate_error(
    error: Any,
    operation: Any,
    field: Optional[Sequence[str]] = None,
    resolve: Optional[Callable[[Dict[str, Any]], Any]] = None,
) -> List[ErrorRecord]:
    """
    Convert one error (or a list of them) into error records.

    Args:
        error: ``ErrorMessage`` or any object/mapping with ``code``,
            ``message`` and ``details``.
        operation: ``"mutation"``, ``"query"`` or an ``OperationType``.
        field: Field path of user errors (defaults to ``["unknown"]``).
        resolve: Receives the record params dict and returns the params (or a
            list of params) actually used to build the records.

    Raises:
        NotImplementedError: For subscriptions.
    """
    if isinstance(error, list):
        records: List[ErrorRecord] = []
        for item in error:
            records.extend(translate_error(item, operation, field=field, resolve=resolve))
        return records

    operation = _normalize_operation(operation)
    if operation == "subscription":
        raise NotImplementedError("Subscriptions are not yet supported.")
    if operation not in ("mutation", "query"):
        raise ValueError(f"Unknown operation type: {operation!r}")

    resolve = resolve or (lambda params: params)
    code = _fetch(error, "code")
    normalized_code = _normalize_code(code)
    message = _fetch(error, "message", "")
    details = _fetch(error, "details") or {}

    if normalized_code in TOP_LEVEL_ERROR_CODES or (
        operation == "query" and normalized_code in QUERY_FIELD_ERROR_CODES
    ):
        params = {"code": code, "message": message, "extensions": details}
        return [TopLevelError.create(p) for p in _as_list(resolve(params))]

    if operation == "mutation" and normalized_code in MUTATION_USER_ERROR_CODES:
        params = {"message": message, "field": tuple(field or UNKNOWN_FIELD)}
        return [UserError.create(p) for p in _as_list(resolve(params))]

    logger.warning(f"Unrecognized {operation} error code: {code!r}")
    return [build_fallback_error()]


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, list) else [value]


def params_error_tree(params: Any, message: str) -> Any:
    """
    Build an error tree from ``details["params"]``: every scalar becomes
    ``[message]``, mappings nest and lists holding mappings stay positional
    (other items become empty trees).
    """
    if isinstance(params, Mapping):
        return {key: params_error_tree(value, message) for key, value in params.items()}
    if isinstance(params, (list, tuple)) and any(isinstance(item, Mapping) for item in params):
        # scalars keep their slot so later mappings stay aligned with the input list
        return [
            params_error_tree(item, message) if isinstance(item, Mapping) else {}
            for item in params
        ]
    return [message]


def build_user_errors(
    error: Any,
    arguments: Any,
    definition: Mapping,
    field_prefix: Optional[Sequence[str]] = None,
) -> List[ErrorRecord]:
    """
    Map an error-message shaped error onto the input through a definition.

    User-error codes are expanded from ``details["params"]`` and walked with
    the structural mapper; top-level codes produce a ``TopLevelError``.
    """
    code = _fetch(error, "code")
    message = _fetch(error, "message", "")
    details = _fetch(error, "details") or {}

    if _normalize_code(code) in TOP_LEVEL_ERROR_CODES:
        return [TopLevelError(code=code, message=message, extensions=details)]

    params = details.get("params", {}) if isinstance(details, Mapping) else {}
    tree = params_error_tree(params, message)
    return map_arguments(tree, arguments, definition, field_prefix=field_prefix)


__all__ = [
    "ErrorMessage",
    "MUTATION_USER_ERROR_CODES",
    "QUERY_FIELD_ERROR_CODES",
    "TOP_LEVEL_ERROR_CODES",
    "build_user_errors",
    "params_error_tree",
    "translate_error",
]

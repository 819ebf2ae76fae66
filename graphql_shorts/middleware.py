"""
Post-resolution middleware for graphene schemas.

Resolvers report failures by raising ``ResolutionErrors`` (usually through
``handle_errors``). For root fields this middleware then shapes the response:

1. Any ``TopLevelError``: the field value is nulled and the error is raised as
   a ``GraphQLError`` with ``extensions.code``. User errors are ignored since
   the operation failed as a whole.
2. Only ``UserError`` records on a mutation: the payload keeps any partial
   value, gets the rendered errors under ``user_error_key`` and
   ``success = False``.
3. No errors on a mutation: ``success = True`` is set on the payload.

Queries never carry user errors; they are logged and dropped. Values that
are not error records follow the ``on_unrecognized_error`` policy and are
replaced by a generic top-level error.

Usage::

    schema.execute(query, middleware=[ErrorResolutionMiddleware()])
"""

import logging
from collections.abc import MutableMapping
from typing import Any, Callable, List, Optional, Tuple

from graphql import GraphQLError
from graphql.language import OperationType

from .conf import GraphQLShortsSettings, get_settings
from .defaults import FALLBACK_ERROR_CODE, UNRECOGNIZED_ERROR_MESSAGE
from .errors import TopLevelError, UserError
from .exceptions import ResolutionErrors, UnrecognizedErrorRecord
from .utils.request import get_request_id

logger = logging.getLogger(__name__)

ROOT_TYPE_NAMES = {
    "query": ("Query", "RootQueryType"),
    "mutation": ("Mutation", "RootMutationType"),
    "subscription": ("Subscription", "RootSubscriptionType"),
}


def operation_type(info: Any) -> str:
    """Return ``query``, ``mutation`` or ``subscription`` for a resolve info."""
    operation = getattr(info, "operation", None)
    if operation is not None and isinstance(operation.operation, OperationType):
        return operation.operation.value
    parent_name = getattr(getattr(info, "parent_type", None), "name", None)
    for kind, names in ROOT_TYPE_NAMES.items():
        if parent_name in names:
            return kind
    raise ValueError(f"Cannot determine the operation type of {info!r}")


def is_root_field(info: Any) -> bool:
    path = getattr(info, "path", None)
    return path is None or getattr(path, "prev", None) is None


def _field_path(info: Any) -> List[Any]:
    path = getattr(info, "path", None)
    return path.as_list() if hasattr(path, "as_list") else []


class ErrorResolutionMiddleware:
    """Graphene middleware turning ``ResolutionErrors`` into GraphQL responses.

    Attributes:
        settings: Effective ``GraphQLShortsSettings``.
    """

    def __init__(self, settings: Optional[GraphQLShortsSettings] = None, **overrides: Any):
        self.settings = settings or get_settings(**overrides)

    def resolve(self, next_resolver: Callable, root: Any, info: Any, **kwargs) -> Any:
        if not is_root_field(info):
            return next_resolver(root, info, **kwargs)

        try:
            value = next_resolver(root, info, **kwargs)
            errors: List[Any] = []
        except ResolutionErrors as exc:
            value, errors = exc.value, exc.errors

        if operation_type(info) == "mutation":
            return self.resolve_mutation(value, errors, info)
        return self.resolve_query(value, errors, info)

    def resolve_query(self, value: Any, errors: List[Any], info: Any) -> Any:
        if not errors:
            return value

        top_level_errors, user_errors = self.sort_errors(errors, info)
        if user_errors:
            logger.warning(
                "`UserError` records are not allowed on queries. Resolvers can "
                "only return `TopLevelError` records for query operations.\n\n"
                f"path:\n{_field_path(info)}"
            )
        if top_level_errors:
            raise self.to_graphql_error(top_level_errors, info)
        raise RuntimeError(
            "Resolver did not return a `TopLevelError` record for query.\n\n"
            f"path:\n{_field_path(info)}"
        )

    def resolve_mutation(self, value: Any, errors: List[Any], info: Any) -> Any:
        payload = {} if value is None else value
        if not errors:
            return _put(payload, self.settings.success_key, True)

        top_level_errors, user_errors = self.sort_errors(errors, info)
        if top_level_errors:
            raise self.to_graphql_error(top_level_errors, info)

        payload = _put(
            payload,
            self.settings.user_error_key,
            [error.to_json() for error in user_errors],
        )
        return _put(payload, self.settings.success_key, False)

    def sort_errors(self, errors: List[Any], info: Any) -> Tuple[List[TopLevelError], List[UserError]]:
        top_level_errors: List[TopLevelError] = []
        user_errors: List[UserError] = []
        for error in errors:
            if isinstance(error, TopLevelError):
                top_level_errors.append(error)
            elif isinstance(error, UserError):
                user_errors.append(error)
            else:
                self.handle_unrecognized(error, info)
                top_level_errors.append(
                    TopLevelError(code=FALLBACK_ERROR_CODE, message=UNRECOGNIZED_ERROR_MESSAGE)
                )
        return top_level_errors, user_errors

    def handle_unrecognized(self, error: Any, info: Any) -> None:
        message = (
            "Resolver returned unrecognized error.\n\n"
            "Expected one of:\n\n"
            "  - A `TopLevelError` record\n"
            "  - A `UserError` record\n\n"
            f"Got:\n{error!r}"
        )
        policy = self.settings.on_unrecognized_error
        if policy == "raise":
            raise UnrecognizedErrorRecord(message, value=error)
        if policy == "warn":
            logger.warning(message)

    def to_graphql_error(self, top_level_errors: List[TopLevelError], info: Any) -> GraphQLError:
        # A field can only raise one error; the others are logged
        request_id = get_request_id(getattr(info, "context", None), self.settings.request_id_header)
        first, *rest = top_level_errors
        for dropped in rest:
            logger.info(f"Additional top-level error not raised at {_field_path(info)}: {dropped!r}")
        rendered = first.to_json(request_id=request_id)
        return GraphQLError(rendered["message"], extensions=rendered["extensions"])


def _put(payload: Any, key: str, value: Any) -> Any:
    if isinstance(payload, MutableMapping):
        payload[key] = value
    else:
        setattr(payload, key, value)
    return payload


__all__ = ["ErrorResolutionMiddleware", "is_root_field", "operation_type"]

"""
Custom exceptions for graphql-shorts.

Configuration and contract problems raise loudly so they surface while a
schema is being developed. Data problems (unmatched errors, unmapped fields)
never raise; they degrade to fallback records instead.
"""

from typing import Any, List, Optional


class GraphQLShortsError(Exception):
    """Base exception for graphql-shorts errors."""


class SelectorContractError(GraphQLShortsError, TypeError):
    """Raised when a selector transform returns something other than error records."""

    def __init__(self, message: str, result: Any = None):
        self.result = result
        super().__init__(message)


class ResolveContractError(GraphQLShortsError, TypeError):
    """Raised when a mapping ``resolve`` callback breaks its return contract."""

    def __init__(self, message: str, key: Any = None, result: Any = None):
        self.key = key
        self.result = result
        super().__init__(message)


class MappingDefinitionError(GraphQLShortsError, ValueError):
    """Raised when a field-mapping definition is malformed."""

    def __init__(self, message: str, key: Any = None):
        self.key = key
        super().__init__(message)


class UnrecognizedErrorRecord(GraphQLShortsError, TypeError):
    """Raised by the middleware when a resolver returns an unknown error value
    and the ``on_unrecognized_error`` policy is ``raise``."""

    def __init__(self, message: str, value: Any = None):
        self.value = value
        super().__init__(message)


class ResolutionErrors(GraphQLShortsError):
    """
    Carries classified error records out of a resolver.

    Raised by resolvers (usually through ``handle_errors``) and consumed by
    ``ErrorResolutionMiddleware``.

    Attributes:
        errors: TopLevelError / UserError records.
        value: Optional partial payload to keep when only user errors exist.
    """

    def __init__(self, errors: List[Any], value: Optional[Any] = None):
        self.errors = list(errors)
        self.value = value
        super().__init__(f"{len(self.errors)} error(s) raised during resolution")


__all__ = [
    "GraphQLShortsError",
    "MappingDefinitionError",
    "ResolutionErrors",
    "ResolveContractError",
    "SelectorContractError",
    "UnrecognizedErrorRecord",
]

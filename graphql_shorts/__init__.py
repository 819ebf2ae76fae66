"""
graphql-shorts: GraphQL error handling for graphene projects.

Application errors are classified by selectors into two record types:

- ``TopLevelError``: the operation failed, rendered at the response root.
- ``UserError``: a field-scoped failure rendered inside the mutation payload.

Example::

    from django.core.exceptions import ValidationError
    from graphql_shorts import (
        ErrorResolutionMiddleware,
        IsInstance,
        Selector,
        handle_errors,
        translate_validation_errors,
    )

    class CreatePost(graphene.Mutation):
        ...

        @staticmethod
        @handle_errors(lambda root, info, **kwargs: Selector(
            IsInstance(ValidationError),
            lambda e: translate_validation_errors(e, kwargs, {"keys": ["title"]}),
        ))
        def mutate(root, info, input):
            post = Post(**input)
            post.full_clean()
            post.save()
            return CreatePost(post=post)

    schema.execute(query, middleware=[ErrorResolutionMiddleware()])
"""

from .bridges import ErrorMessage, error_tree, translate_error, translate_validation_errors
from .conf import GraphQLShortsSettings, get_settings
from .decorators import handle_errors
from .errors import TopLevelError, UserError, is_error_record
from .exceptions import (
    GraphQLShortsError,
    MappingDefinitionError,
    ResolutionErrors,
    ResolveContractError,
    SelectorContractError,
    UnrecognizedErrorRecord,
)
from .handler import Selector, classify, convert_to_error_message, handle_response
from .mapper import build_user_errors, map_arguments
from .matching import ANY, AllOf, AnyOf, Eq, IsInstance, Shape, Where
from .middleware import ErrorResolutionMiddleware

__version__ = "0.1.0"

__all__ = [
    "ANY",
    "AllOf",
    "AnyOf",
    "Eq",
    "ErrorMessage",
    "ErrorResolutionMiddleware",
    "GraphQLShortsError",
    "GraphQLShortsSettings",
    "IsInstance",
    "MappingDefinitionError",
    "ResolutionErrors",
    "ResolveContractError",
    "Selector",
    "SelectorContractError",
    "Shape",
    "TopLevelError",
    "UnrecognizedErrorRecord",
    "UserError",
    "Where",
    "build_user_errors",
    "classify",
    "convert_to_error_message",
    "error_tree",
    "get_settings",
    "handle_errors",
    "handle_response",
    "is_error_record",
    "map_arguments",
    "translate_error",
    "translate_validation_errors",
]

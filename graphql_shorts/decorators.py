"""
Resolver decorators.

``handle_errors`` turns exceptions raised by a resolver into error records
and hands them to ``ErrorResolutionMiddleware`` through ``ResolutionErrors``::

    @handle_errors(lambda root, info, **kwargs: [
        Selector(
            IsInstance(ValidationError),
            lambda e: translate_validation_errors(e, kwargs, {"keys": ["title"]}),
        ),
    ])
    def mutate(root, info, input):
        ...
"""

import functools
import logging
from typing import Any, Callable, Dict, Optional

from .exceptions import GraphQLShortsError, ResolutionErrors
from .handler import is_selector, convert_to_error_message

logger = logging.getLogger(__name__)


def _selectors_for(selectors: Any, args: tuple, kwargs: Dict[str, Any]) -> Any:
    # A callable that is not itself a selector builds the set from the resolver arguments
    if callable(selectors) and not is_selector(selectors):
        return selectors(*args, **kwargs)
    return selectors


def handle_errors(
    selectors: Any,
    fallback_error_message: Optional[Dict[str, Any]] = None,
) -> Callable:
    """
    Classify exceptions raised by the decorated resolver.

    Args:
        selectors: A selector set, or a callable receiving the resolver's
            arguments and returning one.
        fallback_error_message: Passed to ``convert_to_error_message``.

    ``ResolutionErrors`` raised by the resolver itself pass through unchanged,
    and so do contract errors from the library (a broken ``resolve`` callback
    or selector transform, a malformed mapping definition).
    """

    def decorator(resolver: Callable) -> Callable:
        @functools.wraps(resolver)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return resolver(*args, **kwargs)
            except GraphQLShortsError:
                raise
            except Exception as exc:
                logger.debug(
                    f"Classifying {exc.__class__.__name__} raised by {resolver.__qualname__}"
                )
                errors = convert_to_error_message(
                    exc,
                    _selectors_for(selectors, args, kwargs),
                    fallback_error_message,
                )
                raise ResolutionErrors(errors) from exc

        return wrapper

    return decorator


__all__ = ["handle_errors"]

"""
Classification of application errors into GraphQL error records.

Resolvers hand an error value and a selector set to ``convert_to_error_message``.
A selector is a ``(predicate, transform)`` pair: the first selector whose
predicate matches the error wins and its transform builds the records.

Example::

    from graphql_shorts import IsInstance, Selector, TopLevelError, convert_to_error_message

    selectors = [
        Selector(
            {"code": "not_found"},
            lambda e: TopLevelError(code=e.code, message=e.message),
        ),
        Selector(IsInstance(PermissionError), lambda e: TopLevelError("forbidden", str(e))),
    ]

    convert_to_error_message(error, selectors)
"""

import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

from .conf import get_settings
from .defaults import FALLBACK_ERROR_CODE, FALLBACK_ERROR_MESSAGE
from .errors import ErrorRecord, TopLevelError, is_error_record
from .exceptions import SelectorContractError
from .matching import first_match

logger = logging.getLogger(__name__)


class Selector(NamedTuple):
    predicate: Any
    transform: Callable[[Any], Any]


Selectors = Union[Selector, Tuple[Any, Callable[[Any], Any]], Sequence[Selector]]


def is_selector(selectors: Any) -> bool:
    if isinstance(selectors, Selector):
        return True
    return (
        isinstance(selectors, tuple)
        and len(selectors) == 2
        and callable(selectors[1])
        and not isinstance(selectors[0], tuple)
    )


def normalize_selectors(selectors: Selectors) -> List[Selector]:
    """Return ``selectors`` as an ordered list of ``Selector`` pairs."""
    if is_selector(selectors):
        return [Selector(*selectors)]
    normalized = []
    for selector in selectors or ():
        if not is_selector(selector):
            raise SelectorContractError(
                f"Expected a (predicate, transform) pair, got: {selector!r}",
                result=selector,
            )
        normalized.append(Selector(*selector))
    return normalized


def build_fallback_error(fallback_error_message: Optional[Dict[str, Any]] = None) -> TopLevelError:
    if fallback_error_message is None:
        fallback_error_message = get_settings().fallback_error_message
    params = fallback_error_message or {}
    return TopLevelError(
        code=FALLBACK_ERROR_CODE,
        message=FALLBACK_ERROR_MESSAGE,
        extensions=dict(params.get("extensions") or {}),
    )


def _ensure_records(result: Any) -> List[ErrorRecord]:
    if is_error_record(result):
        return [result]
    if isinstance(result, (list, tuple)):
        if all(is_error_record(item) for item in result):
            return list(result)
        raise SelectorContractError(
            "Expected a list of `TopLevelError` or `UserError` records.\n\n"
            f"got:\n{result!r}",
            result=result,
        )
    raise SelectorContractError(
        f"Expected a `TopLevelError` or `UserError` record.\n\ngot:\n{result!r}",
        result=result,
    )


def _apply_selectors(
    error: Any,
    selectors: List[Selector],
    fallback_error_message: Optional[Dict[str, Any]],
) -> Tuple[List[ErrorRecord], bool]:
    matched, transform = first_match(error, selectors)
    if matched:
        return _ensure_records(transform(error)), True

    logger.warning(
        "Selectors did not match error.\n\n"
        f"selectors:\n{selectors!r}\n\n"
        f"error:\n{error!r}"
    )
    return [build_fallback_error(fallback_error_message)], False


def classify(
    error: Any,
    selectors: Selectors,
    fallback_error_message: Optional[Dict[str, Any]] = None,
) -> Tuple[List[ErrorRecord], bool]:
    """
    Classify ``error`` against ``selectors``.

    A ``list`` is a collection of discrete errors and is classified element by
    element; every other value, mappings and tuples included, is one error.

    Args:
        error: The error value.
        selectors: One selector or an ordered list of selectors.
        fallback_error_message: ``{"extensions": {...}}`` for the fallback
            record used when nothing matches.

    Returns:
        ``(records, matched)``. ``matched`` is False when any element fell
        back to the generic internal error.

    Raises:
        SelectorContractError: If a transform returns something other than
            error records.
    """
    selector_list = normalize_selectors(selectors)
    if isinstance(error, list):
        records: List[ErrorRecord] = []
        all_matched = True
        for item in error:
            item_records, item_matched = _apply_selectors(
                item, selector_list, fallback_error_message
            )
            records.extend(item_records)
            all_matched = all_matched and item_matched
        return records, all_matched
    return _apply_selectors(error, selector_list, fallback_error_message)


def convert_to_error_message(
    error: Any,
    selectors: Selectors,
    fallback_error_message: Optional[Dict[str, Any]] = None,
) -> List[ErrorRecord]:
    """Same as ``classify`` but only returns the records."""
    records, _ = classify(error, selectors, fallback_error_message)
    return records


def handle_response(
    response: Any,
    selectors: Selectors,
    fallback_error_message: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Convert ``response`` when it is an exception, return it untouched otherwise.

    Useful for service calls that return either a result or an exception
    instance instead of raising.
    """
    if isinstance(response, BaseException):
        return convert_to_error_message(response, selectors, fallback_error_message)
    return response


__all__ = [
    "Selector",
    "build_fallback_error",
    "is_selector",
    "classify",
    "convert_to_error_message",
    "handle_response",
    "normalize_selectors",
]

"""
Bridge from Django validation errors to user errors.

Django reports validation failures as ``ValidationError`` instances, bound
forms and formsets. ``error_tree`` flattens any of them into the plain nested
error tree understood by ``graphql_shorts.mapper.build_user_errors``:

- ``ValidationError({"title": [...]})`` -> ``{"title": ["..."]}``
- ``ValidationError("msg")`` -> ``{"__all__": ["msg"]}``
- a bound form -> its ``errors`` per field
- a formset -> one tree per form, walked positionally against a list input,
  followed by the formset's non-form messages

Messages are interpolated with their ``params``.
"""

from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

from django.core.exceptions import NON_FIELD_ERRORS, ValidationError
from django.forms import BaseForm
from django.forms.formsets import BaseFormSet
from django.forms.utils import ErrorList
from django.utils.functional import Promise

from ..errors import UserError
from ..mapper import map_arguments


def _messages(error: ValidationError) -> List[str]:
    return [str(message) for message in error.messages]


def _subtree(value: Any) -> Any:
    if isinstance(value, ValidationError):
        if hasattr(value, "error_dict"):
            return error_tree(value)
        return _messages(value)
    if isinstance(value, ErrorList):
        return _messages(ValidationError(value.as_data()))
    if isinstance(value, BaseFormSet):
        forms = [error_tree(form_errors) for form_errors in value.errors]
        return forms + _messages(ValidationError(value.non_form_errors().as_data()))
    if isinstance(value, BaseForm):
        return error_tree(value)
    if isinstance(value, (str, Promise)):
        return [str(value)]
    if isinstance(value, Mapping):
        return error_tree(value)
    if isinstance(value, (list, tuple)):
        flattened: List[Any] = []
        for item in value:
            if _is_message_source(item):
                flattened.extend(_subtree(item))
            else:
                flattened.append(_subtree(item))
        return flattened
    return [str(value)]


def _is_message_source(item: Any) -> bool:
    if isinstance(item, ValidationError):
        return not hasattr(item, "error_dict")
    return isinstance(item, (str, Promise, ErrorList))


def error_tree(source: Any) -> Any:
    """
    Return the plain error tree for a Django error source.

    Args:
        source: ``ValidationError``, bound form, formset, ``ErrorDict`` or a
            dict/list tree whose leaves are strings or ``ValidationError``.

    Examples:
        >>> error_tree(ValidationError({"title": ValidationError("%(n)s is taken", params={"n": "foo"})}))
        {'title': ['foo is taken']}
    """
    if isinstance(source, ValidationError):
        if hasattr(source, "error_dict"):
            return {
                field: _messages(ValidationError(errors))
                for field, errors in source.error_dict.items()
            }
        return {NON_FIELD_ERRORS: _messages(source)}
    if isinstance(source, BaseFormSet):
        return _subtree(source)
    if isinstance(source, BaseForm):
        return {field: _subtree(errors) for field, errors in source.errors.items()}
    if isinstance(source, Mapping):
        return {key: _subtree(value) for key, value in source.items()}
    if isinstance(source, (list, tuple)):
        return [error_tree(item) for item in source]
    raise TypeError(f"Cannot build an error tree from {type(source).__name__}: {source!r}")


def translate_validation_errors(
    source: Any,
    arguments: Mapping,
    definition: Mapping,
    field_prefix: Optional[Sequence[str]] = None,
) -> List[UserError]:
    """
    Convert a Django error source into user errors for a resolver.

    ``definition["path"]`` (default: the ``root_path`` setting) locates the
    input inside the resolver ``arguments`` and is also the leading part of
    every field path.

    Examples:
        >>> translate_validation_errors(
        ...     ValidationError({"title": ["can't be blank"]}),
        ...     {"input": {"title": ""}},
        ...     {"path": ["input"], "keys": ["title"]},
        ... )
        [UserError(field=('input', 'title'), message="can't be blank")]
    """
    return map_arguments(error_tree(source), arguments, definition, field_prefix=field_prefix)


__all__ = ["error_tree", "translate_validation_errors"]

"""
Mapping of nested validation errors onto GraphQL input field paths.

``build_user_errors`` walks three parallel structures at once:

- the error tree: ``{key: [messages] | {nested} | [{nested}, ...]}``
- the input arguments the client sent (mappings, possibly with lists)
- a mapping definition listing which error keys may be exposed

The definition is an allow-list. Keys it does not name are dropped together
with their subtree, and so are errors whose input key the client never sent
(database-only constraints, computed fields).

Definition format::

    {
        "keys": [
            "title",
            ("comments", {"keys": ["body"]}),
            ("author_id", {"input_key": "author", "resolve": resolve_author}),
        ]
    }

A bare key is the same as ``(key, {})``. ``keys`` may also be written as a
dict ``{"title": None, "comments": {"keys": ["body"]}}``. Options:

- ``input_key``: key to look up in the input arguments (defaults to the key).
- ``resolve``: ``resolve(message, field) -> (message, field)`` override. The
  returned field must be a non-empty list or tuple of strings.
- ``keys``: nested definition used when the error value is a nested tree.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Tuple

from django.utils.functional import Promise

from .conf import get_settings
from .errors import UserError
from .exceptions import MappingDefinitionError, ResolveContractError
from .utils.transform import as_path, get_in

logger = logging.getLogger(__name__)

DEFINITION_OPTIONS = frozenset({"input_key", "resolve", "keys"})


class MappingEntry(NamedTuple):
    key: Any
    input_key: Any
    resolve: Optional[Callable[[str, Tuple[str, ...]], Any]]
    keys: Dict[Any, "MappingEntry"]


def _build_entry(key: Any, options: Any) -> MappingEntry:
    if options is None:
        options = {}
    if not isinstance(options, Mapping):
        raise MappingDefinitionError(
            f"Options for key {key!r} must be a mapping, got: {options!r}", key=key
        )
    unknown = set(options) - DEFINITION_OPTIONS
    if unknown:
        raise MappingDefinitionError(
            f"Unknown options {sorted(unknown)} for key {key!r}", key=key
        )
    resolve = options.get("resolve")
    if resolve is not None and not callable(resolve):
        raise MappingDefinitionError(f"`resolve` for key {key!r} is not callable", key=key)
    input_key = options.get("input_key") or key
    return MappingEntry(key, input_key, resolve, normalize_keys(options.get("keys")))


def normalize_keys(keys: Any) -> Dict[Any, MappingEntry]:
    """
    Normalize a ``keys`` list or dict into ``{key: MappingEntry}``.

    The first occurrence of a duplicated key wins.
    """
    if not keys:
        return {}
    if isinstance(keys, Mapping):
        items = list(keys.items())
    elif isinstance(keys, (list, tuple)):
        items = []
        for item in keys:
            if isinstance(item, (list, tuple)):
                if len(item) != 2:
                    raise MappingDefinitionError(
                        f"Expected a key or a (key, options) pair, got: {item!r}"
                    )
                items.append((item[0], item[1]))
            else:
                items.append((item, None))
    else:
        raise MappingDefinitionError(f"`keys` must be a list or a mapping, got: {keys!r}")

    entries: Dict[Any, MappingEntry] = {}
    for key, options in items:
        if key not in entries:
            entries[key] = _build_entry(key, options)
    return entries


def _definition_keys(definition: Any) -> Dict[Any, MappingEntry]:
    if definition is None:
        return {}
    if isinstance(definition, (list, tuple)):
        return normalize_keys(definition)
    if isinstance(definition, Mapping):
        return normalize_keys(definition.get("keys"))
    raise MappingDefinitionError(f"Expected a mapping definition, got: {definition!r}")


def _is_message(value: Any) -> bool:
    return isinstance(value, (str, Promise))


def _input_objects(arguments: Any) -> List[Mapping]:
    """Input objects at the current level; a list is tested element by element."""
    if isinstance(arguments, Mapping):
        return [arguments]
    if isinstance(arguments, (list, tuple)):
        return [item for item in arguments if isinstance(item, Mapping)]
    return []


def _resolve(entry: MappingEntry, message: str, field: Tuple[str, ...]) -> Tuple[str, Tuple[str, ...]]:
    result = entry.resolve(message, field)
    if not isinstance(result, (list, tuple)) or len(result) != 2:
        raise ResolveContractError(
            f"`resolve` for key {entry.key!r} must return a (message, field) pair, "
            f"got: {result!r}",
            key=entry.key,
            result=result,
        )
    new_message, new_field = result
    if not isinstance(new_message, str):
        raise ResolveContractError(
            f"`resolve` for key {entry.key!r} returned a non-string message: {new_message!r}",
            key=entry.key,
            result=result,
        )
    if (
        not isinstance(new_field, (list, tuple))
        or not new_field
        or not all(isinstance(segment, str) for segment in new_field)
    ):
        raise ResolveContractError(
            f"`resolve` for key {entry.key!r} returned an invalid field: {new_field!r}",
            key=entry.key,
            result=result,
        )
    return new_message, tuple(new_field)


class _Walker:
    def __init__(self, root_path: Tuple[str, ...], field_prefix: Tuple[str, ...]):
        self.root_path = root_path
        self.field_prefix = field_prefix
        self.accumulator: List[UserError] = []

    def walk_tree(self, errors: Any, arguments: Any, keys: Dict[Any, MappingEntry], path: Tuple[Any, ...]) -> None:
        if isinstance(errors, (list, tuple)):
            self.walk_trees(errors, arguments, keys, path)
            return
        if not isinstance(errors, Mapping):
            logger.warning(f"Ignoring unrecognized error tree at {list(path)}: {errors!r}")
            return
        for key, value in errors.items():
            entry = keys.get(key)
            if entry is None:
                continue
            self.walk_value(value, arguments, entry, path)

    def walk_trees(self, trees: Sequence[Any], arguments: Any, keys: Dict[Any, MappingEntry], path: Tuple[Any, ...]) -> None:
        # nth tree is matched against the nth input object when both are lists
        positional = isinstance(arguments, (list, tuple))
        for position, tree in enumerate(trees):
            if positional:
                if position >= len(arguments):
                    continue
                self.walk_tree(tree, arguments[position], keys, path)
            else:
                self.walk_tree(tree, arguments, keys, path)

    def walk_value(self, value: Any, arguments: Any, entry: MappingEntry, path: Tuple[Any, ...]) -> None:
        if _is_message(value):
            self.emit(str(value), arguments, entry, path)
        elif isinstance(value, Mapping):
            self.descend(value, arguments, entry, path, position=None)
        elif isinstance(value, (list, tuple)):
            position = 0
            for item in value:
                if isinstance(item, Mapping):
                    self.descend(item, arguments, entry, path, position=position)
                    position += 1
                else:
                    self.walk_value(item, arguments, entry, path)
        else:
            logger.warning(
                f"Ignoring unrecognized error value for key {entry.key!r} at {list(path)}: {value!r}"
            )

    def descend(self, tree: Mapping, arguments: Any, entry: MappingEntry, path: Tuple[Any, ...], position: Optional[int]) -> None:
        if not entry.keys:
            return
        for input_object in _input_objects(arguments):
            if entry.input_key not in input_object:
                continue
            child = input_object[entry.input_key]
            if position is not None and isinstance(child, (list, tuple)):
                if position >= len(child):
                    continue
                child = child[position]
            self.walk_tree(tree, child, entry.keys, path + (entry.input_key,))

    def emit(self, message: str, arguments: Any, entry: MappingEntry, path: Tuple[Any, ...]) -> None:
        for input_object in _input_objects(arguments):
            if entry.input_key not in input_object:
                continue
            field = self.field_prefix + self.root_path + path + (entry.input_key,)
            field = tuple(str(segment) for segment in field)
            resolved_message = message
            if entry.resolve is not None:
                resolved_message, field = _resolve(entry, message, field)
            self.accumulator.append(UserError(field=field, message=resolved_message))


def build_user_errors(
    errors: Any,
    arguments: Any,
    definition: Any,
    path: Optional[Sequence[str]] = None,
    field_prefix: Optional[Sequence[str]] = None,
) -> List[UserError]:
    """
    Convert an error tree into ``UserError`` records for the mapped keys.

    Args:
        errors: Nested error tree (or a list of trees walked positionally
            against a list of input objects).
        arguments: The input arguments at ``path`` (usually ``kwargs["input"]``).
        definition: Mapping definition rooted at ``keys``.
        path: Leading field segments; defaults to the ``root_path`` setting.
        field_prefix: Segments prepended before ``path``.

    Returns:
        User errors in traversal order.

    Raises:
        MappingDefinitionError: If ``definition`` is malformed.
        ResolveContractError: If a ``resolve`` callback breaks its contract.

    Examples:
        >>> build_user_errors({"title": ["can't be blank"]}, {"title": ""}, {"keys": ["title"]})
        [UserError(field=('input', 'title'), message="can't be blank")]
    """
    root_path = as_path(path) if path is not None else tuple(get_settings().root_path)
    walker = _Walker(tuple(root_path), as_path(field_prefix))
    walker.walk_tree(errors, arguments, _definition_keys(definition), ())
    return walker.accumulator


def map_arguments(
    errors: Any,
    arguments: Any,
    definition: Any,
    field_prefix: Optional[Sequence[str]] = None,
) -> List[UserError]:
    """
    Like ``build_user_errors`` but takes the whole resolver ``arguments``.

    ``definition["path"]`` (default: the ``root_path`` setting) locates the
    input inside ``arguments`` and is also the leading part of every field
    path. A bare ``keys`` list always uses the setting. A missing or unusable
    input is logged and maps to nothing.
    """
    path = as_path(definition.get("path")) if isinstance(definition, Mapping) else ()
    path = path or tuple(get_settings().root_path)
    input_arguments = get_in(arguments, path)
    if not isinstance(input_arguments, (Mapping, list, tuple)):
        logger.warning(
            f"Input not found at path {list(path)} in arguments, got: {arguments!r}"
        )
        input_arguments = {}
    return build_user_errors(
        errors, input_arguments, definition, path=path, field_prefix=field_prefix
    )


__all__ = ["MappingEntry", "build_user_errors", "map_arguments", "normalize_keys"]

"""
Structural predicates used by selectors.

A predicate is a small tree describing what an error value must look like:

- ``Eq(value)``: the value equals ``value``.
- ``IsInstance(*types)``: the value is an instance of one of ``types``.
- ``Shape({key: predicate})``: every key exists on the value (mapping key or
  attribute) and its value matches the nested predicate.
- ``AllOf(*predicates)`` / ``AnyOf(*predicates)``: combinators.
- ``Where(callable)``: arbitrary test, for cases the tags above can't express.
- ``ANY``: matches everything.

Plain dicts written where a predicate is expected are read as ``Shape`` and
any other plain value as ``Eq``, so ``{"code": "not_found"}`` is a valid
predicate::

    {"code": "not_found", "details": {"params": IsInstance(dict)}}
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, Tuple

MISSING = object()


class Predicate:
    """Base class for predicates."""

    def matches(self, value: Any) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class _Anything(Predicate):
    def matches(self, value: Any) -> bool:
        return True

    def __repr__(self) -> str:
        return "ANY"


ANY = _Anything()


class Eq(Predicate):
    def __init__(self, expected: Any):
        self.expected = expected

    def matches(self, value: Any) -> bool:
        try:
            return bool(value == self.expected)
        except Exception:
            return False

    def __repr__(self) -> str:
        return f"Eq({self.expected!r})"


class IsInstance(Predicate):
    def __init__(self, *types: type):
        if not types:
            raise ValueError("IsInstance needs at least one type")
        self.types = types

    def matches(self, value: Any) -> bool:
        return isinstance(value, self.types)

    def __repr__(self) -> str:
        names = ", ".join(getattr(t, "__name__", repr(t)) for t in self.types)
        return f"IsInstance({names})"


IS_MAPPING = IsInstance(Mapping)
IS_LIST = IsInstance(list, tuple)


class Shape(Predicate):
    def __init__(self, fields: Dict[Any, Any]):
        self.fields = {key: compile_predicate(expr) for key, expr in fields.items()}

    def matches(self, value: Any) -> bool:
        for key, predicate in self.fields.items():
            actual = lookup(value, key)
            if actual is MISSING or not predicate.matches(actual):
                return False
        return True

    def __repr__(self) -> str:
        return f"Shape({self.fields!r})"


class AllOf(Predicate):
    def __init__(self, *predicates: Any):
        self.predicates = tuple(compile_predicate(p) for p in predicates)

    def matches(self, value: Any) -> bool:
        return all(p.matches(value) for p in self.predicates)

    def __repr__(self) -> str:
        return f"AllOf{self.predicates!r}"


class AnyOf(Predicate):
    def __init__(self, *predicates: Any):
        self.predicates = tuple(compile_predicate(p) for p in predicates)

    def matches(self, value: Any) -> bool:
        return any(p.matches(value) for p in self.predicates)

    def __repr__(self) -> str:
        return f"AnyOf{self.predicates!r}"


class Where(Predicate):
    def __init__(self, test: Callable[[Any], bool], description: str = ""):
        self.test = test
        self.description = description or getattr(test, "__name__", "test")

    def matches(self, value: Any) -> bool:
        return bool(self.test(value))

    def __repr__(self) -> str:
        return f"Where({self.description})"


def lookup(value: Any, key: Any) -> Any:
    """Return ``value[key]`` for mappings or ``value.key`` for objects, else ``MISSING``."""
    if isinstance(value, Mapping):
        return value[key] if key in value else MISSING
    if isinstance(key, str):
        return getattr(value, key, MISSING)
    return MISSING


def compile_predicate(expr: Any) -> Predicate:
    if isinstance(expr, Predicate):
        return expr
    if isinstance(expr, Mapping):
        return Shape(dict(expr))
    return Eq(expr)


def matches(predicate: Any, value: Any) -> bool:
    """Test ``value`` against a predicate or predicate expression."""
    return compile_predicate(predicate).matches(value)


def first_match(
    value: Any, candidates: Iterable[Tuple[Any, Any]]
) -> Tuple[bool, Any]:
    """Linear first-match-wins scan over ``(predicate, payload)`` pairs."""
    for predicate, payload in candidates:
        if matches(predicate, value):
            return True, payload
    return False, None


__all__ = [
    "ANY",
    "AllOf",
    "AnyOf",
    "Eq",
    "IS_LIST",
    "IS_MAPPING",
    "IsInstance",
    "Predicate",
    "Shape",
    "Where",
    "compile_predicate",
    "first_match",
    "MISSING",
    "lookup",
    "matches",
]

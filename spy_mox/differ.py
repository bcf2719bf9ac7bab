"""Structural comparison used by every spy assertion."""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import inspect
import numbers
import re
import typing as t

from .comparators import Comparator
from .serializer import own_attributes

_MISSING: t.Final = object()

# Tags whose values are compared by value in the identity check.
_SCALAR_TAGS: t.Final = frozenset({"str", "bytes", "number", "bool"})

OWN_EQUALS_HINT: t.Final = (
    "own __eq__ method failed <- Maybe you want to disable the usage of own "
    "__eq__ implementation? [ Use: spy.configure(use_own_equals=False) ]"
)


class DiffConfig(t.Protocol):
    """Settings consulted while comparing values."""

    use_own_equals: bool


def _type_tag(value: object) -> str:  # noqa: PLR0911 - one branch per tag
    """Return the runtime category of *value*."""
    if isinstance(value, re.Pattern):
        return "pattern"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, str):
        return "str"
    if isinstance(value, (bytes, bytearray)):
        return "bytes"
    if isinstance(value, numbers.Number):
        return "number"
    if isinstance(value, (dt.date, dt.time)):
        return "datetime"
    if isinstance(value, (set, frozenset)):
        return "set"
    if isinstance(value, cabc.Mapping):
        return "mapping"
    if isinstance(value, (list, tuple)):
        return "sequence"
    if inspect.isroutine(value) or isinstance(value, type):
        return "callable"
    return "object"


def _leaf_difference(tag: str, a: t.Any, b: t.Any) -> str | None:  # noqa: PLR0911
    """Apply the rules for leaf types; return ``""`` when *tag* is no leaf."""
    if tag == "pattern":
        if a.pattern == b.pattern and a.flags == b.flags:
            return None
        return "different regexp"
    if tag == "str":
        return "different string"
    if tag == "bytes":
        return "different bytes"
    if tag == "number":
        # NaN is the only number unequal to itself
        if a != a and b != b:  # noqa: PLR0124
            return None
        return "different number"
    if tag == "datetime":
        return None if a == b else "different date"
    if tag == "bool":
        return "different bool"
    if tag == "set":
        return None if a == b else "different set"
    if tag == "callable":
        return "different function"
    return ""


def _own_items(tag: str, value: t.Any) -> dict[t.Any, object]:
    """Return the own keys of *value* in insertion order with their values."""
    if tag == "mapping":
        return dict(value.items())
    if tag == "sequence":
        return dict(enumerate(value))
    return own_attributes(value)


def _has_own_equals(value: object) -> bool:
    return type(value).__eq__ is not object.__eq__


def _is_nullish(value: object) -> bool:
    return value is None or value is _MISSING


def _diff(  # noqa: C901, PLR0911 - mirrors the ordered comparison rules
    a: t.Any,
    b: t.Any,
    *,
    initial: bool,
    use_own_equals: bool,
    compared: set[int],
) -> str | None:
    if isinstance(b, Comparator) and a is not b:
        if b(a):
            return None
        return f"custom comparison failed for {b!r}"
    if a is b:
        return None
    if _is_nullish(a) or _is_nullish(b):
        return "null or undefined did not match"
    tag = _type_tag(a)
    if tag != _type_tag(b):
        return "different object types"
    if tag in _SCALAR_TAGS and a == b:
        return None
    leaf = _leaf_difference(tag, a, b)
    if leaf != "":
        return leaf
    if type(a) is not type(b):
        return "different constructor"
    a_items = _own_items(tag, a)
    b_items = _own_items(tag, b)
    if len(a_items) != len(b_items):
        return "different key length"
    if use_own_equals and tag == "object" and _has_own_equals(a):
        # element-wise __eq__ (e.g. arrays) has no single truth value
        try:
            equal = bool(a == b)
        except (TypeError, ValueError):
            return OWN_EQUALS_HINT
        return None if equal else OWN_EQUALS_HINT
    # circular structures: a value already under comparison counts as equal
    if id(a) in compared:
        return None
    compared.add(id(a))
    for key, value in a_items.items():
        diff = _diff(
            value,
            b_items.get(key, _MISSING),
            initial=False,
            use_own_equals=use_own_equals,
            compared=compared,
        )
        if diff is not None:
            prefix = f"--> {key}" if initial else f"{key}"
            return f"{prefix} / {diff}"
    return None


def difference_of(a: object, b: object, config: DiffConfig | None = None) -> str | None:
    """Compare *a* with *b* and describe the first difference found.

    Returns ``None`` when the values are considered equal. The checks run in
    a fixed order: identity, ``None`` on either side, runtime type tag, leaf
    rules (regexp, string, number, date, bool), constructor, number of own
    keys, the value's own ``__eq__`` (when ``config.use_own_equals`` is set)
    and finally a recursive comparison of every own key of *a*.

    Values already visited on the left-hand side are treated as equal when
    met again, which keeps circular structures from recursing forever.

    Comparators from :mod:`spy_mox.comparators` on the right-hand side decide
    equality themselves.
    """
    use_own_equals = True if config is None else config.use_own_equals
    return _diff(a, b, initial=True, use_own_equals=use_own_equals, compared=set())


__all__ = ["OWN_EQUALS_HINT", "DiffConfig", "difference_of"]

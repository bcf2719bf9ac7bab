"""Comparator classes used for argument matching.

Comparators may be passed wherever expected call arguments are compared, e.g.
``spy.was_called_with(IsA(int), Contains("bar"))``. The differ hands the
actual argument to the comparator instead of comparing structurally.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as t


class Comparator:
    """Base class for values that decide equality against an actual argument."""

    __slots__ = ()

    def __call__(self, value: object) -> bool:
        """Return ``True`` if *value* satisfies the comparison."""
        raise NotImplementedError


@dc.dataclass(frozen=True, slots=True)
class Any(Comparator):
    """Match any value."""

    def __call__(self, value: object) -> bool:
        """Return ``True`` for any input."""
        return True


@dc.dataclass(frozen=True, slots=True)
class IsA(Comparator):
    """Match values that are instances of ``typ``."""

    typ: type | tuple[type, ...]

    def __call__(self, value: object) -> bool:
        """Return ``True`` when ``value`` is an instance of ``typ``."""
        return isinstance(value, self.typ)


@dc.dataclass(frozen=True, slots=True)
class Regex(Comparator):
    """Match strings in which ``pattern`` can be found."""

    pattern: str

    def __call__(self, value: object) -> bool:
        """Return ``True`` if the regex matches *value*."""
        if not isinstance(value, str):
            return False
        return re.search(self.pattern, value) is not None


@dc.dataclass(frozen=True, slots=True)
class Contains(Comparator):
    """Match if ``substring`` (or item) is found in *value*."""

    substring: object

    def __call__(self, value: object) -> bool:
        """Return ``True`` if ``substring`` is in *value*."""
        try:
            return self.substring in value  # type: ignore[operator]
        except TypeError:
            return False


@dc.dataclass(frozen=True, slots=True)
class StartsWith(Comparator):
    """Match strings beginning with ``prefix``."""

    prefix: str

    def __call__(self, value: object) -> bool:
        """Return ``True`` if *value* starts with ``prefix``."""
        return isinstance(value, str) and value.startswith(self.prefix)


@dc.dataclass(frozen=True, slots=True)
class Predicate(Comparator):
    """Use a custom ``func`` to determine a match."""

    func: t.Callable[[t.Any], object]

    def __call__(self, value: object) -> bool:
        """Return ``True`` if ``func(value)`` is truthy."""
        return bool(self.func(value))


IGNORE: t.Final = Any()
COMPARE = Predicate


__all__ = [
    "COMPARE",
    "IGNORE",
    "Any",
    "Comparator",
    "Contains",
    "IsA",
    "Predicate",
    "Regex",
    "StartsWith",
]

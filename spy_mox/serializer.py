"""Deterministic textual rendering of call arguments.

``repr`` alone is not stable across runs: default object reprs embed memory
addresses and set ordering depends on hash seeds. :func:`serialize` renders
values so that failure messages and ``show_call_arguments`` output are
reproducible.
"""

from __future__ import annotations

import inspect
import typing as t

_CIRCULAR = "[Circular]"


def _has_default_repr(value: object) -> bool:
    return type(value).__repr__ is object.__repr__


def own_attributes(value: object) -> dict[str, object]:
    """Return instance attributes stored in ``__dict__`` or ``__slots__``."""
    attrs = getattr(value, "__dict__", None)
    if isinstance(attrs, dict):
        return dict(attrs)
    result: dict[str, object] = {}
    for cls in type(value).__mro__:
        slots = getattr(cls, "__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in result or name in {"__dict__", "__weakref__"}:
                continue
            if hasattr(value, name):
                result[name] = getattr(value, name)
    return result


def _serialize_items(items: t.Iterable[object], seen: set[int]) -> list[str]:
    return [_serialize(item, seen) for item in items]


def _serialize_container(value: object, seen: set[int]) -> str:
    if isinstance(value, list):
        return "[" + ", ".join(_serialize_items(value, seen)) + "]"
    if isinstance(value, tuple):
        parts = _serialize_items(value, seen)
        if len(parts) == 1:
            return f"({parts[0]},)"
        return "(" + ", ".join(parts) + ")"
    if isinstance(value, dict):
        parts = [
            f"{_serialize(key, seen)}: {_serialize(item, seen)}"
            for key, item in value.items()
        ]
        return "{" + ", ".join(parts) + "}"
    # sets and frozensets: order by rendered text
    parts = sorted(_serialize_items(t.cast("t.Iterable[object]", value), seen))
    if isinstance(value, frozenset):
        return "frozenset({" + ", ".join(parts) + "})"
    if not parts:
        return "set()"
    return "{" + ", ".join(parts) + "}"


def _serialize_object(value: object, seen: set[int]) -> str:
    attrs = own_attributes(value)
    parts = [f"{name}={_serialize(item, seen)}" for name, item in attrs.items()]
    return f"{type(value).__name__}(" + ", ".join(parts) + ")"


def _serialize(value: object, seen: set[int]) -> str:
    if value is None or isinstance(value, (bool, int, float, complex, str, bytes)):
        return repr(value)
    if inspect.isroutine(value):
        return f"<function {getattr(value, '__qualname__', value.__class__.__name__)}>"
    if isinstance(value, type):
        return f"<class {value.__qualname__}>"
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        if id(value) in seen:
            return _CIRCULAR
        seen.add(id(value))
        try:
            return _serialize_container(value, seen)
        finally:
            seen.discard(id(value))
    if not _has_default_repr(value):
        return repr(value)
    if id(value) in seen:
        return _CIRCULAR
    seen.add(id(value))
    try:
        return _serialize_object(value, seen)
    finally:
        seen.discard(id(value))


def serialize(value: object) -> str:
    """Return a deterministic, code-like representation of *value*.

    Circular references are rendered as ``[Circular]``. Objects with a custom
    ``__repr__`` use it; objects relying on :class:`object`'s default repr are
    rendered as ``TypeName(attr=value, ...)``.
    """
    return _serialize(value, set())


__all__ = ["own_attributes", "serialize"]

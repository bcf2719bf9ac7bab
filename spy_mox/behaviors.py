"""Behaviors executed when a spy is called.

Every configuration method of :class:`~spy_mox.spy.Spy` installs exactly one
behavior. ``calls``/``returns``/``resolves``/``rejects``/``throws`` all build a
:class:`Sequence` of result producers; ``transparent_after`` wraps whatever was
installed before in a :class:`TransparentAfter`.
"""

from __future__ import annotations

import typing as t

from .errors import ThrownError

Producer = t.Callable[..., t.Any]
ErrorLike = str | BaseException | type[BaseException] | None


class Behavior(t.Protocol):
    """Callable run with the arguments of every spy invocation."""

    def __call__(self, *args: t.Any, **kwargs: t.Any) -> t.Any:
        """Produce the result of one spy call."""
        ...


def to_error(error: ErrorLike, spy_name: str) -> BaseException:
    """Normalise *error* into an exception instance.

    ``None`` and strings become :class:`ThrownError` instances carrying the
    spy's name, exception classes are instantiated and exception instances
    are returned unchanged.
    """
    if isinstance(error, BaseException):
        return error
    default = f"{spy_name} was requested to throw"
    if isinstance(error, type) and issubclass(error, BaseException):
        return error(default)
    if error is None:
        return ThrownError(default, spy_name=spy_name)
    return ThrownError(str(error), spy_name=spy_name)


def _noop(*_args: t.Any, **_kwargs: t.Any) -> None:
    return None


class Sequence:
    """Run ``producers[i]`` for the i-th call, repeating the last one."""

    __slots__ = ("_index", "_producers")

    def __init__(self, producers: t.Iterable[Producer] = ()) -> None:
        self._producers: tuple[Producer, ...] = tuple(producers) or (_noop,)
        self._index = 0

    def __call__(self, *args: t.Any, **kwargs: t.Any) -> t.Any:
        """Invoke the producer assigned to this call."""
        last = len(self._producers) - 1
        producer = self._producers[min(self._index, last)]
        self._index += 1
        return producer(*args, **kwargs)


def returning(value: object) -> Producer:
    """Return a producer that always yields *value*."""

    def _return(*_args: t.Any, **_kwargs: t.Any) -> object:
        return value

    return _return


def resolving(value: object) -> Producer:
    """Return a producer handing out a coroutine that resolves to *value*."""

    async def _resolve(*_args: t.Any, **_kwargs: t.Any) -> object:
        return value

    return _resolve


def rejecting(error: ErrorLike, spy_name: str) -> Producer:
    """Return a producer handing out a coroutine that raises *error*."""

    async def _reject(*_args: t.Any, **_kwargs: t.Any) -> t.NoReturn:
        raise to_error(error, spy_name)

    return _reject


def throwing(error: ErrorLike, spy_name: str) -> Producer:
    """Return a producer raising *error* synchronously."""

    def _throw(*_args: t.Any, **_kwargs: t.Any) -> t.NoReturn:
        raise to_error(error, spy_name)

    return _throw


class TransparentAfter:
    """Forward to the original attribute once ``threshold`` calls were made.

    The spy records a call before its behavior runs, so ``call_count`` already
    includes the current call when it is consulted.
    """

    __slots__ = ("_call_count", "_original", "_previous", "_threshold")

    def __init__(
        self,
        previous: Behavior,
        threshold: int,
        *,
        call_count: t.Callable[[], int],
        original: t.Callable[[], object | None],
    ) -> None:
        self._previous = previous
        self._threshold = threshold
        self._call_count = call_count
        self._original = original

    def __call__(self, *args: t.Any, **kwargs: t.Any) -> t.Any:
        """Run the previous behavior or the original attribute."""
        if self._call_count() > self._threshold:
            original = self._original()
            if callable(original):
                return original(*args, **kwargs)
            return None
        return self._previous(*args, **kwargs)


__all__ = [
    "Behavior",
    "ErrorLike",
    "Producer",
    "Sequence",
    "TransparentAfter",
    "rejecting",
    "resolving",
    "returning",
    "throwing",
    "to_error",
]

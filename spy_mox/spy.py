"""Callable spies recording their invocations.

A :class:`Spy` is created directly (``Spy("name")``) or by replacing an
attribute of a live object (``Spy.on(obj, "method")``). Every call is recorded
before the configured behavior runs, so call counts stay correct even when the
behavior raises.

Process-wide state lives in this module: the :class:`SpyRegistry` undoing
attribute replacements, the :class:`MockRegistry` holding declared mocks, and
a weak set of every spy so :meth:`Spy.reset_all` can clear their call logs.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as t
import weakref

from . import module_mock
from .behaviors import (
    Behavior,
    ErrorLike,
    Sequence,
    TransparentAfter,
    rejecting,
    resolving,
    returning,
    throwing,
)
from .comparators import COMPARE, IGNORE
from .differ import difference_of
from .errors import ConfigurationError, InitializationError, VerificationError
from .mock import CallsFactory, Mock, MockRegistry
from .registry import SpyRegistry, current_value
from .serializer import serialize

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class SpyConfig:
    """Per-spy settings."""

    use_own_equals: bool = True
    persistent: bool = False


@dc.dataclass(frozen=True, slots=True)
class CallRecord:
    """Arguments of one recorded invocation."""

    args: tuple[t.Any, ...]
    kwargs: dict[str, t.Any] = dc.field(default_factory=dict)


DEFAULT_SETTINGS = SpyConfig()

registry = SpyRegistry()
mocks = MockRegistry()
_all_spies: weakref.WeakSet[Spy] = weakref.WeakSet()


def _format_arguments(args: t.Sequence[t.Any], kwargs: t.Mapping[str, t.Any]) -> str:
    rendered = serialize(list(args))
    if kwargs:
        rendered += f" {serialize(dict(kwargs))}"
    return rendered


class Spy:
    """Instrumented stand-in for a function or method.

    Configuration methods (``calls``, ``returns``, ``resolves``, ``rejects``,
    ``throws``, ``transparent_after``) replace the current behavior and return
    the spy so they can be chained. Assertion methods raise
    :class:`~spy_mox.errors.VerificationError` with a rendering of the call log.
    """

    IGNORE = IGNORE
    COMPARE = COMPARE

    def __init__(self, name: str = "", *, _handle: int | None = None) -> None:
        self._handle = _handle
        if _handle is None:
            self.display_name = name or "the spy"
            self._snapshot = f"Spy({name})"
        else:
            self.display_name = f"the spy on '{name}'"
            self._snapshot = f"Spy.on({name})"
        self._behavior: Behavior = Sequence()
        self._calls: list[CallRecord] = []
        self._config = SpyConfig(use_own_equals=DEFAULT_SETTINGS.use_own_equals)
        _all_spies.add(self)

    def __call__(self, *args: t.Any, **kwargs: t.Any) -> t.Any:
        """Record the call, then run the configured behavior."""
        self._calls.append(CallRecord(args, dict(kwargs)))
        return self._behavior(*args, **kwargs)

    def __repr__(self) -> str:
        """Return ``Spy(name)`` or ``Spy.on(name)``."""
        return self._snapshot

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def configure(
        self,
        *,
        use_own_equals: bool | None = None,
        persistent: bool | None = None,
    ) -> Spy:
        """Adjust comparison and persistence settings of this spy.

        Parameters
        ----------
        use_own_equals:
            Whether argument comparisons delegate to the ``__eq__`` of
            objects that define one.
        persistent:
            Exclude the replaced attribute from :meth:`restore_all`. Only
            spies created by :meth:`on` can be persistent.
        """
        if use_own_equals is not None:
            self._config.use_own_equals = use_own_equals
        if persistent is not None:
            if self._handle is None:
                msg = (
                    f"{self.display_name} can not be configured to be persistent! "
                    "It does not mock any object."
                )
                raise ConfigurationError(msg)
            self._config.persistent = persistent
            registry.persist(self._handle, persistent)
        return self

    def calls(self, *funcs: t.Callable[..., t.Any]) -> Spy:
        """Run ``funcs[i]`` on the i-th call, repeating the last function."""
        self._behavior = Sequence(funcs)
        return self

    def returns(self, *values: t.Any) -> Spy:
        """Return ``values[i]`` on the i-th call, repeating the last value."""
        return self.calls(*(returning(value) for value in values))

    def resolves(self, *values: t.Any) -> Spy:
        """Return coroutines resolving to ``values`` one call after another."""
        return self.calls(*(resolving(value) for value in values or (None,)))

    def rejects(self, *errors: ErrorLike) -> Spy:
        """Return coroutines raising ``errors`` one call after another."""
        return self.calls(
            *(rejecting(error, self.display_name) for error in errors or (None,))
        )

    def throws(self, error: ErrorLike = None) -> Spy:
        """Raise *error* on every call."""
        self._behavior = Sequence([throwing(error, self.display_name)])
        return self

    def transparent(self) -> Spy:
        """Forward every further call to the replaced attribute."""
        return self.transparent_after(0)

    def transparent_after(self, call_count: int) -> Spy:
        """Forward calls to the replaced attribute after *call_count* calls.

        Spies not replacing any attribute do nothing once the threshold is
        exceeded.
        """
        self._behavior = TransparentAfter(
            self._behavior,
            call_count,
            call_count=self.get_call_count,
            original=lambda: registry.get_original_method(self._handle),
        )
        return self

    def reset(self) -> Spy:
        """Forget every recorded call."""
        self._calls.clear()
        return self

    def restore(self) -> Spy:
        """Put the replaced attribute back in place."""
        if self._config.persistent:
            msg = (
                f"{self.display_name} can not be restored! "
                "It was configured to be persistent."
            )
            raise ConfigurationError(msg)
        registry.restore(self._handle)
        return self

    def when_restored(self, callback: t.Callable[[], None]) -> Spy:
        """Run *callback* once the replaced attribute has been restored."""
        if self._handle is not None:
            registry.on_restore(self._handle, callback)
        return self

    # ------------------------------------------------------------------
    # Assertions
    # ------------------------------------------------------------------
    def was_called(self, call_count: int | None = None) -> None:
        """Assert the spy was called *call_count* times, or at all."""
        made_calls = len(self._calls)
        if call_count is not None:
            if made_calls != call_count:
                msg = (
                    f"{self.display_name} was called {made_calls} times, "
                    f"but there were expected {call_count} calls.\n\n"
                    "Actually there were:\n\n"
                    f"{self.show_call_arguments()}"
                )
                raise VerificationError(msg)
        elif made_calls == 0:
            msg = f"{self.display_name} was never called!"
            raise VerificationError(msg)

    def was_not_called(self) -> None:
        """Assert the spy was never called."""
        if self._calls:
            msg = (
                f"{self.display_name} was not considered to be called.\n\n"
                "Actually there were:\n\n"
                f"{self.show_call_arguments()}"
            )
            raise VerificationError(msg)

    def was_called_with(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Assert at least one recorded call matches the given arguments."""
        if not self._calls:
            msg = f"{self.display_name} was never called!"
            raise VerificationError(msg)
        differences: list[str | None] = []
        for call in self._calls:
            difference = self._call_difference(call, args, kwargs)
            if difference is None:
                return
            differences.append(difference)
        msg = (
            f"{self.display_name} was considered to be called with the "
            "following arguments:\n\n"
            f"    --> {_format_arguments(args, kwargs)}\n\n"
            "Actually there were:\n\n"
            f"{self.show_call_arguments(differences)}"
        )
        raise VerificationError(msg)

    def was_not_called_with(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Assert no recorded call matches the given arguments."""
        try:
            self.was_called_with(*args, **kwargs)
        except VerificationError:
            return
        msg = (
            f"{self.display_name} was considered to be called unexpectedly "
            "with the following arguments:\n\n"
            f"    --> {_format_arguments(args, kwargs)}"
        )
        raise VerificationError(msg)

    def has_call_history(self, *call_history: t.Any) -> None:
        """Assert the complete, ordered history of positional arguments.

        Each entry is a list holding the arguments of one call; other values
        stand for a call with that single argument, i.e. ``1, 2, 3`` is read
        as ``[1], [2], [3]``.
        """
        made_calls = self._calls
        if len(made_calls) != len(call_history):
            msg = (
                f"{self.display_name} was called {len(made_calls)} times, but the "
                f"expected call history includes exactly {len(call_history)} "
                "calls.\n\n"
                "Actually there were:\n\n"
                f"{self.show_call_arguments()}"
            )
            raise VerificationError(msg)
        history = [
            entry if isinstance(entry, list) else [entry] for entry in call_history
        ]
        differences = [
            difference_of(list(call.args), expected, self._config)
            for call, expected in zip(made_calls, history, strict=True)
        ]
        if any(difference is not None for difference in differences):
            expected_lines = "\n".join(
                f"call {index}: {serialize(entry)}"
                for index, entry in enumerate(history)
            )
            msg = (
                f"{self.display_name} was considered to be called with the "
                "following arguments in the given order:\n\n"
                f"{expected_lines}\n\n"
                "Actually there were:\n\n"
                f"{self.show_call_arguments(differences)}"
            )
            raise VerificationError(msg)

    def get_call_arguments(self, call_nr: int = 0) -> list[t.Any]:
        """Return the positional arguments of call number *call_nr*."""
        made_calls = self._calls
        valid = (
            isinstance(call_nr, int)
            and not isinstance(call_nr, bool)
            and 0 <= call_nr < len(made_calls)
        )
        if not valid:
            msg = (
                f'The provided call_nr "{call_nr}" was not valid.\n\n'
                f"Made calls for {self.display_name}:\n\n"
                f"{self.show_call_arguments()}"
            )
            raise VerificationError(msg)
        return list(made_calls[call_nr].args)

    def get_call_argument(self, call_nr: int = 0, arg_nr: int = 0) -> t.Any:
        """Return one positional argument, or ``None`` if there is none."""
        args = self.get_call_arguments(call_nr)
        if 0 <= arg_nr < len(args):
            return args[arg_nr]
        return None

    def get_call_kwargs(self, call_nr: int = 0) -> dict[str, t.Any]:
        """Return the keyword arguments of call number *call_nr*."""
        self.get_call_arguments(call_nr)
        return dict(self._calls[call_nr].kwargs)

    def get_call_count(self) -> int:
        """Return the number of recorded calls."""
        return len(self._calls)

    def show_call_arguments(
        self, additional_information: t.Sequence[str | None] | None = None
    ) -> str:
        """Render every recorded call, one per line.

        ``additional_information[i]``, when present, is printed below call
        ``i``::

            call 0: ['test1']
                    --> 0 / different string
            call 1: ['test1', 'test2']
        """
        if not self._calls:
            return f"{self.display_name} was never called!\n"
        info = additional_information or []
        lines: list[str] = []
        for index, call in enumerate(self._calls):
            lines.append(f"call {index}: {_format_arguments(call.args, call.kwargs)}\n")
            if index < len(info) and info[index]:
                lines.append(f"        {info[index]}\n")
        return "".join(lines)

    def _call_difference(
        self,
        call: CallRecord,
        args: t.Sequence[t.Any],
        kwargs: t.Mapping[str, t.Any],
    ) -> str | None:
        difference = difference_of(list(call.args), list(args), self._config)
        if difference is not None:
            return difference
        difference = difference_of(call.kwargs, dict(kwargs), self._config)
        if difference is not None:
            return f"kwargs {difference}"
        return None

    # ------------------------------------------------------------------
    # Process-wide helpers
    # ------------------------------------------------------------------
    @classmethod
    def on(cls, obj: object, method_name: str) -> Spy:
        """Replace ``obj.method_name`` with a new spy and return it.

        The attribute must hold a callable that is not already spied.
        """
        method = current_value(obj, method_name)
        if not callable(method):
            msg = (
                f"The object attribute '{method_name}' was: {serialize(method)}\n\n"
                "You should only spy on functions!"
            )
            raise InitializationError(msg)
        if isinstance(method, Spy):
            msg = (
                f"The objects attribute '{method_name}' was already spied. "
                "Please make sure to spy only once at a time at any attribute."
            )
            raise InitializationError(msg)
        handle = registry.push(obj, method_name)
        spy = cls(method_name, _handle=handle)
        registry.apply(handle, spy)
        return spy

    @classmethod
    def mock(
        cls,
        obj: object,
        *method_names: str,
        calls_factory: CallsFactory | None = None,
    ) -> Mock:
        """Declare spies for several methods of *obj* at once.

        The returned :class:`~spy_mox.mock.Mock` exposes one member per
        method; members become spies when :meth:`init_mocks` runs.
        """
        return mocks.create_mock(obj, method_names, calls_factory)

    @classmethod
    def mock_module(
        cls,
        module_name: str,
        *export_names: str,
        package: str | None = None,
    ) -> Mock:
        """Declare spies for functions exported by the module *module_name*.

        Relative names are resolved against the calling module's package
        unless *package* is given.
        """
        if package is None:
            package = module_mock.caller_package()
        module = module_mock.resolve_module(module_name, package)
        module_mock.check_exports(module, module_name, export_names)
        return mocks.create_mock(module, export_names, None, module_name)

    @classmethod
    def init_mocks(cls, scope: str | None = None) -> None:
        """Bind every declared mock of the default scope and of *scope*."""
        mocks.init_mocks(cls.on, scope)

    @classmethod
    def restore_all(cls) -> None:
        """Restore every replaced attribute except persistent ones."""
        registry.restore_all()

    @classmethod
    def reset_all(cls) -> None:
        """Forget the recorded calls of every spy."""
        for spy in list(_all_spies):
            spy.reset()


def set_scope(scope: str | None = None) -> None:
    """Collect further mock declarations in *scope* (or the default scope)."""
    mocks.set_scope(scope)


__all__ = [
    "DEFAULT_SETTINGS",
    "CallRecord",
    "Spy",
    "SpyConfig",
    "mocks",
    "registry",
    "set_scope",
]

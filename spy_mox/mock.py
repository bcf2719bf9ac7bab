"""Declared mocks grouped into scopes and bound to spies on demand.

A mock is declared once (typically at module level of a test file) and bound
before every test by :meth:`MockRegistry.init_mocks`. Restoring the spies
deactivates the declaration again so the next initialisation re-binds it.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as t

from .errors import InitializationError

logger = logging.getLogger(__name__)

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    from .spy import Spy


class _DefaultScope:
    """Sentinel naming the scope that always exists."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<global scope>"


DEFAULT_SCOPE: t.Final = _DefaultScope()

ScopeName = str | _DefaultScope
SpyOn = t.Callable[[object, str], "Spy"]
CallsFactory = t.Callable[[str], t.Callable[..., t.Any]]


def _uninitialized(method: str) -> t.Callable[..., t.NoReturn]:
    def _raise(*_args: t.Any, **_kwargs: t.Any) -> t.NoReturn:
        msg = f"Method '{method}' was not initialized on Mock."
        raise InitializationError(msg)

    return _raise


class Mock:
    """Placeholder exposing one member per mocked method.

    Members raise :class:`InitializationError` when called until the owning
    declaration is initialised; afterwards each member is the live spy.
    """

    def __init__(self, method_names: t.Iterable[str]) -> None:
        for method in method_names:
            setattr(self, method, _uninitialized(method))

    def __repr__(self) -> str:
        names = ", ".join(vars(self))
        return f"Mock({names})"


@dc.dataclass(slots=True, eq=False)
class MockDeclaration:
    """Mocked methods of one target object awaiting initialisation."""

    mocked: object
    mock: Mock
    method_names: tuple[str, ...]
    scope: ScopeName
    calls_factory: CallsFactory | None = None
    module_name: str | None = None
    active: bool = False


def describe_scope(scope: ScopeName) -> str:
    """Return the scope name as used in error messages."""
    if isinstance(scope, _DefaultScope):
        return "global scope"
    return f'scope "{scope}"'


def could_not_init_error(scope: ScopeName, reason: str) -> InitializationError:
    """Build the error raised when a declaration cannot be bound."""
    msg = f"Could not initialize mock for {describe_scope(scope)}, because:\n{reason}"
    return InitializationError(msg)


def _with_module_hint(reason: str, module_name: str | None, method: str) -> str:
    if module_name is None or "has only a getter" not in reason:
        return reason
    return (
        f"{reason}\n\n"
        "Replacing the whole module before it is imported might resolve this "
        "problem, e.g. with pytest's monkeypatch:\n\n"
        f"    monkeypatch.setitem(sys.modules, {module_name!r}, fake_module)\n\n"
        f"where fake_module provides its own {method!r}."
    )


class MockRegistry:
    """Scope-aware store of mock declarations.

    Exactly one scope is current at any time. :data:`DEFAULT_SCOPE` always
    exists and is initialised by every call to :meth:`init_mocks`.
    """

    def __init__(self) -> None:
        self._scopes: dict[ScopeName, list[MockDeclaration]] = {DEFAULT_SCOPE: []}
        self._current: ScopeName = DEFAULT_SCOPE

    @property
    def current_scope(self) -> ScopeName:
        """Return the scope receiving new declarations."""
        return self._current

    def declarations(self, scope: ScopeName = DEFAULT_SCOPE) -> list[MockDeclaration]:
        """Return the declarations registered for *scope*."""
        return list(self._scopes.get(scope, []))

    def set_scope(self, scope: str | None = None) -> None:
        """Switch to a fresh scope named *scope*, or back to the default one.

        Naming an existing scope clears its declarations.
        """
        if scope:
            self._scopes[scope] = []
            self._current = scope
        else:
            self._current = DEFAULT_SCOPE

    def create_mock(
        self,
        obj: object,
        method_names: t.Iterable[str],
        calls_factory: CallsFactory | None = None,
        module_name: str | None = None,
    ) -> Mock:
        """Declare mocks for *method_names* of *obj* in the current scope."""
        names = tuple(method_names)
        mock = Mock(names)
        self._scopes[self._current].append(
            MockDeclaration(
                mocked=obj,
                mock=mock,
                method_names=names,
                scope=self._current,
                calls_factory=calls_factory,
                module_name=module_name,
            )
        )
        return mock

    def init_mocks(self, spy_on: SpyOn, scope: str | None = None) -> None:
        """Bind the default scope and, when given, the scope named *scope*."""
        self._init_scope(DEFAULT_SCOPE, spy_on)
        if scope:
            self._init_scope(scope, spy_on)

    def clear(self) -> None:
        """Forget every declaration and return to the default scope."""
        self._scopes = {DEFAULT_SCOPE: []}
        self._current = DEFAULT_SCOPE

    def _init_scope(self, scope: ScopeName, spy_on: SpyOn) -> None:
        for declaration in self._scopes.get(scope, []):
            self._init_declaration(declaration, spy_on)

    def _init_declaration(self, declaration: MockDeclaration, spy_on: SpyOn) -> None:
        if declaration.active:
            return
        for method in declaration.method_names:
            try:
                spy = spy_on(declaration.mocked, method)
            except InitializationError as exc:
                reason = _with_module_hint(
                    str(exc), declaration.module_name, method
                )
                raise could_not_init_error(declaration.scope, reason) from exc
            declaration.active = True
            if declaration.calls_factory is not None:
                spy.calls(declaration.calls_factory(method))
            spy.when_restored(_deactivate(declaration))
            setattr(declaration.mock, method, spy)
        logger.debug(
            "Initialised mock for %s in %s",
            ", ".join(declaration.method_names),
            describe_scope(declaration.scope),
        )


def _deactivate(declaration: MockDeclaration) -> t.Callable[[], None]:
    def _callback() -> None:
        declaration.active = False

    return _callback


__all__ = [
    "DEFAULT_SCOPE",
    "Mock",
    "MockDeclaration",
    "MockRegistry",
    "could_not_init_error",
    "describe_scope",
]

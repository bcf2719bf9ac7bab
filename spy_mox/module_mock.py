"""Resolve modules whose exports are rewired by ``Spy.mock_module``.

Only attributes looked up on the module at call time are affected: code that
did ``from module import func`` before the mock was initialised keeps its own
reference to the real function.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
import types
import typing as t

from .errors import InitializationError, ModuleResolutionError

logger = logging.getLogger(__name__)

_MISSING: t.Final = object()


def caller_package(stacklevel: int = 1) -> str | None:
    """Return the package of a calling module.

    ``stacklevel=1`` names the module that called the function invoking this
    helper; higher values walk further up the stack.
    """
    frame = sys._getframe(stacklevel + 1)  # noqa: SLF001
    module_globals = frame.f_globals
    package = module_globals.get("__package__")
    if package:
        return package
    spec = module_globals.get("__spec__")
    parent = getattr(spec, "parent", None)
    return parent or None


def _is_missing_module(exc: ModuleNotFoundError, absolute_name: str) -> bool:
    """Return ``True`` when *exc* is about *absolute_name* or one of its parents."""
    missing = exc.name
    if missing is None:
        return True
    return absolute_name == missing or absolute_name.startswith(f"{missing}.")


def _is_lazy(module: object) -> bool:
    # importlib.util.LazyLoader swaps in this class until the first attribute
    # access executes the module; type() does not trigger that access.
    return type(module).__name__ == "_LazyModule"


def resolve_module(module_name: str, package: str | None = None) -> types.ModuleType:
    """Import *module_name* and return the live module object.

    Raises
    ------
    ModuleResolutionError
        When the module cannot be found, a relative name cannot be resolved,
        or the module is loaded lazily and cannot be rewired.
    """
    not_found = f'Could not find given module: "{module_name}"'
    try:
        absolute_name = (
            importlib.util.resolve_name(module_name, package)
            if module_name.startswith(".")
            else module_name
        )
    except (ImportError, ValueError) as exc:
        raise ModuleResolutionError(not_found) from exc

    module = sys.modules.get(absolute_name)
    if module is None:
        try:
            module = importlib.import_module(absolute_name)
        except ModuleNotFoundError as exc:
            if not _is_missing_module(exc, absolute_name):
                raise
            raise ModuleResolutionError(not_found) from exc

    if _is_lazy(module):
        msg = (
            "Mocking a module only works for eagerly loaded modules, but "
            f'"{module_name}" was loaded lazily and has not been executed yet.'
        )
        raise ModuleResolutionError(msg)
    logger.debug("Resolved module %r as %r", module_name, absolute_name)
    return t.cast("types.ModuleType", module)


def check_exports(
    module: object, module_name: str, export_names: t.Iterable[str]
) -> None:
    """Ensure every export exists, is callable and is not spied already."""
    from .spy import Spy

    for name in export_names:
        value = getattr(module, name, _MISSING)
        if value is _MISSING:
            msg = f'The export "{name}" of "{module_name}" does not exist.'
            raise InitializationError(msg)
        if isinstance(value, Spy):
            msg = (
                f'The export "{name}" of "{module_name}" was already spied. '
                "Please make sure to mock it only once at a time."
            )
            raise InitializationError(msg)
        if not callable(value):
            msg = (
                f'The export "{name}" of "{module_name}" is not a function. '
                "Only function exports can be spied."
            )
            raise InitializationError(msg)


__all__ = ["caller_package", "check_exports", "resolve_module"]

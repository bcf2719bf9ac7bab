"""Before-each and after-each hooks run around every test.

By default every test starts by binding the declared mocks and ends by
restoring all non-persistent replacements and clearing every call log. Both
hooks can be swapped through :func:`configure`; the last configuration wins.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as t

from .spy import DEFAULT_SETTINGS, Spy

logger = logging.getLogger(__name__)

Hook = t.Callable[[str | None], None]


def default_before_each(scope: str | None = None) -> None:
    """Bind the mocks of the default scope and of *scope*."""
    Spy.init_mocks(scope)


def default_after_each(scope: str | None = None) -> None:
    """Restore replaced attributes and forget all recorded calls."""
    del scope
    Spy.restore_all()
    Spy.reset_all()


@dc.dataclass(slots=True)
class LifecycleHooks:
    """The active pair of hooks."""

    before_each: Hook = default_before_each
    after_each: Hook = default_after_each


_hooks = LifecycleHooks()


def configure_test_suite(
    *,
    before_each: Hook | None = None,
    after_each: Hook | None = None,
) -> None:
    """Replace the before-each and/or after-each hook."""
    if before_each is not None:
        _hooks.before_each = before_each
    if after_each is not None:
        _hooks.after_each = after_each


def reset_test_suite() -> None:
    """Reinstate the default hooks."""
    _hooks.before_each = default_before_each
    _hooks.after_each = default_after_each


def current_hooks() -> LifecycleHooks:
    """Return a copy of the active hooks."""
    return dc.replace(_hooks)


def configure(
    *,
    use_own_equals: bool | None = None,
    before_each: Hook | None = None,
    after_each: Hook | None = None,
) -> None:
    """Configure defaults for new spies and the test-suite hooks.

    Parameters
    ----------
    use_own_equals:
        Default for :meth:`Spy.configure`'s ``use_own_equals`` on spies
        created afterwards.
    before_each, after_each:
        Hooks run around every test; each receives the scope selected for
        the test (or ``None``).
    """
    if use_own_equals is not None:
        DEFAULT_SETTINGS.use_own_equals = use_own_equals
    configure_test_suite(before_each=before_each, after_each=after_each)


def before_each(scope: str | None = None) -> None:
    """Run the active before-each hook."""
    logger.debug("Running before-each hook for scope %r", scope)
    _hooks.before_each(scope)


def after_each(scope: str | None = None) -> None:
    """Run the active after-each hook."""
    logger.debug("Running after-each hook for scope %r", scope)
    _hooks.after_each(scope)


__all__ = [
    "Hook",
    "LifecycleHooks",
    "after_each",
    "before_each",
    "configure",
    "configure_test_suite",
    "current_hooks",
    "default_after_each",
    "default_before_each",
    "reset_test_suite",
]

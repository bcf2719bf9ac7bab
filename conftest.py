"""Global test configuration and shared fixtures."""

from __future__ import annotations

import typing as t

import pytest

from spy_mox import lifecycle, spy

pytest_plugins = ("pytester",)


@pytest.fixture(autouse=True)
def reset_spy_mox_state() -> t.Generator[None, None, None]:
    """Drop mocks, hooks and settings a test leaves behind.

    Module-level declarations made during collection survive; declarations
    added by the test itself are discarded afterwards.
    """
    mocks = spy.mocks
    saved_scopes = {
        scope: list(declarations)
        for scope, declarations in mocks._scopes.items()  # noqa: SLF001
    }
    saved_current = mocks.current_scope
    yield
    spy.registry.restore_all()
    spy.Spy.reset_all()
    mocks._scopes = saved_scopes  # noqa: SLF001
    mocks._current = saved_current  # noqa: SLF001
    lifecycle.reset_test_suite()
    spy.DEFAULT_SETTINGS.use_own_equals = True

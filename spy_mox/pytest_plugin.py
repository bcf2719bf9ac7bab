"""Pytest plugin running the spy-mox lifecycle hooks around every test."""

from __future__ import annotations

import logging
import typing as t

import pytest

from . import lifecycle

logger = logging.getLogger(__name__)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line and ini options for the plugin."""
    group = parser.getgroup("spy_mox")
    group.addoption(
        "--spy-mox-auto-lifecycle",
        action="store_true",
        dest="spy_mox_auto_lifecycle",
        default=None,
        help=(
            "Run the spy-mox before-each/after-each hooks around every test. "
            "Overrides the pytest.ini setting."
        ),
    )
    group.addoption(
        "--no-spy-mox-auto-lifecycle",
        action="store_false",
        dest="spy_mox_auto_lifecycle",
        default=None,
        help=(
            "Do not run the spy-mox hooks around tests. "
            "Overrides the pytest.ini setting."
        ),
    )
    parser.addini(
        "spy_mox_auto_lifecycle",
        (
            "Bind declared mocks before every test, restore spied attributes "
            "and reset call logs afterwards."
        ),
        type="bool",
        default=True,
    )
    parser.addini(
        "spy_mox_use_own_equals",
        "Default for comparing arguments with their own __eq__ implementation.",
        type="bool",
        default=True,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register plugin-specific markers and apply ini defaults."""
    config.addinivalue_line(
        "markers",
        (
            "spy_mox(scope: str | None = None, auto_lifecycle: bool = True): "
            "select the mock scope initialised for a single test or disable "
            "the spy-mox hooks for it."
        ),
    )
    # only an explicit ini value overrides settings made in conftest modules
    if "spy_mox_use_own_equals" in config.inicfg:
        lifecycle.configure(
            use_own_equals=bool(config.getini("spy_mox_use_own_equals"))
        )


def _marker_kwargs(request: pytest.FixtureRequest) -> dict[str, t.Any]:
    marker = request.node.get_closest_marker("spy_mox")
    if marker is None:
        return {}
    return dict(marker.kwargs)


def _auto_lifecycle_enabled(request: pytest.FixtureRequest) -> bool:
    """Return whether the hooks should run for this test."""
    # Priority order: marker > CLI option > INI setting
    marker_kwargs = _marker_kwargs(request)
    if "auto_lifecycle" in marker_kwargs:
        return bool(marker_kwargs["auto_lifecycle"])

    config = request.config
    cli_value = config.getoption("spy_mox_auto_lifecycle")
    if cli_value is not None:
        return bool(cli_value)

    return bool(config.getini("spy_mox_auto_lifecycle"))


def _marker_scope(request: pytest.FixtureRequest) -> str | None:
    """Return the mock scope requested by the ``spy_mox`` marker."""
    scope = _marker_kwargs(request).get("scope")
    if scope is None:
        return None
    if not isinstance(scope, str):
        msg = f"spy_mox marker scope must be a string, got {type(scope).__name__}"
        raise TypeError(msg)
    return scope


@pytest.fixture(autouse=True)
def _spy_mox_lifecycle(request: pytest.FixtureRequest) -> t.Generator[None, None, None]:
    """Run the before-each hook, the test, then the after-each hook."""
    if not _auto_lifecycle_enabled(request):
        yield
        return
    scope = _marker_scope(request)
    try:
        lifecycle.before_each(scope)
    except Exception:
        logger.exception("Error during spy_mox before-each hook")
        # spies bound before the failure must not leak into other tests
        lifecycle.after_each(scope)
        raise
    try:
        yield
    finally:
        try:
            lifecycle.after_each(scope)
        except Exception:
            logger.exception("Error during spy_mox after-each hook")
            raise

"""Example tests demonstrating module-level mock declarations."""

from __future__ import annotations

import pytest

import _weather
from spy_mox import Spy, set_scope

weather = Spy.mock_module("_weather", "fetch_temperature")

set_scope("offline")
offline = Spy.mock_module("_weather", "report")
set_scope()


def test_mocked_export_is_used_by_the_module() -> None:
    """The module's own lookups hit the spy while the test runs."""
    weather.fetch_temperature.returns(21.5)

    assert _weather.report("Berlin") == "Berlin: 21.5 degrees"
    weather.fetch_temperature.was_called_with("Berlin")


def test_each_test_gets_fresh_spies() -> None:
    """Call logs and behavior do not leak between tests."""
    weather.fetch_temperature.was_not_called()
    assert weather.fetch_temperature("x") is None


@pytest.mark.spy_mox(scope="offline")
def test_scope_selected_by_marker() -> None:
    """Named scopes are bound only for tests asking for them."""
    offline.report.returns("unavailable")

    assert _weather.report("Oslo") == "unavailable"
    weather.fetch_temperature.was_not_called()

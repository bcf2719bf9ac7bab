# ruff: noqa: S101
"""pytest-bdd steps creating, calling and verifying spies."""

from __future__ import annotations

import typing as t

import pytest
from pytest_bdd import given, parsers, then, when

from spy_mox import Spy, SpyMoxError, VerificationError


@given(parsers.cfparse('a spy named "{name}"'), target_fixture="spy")
def create_spy(name: str) -> Spy:
    """Create a free spy."""
    return Spy(name)


@given(
    parsers.cfparse('an object whose method "{method}" returns "{value}"'),
    target_fixture="target",
)
def create_target(method: str, value: str) -> object:
    """Build an object with a single method returning *value*."""
    cls = type("Target", (), {method: lambda self: value})
    return cls()


@when(parsers.cfparse('the spy is configured to return "{first}" then "{second}"'))
def configure_returns(spy: Spy, first: str, second: str) -> None:
    """Queue two return values."""
    spy.returns(first, second)


@when(parsers.cfparse('the spy is configured to throw "{message}"'))
def configure_throws(spy: Spy, message: str) -> None:
    """Make every call raise *message*."""
    spy.throws(message)


@when(
    parsers.cfparse('the spy is called {count:d} times with "{value}"'),
    target_fixture="results",
)
def call_spy_repeatedly(spy: Spy, count: int, value: str) -> list[t.Any]:
    """Call the spy *count* times and keep the results."""
    return [spy(value) for _ in range(count)]


@when(parsers.cfparse('the spy is called with "{value}"'))
def call_spy(spy: Spy, value: str) -> None:
    """Call the spy once."""
    spy(value)


@when(
    parsers.cfparse('the spy is called with "{value}" expecting an error'),
    target_fixture="error",
)
def call_spy_expecting_error(spy: Spy, value: str) -> SpyMoxError:
    """Call the spy and capture the raised error."""
    with pytest.raises(SpyMoxError) as exc:
        spy(value)
    return exc.value


@when(
    parsers.cfparse('a spy replaces "{method}" returning "{value}"'),
    target_fixture="spy",
)
def replace_method(target: object, method: str, value: str) -> Spy:
    """Spy on *method* of the target object."""
    return Spy.on(target, method).returns(value)


@when(parsers.cfparse("the spy becomes transparent after {count:d} call"))
def become_transparent(spy: Spy, count: int) -> None:
    """Forward calls to the original after *count* calls."""
    spy.transparent_after(count)


@when("all spies are restored")
def restore_spies() -> None:
    """Put every replaced attribute back."""
    Spy.restore_all()


@then(parsers.cfparse('the results should be "{expected}"'))
def check_results(results: list[t.Any], expected: str) -> None:
    """Compare the collected results with a comma separated list."""
    assert results == expected.split(",")


@then(parsers.cfparse("the spy should have been called {count:d} times"))
def check_call_count(spy: Spy, count: int) -> None:
    """Verify the number of recorded calls."""
    spy.was_called(count)


@then(
    parsers.cfparse('expecting a call with "{value}" should fail mentioning "{text}"'),
    target_fixture="failure",
)
def check_failed_expectation(spy: Spy, value: str, text: str) -> str:
    """Expect ``was_called_with`` to fail with *text* in its message."""
    with pytest.raises(VerificationError) as exc:
        spy.was_called_with(value)
    message = str(exc.value)
    assert text in message
    return message


@then(parsers.cfparse('the failure should mention "{text}"'))
def check_failure_text(failure: str, text: str) -> None:
    """Ensure the failure message contains *text*."""
    assert text in failure


@then(parsers.cfparse('calling "{method}" should give "{expected}"'))
def check_method_result(target: object, method: str, expected: str) -> None:
    """Call the target's method once."""
    assert getattr(target, method)() == expected


@then(parsers.cfparse('calling "{method}" twice should give "{expected}"'))
def check_method_results(target: object, method: str, expected: str) -> None:
    """Call the target's method twice."""
    results = [getattr(target, method)() for _ in range(2)]
    assert results == expected.split(",")


@then(parsers.cfparse('the error message should be "{text}"'))
def check_error_message(error: Exception, text: str) -> None:
    """Compare the captured error's message."""
    assert str(error) == text

"""Unit tests for declared mocks and their scopes."""

from __future__ import annotations

import pytest

from spy_mox import spy as spy_module
from spy_mox.errors import InitializationError
from spy_mox.mock import DEFAULT_SCOPE, Mock, describe_scope
from spy_mox.spy import Spy, set_scope


class Client:
    """Target object for mocks."""

    def fetch(self) -> str:
        return "fetched"

    def store(self, value: object) -> bool:
        del value
        return True


class TestMockDeclaration:
    """Declaring and binding mocks."""

    def test_members_raise_until_initialised(self) -> None:
        """Placeholders name the method that was not bound."""
        mock = Spy.mock(Client(), "fetch")
        with pytest.raises(
            InitializationError, match="Method 'fetch' was not initialized on Mock."
        ):
            mock.fetch()

    def test_declaring_does_not_touch_target(self) -> None:
        """Targets stay untouched until ``init_mocks``."""
        client = Client()
        Spy.mock(client, "fetch")
        assert client.fetch() == "fetched"

    def test_init_binds_spies(self) -> None:
        """After initialisation every member is the live spy."""
        client = Client()
        mock = Spy.mock(client, "fetch", "store")
        Spy.init_mocks()
        assert isinstance(mock.fetch, Spy)
        assert client.fetch is mock.fetch
        mock.fetch.returns("mocked")
        assert client.fetch() == "mocked"
        client.store(1)
        mock.store.was_called_with(1)

    def test_init_is_idempotent_while_active(self) -> None:
        """Repeated initialisation keeps the bound spies."""
        client = Client()
        mock = Spy.mock(client, "fetch")
        Spy.init_mocks()
        first = mock.fetch
        Spy.init_mocks()
        assert mock.fetch is first

    def test_restore_allows_rebinding(self) -> None:
        """Restoring deactivates the declaration for the next test."""
        client = Client()
        mock = Spy.mock(client, "fetch")
        Spy.init_mocks()
        first = mock.fetch
        Spy.restore_all()
        assert client.fetch() == "fetched"
        Spy.init_mocks()
        assert mock.fetch is not first
        assert client.fetch is mock.fetch

    def test_calls_factory(self) -> None:
        """The factory provides the initial behavior per method."""
        client = Client()
        mock = Spy.mock(
            client, "fetch", "store", calls_factory=lambda name: lambda *_: name
        )
        Spy.init_mocks()
        assert client.fetch() == "fetch"
        assert client.store(1) == "store"
        mock.store.was_called_with(1)

    def test_repr(self) -> None:
        """The repr lists the mocked methods."""
        assert repr(Mock(["a", "b"])) == "Mock(a, b)"

    def test_init_failure_names_the_scope(self) -> None:
        """Unbindable declarations fail with the scope in the message."""
        client = Client()
        Spy.mock(client, "missing")
        with pytest.raises(InitializationError) as exc:
            Spy.init_mocks()
        assert str(exc.value) == (
            "Could not initialize mock for global scope, because:\n"
            "The object attribute 'missing' was: None\n\n"
            "You should only spy on functions!"
        )


class TestScopes:
    """Named scopes collect declarations separately."""

    def test_named_scope_only_bound_on_request(self) -> None:
        """Initialising scope B leaves declarations of scope A unbound."""
        first = Client()
        second = Client()
        set_scope("A")
        mock_a = Spy.mock(first, "fetch")
        set_scope("B")
        mock_b = Spy.mock(second, "fetch")
        set_scope()
        Spy.init_mocks("B")
        assert isinstance(mock_b.fetch, Spy)
        assert not isinstance(mock_a.fetch, Spy)
        assert first.fetch() == "fetched"

    def test_init_without_scope_leaves_named_scopes_unbound(self) -> None:
        """Only the default scope is bound when no scope is requested."""
        target = Client()
        set_scope("A")
        mock_a = Spy.mock(target, "fetch")
        set_scope("B")
        Spy.init_mocks()
        assert not isinstance(mock_a.fetch, Spy)
        assert target.fetch() == "fetched"

    def test_default_scope_always_bound(self) -> None:
        """Default declarations are bound together with any named scope."""
        shared = Client()
        scoped = Client()
        shared_mock = Spy.mock(shared, "fetch")
        set_scope("scoped")
        scoped_mock = Spy.mock(scoped, "fetch")
        set_scope()
        Spy.init_mocks("scoped")
        assert isinstance(shared_mock.fetch, Spy)
        assert isinstance(scoped_mock.fetch, Spy)

    def test_setting_scope_again_clears_it(self) -> None:
        """Re-entering a scope name starts it afresh."""
        set_scope("again")
        Spy.mock(Client(), "fetch")
        set_scope("again")
        assert spy_module.mocks.declarations("again") == []

    def test_current_scope(self) -> None:
        """The current scope changes with ``set_scope``."""
        assert spy_module.mocks.current_scope is DEFAULT_SCOPE
        set_scope("named")
        assert spy_module.mocks.current_scope == "named"
        set_scope()
        assert spy_module.mocks.current_scope is DEFAULT_SCOPE

    def test_init_failure_in_named_scope(self) -> None:
        """Named scopes are quoted in error messages."""
        set_scope("broken")
        Spy.mock(Client(), "missing")
        set_scope()
        with pytest.raises(
            InitializationError,
            match='^Could not initialize mock for scope "broken", because:\n',
        ):
            Spy.init_mocks("broken")


def test_describe_scope() -> None:
    """Scope names are rendered for messages."""
    assert describe_scope(DEFAULT_SCOPE) == "global scope"
    assert describe_scope("x") == 'scope "x"'
    assert repr(DEFAULT_SCOPE) == "<global scope>"

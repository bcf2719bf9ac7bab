"""Module whose exports are rewired by the module-mocking tests."""

from __future__ import annotations

from spy_mox.mock import Mock
from spy_mox.spy import Spy

GREETING = "hello"


def greet(name: str) -> str:
    return f"{GREETING} {name}"


def shout(name: str) -> str:
    return greet(name).upper()


def welcome(name: str) -> str:
    """Call ``greet`` through the module namespace."""
    return f"{greet(name)}!"


def declare_relative_mock() -> Mock:
    """Declare a mock using a name relative to this module's package."""
    return Spy.mock_module("._getter_module", "compute")

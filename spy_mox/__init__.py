"""Spies, scoped mocks and module rewiring for Python tests.

Create a spy with ``Spy("name")`` or replace a live attribute with
``Spy.on(obj, "method")``; configure its behavior with ``returns``, ``calls``,
``throws``, ``resolves``, ``rejects`` or ``transparent_after``; assert with
``was_called``, ``was_called_with`` or ``has_call_history``. The bundled pytest
plugin restores every replaced attribute after each test.
"""

from __future__ import annotations

from .comparators import (
    COMPARE,
    IGNORE,
    Any,
    Comparator,
    Contains,
    IsA,
    Predicate,
    Regex,
    StartsWith,
)
from .differ import difference_of
from .errors import (
    ConfigurationError,
    InitializationError,
    ModuleResolutionError,
    SpyMoxError,
    ThrownError,
    VerificationError,
)
from .lifecycle import configure, configure_test_suite
from .mock import DEFAULT_SCOPE, Mock, MockRegistry
from .registry import SpyRegistry
from .serializer import serialize
from .spy import CallRecord, Spy, set_scope

__all__ = [
    "COMPARE",
    "DEFAULT_SCOPE",
    "IGNORE",
    "Any",
    "CallRecord",
    "Comparator",
    "ConfigurationError",
    "Contains",
    "InitializationError",
    "IsA",
    "Mock",
    "MockRegistry",
    "ModuleResolutionError",
    "Predicate",
    "Regex",
    "Spy",
    "SpyMoxError",
    "SpyRegistry",
    "StartsWith",
    "ThrownError",
    "VerificationError",
    "configure",
    "configure_test_suite",
    "difference_of",
    "serialize",
    "set_scope",
]

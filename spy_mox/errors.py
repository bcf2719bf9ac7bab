"""Custom exceptions raised by spy-mox."""

from __future__ import annotations


class SpyMoxError(Exception):
    """Base class for spy-mox specific errors."""


class ConfigurationError(SpyMoxError):
    """Raised when a spy is configured in an unsupported way."""


class InitializationError(SpyMoxError):
    """Raised when a spy or mock cannot be bound to its target."""


class ModuleResolutionError(SpyMoxError):
    """Raised when a module cannot be resolved or rewired for mocking."""


class VerificationError(SpyMoxError, AssertionError):
    """Raised when an assertion about recorded calls fails."""


class ThrownError(SpyMoxError):
    """Error produced by spies configured with ``throws`` or ``rejects``."""

    def __init__(self, message: str, *, spy_name: str) -> None:
        super().__init__(message)
        self.spy_name = spy_name


__all__ = [
    "ConfigurationError",
    "InitializationError",
    "ModuleResolutionError",
    "SpyMoxError",
    "ThrownError",
    "VerificationError",
]

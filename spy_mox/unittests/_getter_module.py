"""Module exposing an export through a read-only property."""

from __future__ import annotations

import sys
import types


def _compute() -> int:
    return 42


class _ReadOnlyModule(types.ModuleType):
    @property
    def compute(self) -> object:
        return _compute


sys.modules[__name__].__class__ = _ReadOnlyModule

"""Bookkeeping for attributes replaced by spies."""

from __future__ import annotations

import collections.abc as cabc
import contextlib
import dataclasses as dc
import inspect
import logging
import typing as t

from .errors import InitializationError

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class RegistryEntry:
    """A single replaced attribute and everything needed to undo it.

    ``original`` is the value read through normal attribute access and is used
    when forwarding calls. ``raw`` is the value stored in the container's own
    namespace; restoring writes it back when ``owned`` is set and otherwise
    deletes the override so the inherited attribute shows through again.
    """

    container: object
    key: str
    original: object
    raw: object
    owned: bool
    active: bool = True
    persistent: bool = False
    on_restore: t.Callable[[], None] | None = None


def _is_mapping(container: object) -> bool:
    return isinstance(container, cabc.MutableMapping)


def current_value(container: object, key: str) -> object | None:
    """Return the value stored under *key*, or ``None`` when there is none."""
    if _is_mapping(container):
        return t.cast("cabc.MutableMapping[str, object]", container).get(key)
    return getattr(container, key, None)


def _capture(container: object, key: str) -> tuple[object, object, bool]:
    """Return ``(original, raw, owned)`` for ``container.key``."""
    if _is_mapping(container):
        value = t.cast("cabc.MutableMapping[str, object]", container)[key]
        return value, value, True
    original = getattr(container, key)
    try:
        namespace = vars(container)
    except TypeError:
        # no __dict__ (e.g. __slots__): the attribute lives on the instance
        return original, original, True
    if key in namespace:
        return original, namespace[key], True
    return original, None, False


def _check_writable(container: object, key: str) -> None:
    if _is_mapping(container) or isinstance(container, type):
        return
    descriptor = inspect.getattr_static(type(container), key, None)
    if isinstance(descriptor, property) and descriptor.fset is None:
        msg = f"The attribute '{key}' has only a getter and cannot be replaced."
        raise InitializationError(msg)


def _assign(container: object, key: str, value: object) -> None:
    if _is_mapping(container):
        t.cast("cabc.MutableMapping[str, object]", container)[key] = value
        return
    _check_writable(container, key)
    try:
        setattr(container, key, value)
    except (AttributeError, TypeError) as exc:
        msg = f"The attribute '{key}' has only a getter and cannot be replaced: {exc}"
        raise InitializationError(msg) from exc


class SpyRegistry:
    """Track replaced attributes so they can be restored later.

    Handles returned by :meth:`push` are indices into an append-only list and
    are never reused, not even after the entry was restored.
    """

    def __init__(self) -> None:
        self._entries: list[RegistryEntry] = []

    def __len__(self) -> int:
        """Return the number of entries ever pushed."""
        return len(self._entries)

    def _entry(self, handle: int | None) -> RegistryEntry | None:
        if handle is None or not 0 <= handle < len(self._entries):
            return None
        return self._entries[handle]

    def push(self, container: object, key: str) -> int:
        """Capture ``container.key`` and return a handle for the new entry."""
        original, raw, owned = _capture(container, key)
        handle = len(self._entries)
        self._entries.append(
            RegistryEntry(
                container=container,
                key=key,
                original=original,
                raw=raw,
                owned=owned,
            )
        )
        logger.debug("Registered replacement %d for attribute %r", handle, key)
        return handle

    def apply(self, handle: int, replacement: object) -> None:
        """Write *replacement* onto the attribute tracked by *handle*.

        When the attribute cannot be written the entry is deactivated and an
        :class:`InitializationError` is raised.
        """
        entry = self._entries[handle]
        try:
            _assign(entry.container, entry.key, replacement)
        except InitializationError:
            entry.active = False
            raise

    def get_original_method(self, handle: int | None) -> object | None:
        """Return the replaced value while the entry is active."""
        entry = self._entry(handle)
        if entry is None or not entry.active:
            return None
        return entry.original

    def is_active(self, handle: int | None) -> bool:
        """Return ``True`` while the replacement for *handle* is in place."""
        entry = self._entry(handle)
        return entry is not None and entry.active

    def persist(self, handle: int, persistent: bool) -> None:  # noqa: FBT001
        """Exclude (or re-include) the entry from :meth:`restore_all`."""
        self._entries[handle].persistent = persistent

    def on_restore(self, handle: int, callback: t.Callable[[], None] | None) -> None:
        """Register *callback* to run once the entry has been restored."""
        self._entries[handle].on_restore = callback

    def restore(self, handle: int | None) -> None:
        """Put the original value back; a no-op for inactive entries."""
        entry = self._entry(handle)
        if entry is None or not entry.active:
            return
        container, key = entry.container, entry.key
        if _is_mapping(container):
            t.cast("cabc.MutableMapping[str, object]", container)[key] = entry.raw
        elif entry.owned:
            setattr(container, key, entry.raw)
        else:
            with contextlib.suppress(AttributeError):
                delattr(container, key)
        entry.active = False
        logger.debug("Restored replacement %d for attribute %r", handle, key)
        if entry.on_restore is not None:
            entry.on_restore()

    def restore_all(self) -> None:
        """Restore every active, non-persistent entry in registration order."""
        for handle, entry in enumerate(self._entries):
            if entry.active and not entry.persistent:
                self.restore(handle)


__all__ = ["RegistryEntry", "SpyRegistry", "current_value"]

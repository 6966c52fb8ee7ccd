from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set

from .settings import get_settings

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


@dataclass
class _Registration:
    callback: Listener
    once: bool = False


def _describe(callback: Listener) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


class ListenerRegistry:
    """Ordered, synchronous observer primitive.

    Listeners are kept per event name in registration order. ``emit`` calls
    them one after another with the emitted arguments; an exception raised by
    a listener stops the emit and propagates to the caller.
    """

    def __init__(self, max_listeners: Optional[int] = None) -> None:
        self._listeners: Dict[str, List[_Registration]] = {}
        self._max_listeners = max_listeners
        self._leak_warned: Set[str] = set()

    # ------------------------ Registration ------------------------
    def on(self, event_name: str, fn: Listener) -> "ListenerRegistry":
        """Append ``fn`` to the listeners of ``event_name``."""
        return self._add(event_name, fn, once=False)

    add_listener = on

    def once(self, event_name: str, fn: Listener) -> "ListenerRegistry":
        """Append ``fn`` so that it is removed right before its first call."""
        return self._add(event_name, fn, once=True)

    def remove_listener(self, event_name: str, fn: Listener) -> "ListenerRegistry":
        """Remove the most recent registration of ``fn``; unknown listeners are ignored."""
        registrations = self._listeners.get(event_name)
        if not registrations:
            return self
        for index in range(len(registrations) - 1, -1, -1):
            if registrations[index].callback == fn:
                del registrations[index]
                logger.debug("Removed listener %s from '%s'", _describe(fn), event_name)
                break
        if not registrations:
            del self._listeners[event_name]
            self._leak_warned.discard(event_name)
        return self

    off = remove_listener

    def remove_all_listeners(self, event_name: Optional[str] = None) -> "ListenerRegistry":
        if event_name is None:
            self._listeners.clear()
            self._leak_warned.clear()
        else:
            self._listeners.pop(event_name, None)
            self._leak_warned.discard(event_name)
        return self

    def _add(self, event_name: str, fn: Listener, once: bool) -> "ListenerRegistry":
        if not callable(fn):
            raise TypeError("listener must be callable")
        registrations = self._listeners.setdefault(event_name, [])
        registrations.append(_Registration(fn, once=once))
        logger.debug("Added %slistener %s to '%s'", "once " if once else "", _describe(fn), event_name)
        self._check_leak(event_name, len(registrations))
        return self

    # ------------------------ Limits ------------------------
    @property
    def max_listeners(self) -> int:
        if self._max_listeners is None:
            return get_settings().max_listeners
        return self._max_listeners

    def set_max_listeners(self, value: int) -> "ListenerRegistry":
        if value < 0:
            raise ValueError("max_listeners must be >= 0")
        self._max_listeners = value
        return self

    def _check_leak(self, event_name: str, count: int) -> None:
        limit = self.max_listeners
        if limit and count > limit and event_name not in self._leak_warned:
            self._leak_warned.add(event_name)
            logger.warning(
                "Possible listener leak: %d listeners registered for '%s' on %r (max %d)",
                count,
                event_name,
                self,
                limit,
            )

    # ------------------------ Queries ------------------------
    def listeners(self, event_name: str) -> List[Listener]:
        return [r.callback for r in self._listeners.get(event_name, [])]

    def listener_count(self, event_name: str) -> int:
        return len(self._listeners.get(event_name, []))

    def event_names(self) -> List[str]:
        return list(self._listeners)

    # ------------------------ Notify ------------------------
    def emit(self, event_name: str, *args: Any, **kwargs: Any) -> bool:
        """Call every listener of ``event_name``; return whether there were any."""
        registrations = list(self._listeners.get(event_name, []))
        if not registrations:
            return False
        logger.debug("Emitting '%s' to %d listeners", event_name, len(registrations))
        for registration in registrations:
            if registration.once:
                self._discard(event_name, registration)
            registration.callback(*args, **kwargs)
        return True

    def _discard(self, event_name: str, registration: _Registration) -> None:
        registrations = self._listeners.get(event_name)
        if registrations is None:
            return
        for index, existing in enumerate(registrations):
            if existing is registration:
                del registrations[index]
                break
        if not registrations:
            del self._listeners[event_name]
            self._leak_warned.discard(event_name)

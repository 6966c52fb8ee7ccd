from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional

if TYPE_CHECKING:
    from .tree import Node

RESULT_KEY = "val"


class EventFacade:
    """Mutable carrier threaded through one dispatch.

    Attributes:
        params: read-only view of the caller's parameters, minus the
            reserved ``"val"`` key which seeds :attr:`value` instead.
        target: node on which the dispatch started. Set by ``fire``.
        current_target: node whose listeners are currently running. Updated
            by the engine as the traversal moves.
    """

    def __init__(self, params: Optional[Mapping[str, Any]] = None) -> None:
        data = dict(params or {})
        self._value: Any = None
        self._has_value = False
        if RESULT_KEY in data:
            self.set_value(data.pop(RESULT_KEY))
        self.params: Mapping[str, Any] = MappingProxyType(data)
        self.target: Optional["Node"] = None
        self.current_target: Optional["Node"] = None

    def get_value(self) -> Any:
        """Return the result value, ``None`` when nothing was set."""
        return self._value

    def set_value(self, value: Any) -> Any:
        self._value = value
        self._has_value = True
        return value

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self.set_value(value)

    @property
    def has_value(self) -> bool:
        return self._has_value

    def __repr__(self) -> str:
        return (
            f"EventFacade(value={self._value!r}, params={dict(self.params)!r}, "
            f"target={self.target!r}, current_target={self.current_target!r})"
        )

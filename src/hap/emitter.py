from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from . import dispatch, tree
from .facade import EventFacade
from .phases import after_event, before_event
from .registry import Listener, ListenerRegistry
from .tree import Node


class EventEmitter(ListenerRegistry, Node):
    """Listener registry that takes part in a propagation tree.

    Listeners registered with :meth:`before` run on the way down, plain
    listeners and :meth:`after` listeners run on the way back up. Every
    listener receives the dispatch's :class:`EventFacade`.

    Example::

        root, leaf = EventEmitter("root"), EventEmitter("leaf")
        root.add_child(leaf)
        root.on("save", lambda e: e.set_value("saved"))
        leaf.fire("save")  # -> "saved"
    """

    def __init__(self, name: Optional[str] = None, max_listeners: Optional[int] = None) -> None:
        ListenerRegistry.__init__(self, max_listeners=max_listeners)
        Node.__init__(self)
        self.name = name

    def __repr__(self) -> str:
        label = self.name if self.name is not None else hex(id(self))
        return f"<EventEmitter {label}>"

    # ------------------------ Phase aliases ------------------------
    def before(self, event_name: str, fn: Listener) -> "EventEmitter":
        self.on(before_event(event_name), fn)
        return self

    def once_before(self, event_name: str, fn: Listener) -> "EventEmitter":
        self.once(before_event(event_name), fn)
        return self

    def remove_before(self, event_name: str, fn: Listener) -> "EventEmitter":
        self.remove_listener(before_event(event_name), fn)
        return self

    def after(self, event_name: str, fn: Listener) -> "EventEmitter":
        self.on(after_event(event_name), fn)
        return self

    def once_after(self, event_name: str, fn: Listener) -> "EventEmitter":
        self.once(after_event(event_name), fn)
        return self

    def remove_after(self, event_name: str, fn: Listener) -> "EventEmitter":
        self.remove_listener(after_event(event_name), fn)
        return self

    # ------------------------ Structure ------------------------
    def add_child(self, child: Node) -> "EventEmitter":
        tree.attach(self, child)
        return self

    def set_parent(self, parent: Node) -> "EventEmitter":
        tree.attach_to_parent(self, parent)
        return self

    def remove_child(self, child: Node) -> "EventEmitter":
        if child.parent is self:
            tree.detach(child)
        return self

    def detach(self) -> "EventEmitter":
        tree.detach(self)
        return self

    @property
    def is_leaf(self) -> bool:
        return tree.is_leaf(self)

    # ------------------------ Dispatch ------------------------
    def fire(self, event_name: str, args: Optional[Union[Mapping[str, Any], EventFacade]] = None) -> Any:
        """Capture ``event_name`` through this subtree, bubble it back up, return the value."""
        return dispatch.fire(self, event_name, args)

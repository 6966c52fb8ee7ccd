"""Propagation tree structure.

Children lists are owned by the parent. The parent link is a weak
back-reference used only for upward traversal; both sides are updated
together by :func:`attach` and :func:`detach`.
"""
from __future__ import annotations

import abc
import logging
import weakref
from typing import Any, Iterator, List, Optional

from .errors import CycleError, InvalidNodeError

logger = logging.getLogger(__name__)


class Node(abc.ABC):
    """Capability every participant of a propagation tree must provide."""

    def __init__(self) -> None:
        self.children: List[Any] = []
        self._parent_ref: Optional[weakref.ReferenceType] = None
        self._foreign_parent: Optional[Any] = None

    @property
    def parent(self) -> Optional[Any]:
        if self._parent_ref is not None:
            return self._parent_ref()
        return self._foreign_parent

    @parent.setter
    def parent(self, value: Optional[Any]) -> None:
        # Only Node parents are weak; anything else is kept as-is and skipped by traversal.
        if isinstance(value, Node):
            self._parent_ref, self._foreign_parent = weakref.ref(value), None
        else:
            self._parent_ref, self._foreign_parent = None, value

    @abc.abstractmethod
    def emit(self, event_name: str, *args: Any, **kwargs: Any) -> bool:
        """Synchronously notify the listeners of ``event_name``."""


def is_node(obj: Any) -> bool:
    return isinstance(obj, Node)


def valid_children(node: Node) -> List[Node]:
    """Children of ``node`` that satisfy the Node capability, in attach order."""
    return [child for child in node.children if is_node(child)]


def is_leaf(node: Node) -> bool:
    return not any(is_node(child) for child in node.children)


def has_valid_parent(node: Node) -> bool:
    return is_node(node.parent)


def ancestors(node: Node) -> Iterator[Node]:
    """Yield the valid parents of ``node`` from nearest to root."""
    seen = {id(node)}
    current = node
    while has_valid_parent(current):
        current = current.parent
        if id(current) in seen:
            # Cycle introduced by assigning ``parent`` directly.
            return
        seen.add(id(current))
        yield current


def root_of(node: Node) -> Node:
    root = node
    for root in ancestors(node):
        pass
    return root


def _require_node(obj: Any, role: str) -> None:
    if not is_node(obj):
        raise InvalidNodeError(f"{role} must be a Node, got {type(obj).__name__}")


def _remove_all(children: List[Any], child: Node) -> None:
    children[:] = [c for c in children if c is not child]


def attach(parent: Node, child: Node) -> Node:
    """Append ``child`` to ``parent.children`` and point it back at ``parent``.

    A child already attached elsewhere is moved. Attaching to the same parent
    twice appends it twice. Raises CycleError if ``child`` is ``parent`` or one
    of its ancestors.
    """
    _require_node(parent, "parent")
    _require_node(child, "child")
    if child is parent or any(a is child for a in ancestors(parent)):
        raise CycleError(f"{child!r} cannot become a descendant of itself")

    previous = child.parent
    if previous is parent:
        logger.warning("%r is already a child of %r; attaching it again", child, parent)
    elif is_node(previous):
        _remove_all(previous.children, child)
        logger.debug("Moved %r from %r to %r", child, previous, parent)

    parent.children.append(child)
    child.parent = parent
    return parent


def attach_to_parent(child: Node, parent: Node) -> Node:
    attach(parent, child)
    return child


def detach(child: Node) -> Optional[Node]:
    """Remove ``child`` from its parent and return the former parent."""
    _require_node(child, "child")
    previous = child.parent
    if is_node(previous):
        _remove_all(previous.children, child)
        logger.debug("Detached %r from %r", child, previous)
    child.parent = None
    return previous if is_node(previous) else None

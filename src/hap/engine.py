"""Capture/bubble traversal for a single dispatch.

A dispatch first captures downward from its origin, notifying ``before``
listeners on every node. Each leaf reached seeds an upward bubble for the
primary event and then for the ``after`` event. Converging bubbles are
deduplicated so that every node sees each phase once per dispatch, and a
parent is only notified after all of its captured children have bubbled.

Dedup state lives on the :class:`Propagation`, not on the nodes, so
sequential and re-entrant dispatches never see each other's flags.
Capture and the upward walk are loops, so tree depth is not bounded by
the interpreter's recursion limit. Bubbling a subtree directly with
:func:`bubble` still recurses.
"""
from __future__ import annotations

import logging
from typing import List, Set, Tuple

from .errors import CycleError
from .facade import EventFacade
from .phases import after_event, before_event
from .tree import Node, has_valid_parent, valid_children

logger = logging.getLogger(__name__)


class Propagation:
    """State of one dispatch: the shared facade and dedup bookkeeping."""

    def __init__(self, facade: EventFacade) -> None:
        self.facade = facade
        self._bubbled: Set[Tuple[int, str]] = set()
        self._scheduled: Set[int] = set()

    def has_bubbled(self, node: Node, event_name: str) -> bool:
        return (id(node), event_name) in self._bubbled

    # ------------------------ Capture ------------------------
    def capture(self, node: Node, event_name: str) -> Node:
        """Capture downward from ``node`` in depth-first pre-order.

        A node's children are read once, after its ``before`` listeners have
        run, so listeners may add or detach children of the node being
        captured. That snapshot is what the node waits for while bubbling.

        Raises CycleError if a node turns up inside its own subtree, which
        only happens when ``children`` was edited without :func:`attach`.
        """
        after_name = after_event(event_name)
        pending: List[Tuple[Node, bool]] = [(node, True)]
        open_path: Set[int] = set()
        while pending:
            current, entering = pending.pop()
            if not entering:
                open_path.discard(id(current))
                continue
            if id(current) in open_path:
                raise CycleError(f"{current!r} is its own descendant")
            open_path.add(id(current))
            pending.append((current, False))

            self.facade.current_target = current
            self._bubbled.discard((id(current), event_name))
            self._bubbled.discard((id(current), after_name))

            logger.debug("Capturing '%s' at %r", event_name, current)
            current.emit(before_event(event_name), self.facade)

            children = valid_children(current)
            if children:
                self._scheduled.update(id(child) for child in children)
                pending.extend((child, True) for child in reversed(children))
            else:
                self.bubble(current, event_name)
                self.bubble(current, after_name)
        return node

    # ------------------------ Bubble ------------------------
    def bubble(self, node: Node, event_name: str) -> Node:
        self.facade.current_target = node
        if not self.has_bubbled(node, event_name):
            # Only reached for a non-leaf when bubble is called directly.
            for child in valid_children(node):
                if not self.has_bubbled(child, event_name):
                    self._bubble_subtree(child, event_name)
            self._notify(node, event_name)
        self._ascend(node, event_name)
        return node

    def _bubble_subtree(self, node: Node, event_name: str) -> None:
        for child in valid_children(node):
            if not self.has_bubbled(child, event_name):
                self._bubble_subtree(child, event_name)
        self._notify(node, event_name)

    def _ascend(self, node: Node, event_name: str) -> None:
        while has_valid_parent(node):
            parent = node.parent
            if self.has_bubbled(parent, event_name) or not self._ready(parent, event_name):
                return
            self._notify(parent, event_name)
            node = parent

    def _ready(self, node: Node, event_name: str) -> bool:
        """True once every scheduled child of ``node`` has bubbled ``event_name``."""
        for child in valid_children(node):
            if id(child) in self._scheduled and not self.has_bubbled(child, event_name):
                return False
        return True

    def _notify(self, node: Node, event_name: str) -> None:
        self.facade.current_target = node
        logger.debug("Bubbling '%s' at %r", event_name, node)
        node.emit(event_name, self.facade)
        self._bubbled.add((id(node), event_name))


def capture(node: Node, event_name: str, facade: EventFacade) -> Node:
    """Run a capture pass from ``node`` with fresh dedup state."""
    return Propagation(facade).capture(node, event_name)


def bubble(node: Node, event_name: str, facade: EventFacade) -> Node:
    """Bubble ``event_name`` from ``node`` (its unbubbled subtree first) to the root."""
    return Propagation(facade).bubble(node, event_name)

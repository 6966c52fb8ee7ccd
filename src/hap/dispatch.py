from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .engine import Propagation
from .errors import InvalidNodeError
from .facade import EventFacade
from .tree import Node, is_node

logger = logging.getLogger(__name__)


def fire(node: Node, event_name: str, args: Optional[Union[Mapping[str, Any], EventFacade]] = None) -> Any:
    """Dispatch ``event_name`` from ``node`` and return the facade's final value.

    ``args`` may be an existing EventFacade, which is reused as-is so that
    forwarded dispatches share one value, or a mapping of parameters.
    """
    if not is_node(node):
        raise InvalidNodeError(f"cannot fire on {type(node).__name__}; expected a Node")
    if isinstance(args, EventFacade):
        facade = args
    elif args is None or isinstance(args, Mapping):
        facade = EventFacade(args)
    else:
        raise TypeError(f"args must be a mapping or EventFacade, got {type(args).__name__}")

    facade.target = node
    logger.debug("Firing '%s' from %r", event_name, node)
    Propagation(facade).capture(node, event_name)
    return facade.get_value()

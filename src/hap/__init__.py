"""
hap: hierarchical event propagation.

Emitters form a tree. ``fire`` sends one event down the subtree ("before"
listeners) and back up to the root (primary then "after" listeners), with
every node notified once per phase per dispatch.
"""
from .dispatch import fire
from .emitter import EventEmitter
from .engine import Propagation, bubble, capture
from .errors import CycleError, HapError, InvalidNodeError, SettingsError
from .facade import EventFacade
from .logging_config import configure_logging
from .phases import Phase, after_event, before_event, phase_name
from .registry import ListenerRegistry
from .settings import HapSettings, get_settings, reload_settings
from .tree import (
    Node,
    ancestors,
    attach,
    attach_to_parent,
    detach,
    has_valid_parent,
    is_leaf,
    is_node,
    root_of,
    valid_children,
)

__all__ = [
    "EventEmitter",
    "EventFacade",
    "ListenerRegistry",
    "Node",
    "Propagation",
    "Phase",
    "HapSettings",
    "HapError",
    "CycleError",
    "InvalidNodeError",
    "SettingsError",
    "fire",
    "capture",
    "bubble",
    "attach",
    "attach_to_parent",
    "detach",
    "ancestors",
    "root_of",
    "is_leaf",
    "is_node",
    "has_valid_parent",
    "valid_children",
    "before_event",
    "after_event",
    "phase_name",
    "get_settings",
    "configure_logging",
    "reload_settings",
]

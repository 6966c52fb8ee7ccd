from __future__ import annotations

from enum import Enum


class Phase(Enum):
    """Listener phases of a single dispatch."""

    BEFORE = "before"
    ON = "on"
    AFTER = "after"


def phase_name(event_name: str, phase: Phase) -> str:
    """Return the registry key used for ``event_name`` in ``phase``."""
    if phase is Phase.ON:
        return event_name
    return f"{phase.value} {event_name}"


def before_event(event_name: str) -> str:
    return phase_name(event_name, Phase.BEFORE)


def after_event(event_name: str) -> str:
    return phase_name(event_name, Phase.AFTER)

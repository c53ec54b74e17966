"""
Event system for the feedback controls

Input events come from the keyboard layer; control events are emitted by
the parameter integrator and published once per frame by the frame clock.
"""

from models.events.types import EventType
from models.events.base import Event
from models.events.sources import EventSource, KeyboardSource

from models.events.input import KeyStateChangedEvent
from models.events.controls import (
    ControlModeChangedEvent,
    ControlsResetEvent,
    PresetStoredEvent,
    PresetRecalledEvent,
)

__all__ = [
    "EventType",
    "Event",
    "EventSource",
    "KeyboardSource",
    "KeyStateChangedEvent",
    "ControlModeChangedEvent",
    "ControlsResetEvent",
    "PresetStoredEvent",
    "PresetRecalledEvent",
]

"""Input events (keyboard held-key changes)"""

from dataclasses import dataclass
from typing import FrozenSet

from models.enums import InputKey
from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource, KeyboardSource


@dataclass(init=False)
class KeyStateChangedEvent(Event):
    """A key went down or up; carries the resulting held-key set"""
    key: InputKey
    pressed: bool
    held: FrozenSet[InputKey]
    keyboard: KeyboardSource

    def __init__(self, key: InputKey, pressed: bool, held: FrozenSet[InputKey],
                 keyboard: KeyboardSource = KeyboardSource.EVDEV):
        super().__init__(
            type=EventType.KEY_STATE_CHANGED,
            source=EventSource.INPUT,
        )
        self.key = key
        self.pressed = pressed
        self.held = held
        self.keyboard = keyboard

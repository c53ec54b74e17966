"""Events emitted by the parameter integrator"""

from dataclasses import dataclass

from models.enums import MouseMode
from models.events.base import Event
from models.events.types import EventType
from models.events.sources import EventSource


@dataclass(init=False)
class ControlModeChangedEvent(Event):
    old: MouseMode
    new: MouseMode

    def __init__(self, old: MouseMode, new: MouseMode):
        super().__init__(
            type=EventType.CONTROL_MODE_CHANGED,
            source=EventSource.CONTROLS,
        )
        self.old = old
        self.new = new


@dataclass(init=False)
class ControlsResetEvent(Event):
    def __init__(self):
        super().__init__(
            type=EventType.CONTROLS_RESET,
            source=EventSource.CONTROLS,
        )


@dataclass(init=False)
class PresetStoredEvent(Event):
    slot: int

    def __init__(self, slot: int):
        super().__init__(
            type=EventType.PRESET_STORED,
            source=EventSource.CONTROLS,
        )
        self.slot = slot


@dataclass(init=False)
class PresetRecalledEvent(Event):
    slot: int
    chained: bool

    def __init__(self, slot: int, chained: bool):
        """
        Args:
            slot: Recalled preset slot
            chained: True if the new transition starts from a running one
        """
        super().__init__(
            type=EventType.PRESET_RECALLED,
            source=EventSource.CONTROLS,
        )
        self.slot = slot
        self.chained = chained

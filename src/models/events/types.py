from enum import Enum, auto


class EventType(Enum):
    # Input
    KEY_STATE_CHANGED = auto()

    # Controls
    CONTROL_MODE_CHANGED = auto()
    CONTROLS_RESET = auto()

    # Presets
    PRESET_STORED = auto()
    PRESET_RECALLED = auto()

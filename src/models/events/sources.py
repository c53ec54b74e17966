from enum import Enum, auto


class KeyboardSource(Enum):
    EVDEV = auto()
    DUMMY = auto()


class EventSource(Enum):
    """Event source identifiers for application events"""
    INPUT = auto()          # Keyboard, pointer, orientation
    CONTROLS = auto()       # ParameterIntegrator
    API = auto()            # Remote control endpoints

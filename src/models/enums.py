"""
Enums for the feedback control engine
"""

from enum import Enum, auto
from typing import Optional


class MouseMode(Enum):
    """
    What pointer movement steers

    ZOOM: horizontal movement drives rotation, vertical drives zoom
    PAN: pointer movement drives position
    """
    ZOOM = auto()
    PAN = auto()

    def toggled(self) -> "MouseMode":
        return MouseMode.PAN if self is MouseMode.ZOOM else MouseMode.ZOOM


class InputKey(Enum):
    """
    Input identifiers delivered by the input layer as a held-key set

    Values are the evdev key names (without KEY_ prefix and left/right
    qualifiers) the keyboard adapter maps onto each identifier.
    """
    # Zoom
    UP = "UP"
    DOWN = "DOWN"
    I = "I"
    K = "K"

    # Rotation
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    J = "J"
    L = "L"

    # Position
    A = "A"
    D = "D"
    S = "S"
    W = "W"

    # Color offset
    X = "X"
    Z = "Z"

    # Linearity
    COMMA = "COMMA"
    PERIOD = "DOT"

    # Modes & modifiers
    TAB = "TAB"            # Mouse mode toggle
    SPACE = "SPACE"        # Reset
    SHIFT = "SHIFT"        # Accelerate / store preset

    # Preset slots
    DIGIT_0 = "0"
    DIGIT_1 = "1"
    DIGIT_2 = "2"
    DIGIT_3 = "3"
    DIGIT_4 = "4"
    DIGIT_5 = "5"
    DIGIT_6 = "6"
    DIGIT_7 = "7"
    DIGIT_8 = "8"
    DIGIT_9 = "9"

    @property
    def digit(self) -> Optional[int]:
        """Preset slot for digit keys, None otherwise"""
        if self.name.startswith("DIGIT_"):
            return int(self.value)
        return None

    @classmethod
    def for_digit(cls, digit: int) -> "InputKey":
        return cls[f"DIGIT_{digit}"]

    @classmethod
    def from_key_name(cls, name: str) -> Optional["InputKey"]:
        """Look up by normalized evdev key name, None when unmapped"""
        try:
            return cls(name)
        except ValueError:
            return None


class TransitionState(Enum):
    """Lifecycle of a preset transition"""
    RUNNING = auto()
    COMPLETE = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    INPUT = auto()       # Keyboard, pointer, orientation sources
    CONTROLS = auto()    # Integration, mode switches, resets
    TRANSITION = auto()  # Preset transitions
    PRESET = auto()      # Preset store/recall/persistence
    RENDER = auto()      # Frame clock, render targets
    EVENT = auto()       # Event bus events and handling
    API = auto()
    SYSTEM = auto()      # Startup, shutdown, errors

    GENERAL = auto()    # Default general category

"""Services layer"""

from .event_bus import EventBus
from .middleware import log_middleware
from .preset_persistence import PresetPersistence

__all__ = [
    "EventBus",
    "log_middleware",
    "PresetPersistence",
]

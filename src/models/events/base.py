from __future__ import annotations

import time
from enum import Enum
from typing import Any, Dict

from models.events.types import EventType
from models.events.sources import EventSource

_META_FIELDS = ("type", "source", "timestamp")


def _plain(value: Any) -> Any:
    """JSON-safe view of a payload value (enums by name, sets sorted)"""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (set, frozenset)):
        return sorted(_plain(v) for v in value)
    if isinstance(value, (tuple, list)):
        return [_plain(v) for v in value]
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


class Event:
    """
    Base event

    Subclasses are `@dataclass(init=False)` and set their payload fields
    after calling super().__init__(); everything that is not type, source
    or timestamp is payload.
    """

    def __init__(self, *, type: EventType, source: EventSource | None):
        self.type = type
        self.source = source
        self.timestamp = time.time()

    @property
    def data(self) -> Dict[str, Any]:
        """Payload fields"""
        return {k: v for k, v in self.__dict__.items() if k not in _META_FIELDS}

    def to_record(self) -> Dict[str, Any]:
        """JSON-safe snapshot for the event history endpoint"""
        return {
            "type": self.type.name,
            "source": self.source.name if self.source else None,
            "timestamp": self.timestamp,
            "data": {k: _plain(v) for k, v in self.data.items()},
        }


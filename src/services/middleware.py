"""
Middleware for EventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from models.events import Event, EventType
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

# Per-keystroke events are only worth seeing at DEBUG
_NOISY_EVENTS = {EventType.KEY_STATE_CHANGED}


def _format_value(value) -> str:
    name = getattr(value, "name", None)
    if name is not None:
        return name
    if isinstance(value, (set, frozenset)):
        return "{" + ", ".join(sorted(_format_value(v) for v in value)) + "}"
    return str(value)


def log_middleware(event: Event) -> Event:
    """
    Log all events

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source_str = event.source.name if event.source else "?"
    data_str = ", ".join(f"{k}={_format_value(v)}" for k, v in event.data.items())

    message = f"Event: {event.type.name} from {source_str}" + (f" | {data_str}" if data_str else "")
    if event.type in _NOISY_EVENTS:
        log.debug(message)
    else:
        log.info(message)
    return event

"""
Event Bus - Central event routing system

Implements pub-sub pattern:
- Publishers: publish(event), publish_all(events) for a frame's batch
- Subscribers: subscribe(event_type, handler, priority, filter_fn)
- Middleware: add_middleware(middleware_fn)

Handlers run on the event loop after tick() has returned, so they may
read the integrator but never run inside a tick.
"""

import inspect
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional
from dataclasses import dataclass
from models.events import Event, EventType
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

Handler = Callable[[Event], None]
Middleware = Callable[[Event], Optional[Event]]


@dataclass
class Subscription:
    handler: Handler
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]

    @property
    def name(self) -> str:
        return getattr(self.handler, "__qualname__", None) or repr(self.handler)

    def accepts(self, event: Event) -> bool:
        return self.filter_fn is None or self.filter_fn(event)


class EventBus:
    """
    Central event bus for control and input events

    - Higher priority handlers run first; equal priorities keep subscription order
    - Sync and async handlers (auto-detected)
    - A failing handler is logged and the rest still run
    - Bounded history of delivered events for the API and debugging

    Example:
        bus = EventBus()
        bus.subscribe(EventType.PRESET_STORED, persistence.on_stored, priority=10)
        bus.subscribe(
            EventType.KEY_STATE_CHANGED,
            on_key,
            filter_fn=lambda e: e.pressed
        )

        await bus.publish(PresetStoredEvent(3))
    """

    def __init__(self, history_limit: int = 100):
        self._subscriptions: Dict[EventType, List[Subscription]] = {}
        self._middleware: List[Middleware] = []
        self._history: Deque[Event] = deque(maxlen=history_limit)

    def subscribe(
        self,
        event_type: EventType,
        handler: Handler,
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> None:
        """
        Subscribe to event type

        Args:
            event_type: Which events to listen for
            handler: Function to call (can be async or sync)
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)
        """
        subscription = Subscription(handler, priority, filter_fn)
        subscriptions = self._subscriptions.setdefault(event_type, [])
        subscriptions.append(subscription)
        # Stable sort keeps subscription order within a priority
        subscriptions.sort(key=lambda s: -s.priority)

        log.debug("Handler subscribed", event_type=event_type, handler=subscription.name, priority=priority)

    def unsubscribe(self, event_type: EventType, handler: Handler) -> bool:
        """Remove a handler; returns False if it was not registered"""
        subscriptions = self._subscriptions.get(event_type, [])
        for subscription in subscriptions:
            if subscription.handler == handler:
                subscriptions.remove(subscription)
                return True
        return False

    def subscriber_count(self, event_type: EventType) -> int:
        return len(self._subscriptions.get(event_type, []))

    def add_middleware(self, middleware: Middleware) -> None:
        """
        Middleware runs in registration order before any handler; it may
        return a replacement event, or None to drop the event.
        """
        self._middleware.append(middleware)

    async def publish(self, event: Event) -> None:
        for middleware in self._middleware:
            event = middleware(event)
            if event is None:
                return

        self._history.append(event)

        # Copy: handlers may unsubscribe while running
        for subscription in list(self._subscriptions.get(event.type, [])):
            if not subscription.accepts(event):
                continue
            try:
                result = subscription.handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                log.error(
                    "Event handler failed",
                    event_type=event.type,
                    handler=subscription.name,
                    error=f"{type(e).__name__}: {e}"
                )

    async def publish_all(self, events: Iterable[Event]) -> None:
        """Publish in order (one frame's events from the integrator)"""
        for event in events:
            await self.publish(event)

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Recent events, newest last"""
        if limit <= 0:
            return []
        return list(self._history)[-limit:]

    def clear_history(self) -> None:
        self._history.clear()

"""
Dummy keyboard adapter for platforms without evdev (e.g., macOS, Windows, containers).
Does nothing - input then only arrives through the remote control API.
"""

import asyncio
from hardware.input.keyboard.held_keys import HeldKeys
from services.event_bus import EventBus


class DummyKeyboardAdapter:
    """
    Dummy keyboard adapter that does nothing.

    Keeps the same constructor as the real adapter so the factory can swap
    them freely.
    """

    def __init__(self, held_keys: HeldKeys, event_bus: EventBus):
        self.held_keys = held_keys
        self.event_bus = event_bus

    async def run(self) -> None:
        """Yield to the event loop until cancelled"""
        while True:
            await asyncio.sleep(1.0)

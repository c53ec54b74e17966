import asyncio
from typing import Protocol

from hardware.input.keyboard.held_keys import HeldKeys
from services.event_bus import EventBus
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.INPUT)


class IKeyboardAdapter(Protocol):
    """Keeps HeldKeys current and publishes KeyStateChangedEvent until cancelled"""

    async def run(self) -> None:
        ...


async def start_keyboard(held_keys: HeldKeys, event_bus: EventBus) -> None:
    """
    Run the first working keyboard adapter until cancelled.

    Priority:
    1. Evdev (Linux physical keyboard)
    2. Dummy (fallback, no keyboard input)
    """
    adapters: list[IKeyboardAdapter] = []

    try:
        from .evdev_keyboard_adapter import EvdevKeyboardAdapter
        adapters.append(EvdevKeyboardAdapter(held_keys, event_bus))
    except ImportError as e:
        log.info("Evdev adapter not available", reason=str(e))

    from .dummy_keyboard_adapter import DummyKeyboardAdapter
    adapters.append(DummyKeyboardAdapter(held_keys, event_bus))

    for adapter in adapters:
        try:
            log.info("Starting keyboard adapter", adapter=adapter.__class__.__name__)
            await adapter.run()
            return

        except asyncio.CancelledError:
            raise

        except Exception as e:
            log.warn(
                "Keyboard adapter failed, falling back",
                adapter=adapter.__class__.__name__,
                reason=str(e)
            )

    log.error("No keyboard adapter could be started")
    raise RuntimeError("Keyboard input unavailable")

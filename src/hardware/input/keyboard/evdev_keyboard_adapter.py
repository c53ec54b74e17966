from typing import Optional
import asyncio
from evdev import InputDevice, list_devices, ecodes
from hardware.input.keyboard.held_keys import HeldKeys
from hardware.input.keyboard.key_mapping import input_key_for
from models.events import KeyStateChangedEvent, KeyboardSource
from services.event_bus import EventBus
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.INPUT)

KEY_UP = 0
KEY_DOWN = 1
KEY_REPEAT = 2


class EvdevKeyboardAdapter:
    """
    Physical keyboard input via Linux evdev (/dev/input/event*)

    - Uses blocking device.read() executed in executor (thread) to avoid EAGAIN races
    - Maps keycodes via ecodes.bytype
    - Tracks press AND release, so held keys keep driving momentum
    - Publishes KeyStateChangedEvent(key, pressed, held) to EventBus
    """

    def __init__(self, held_keys: HeldKeys, event_bus: EventBus, device_path: Optional[str] = None):
        self.held_keys = held_keys
        self.event_bus = event_bus
        self.device_path = device_path
        self.device: Optional[InputDevice] = None

    async def _find_keyboard_device(self) -> Optional[str]:
        """
        Detect and select the correct keyboard input device.

        Returns:
            Path to the best /dev/input/eventX device for a real keyboard.
        """
        candidates = []

        for path in list_devices():
            try:
                device = InputDevice(path)
                caps = device.capabilities()
            except OSError as e:
                log.warn(f"Cannot inspect {path}: {e}")
                continue

            if ecodes.EV_KEY not in caps:
                continue

            raw_keys = caps.get(ecodes.EV_KEY, [])
            key_codes = [code if isinstance(code, int) else code[0] for code in raw_keys]

            has_letters = any(ecodes.KEY_A <= code <= ecodes.KEY_Z for code in key_codes)
            has_space = ecodes.KEY_SPACE in key_codes
            has_tab = ecodes.KEY_TAB in key_codes

            if has_letters and has_space and has_tab:
                candidates.append((path, device.name, len(key_codes)))

            log.debug(
                "Keyboard candidate",
                name=device.name,
                path=path,
                has_letters=has_letters,
                num_keys=len(key_codes)
            )
            device.close()

        if not candidates:
            log.warn("No valid keyboard input devices found")
            return None

        # More keys = likely a full keyboard
        candidates.sort(key=lambda x: -x[2])
        best_path, best_name, num_keys = candidates[0]

        log.info("Selected keyboard device", name=best_name, path=best_path, total_keys=num_keys)
        return best_path

    async def run(self) -> None:
        """
        Read keyboard events until cancelled

        Raises:
            RuntimeError: If no usable keyboard device can be opened
        """
        if not self.device_path:
            self.device_path = await self._find_keyboard_device()

        if not self.device_path:
            raise RuntimeError("No physical keyboard found via evdev")

        try:
            self.device = InputDevice(self.device_path)
        except OSError as e:
            raise RuntimeError(f"Cannot open keyboard device: {e}") from e

        log.info("Listening for physical keyboard input", device=self.device.name, path=self.device_path)

        loop = asyncio.get_running_loop()
        try:
            while True:
                try:
                    events = await loop.run_in_executor(None, self.device.read)
                except BlockingIOError:
                    await asyncio.sleep(0.005)
                    continue
                except OSError as e:
                    log.warn(f"Temporary read error: {e}")
                    await asyncio.sleep(0.1)
                    continue

                for event in events:
                    if event.type == ecodes.EV_KEY:
                        await self._handle_key_event(event.code, event.value)

        except asyncio.CancelledError:
            log.debug("Evdev keyboard cancelled (task stopped)")
            raise
        finally:
            self.held_keys.release_all()
            self.device.close()

    async def _handle_key_event(self, code: int, value: int) -> None:
        if value == KEY_REPEAT:
            return

        key = input_key_for(ecodes.bytype[ecodes.EV_KEY].get(code))
        if key is None:
            return

        pressed = value == KEY_DOWN
        changed = self.held_keys.press(key) if pressed else self.held_keys.release(key)
        if not changed:
            return

        await self.event_bus.publish(
            KeyStateChangedEvent(key, pressed, self.held_keys.snapshot(), KeyboardSource.EVDEV)
        )

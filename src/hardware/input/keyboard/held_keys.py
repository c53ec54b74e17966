"""
Held keys - Thread-safe set of keys currently down

Keyboard adapters call press()/release(); the frame clock takes one
snapshot() per tick.
"""

import threading
from typing import FrozenSet, Set

from models.enums import InputKey


class HeldKeys:
    """
    Example:
        held = HeldKeys()
        held.press(InputKey.SHIFT)
        held.press(InputKey.DIGIT_3)
        integrator.tick(held.snapshot())    # stores preset 3
    """

    def __init__(self):
        self._keys: Set[InputKey] = set()
        self._lock = threading.Lock()

    def press(self, key: InputKey) -> bool:
        """Mark key down; returns True if it was not already held"""
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def release(self, key: InputKey) -> bool:
        """Mark key up; returns True if it was held"""
        with self._lock:
            if key not in self._keys:
                return False
            self._keys.discard(key)
            return True

    def release_all(self) -> None:
        """Forget every held key (device lost, focus lost)"""
        with self._lock:
            self._keys.clear()

    def snapshot(self) -> FrozenSet[InputKey]:
        with self._lock:
            return frozenset(self._keys)

    def __contains__(self, key: InputKey) -> bool:
        with self._lock:
            return key in self._keys

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

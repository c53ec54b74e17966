from .factory import IKeyboardAdapter, start_keyboard
from .held_keys import HeldKeys
from .key_mapping import input_key_for, normalize_key_name
from .dummy_keyboard_adapter import DummyKeyboardAdapter

__all__ = [
    "IKeyboardAdapter",
    "HeldKeys",
    "input_key_for",
    "normalize_key_name",
    "DummyKeyboardAdapter",
    "start_keyboard"
]

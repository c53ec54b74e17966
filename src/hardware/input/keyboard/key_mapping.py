"""
Key mapping - evdev key names → InputKey

Kept free of the evdev import so it works (and tests) on any platform.
"""

from typing import Iterable, Optional, Union

from models.enums import InputKey

# Both shift keys act as one modifier
_ALIASES = {
    "LEFTSHIFT": "SHIFT",
    "RIGHTSHIFT": "SHIFT",
    "KPDOT": "DOT",
}


def normalize_key_name(key_name: Union[str, Iterable[str], None]) -> str:
    """
    Normalize an evdev key name: drop the KEY_ prefix, fold shift keys.

    evdev reports aliased codes as a list of names; the first one is used.
    Arrow keys keep their LEFT/RIGHT names.
    """
    if not key_name:
        return ""
    if not isinstance(key_name, str):
        key_name = next(iter(key_name), "")

    name = key_name.upper()
    if name.startswith("KEY_"):
        name = name[4:]
    return _ALIASES.get(name, name)


def input_key_for(key_name: Union[str, Iterable[str], None]) -> Optional[InputKey]:
    """InputKey for an evdev key name, None for keys the controls don't use"""
    normalized = normalize_key_name(key_name)
    if not normalized:
        return None
    return InputKey.from_key_name(normalized)

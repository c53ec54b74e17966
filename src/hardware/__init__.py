"""
Hardware Layer

Low-level input devices only:

- Keyboard (evdev adapter, dummy fallback, held-key tracking)
"""

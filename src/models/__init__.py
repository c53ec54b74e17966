"""
Models package - Data models for the feedback control engine
"""

from .enums import MouseMode, InputKey, TransitionState, LogLevel, LogCategory
from .parameter_state import ParameterVector
from .control_binding import ControlBinding, CONTROL_BINDINGS
from .transition import (
    TransitionComposer,
    SnapshotOrigin,
    ComposerOrigin,
    DURATION,
    ease_in_out_cubic,
)
from .uniforms import RenderUniforms

__all__ = [
    'MouseMode',
    'InputKey',
    'TransitionState',
    'LogLevel',
    'LogCategory',
    'ParameterVector',
    'ControlBinding',
    'CONTROL_BINDINGS',
    'TransitionComposer',
    'SnapshotOrigin',
    'ComposerOrigin',
    'DURATION',
    'ease_in_out_cubic',
    'RenderUniforms',
]

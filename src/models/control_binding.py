"""
Control bindings - Static key → parameter table

Each binding ties one animatable scalar (position contributes one binding
per axis) to the keys that push its momentum down or up. Fields are reached
through small getter/setter functions rather than attribute-name strings.
"""

from dataclasses import dataclass
from typing import Callable, FrozenSet, Tuple

from models.enums import InputKey
from models.parameter_state import ParameterVector

Getter = Callable[[ParameterVector], float]
Setter = Callable[[ParameterVector, float], None]


@dataclass(frozen=True)
class FieldAccessor:
    """Read/write access to one scalar of a ParameterVector"""
    name: str
    get: Getter
    set: Setter


@dataclass(frozen=True)
class ControlBinding:
    """
    One row of the control table

    Attributes:
        target: Field the momentum is integrated into
        decrement: Keys that push momentum down (win over increment)
        increment: Keys that push momentum up
        momentum: Momentum field of the target
    """
    target: FieldAccessor
    decrement: FrozenSet[InputKey]
    increment: FrozenSet[InputKey]
    momentum: FieldAccessor


def _scalar(name: str) -> FieldAccessor:
    return FieldAccessor(
        name=name,
        get=lambda state: getattr(state, name),
        set=lambda state, value: setattr(state, name, value),
    )


def _axis(name: str, index: int) -> FieldAccessor:
    def get(state: ParameterVector) -> float:
        return getattr(state, name)[index]

    def set_(state: ParameterVector, value: float) -> None:
        vec = list(getattr(state, name))
        vec[index] = value
        setattr(state, name, (vec[0], vec[1]))

    axis = "xy"[index]
    return FieldAccessor(name=f"{name}.{axis}", get=get, set=set_)


def _keys(*keys: InputKey) -> FrozenSet[InputKey]:
    return frozenset(keys)


#   Target                      Decrement                          Increment                           Momentum
CONTROL_BINDINGS: Tuple[ControlBinding, ...] = (
    ControlBinding(_scalar("zoom"),          _keys(InputKey.UP, InputKey.I),    _keys(InputKey.DOWN, InputKey.K),   _scalar("zoom_momentum")),
    ControlBinding(_scalar("rotation"),      _keys(InputKey.LEFT, InputKey.J),  _keys(InputKey.RIGHT, InputKey.L),  _scalar("rotation_momentum")),
    ControlBinding(_axis("position", 0),     _keys(InputKey.A),                 _keys(InputKey.D),                  _axis("position_momentum", 0)),
    ControlBinding(_axis("position", 1),     _keys(InputKey.S),                 _keys(InputKey.W),                  _axis("position_momentum", 1)),
    ControlBinding(_scalar("color_offset"),  _keys(InputKey.X),                 _keys(InputKey.Z),                  _scalar("color_offset_momentum")),
    ControlBinding(_scalar("linearity"),     _keys(InputKey.COMMA),             _keys(InputKey.PERIOD),             _scalar("linearity_momentum")),
)

"""
Parameter state - The animatable rendering parameters and their momenta

A ParameterVector is the full state steered by the controls each frame:
five parameters (position counts as a 2D vector) each paired with a
momentum that is integrated into it every tick.
"""

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Tuple

Vec2 = Tuple[float, float]

TWO_PI = 2 * math.pi

POSITION_LOW = -1.0
POSITION_HIGH = 1.0


def wrap_fraction(value: float) -> float:
    """Fractional part in [0, 1), also for negative values"""
    frac = value - math.floor(value)
    # Tiny negatives round up to exactly 1.0
    return 0.0 if frac >= 1.0 else frac


def wrap(value: float, low: float, high: float) -> float:
    """Wrap value into the half-open interval [low, high)"""
    t = (value - low) / (high - low)
    return low + (high - low) * wrap_fraction(t)


def _combine(lhs: Any, rhs: Any, op) -> Any:
    if isinstance(lhs, tuple):
        return tuple(op(a, b) for a, b in zip(lhs, rhs))
    return op(lhs, rhs)


def _scale(value: Any, op) -> Any:
    if isinstance(value, tuple):
        return tuple(op(v) for v in value)
    return op(value)


@dataclass
class ParameterVector:
    """
    Animatable parameter state

    Fields (each with its momentum):
        zoom: Feedback zoom factor (1.0 = identity)
        rotation: Feedback rotation in radians
        position: Feedback offset (x, y) in normalized viewport units
        color_offset: Hue shift applied per feedback pass
        linearity: Nonlinearity of the feedback color mapping

    Arithmetic (+, -, scalar *, scalar /) applies independently to every
    field, momenta included, so the vector can be linearly blended by
    transitions.

    Examples:
        state = ParameterVector.initial()      # zoom=1, everything else 0
        halfway = a + (b - a) * 0.5
    """

    zoom: float = 0.0
    zoom_momentum: float = 0.0

    rotation: float = 0.0
    rotation_momentum: float = 0.0

    position: Vec2 = (0.0, 0.0)
    position_momentum: Vec2 = (0.0, 0.0)

    color_offset: float = 0.0
    color_offset_momentum: float = 0.0

    linearity: float = 0.0
    linearity_momentum: float = 0.0

    @classmethod
    def initial(cls) -> "ParameterVector":
        """Vector in its reset state"""
        state = cls()
        state.reset()
        return state

    def reset(self) -> None:
        """Zoom back to 1.0, every other field and momentum to 0.0"""
        self.zoom = 1.0
        self.zoom_momentum = 0.0

        self.rotation = 0.0
        self.rotation_momentum = 0.0

        self.position = (0.0, 0.0)
        self.position_momentum = (0.0, 0.0)

        self.color_offset = 0.0
        self.color_offset_momentum = 0.0

        self.linearity = 0.0
        self.linearity_momentum = 0.0

    def normalize(self) -> None:
        """Wrap rotation into [0, 2π) and each position component into [-1, 1)"""
        self.rotation = wrap_fraction(self.rotation / TWO_PI) * TWO_PI
        if self.rotation >= TWO_PI:
            self.rotation = 0.0
        x, y = self.position
        self.position = (
            wrap(x, POSITION_LOW, POSITION_HIGH),
            wrap(y, POSITION_LOW, POSITION_HIGH),
        )

    def copy(self) -> "ParameterVector":
        return replace(self)

    # === Arithmetic ===

    def _zip(self, other: "ParameterVector", op) -> "ParameterVector":
        return ParameterVector(**{
            f.name: _combine(getattr(self, f.name), getattr(other, f.name), op)
            for f in fields(self)
        })

    def _map(self, op) -> "ParameterVector":
        return ParameterVector(**{
            f.name: _scale(getattr(self, f.name), op)
            for f in fields(self)
        })

    def __add__(self, other: "ParameterVector") -> "ParameterVector":
        if not isinstance(other, ParameterVector):
            return NotImplemented
        return self._zip(other, lambda a, b: a + b)

    def __sub__(self, other: "ParameterVector") -> "ParameterVector":
        if not isinstance(other, ParameterVector):
            return NotImplemented
        return self._zip(other, lambda a, b: a - b)

    def __mul__(self, factor: float) -> "ParameterVector":
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return self._map(lambda v: v * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "ParameterVector":
        if not isinstance(divisor, (int, float)):
            return NotImplemented
        return self._map(lambda v: v / divisor)

    # === Serialization ===

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible dict (tuples become lists)"""
        return {
            f.name: list(getattr(self, f.name)) if isinstance(getattr(self, f.name), tuple)
            else getattr(self, f.name)
            for f in fields(self)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterVector":
        """
        Build from a dict produced by to_dict()

        Missing fields keep their zero default; unknown keys are ignored.

        Raises:
            ValueError: If a field holds a non-numeric value
        """
        values: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            raw = data[f.name]
            try:
                if f.name in ("position", "position_momentum"):
                    x, y = raw
                    values[f.name] = (float(x), float(y))
                else:
                    values[f.name] = float(raw)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid value for {f.name}: {raw!r}") from e
        return cls(**values)

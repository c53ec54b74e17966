"""
Render uniforms - Per-frame parameter block handed to the render pipeline
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Tuple

from models.parameter_state import ParameterVector


@dataclass(frozen=True)
class RenderUniforms:
    """
    Shader-facing snapshot of one frame

    Attributes:
        output_size: Viewport (width, height) in pixels
        position: Feedback offset (x, y)
        zoom: Feedback zoom factor
        rotation: Feedback rotation (radians)
        time: Accumulated frame time
        aspect_ratio: width / height
        color_offset: Hue shift per feedback pass
        nonlinearity: Color mapping nonlinearity (the controls' linearity)
    """
    output_size: Tuple[float, float]
    position: Tuple[float, float]
    zoom: float
    rotation: float
    time: float
    aspect_ratio: float
    color_offset: float
    nonlinearity: float

    @classmethod
    def from_state(
        cls,
        state: ParameterVector,
        output_size: Tuple[float, float],
        time: float
    ) -> "RenderUniforms":
        width, height = output_size
        return cls(
            output_size=(float(width), float(height)),
            position=state.position,
            zoom=state.zoom,
            rotation=state.rotation,
            time=time,
            aspect_ratio=width / height if height else 1.0,
            color_offset=state.color_offset,
            nonlinearity=state.linearity,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

"""
Control schemas - Pydantic models for controls and preset requests/responses
"""

from pydantic import BaseModel, Field
from typing import Optional, Tuple, Literal

from models.parameter_state import ParameterVector


class ParameterVectorResponse(BaseModel):
    """Full parameter state, momenta included"""
    zoom: float
    zoom_momentum: float
    rotation: float = Field(description="Radians, always in [0, 2π)")
    rotation_momentum: float
    position: Tuple[float, float] = Field(description="Each component in [-1, 1)")
    position_momentum: Tuple[float, float]
    color_offset: float
    color_offset_momentum: float
    linearity: float
    linearity_momentum: float

    @classmethod
    def from_state(cls, state: ParameterVector) -> "ParameterVectorResponse":
        return cls(**state.to_dict())


class TransitionStatusResponse(BaseModel):
    active: bool = Field(description="A preset transition is running")
    progress: float = Field(ge=0.0, le=1.0, description="Fraction of steps taken (1.0 when idle)")
    depth: int = Field(ge=0, description="Number of chained transitions still blending")


class ControlStateResponse(BaseModel):
    """Live controls snapshot"""
    state: ParameterVectorResponse
    mode: Literal["ZOOM", "PAN"] = Field(description="What pointer movement steers")
    transition: TransitionStatusResponse
    viewport: Optional[Tuple[float, float]] = Field(None, description="Viewport (width, height) used for pointer scaling")

    class Config:
        json_schema_extra = {
            "example": {
                "state": {
                    "zoom": 1.02, "zoom_momentum": 0.0001,
                    "rotation": 0.35, "rotation_momentum": 0.0,
                    "position": [0.1, -0.2], "position_momentum": [0.0, 0.0],
                    "color_offset": 0.0, "color_offset_momentum": 0.0,
                    "linearity": 0.4, "linearity_momentum": 0.0
                },
                "mode": "ZOOM",
                "transition": {"active": False, "progress": 1.0, "depth": 0},
                "viewport": [640, 360]
            }
        }


class PointerDeltaRequest(BaseModel):
    """Pointer movement in pixels"""
    dx: float = Field(allow_inf_nan=False, description="Horizontal movement (pixels)")
    dy: float = Field(allow_inf_nan=False, description="Vertical movement (pixels)")


class OrientationRequest(BaseModel):
    """Device attitude change in radians"""
    yaw: float = Field(0.0, allow_inf_nan=False)
    pitch: float = Field(0.0, allow_inf_nan=False)
    roll: float = Field(0.0, allow_inf_nan=False)


class CommandAcceptedResponse(BaseModel):
    """Command queued; it takes effect at the next frame"""
    queued: bool = True
    command: str


class PresetRecallResponse(CommandAcceptedResponse):
    slot: int
    known: bool = Field(description="Slot held a preset when the recall was queued")


class PresetResponse(BaseModel):
    slot: int = Field(ge=0, le=9)
    state: ParameterVectorResponse


class PresetListResponse(BaseModel):
    presets: list[PresetResponse]
    count: int

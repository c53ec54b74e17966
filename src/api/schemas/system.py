"""
System schemas - frame loop metrics, frame loop control and event history
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class FrameMetricsResponse(BaseModel):
    running: bool
    paused: bool = False
    fps_target: int = Field(0, description="Configured frames per second")
    fps_actual: float = Field(0.0, description="Measured over the last frames")
    frames_rendered: int = 0
    time: float = Field(0.0, description="Shader time uniform")


class FpsRequest(BaseModel):
    """New target frame rate"""
    fps: int = Field(ge=1, le=240)


class EventRecord(BaseModel):
    type: str
    source: Optional[str] = None
    timestamp: float
    data: Dict[str, Any]


class EventHistoryResponse(BaseModel):
    events: list[EventRecord]
    count: int

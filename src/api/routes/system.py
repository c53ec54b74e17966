"""
System endpoints - Frame loop metrics and control, recent events
"""

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_service_container
from api.middleware.error_handler import FrameClockUnavailableError
from api.schemas.system import FrameMetricsResponse, FpsRequest, EventRecord, EventHistoryResponse
from engine.frame_clock import FrameClock
from models.enums import LogCategory
from services.service_container import ServiceContainer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)

router = APIRouter(prefix="/system", tags=["System"])


def _require_clock(services: ServiceContainer) -> FrameClock:
    if services.frame_clock is None:
        raise FrameClockUnavailableError()
    return services.frame_clock


@router.get("/metrics", response_model=FrameMetricsResponse, summary="Frame loop metrics")
async def get_metrics(
    services: ServiceContainer = Depends(get_service_container)
) -> FrameMetricsResponse:
    """Target and measured FPS, frame count and shader time; not running when ticked manually"""
    if services.frame_clock is None:
        return FrameMetricsResponse(running=False)
    return FrameMetricsResponse(**services.frame_clock.get_metrics())


@router.post("/frame/pause", response_model=FrameMetricsResponse, summary="Pause the frame loop")
async def pause_frames(
    services: ServiceContainer = Depends(get_service_container)
) -> FrameMetricsResponse:
    clock = _require_clock(services)
    clock.pause()
    log.info("Frame loop paused via API")
    return FrameMetricsResponse(**clock.get_metrics())


@router.post("/frame/resume", response_model=FrameMetricsResponse, summary="Resume the frame loop")
async def resume_frames(
    services: ServiceContainer = Depends(get_service_container)
) -> FrameMetricsResponse:
    clock = _require_clock(services)
    clock.resume()
    log.info("Frame loop resumed via API")
    return FrameMetricsResponse(**clock.get_metrics())


@router.post("/frame/step", response_model=FrameMetricsResponse, summary="Render one frame while paused")
async def step_frame(
    services: ServiceContainer = Depends(get_service_container)
) -> FrameMetricsResponse:
    """Requests a single frame; the loop runs it on its next iteration"""
    clock = _require_clock(services)
    clock.step_frame()
    return FrameMetricsResponse(**clock.get_metrics())


@router.put("/frame/fps", response_model=FrameMetricsResponse, summary="Change the target frame rate")
async def set_fps(
    request: FpsRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> FrameMetricsResponse:
    clock = _require_clock(services)
    clock.set_fps(request.fps)
    return FrameMetricsResponse(**clock.get_metrics())


@router.get("/events", response_model=EventHistoryResponse, summary="Recent events")
async def get_events(
    limit: int = Query(20, ge=1, le=100),
    services: ServiceContainer = Depends(get_service_container)
) -> EventHistoryResponse:
    """Most recent control and input events, oldest first"""
    events = [EventRecord(**e.to_record()) for e in services.event_bus.get_event_history(limit)]
    return EventHistoryResponse(events=events, count=len(events))

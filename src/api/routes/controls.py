"""
Control Endpoints - Remote view of the live parameters and remote input

Mutating endpoints never touch the parameters directly: they enqueue a
command that the integrator applies at the start of its next tick.
"""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_service_container
from api.schemas.controls import (
    ControlStateResponse,
    ParameterVectorResponse,
    TransitionStatusResponse,
    PointerDeltaRequest,
    OrientationRequest,
    CommandAcceptedResponse,
)
from engine.input_queue import ResetCommand
from models.enums import LogCategory
from services.service_container import ServiceContainer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)

router = APIRouter(
    prefix="/controls",
    tags=["Controls"],
)


@router.get(
    "/state",
    response_model=ControlStateResponse,
    summary="Live parameters",
    description="Current parameter vector, mouse mode and transition status"
)
async def get_state(
    services: ServiceContainer = Depends(get_service_container)
) -> ControlStateResponse:
    integrator = services.integrator
    transition = integrator.transition
    active = integrator.transition_active

    return ControlStateResponse(
        state=ParameterVectorResponse.from_state(integrator.state),
        mode=integrator.mouse_mode.name,
        transition=TransitionStatusResponse(
            active=active,
            progress=transition.progress if active else 1.0,
            depth=transition.depth if active else 0,
        ),
        viewport=integrator.viewport_size,
    )


@router.post(
    "/reset",
    response_model=CommandAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Reset parameters",
    description="Zoom back to 1, every other parameter and momentum to 0"
)
async def reset_controls(
    services: ServiceContainer = Depends(get_service_container)
) -> CommandAcceptedResponse:
    services.integrator.input_queue.put(ResetCommand())
    log.info("Reset queued")
    return CommandAcceptedResponse(command="reset")


@router.post(
    "/pointer",
    response_model=CommandAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Pointer movement",
    description="Pixel delta routed by the current mouse mode (ZOOM: rotation/zoom, PAN: position)"
)
async def pointer_delta(
    request: PointerDeltaRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> CommandAcceptedResponse:
    services.integrator.on_pointer_delta(request.dx, request.dy)
    return CommandAcceptedResponse(command="pointer")


@router.post(
    "/orientation",
    response_model=CommandAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Device orientation change",
    description="Attitude delta in radians (roll → rotation, yaw → zoom, pitch → position)"
)
async def orientation_changed(
    request: OrientationRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> CommandAcceptedResponse:
    services.integrator.on_orientation_changed(request.yaw, request.pitch, request.roll)
    return CommandAcceptedResponse(command="orientation")

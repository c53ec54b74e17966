"""
Preset Endpoints - Inspect, store and recall the ten preset slots
"""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_service_container
from api.middleware.error_handler import PresetNotFoundError, InvalidPresetSlotError
from api.schemas.controls import (
    ParameterVectorResponse,
    PresetResponse,
    PresetListResponse,
    PresetRecallResponse,
    CommandAcceptedResponse,
)
from engine.input_queue import StorePresetCommand, RecallPresetCommand
from managers.preset_store import is_valid_slot
from models.enums import LogCategory
from services.service_container import ServiceContainer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)

router = APIRouter(
    prefix="/presets",
    tags=["Presets"],
)


def _check_slot(slot: int) -> int:
    if not is_valid_slot(slot):
        raise InvalidPresetSlotError(slot)
    return slot


@router.get(
    "",
    response_model=PresetListResponse,
    summary="List presets",
    description="All occupied slots with their stored parameters"
)
async def list_presets(
    services: ServiceContainer = Depends(get_service_container)
) -> PresetListResponse:
    store = services.preset_store
    presets = [
        PresetResponse(slot=slot, state=ParameterVectorResponse.from_state(store.get(slot)))
        for slot in store.slots()
    ]
    return PresetListResponse(presets=presets, count=len(presets))


@router.get(
    "/{slot}",
    response_model=PresetResponse,
    summary="Get preset",
    responses={404: {"description": "Slot is empty"}, 422: {"description": "Slot outside 0-9"}}
)
async def get_preset(
    slot: int,
    services: ServiceContainer = Depends(get_service_container)
) -> PresetResponse:
    _check_slot(slot)
    state = services.preset_store.get(slot)
    if state is None:
        raise PresetNotFoundError(slot)
    return PresetResponse(slot=slot, state=ParameterVectorResponse.from_state(state))


@router.put(
    "/{slot}",
    response_model=CommandAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Store preset",
    description="Snapshot the live parameters into the slot at the next frame (overwrites)"
)
async def store_preset(
    slot: int,
    services: ServiceContainer = Depends(get_service_container)
) -> CommandAcceptedResponse:
    _check_slot(slot)
    services.integrator.input_queue.put(StorePresetCommand(slot))
    log.info("Preset store queued", slot=slot)
    return CommandAcceptedResponse(command="store")


@router.post(
    "/{slot}/recall",
    response_model=PresetRecallResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Recall preset",
    description="Start a transition toward the slot at the next frame; empty slots are ignored"
)
async def recall_preset(
    slot: int,
    services: ServiceContainer = Depends(get_service_container)
) -> PresetRecallResponse:
    _check_slot(slot)
    known = slot in services.preset_store
    services.integrator.input_queue.put(RecallPresetCommand(slot))
    log.info("Preset recall queued", slot=slot, known=known)
    return PresetRecallResponse(command="recall", slot=slot, known=known)

"""Per-bottle journey and chat routes."""

from fastapi import APIRouter, HTTPException

from bottletrail.dependencies import ReconstructionServiceDep
from bottletrail.models import ChatThread, JourneyView
from bottletrail.services.history import MissingBottleFieldError

router = APIRouter()


@router.get("/{bottle_id}/journey", response_model=JourneyView)
async def get_journey(bottle_id: str, service: ReconstructionServiceDep):
    try:
        journey = await service.get_journey(bottle_id)
    except MissingBottleFieldError as exc:
        raise HTTPException(422, str(exc)) from exc
    if not journey:
        raise HTTPException(404, "Bottle not found")
    return journey


@router.get("/{bottle_id}/chat", response_model=ChatThread)
async def get_chat_thread(bottle_id: str, service: ReconstructionServiceDep):
    try:
        thread = await service.get_chat_thread(bottle_id)
    except MissingBottleFieldError as exc:
        raise HTTPException(422, str(exc)) from exc
    if not thread:
        raise HTTPException(404, "Bottle not found")
    return thread

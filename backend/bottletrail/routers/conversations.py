"""Conversation list routes."""

from fastapi import APIRouter, HTTPException, Query

from bottletrail.dependencies import ReconstructionServiceDep
from bottletrail.models import Conversation
from bottletrail.services.history import MissingBottleFieldError

router = APIRouter()


@router.get("/", response_model=list[Conversation])
async def list_conversations(
    service: ReconstructionServiceDep,
    merge_by_hop: bool = Query(default=False),
):
    try:
        return await service.get_conversations(merge_by_hop=merge_by_hop)
    except MissingBottleFieldError as exc:
        raise HTTPException(422, str(exc)) from exc

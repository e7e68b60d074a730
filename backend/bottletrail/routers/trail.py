"""Map trail routes."""

from fastapi import APIRouter, Query

from bottletrail.dependencies import ReconstructionServiceDep
from bottletrail.models import TrailFilter, TrailMarker

router = APIRouter()


@router.get("/", response_model=list[TrailMarker])
async def get_trail(
    service: ReconstructionServiceDep,
    action: TrailFilter = Query(default=TrailFilter.ALL),
):
    return await service.get_trail(action)

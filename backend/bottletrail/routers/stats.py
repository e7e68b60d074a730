"""Statistics routes."""

from fastapi import APIRouter

from bottletrail.dependencies import ReconstructionServiceDep
from bottletrail.models import GlobalStats, StatsReconciliation, UserStats

router = APIRouter()


@router.get("/global", response_model=GlobalStats)
async def get_global_stats(service: ReconstructionServiceDep):
    return await service.get_global_stats()


@router.get("/reconciliation", response_model=StatsReconciliation)
async def get_reconciliation(service: ReconstructionServiceDep):
    return await service.reconcile_stats()


@router.get("/users/{username}", response_model=UserStats)
async def get_user_stats(username: str, service: ReconstructionServiceDep):
    return await service.get_user_stats(username)

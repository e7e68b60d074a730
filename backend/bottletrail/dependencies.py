"""
Dependency injection for FastAPI routes.

Provides typed service dependencies that enable IDE navigation (Ctrl+Click).
"""

from typing import Annotated
from fastapi import Request, Depends

from bottletrail.services.reconstruction import ReconstructionService


def get_reconstruction_service(request: Request) -> ReconstructionService:
    return request.app.state.reconstruction_service


ReconstructionServiceDep = Annotated[ReconstructionService, Depends(get_reconstruction_service)]

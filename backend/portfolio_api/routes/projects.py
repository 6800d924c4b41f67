"""
Portfolio Backend: Project Route Handler
==========================================

What:  GET /api/projects, the project cards with their derived action label.
"""

from typing import List

from fastapi import APIRouter, Depends

from portfolio_api.dependencies import get_gateway
from portfolio_api.schemas.common import ErrorResponse
from portfolio_api.schemas.project import ProjectOut
from portfolio_api.services.gateway import PersistenceGateway

router = APIRouter(prefix="/api", tags=["Projects"])


@router.get(
    "/projects",
    response_model=List[ProjectOut],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List projects",
    description='Each project carries actionLabel: "Show Code" for GitHub URLs, else "Show Website".',
)
async def list_projects(
    gateway: PersistenceGateway = Depends(get_gateway),
) -> List[ProjectOut]:
    return await gateway.list_projects()

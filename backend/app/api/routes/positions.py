"""Positions — read-only catalog endpoints.

Invariants:
    - GET /positions lists active positions only, declaration order preserved
    - GET /positions/{id} returns inactive positions too (existing drafts still render)
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_position_catalog
from app.core.errors import ErrorContext, PositionNotFoundError
from app.core.repository_protocols import PositionCatalog
from app.schemas.position import PositionSummary, PositionView

router = APIRouter(prefix="/api/v1/positions", tags=["positions"])


@router.get("", response_model=list[PositionSummary])
async def list_positions(
    catalog: PositionCatalog = Depends(get_position_catalog),
):
    return [p.to_dict() for p in catalog.list_active()]


@router.get("/{position_id}", response_model=PositionView)
async def get_position(
    position_id: str, catalog: PositionCatalog = Depends(get_position_catalog),
):
    position = catalog.get(position_id)
    if position is None:
        raise PositionNotFoundError(
            position_id, ErrorContext(position_id=position_id),
        )
    return position.to_dict()

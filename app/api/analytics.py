"""Utilization and recommendation endpoints."""
from uuid import UUID
from fastapi import APIRouter, HTTPException, Path, Query, status

from app.core.dependencies import TenantPathCtx, Utilization, Recommendations
from app.core.logging import get_logger
from app.schemas.common import Envelope
from app.schemas.recommendation import RecommendationReport
from app.schemas.utilization import UtilizationSnapshot
from app.services.recommendations import summarize


router = APIRouter()
logger = get_logger(__name__)


@router.get(
    "/utilization/{tenant_id}/{room_id}",
    response_model=Envelope[UtilizationSnapshot],
)
async def get_utilization(
    ctx: TenantPathCtx,
    service: Utilization,
    tenant_id: UUID,
    room_id: str = Path(..., min_length=1, max_length=100),
    days: int = Query(7, ge=1, le=365, description="Trailing window in days"),
):
    """Average and peak occupancy of a room over the trailing window."""
    utilization = await service.get_utilization(ctx.tenant_id, room_id, days)

    if utilization is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Room not found or no data available",
        )

    logger.info(
        f"Utilization data retrieved via API: days={days}",
        extra={"tenant_id": ctx.tenant_id, "room_id": room_id},
    )
    return Envelope(data=utilization)


@router.get(
    "/recommend/{tenant_id}/{office_id}",
    response_model=Envelope[RecommendationReport],
)
async def get_recommendations(
    ctx: TenantPathCtx,
    service: Recommendations,
    tenant_id: UUID,
    office_id: UUID,
    days: int = Query(30, ge=1, le=365, description="Trailing window in days"),
    threshold: float = Query(0.5, ge=0, le=1, description="Target utilization rate"),
):
    """Ranked space optimization recommendations for every active room of an office."""
    recommendations = await service.get_recommendations(
        ctx.tenant_id, str(office_id), days, threshold
    )

    logger.info(
        f"Recommendations retrieved via API: count={len(recommendations)}",
        extra={"tenant_id": ctx.tenant_id, "office_id": str(office_id)},
    )
    return Envelope(data=RecommendationReport(
        office_id=str(office_id),
        analysis_period_days=days,
        utilization_threshold=threshold,
        recommendations=recommendations,
        summary=summarize(recommendations),
    ))

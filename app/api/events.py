"""Occupancy event ingestion endpoints."""
from fastapi import APIRouter, status

from app.core.dependencies import TenantCtx, Ingestion, ensure_tenant_access
from app.core.exceptions import TenantAccessError
from app.core.logging import get_logger
from app.schemas.common import Envelope
from app.schemas.occupancy_event import (
    OccupancyEventCreate, OccupancyEventBatchRequest, OccupancyEventResponse,
    BatchIngestResult
)


router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "",
    response_model=Envelope[OccupancyEventResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_event(
    request: OccupancyEventCreate,
    ctx: TenantCtx,
    service: Ingestion,
):
    """Ingest a single occupancy event for a room of the authenticated tenant."""
    ensure_tenant_access(ctx, request.tenant_key)

    event = await service.create_event(request)

    logger.info(
        f"Occupancy event created via API: {event.id}",
        extra={"tenant_id": ctx.tenant_id, "room_id": request.room_id},
    )
    return Envelope(data=OccupancyEventResponse.model_validate(event))


@router.post(
    "/batch",
    response_model=Envelope[BatchIngestResult],
    status_code=status.HTTP_201_CREATED,
)
async def batch_create_events(
    request: OccupancyEventBatchRequest,
    ctx: TenantCtx,
    service: Ingestion,
):
    """
    Ingest many occupancy events at once.
    - Every event must name the authenticated tenant.
    - Events for unknown or inactive rooms are dropped.
    - Fails when no event survives.
    """
    if any(event.tenant_key != ctx.tenant_id for event in request.events):
        logger.warning(
            "Batch contains events for another tenant",
            extra={"tenant_id": ctx.tenant_id},
        )
        raise TenantAccessError("All events must belong to the authenticated tenant")

    processed = await service.create_events(request.events)
    submitted = len(request.events)

    logger.info(
        f"Batch occupancy events created via API: submitted={submitted}, processed={processed}",
        extra={"tenant_id": ctx.tenant_id},
    )
    return Envelope(data=BatchIngestResult(
        total_submitted=submitted,
        total_processed=processed,
        message=f"Successfully processed {processed} out of {submitted} events",
    ))

"""Tenant-aware health endpoint."""
from datetime import datetime, timezone
from fastapi import APIRouter

from app.core.dependencies import TenantCtx
from app.schemas.common import Envelope
from app.schemas.tenant import TenantHealth


router = APIRouter()

SERVICE_NAME = "workplace-optimization-api"


@router.get("/health", response_model=Envelope[TenantHealth])
async def tenant_health(ctx: TenantCtx):
    """Liveness check that echoes the authenticated tenant."""
    return Envelope(data=TenantHealth(
        service=SERVICE_NAME,
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        tenant=ctx.slug or "unknown",
    ))

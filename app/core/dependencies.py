"""Application dependencies for dependency injection."""
from typing import Annotated, Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import ResultCache, get_cache
from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationError, ConfigurationError, TenantAccessError
from app.core.logging import get_logger
from app.core.security import decode_token, TokenPayload
from app.models.tenant import Tenant
from app.services.ingestion import IngestionService
from app.services.occupancy_store import OccupancyStore
from app.services.recommendations import RecommendationService
from app.services.utilization import UtilizationService


security = HTTPBearer(auto_error=False)
logger = get_logger(__name__)


DbSession = Annotated[AsyncSession, Depends(get_db)]
Cache = Annotated[ResultCache, Depends(get_cache)]


async def get_store(db: DbSession) -> OccupancyStore:
    return OccupancyStore(db)


Store = Annotated[OccupancyStore, Depends(get_store)]


async def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenPayload:
    """Validate and decode the bearer token from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token is required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not settings.JWT_SECRET_KEY:
        logger.error("JWT_SECRET_KEY not configured")
        raise ConfigurationError("Server configuration error")

    try:
        return decode_token(credentials.credentials)
    except AuthenticationError as e:
        logger.warning(f"Authentication error: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token",
        )


class TenantContext:
    """Context object containing the authenticated tenant."""

    def __init__(self, token: TokenPayload, tenant: Tenant):
        self.token = token
        self.tenant = tenant
        self.tenant_id = tenant.id
        self.slug = tenant.slug


async def get_tenant_context(
    request: Request,
    store: Store,
    token: TokenPayload = Depends(get_current_token),
) -> TenantContext:
    """Resolve the active tenant named by the token and scope the session to it."""
    tenant = await store.get_active_tenant(token.tenantId)
    if tenant is None:
        logger.warning(f"Rejected token for unknown or inactive tenant: {token.tenantId}")
        raise TenantAccessError("Invalid or inactive tenant")

    await store.set_tenant_scope(tenant.id)

    logger.info(
        f"Request authenticated for tenant: {tenant.slug}",
        extra={"tenant_id": tenant.id, "path": request.url.path, "method": request.method},
    )
    return TenantContext(token=token, tenant=tenant)


TenantCtx = Annotated[TenantContext, Depends(get_tenant_context)]


def ensure_tenant_access(ctx: TenantContext, tenant_id: str) -> None:
    """Reject requests naming a tenant other than the authenticated one."""
    if tenant_id != ctx.tenant_id:
        logger.warning(
            f"Tenant ID mismatch: authenticated={ctx.tenant_id}, requested={tenant_id}",
            extra={"tenant_id": ctx.tenant_id},
        )
        raise TenantAccessError("Tenant access violation")


async def get_tenant_path_context(tenant_id: str, ctx: TenantCtx) -> TenantContext:
    """Tenant context whose id must match the ``tenant_id`` path parameter."""
    ensure_tenant_access(ctx, tenant_id)
    return ctx


TenantPathCtx = Annotated[TenantContext, Depends(get_tenant_path_context)]


async def get_ingestion_service(store: Store, cache: Cache) -> IngestionService:
    return IngestionService(store, cache)


async def get_utilization_service(store: Store, cache: Cache) -> UtilizationService:
    return UtilizationService(store, cache)


async def get_recommendation_service(store: Store, cache: Cache) -> RecommendationService:
    return RecommendationService(store, cache)


Ingestion = Annotated[IngestionService, Depends(get_ingestion_service)]
Utilization = Annotated[UtilizationService, Depends(get_utilization_service)]
Recommendations = Annotated[RecommendationService, Depends(get_recommendation_service)]

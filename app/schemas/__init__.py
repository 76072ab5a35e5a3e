"""Pydantic schemas."""
from app.schemas.common import Envelope, ErrorDetail, ErrorEnvelope
from app.schemas.tenant import ServiceHealth, TenantHealth
from app.schemas.occupancy_event import (
    OccupancyEventCreate, OccupancyEventBatchRequest, OccupancyEventResponse,
    BatchIngestResult
)
from app.schemas.utilization import UtilizationSnapshot
from app.schemas.recommendation import (
    Recommendation, RecommendationSummary, RecommendationReport
)

__all__ = [
    "Envelope", "ErrorDetail", "ErrorEnvelope",
    "ServiceHealth", "TenantHealth",
    "OccupancyEventCreate", "OccupancyEventBatchRequest", "OccupancyEventResponse",
    "BatchIngestResult",
    "UtilizationSnapshot",
    "Recommendation", "RecommendationSummary", "RecommendationReport",
]

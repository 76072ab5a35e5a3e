"""Occupancy event schemas."""
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import UUID
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


MAX_PEOPLE_COUNT = 1000
MAX_BATCH_SIZE = 1000


class OccupancyEventCreate(BaseModel):
    """Schema for ingesting a single sensor observation."""
    model_config = ConfigDict(extra="ignore")

    tenant_id: UUID
    room_id: str = Field(..., min_length=1, max_length=100)
    timestamp: datetime
    people_count: int = Field(..., ge=0, le=MAX_PEOPLE_COUNT)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        # Naive timestamps are taken as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @field_validator("metadata", mode="before")
    @classmethod
    def default_metadata(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def tenant_key(self) -> str:
        """Tenant id in the canonical string form stored in the database."""
        return str(self.tenant_id)


class OccupancyEventBatchRequest(BaseModel):
    """Schema for batch ingestion."""
    events: List[OccupancyEventCreate] = Field(..., min_length=1, max_length=MAX_BATCH_SIZE)


class OccupancyEventResponse(BaseModel):
    """Stored occupancy event."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    room_id: str
    timestamp: datetime
    people_count: int
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("event_metadata", "metadata"),
    )
    created_at: datetime
    updated_at: datetime


class BatchIngestResult(BaseModel):
    """Outcome of a batch ingestion."""
    total_submitted: int
    total_processed: int
    message: str

"""Tenant and health schemas."""
from datetime import datetime
from pydantic import BaseModel


class ServiceHealth(BaseModel):
    """Unauthenticated liveness response."""
    status: str
    service: str
    version: str
    environment: str
    timestamp: datetime


class TenantHealth(BaseModel):
    """Authenticated liveness response echoing the tenant."""
    service: str
    status: str
    timestamp: datetime
    tenant: str

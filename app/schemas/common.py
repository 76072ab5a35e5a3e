"""Response envelope schemas."""
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel


T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Successful response wrapper: ``{"success": true, "data": ...}``."""
    success: bool = True
    data: T


class ErrorDetail(BaseModel):
    """A single field-level validation failure."""
    field: str
    message: str


class ErrorEnvelope(BaseModel):
    """Failed response wrapper."""
    success: bool = False
    error: str
    message: Optional[str] = None
    details: Optional[List[ErrorDetail]] = None

"""Utilization schemas."""
from pydantic import BaseModel


class UtilizationSnapshot(BaseModel):
    """Utilization of one room over a trailing window."""
    room_id: str
    room_name: str
    average_utilization: float
    total_events: int
    peak_occupancy: int
    capacity: int
    utilization_percentage: float

"""SQLAlchemy models."""
from app.models.tenant import Tenant
from app.models.office import Office
from app.models.room import Room
from app.models.occupancy_event import OccupancyEvent

__all__ = ["Tenant", "Office", "Room", "OccupancyEvent"]

"""Business services for occupancy ingestion and analytics."""
from app.services.occupancy_store import OccupancyStore, RoomStats
from app.services.utilization import UtilizationService
from app.services.recommendations import RecommendationService
from app.services.ingestion import IngestionService

__all__ = [
    "OccupancyStore", "RoomStats", "UtilizationService", "RecommendationService",
    "IngestionService",
]

"""Room utilization over a trailing window."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.core.cache import ResultCache, utilization_key
from app.core.config import settings
from app.core.logging import get_logger
from app.schemas.utilization import UtilizationSnapshot
from app.services.occupancy_store import OccupancyStore


logger = get_logger(__name__)

DEFAULT_WINDOW_DAYS = 7


def utilization_percentage(average: float, capacity: int) -> float:
    """Average occupancy as a percentage of capacity, 0 for rooms without capacity."""
    if capacity <= 0:
        return 0.0
    return (average / capacity) * 100


class UtilizationService:
    """Computes and caches per-room utilization snapshots."""

    def __init__(self, store: OccupancyStore, cache: ResultCache):
        self.store = store
        self.cache = cache

    async def get_utilization(
        self,
        tenant_id: str,
        room_id: str,
        days: int = DEFAULT_WINDOW_DAYS,
    ) -> Optional[UtilizationSnapshot]:
        """Return the snapshot for a room, or None when the room is unknown or inactive."""
        cache_key = utilization_key(tenant_id, room_id, days)

        cached = await self.cache.get_json(cache_key)
        if cached is not None:
            logger.debug(
                "Returning cached utilization data",
                extra={"tenant_id": tenant_id, "room_id": room_id},
            )
            return UtilizationSnapshot.model_validate_json(cached)

        room = await self.store.find_active_room(tenant_id, room_id)
        if room is None:
            return None

        since = datetime.now(timezone.utc) - timedelta(days=days)
        stats = await self.store.aggregate_room_stats(tenant_id, room_id, since)

        snapshot = UtilizationSnapshot(
            room_id=room_id,
            room_name=room.name,
            average_utilization=stats.average,
            total_events=stats.count,
            peak_occupancy=stats.peak,
            capacity=room.capacity,
            utilization_percentage=utilization_percentage(stats.average, room.capacity),
        )

        await self.cache.set_json(
            cache_key, snapshot.model_dump_json(), settings.UTILIZATION_CACHE_TTL
        )

        logger.info(
            f"Utilization calculated: {snapshot.utilization_percentage:.1f}%",
            extra={"tenant_id": tenant_id, "room_id": room_id},
        )
        return snapshot

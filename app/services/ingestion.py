"""Occupancy event ingestion with cache invalidation."""
from typing import List

from app.core.cache import ResultCache
from app.core.logging import get_logger
from app.models.occupancy_event import OccupancyEvent
from app.schemas.occupancy_event import OccupancyEventCreate
from app.services.occupancy_store import OccupancyStore


logger = get_logger(__name__)


class IngestionService:
    """Writes events through the store, then evicts the affected cache entries."""

    def __init__(self, store: OccupancyStore, cache: ResultCache):
        self.store = store
        self.cache = cache

    async def create_event(self, event: OccupancyEventCreate) -> OccupancyEvent:
        stored = await self.store.insert_event(
            tenant_id=event.tenant_key,
            room_id=event.room_id,
            timestamp=event.timestamp,
            people_count=event.people_count,
            metadata=event.metadata,
        )

        # The row is committed at this point; an eviction failure is not rolled back
        await self.cache.invalidate_room(event.tenant_key, event.room_id)

        logger.info(
            f"Occupancy event created: people_count={event.people_count}",
            extra={"tenant_id": event.tenant_key, "room_id": event.room_id},
        )
        return stored

    async def create_events(self, events: List[OccupancyEventCreate]) -> int:
        processed = await self.store.insert_events_batch(events)

        affected = {(e.tenant_key, e.room_id) for e in events}
        for tenant_id, room_id in sorted(affected):
            await self.cache.invalidate_room(tenant_id, room_id)
        for tenant_id in sorted({tenant_id for tenant_id, _ in affected}):
            await self.cache.invalidate_tenant(tenant_id)

        logger.info(f"Batch occupancy events created: total={len(events)}, valid={processed}")
        return processed

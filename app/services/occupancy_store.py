"""Tenant-scoped persistence operations for rooms and occupancy events."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import set_tenant_context
from app.core.exceptions import NotFoundError, RequestValidationFailed
from app.core.logging import get_logger
from app.models.occupancy_event import OccupancyEvent
from app.models.room import Room
from app.models.tenant import Tenant
from app.schemas.occupancy_event import OccupancyEventCreate


logger = get_logger(__name__)


@dataclass(frozen=True)
class RoomStats:
    """Aggregate of occupancy events for one room."""
    average: float
    count: int
    peak: int


class OccupancyStore:
    """
    Database accessor for the occupancy pipeline.

    Every method takes the tenant explicitly and filters on it; the PostgreSQL
    row-level-security policy is only a second line of defense.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def set_tenant_scope(self, tenant_id: str) -> None:
        await set_tenant_context(self.session, tenant_id)

    async def get_active_tenant(self, tenant_id: str) -> Optional[Tenant]:
        result = await self.session.execute(
            select(Tenant).where(Tenant.id == tenant_id, Tenant.active.is_(True))
        )
        return result.scalar_one_or_none()

    async def find_active_room(self, tenant_id: str, room_id: str) -> Optional[Room]:
        result = await self.session.execute(
            select(Room).where(
                Room.tenant_id == tenant_id,
                Room.room_id == room_id,
                Room.active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def find_active_rooms(self, tenant_id: str, room_ids: Iterable[str]) -> Dict[str, Room]:
        """Resolve many external room ids for one tenant in a single query."""
        room_ids = set(room_ids)
        if not room_ids:
            return {}
        result = await self.session.execute(
            select(Room).where(
                Room.tenant_id == tenant_id,
                Room.room_id.in_(room_ids),
                Room.active.is_(True),
            )
        )
        return {room.room_id: room for room in result.scalars().all()}

    async def list_active_rooms(self, tenant_id: str, office_id: str) -> List[Room]:
        result = await self.session.execute(
            select(Room)
            .where(
                Room.tenant_id == tenant_id,
                Room.office_id == office_id,
                Room.active.is_(True),
            )
            .order_by(Room.room_id)
        )
        return list(result.scalars().all())

    async def insert_event(
        self,
        tenant_id: str,
        room_id: str,
        timestamp: datetime,
        people_count: int,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> OccupancyEvent:
        """Persist one event for an existing active room."""
        room = await self.find_active_room(tenant_id, room_id)
        if room is None:
            raise NotFoundError(f"Room {room_id} not found for tenant")

        event = OccupancyEvent(
            tenant_id=tenant_id,
            room_id=room_id,
            timestamp=timestamp,
            people_count=people_count,
            event_metadata=metadata or {},
        )
        self.session.add(event)
        try:
            await self.session.commit()
        except Exception:
            logger.exception(
                "Failed to persist occupancy event",
                extra={"tenant_id": tenant_id, "room_id": room_id},
            )
            await self.session.rollback()
            raise
        await self.session.refresh(event)
        return event

    async def insert_events_batch(self, events: List[OccupancyEventCreate]) -> int:
        """
        Persist every event whose room resolves; silently drop the rest.

        Room existence is checked with one query per tenant and survivors are
        written with a single multi-row insert.
        """
        rooms_by_tenant: Dict[str, set] = {}
        for event in events:
            rooms_by_tenant.setdefault(event.tenant_key, set()).add(event.room_id)

        known = set()
        for tenant_id, room_ids in rooms_by_tenant.items():
            for room_id in await self.find_active_rooms(tenant_id, room_ids):
                known.add((tenant_id, room_id))

        now = datetime.now(timezone.utc)
        rows = [
            {
                "tenant_id": event.tenant_key,
                "room_id": event.room_id,
                "timestamp": event.timestamp,
                "people_count": event.people_count,
                "event_metadata": event.metadata or {},
                "created_at": now,
                "updated_at": now,
            }
            for event in events
            if (event.tenant_key, event.room_id) in known
        ]

        if not rows:
            raise RequestValidationFailed("No valid events to insert")

        try:
            await self.session.execute(insert(OccupancyEvent), rows)
            await self.session.commit()
        except Exception:
            logger.exception(f"Failed to persist batch of {len(rows)} occupancy events")
            await self.session.rollback()
            raise

        return len(rows)

    async def aggregate_room_stats(self, tenant_id: str, room_id: str, since: datetime) -> RoomStats:
        """Average, count and peak of people counts recorded at or after ``since``."""
        result = await self.session.execute(
            select(
                func.avg(OccupancyEvent.people_count),
                func.count(OccupancyEvent.id),
                func.max(OccupancyEvent.people_count),
            ).where(
                OccupancyEvent.tenant_id == tenant_id,
                OccupancyEvent.room_id == room_id,
                OccupancyEvent.timestamp >= since,
            )
        )
        average, count, peak = result.one()
        return RoomStats(
            average=float(average or 0),
            count=int(count or 0),
            peak=int(peak or 0),
        )

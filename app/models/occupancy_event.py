"""OccupancyEvent model."""
from datetime import datetime, timezone
from sqlalchemy import (
    String, Integer, DateTime, ForeignKey, ForeignKeyConstraint, Index, JSON
)
from sqlalchemy.orm import Mapped, mapped_column
import uuid

from app.core.database import Base


class OccupancyEvent(Base):
    """Immutable people-count observation for a room."""

    __tablename__ = "occupancy_events"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False
    )
    # External room identifier, resolved together with tenant_id
    room_id: Mapped[str] = mapped_column(String(100), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    people_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    event_metadata: Mapped[dict] = mapped_column("metadata", JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    __table_args__ = (
        ForeignKeyConstraint(
            ["tenant_id", "room_id"],
            ["rooms.tenant_id", "rooms.room_id"],
            name="fk_occupancy_events_tenant_room_rooms",
        ),
        Index("ix_occupancy_tenant_room_timestamp", "tenant_id", "room_id", "timestamp"),
        Index("ix_occupancy_tenant_timestamp", "tenant_id", "timestamp"),
    )

"""Room model."""
from datetime import datetime, timezone
from sqlalchemy import (
    String, Integer, Boolean, DateTime, ForeignKey, Index, UniqueConstraint, JSON
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from app.core.database import Base


class Room(Base):
    """Room model representing an observable space inside an office."""

    __tablename__ = "rooms"

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
    office_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("offices.id", ondelete="CASCADE"),
        nullable=False
    )
    # External identifier reported by sensors, unique within a tenant
    room_id: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(50), default="general", nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    floor: Mapped[str] = mapped_column(String(10), nullable=True)
    room_metadata: Mapped[dict] = mapped_column("metadata", JSON, default=dict, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Relationships
    tenant = relationship("Tenant", back_populates="rooms")
    office = relationship("Office", back_populates="rooms")

    __table_args__ = (
        UniqueConstraint("tenant_id", "room_id", name="uq_rooms_tenant_room"),
        Index("ix_room_tenant_office_active", "tenant_id", "office_id", "active"),
        Index("ix_room_tenant_type", "tenant_id", "type"),
    )

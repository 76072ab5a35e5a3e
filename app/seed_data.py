"""Seed data script to populate a demo tenant with offices, rooms and events."""
import asyncio
import random
from datetime import datetime, timedelta, timezone

from sqlalchemy import insert, select

from app.core.database import async_session_maker, engine, Base
from app.models.tenant import Tenant
from app.models.office import Office
from app.models.room import Room
from app.models.occupancy_event import OccupancyEvent


DEMO_TENANT_ID = "a1b2c3d4-e5f6-4789-a012-345678901234"
NEW_YORK_OFFICE_ID = "b2c3d4e5-f6a7-4890-b123-456789012345"
LONDON_OFFICE_ID = "c3d4e5f6-a7b8-4901-c234-567890123456"

HISTORY_DAYS = 30
BATCH_SIZE = 1000

# room_id -> (chance of an event per hour, min people, max people)
USAGE_PATTERNS = {
    "confA": (0.3, 1, 4),
    "confB": (0.6, 2, 7),
    "collab1": (0.8, 3, 7),
    "phone1": (0.4, 1, 1),
    "london_conf1": (0.5, 2, 8),
    "london_collab1": (0.7, 2, 7),
}


def _rooms(tenant_id: str) -> list:
    return [
        Room(tenant_id=tenant_id, office_id=NEW_YORK_OFFICE_ID, room_id="confA",
             name="Conference Room A", type="conference", capacity=12, floor="15",
             room_metadata={"equipment": ["projector", "video_conference", "whiteboard"]}),
        Room(tenant_id=tenant_id, office_id=NEW_YORK_OFFICE_ID, room_id="confB",
             name="Conference Room B", type="conference", capacity=8, floor="15",
             room_metadata={"equipment": ["projector", "whiteboard"]}),
        Room(tenant_id=tenant_id, office_id=NEW_YORK_OFFICE_ID, room_id="collab1",
             name="Collaboration Zone 1", type="collaboration", capacity=6, floor="10",
             room_metadata={"equipment": ["whiteboard", "standing_desk"]}),
        Room(tenant_id=tenant_id, office_id=NEW_YORK_OFFICE_ID, room_id="phone1",
             name="Phone Booth 1", type="phone_booth", capacity=1, floor="12",
             room_metadata={"soundproof": True}),
        Room(tenant_id=tenant_id, office_id=LONDON_OFFICE_ID, room_id="london_conf1",
             name="Thames Conference Room", type="conference", capacity=10, floor="5",
             room_metadata={"equipment": ["projector", "video_conference"]}),
        Room(tenant_id=tenant_id, office_id=LONDON_OFFICE_ID, room_id="london_collab1",
             name="Innovation Lab", type="collaboration", capacity=8, floor="3",
             room_metadata={"equipment": ["whiteboard", "creative_supplies"]}),
    ]


def _events(tenant_id: str, now: datetime) -> list:
    """Weekday events between 09:00 and 18:00 for the last HISTORY_DAYS days."""
    events = []
    for days_ago in range(HISTORY_DAYS, -1, -1):
        day = now - timedelta(days=days_ago)
        if day.weekday() >= 5:
            continue
        for hour in range(9, 19):
            event_time = day.replace(hour=hour, minute=random.randrange(60), second=0, microsecond=0)
            if event_time > now:
                continue
            for room_id, (chance, low, high) in USAGE_PATTERNS.items():
                if random.random() < chance:
                    events.append({
                        "tenant_id": tenant_id,
                        "room_id": room_id,
                        "timestamp": event_time,
                        "people_count": random.randint(low, high),
                        "event_metadata": {},
                        "created_at": now,
                        "updated_at": now,
                    })
    return events


async def seed_data():
    """Seed initial data for local development."""
    async with async_session_maker() as session:
        # Check if data already exists
        result = await session.execute(select(Tenant).limit(1))
        if result.scalar_one_or_none():
            print("Data already seeded. Skipping...")
            return

        tenant = Tenant(
            id=DEMO_TENANT_ID,
            name="Global Bank Corp",
            slug="bank123",
            description="Large multinational banking corporation",
            settings={"timezone": "UTC", "currency": "USD", "utilization_threshold": 0.7},
            active=True,
        )
        session.add(tenant)
        await session.flush()
        print(f"Created tenant: {tenant.name} (ID: {tenant.id})")

        offices = [
            Office(id=NEW_YORK_OFFICE_ID, tenant_id=tenant.id, name="New York Headquarters",
                   location="New York, NY", address="123 Financial District, New York, NY 10004",
                   timezone="America/New_York", total_capacity=500,
                   office_metadata={"floors": 15, "building_type": "headquarters"}),
            Office(id=LONDON_OFFICE_ID, tenant_id=tenant.id, name="London Branch",
                   location="London, UK", address="456 Canary Wharf, London E14 5AB, UK",
                   timezone="Europe/London", total_capacity=300,
                   office_metadata={"floors": 8, "building_type": "branch"}),
        ]
        session.add_all(offices)
        await session.flush()
        print(f"Created {len(offices)} offices")

        rooms = _rooms(tenant.id)
        session.add_all(rooms)
        await session.flush()
        print(f"Created {len(rooms)} rooms")

        events = _events(tenant.id, datetime.now(timezone.utc))
        for start in range(0, len(events), BATCH_SIZE):
            await session.execute(insert(OccupancyEvent), events[start:start + BATCH_SIZE])

        await session.commit()
        print(f"Seeded {len(events)} occupancy events")
        print(f"\nSample tenant ID: {tenant.id}")
        print("Generate a token with: python scripts/generate_token.py")


async def main():
    """Main entry point."""
    # Create tables if they don't exist (for local development)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await seed_data()


if __name__ == "__main__":
    asyncio.run(main())

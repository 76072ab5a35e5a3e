"""Room utilization endpoint tests."""
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from app.services.utilization import utilization_percentage


def test_utilization_percentage_zero_capacity():
    assert utilization_percentage(3.0, 0) == 0.0
    assert utilization_percentage(5.0, 10) == 50.0


@pytest.mark.asyncio
async def test_get_utilization(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
    make_room,
    add_events,
):
    """Average, peak and percentage over the default 7 day window."""
    await make_room("confA", capacity=10)
    await add_events("confA", [1, 1])

    response = await client.get(f"/api/utilization/{test_tenant.id}/confA", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"] == {
        "room_id": "confA",
        "room_name": "Room confA",
        "average_utilization": 1.0,
        "total_events": 2,
        "peak_occupancy": 1,
        "capacity": 10,
        "utilization_percentage": 10.0,
    }


@pytest.mark.asyncio
async def test_get_utilization_peak_and_average(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
    make_room,
    add_events,
):
    await make_room("collab1", capacity=8)
    await add_events("collab1", [2, 4, 6])

    response = await client.get(f"/api/utilization/{test_tenant.id}/collab1", headers=auth_headers)

    data = response.json()["data"]
    assert data["average_utilization"] == 4.0
    assert data["peak_occupancy"] == 6
    assert data["utilization_percentage"] == 50.0


@pytest.mark.asyncio
async def test_get_utilization_without_events(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
    make_room,
):
    await make_room("confB", capacity=6)

    response = await client.get(f"/api/utilization/{test_tenant.id}/confB", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["average_utilization"] == 0
    assert data["total_events"] == 0
    assert data["peak_occupancy"] == 0
    assert data["utilization_percentage"] == 0


@pytest.mark.asyncio
async def test_get_utilization_zero_capacity(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
    make_room,
    add_events,
):
    await make_room("hotdesk", capacity=0)
    await add_events("hotdesk", [3])

    response = await client.get(f"/api/utilization/{test_tenant.id}/hotdesk", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["average_utilization"] == 3.0
    assert data["utilization_percentage"] == 0


@pytest.mark.asyncio
async def test_get_utilization_excludes_old_events(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
    make_room,
    add_events,
):
    await make_room("confA", capacity=10)
    await add_events("confA", [5])
    await add_events("confA", [9], timestamp=datetime.now(timezone.utc) - timedelta(days=10))

    week = await client.get(f"/api/utilization/{test_tenant.id}/confA", headers=auth_headers)
    month = await client.get(
        f"/api/utilization/{test_tenant.id}/confA",
        headers=auth_headers,
        params={"days": 30},
    )

    assert week.json()["data"]["total_events"] == 1
    assert week.json()["data"]["peak_occupancy"] == 5
    assert month.json()["data"]["total_events"] == 2
    assert month.json()["data"]["average_utilization"] == 7.0


@pytest.mark.asyncio
async def test_get_utilization_unknown_room(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
):
    response = await client.get(f"/api/utilization/{test_tenant.id}/ghost", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Room not found or no data available"}


@pytest.mark.asyncio
async def test_get_utilization_inactive_room(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
    make_room,
):
    await make_room("retired", active=False)

    response = await client.get(f"/api/utilization/{test_tenant.id}/retired", headers=auth_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("days", [0, 366, "week"])
async def test_get_utilization_invalid_days(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
    days,
):
    response = await client.get(
        f"/api/utilization/{test_tenant.id}/confA",
        headers=auth_headers,
        params={"days": days},
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "days"


@pytest.mark.asyncio
async def test_get_utilization_is_cached(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
    make_room,
    add_events,
    fake_redis,
):
    """The second identical call is served from the cache, byte for byte."""
    await make_room("confA", capacity=10)
    await add_events("confA", [1, 1])
    url = f"/api/utilization/{test_tenant.id}/confA"

    first = await client.get(url, headers=auth_headers)

    key = f"utilization:{test_tenant.id}:confA:7d"
    assert await fake_redis.exists(key)
    assert 3590 < await fake_redis.ttl(key) <= 3600

    # Written behind the API's back, so nothing evicts the cached entry
    await add_events("confA", [9])
    second = await client.get(url, headers=auth_headers)

    assert second.status_code == 200
    assert second.content == first.content


@pytest.mark.asyncio
async def test_cache_is_keyed_by_window(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
    make_room,
    fake_redis,
):
    await make_room("confA")
    url = f"/api/utilization/{test_tenant.id}/confA"

    await client.get(url, headers=auth_headers)
    await client.get(url, headers=auth_headers, params={"days": 14})

    assert await fake_redis.exists(f"utilization:{test_tenant.id}:confA:7d")
    assert await fake_redis.exists(f"utilization:{test_tenant.id}:confA:14d")


@pytest.mark.asyncio
async def test_new_event_refreshes_utilization(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
    make_room,
    add_events,
):
    await make_room("confA", capacity=10)
    await add_events("confA", [2])
    url = f"/api/utilization/{test_tenant.id}/confA"

    before = await client.get(url, headers=auth_headers)
    assert before.json()["data"]["total_events"] == 1

    created = await client.post(
        "/api/events",
        headers=auth_headers,
        json={
            "tenant_id": test_tenant.id,
            "room_id": "confA",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "people_count": 6,
        },
    )
    assert created.status_code == 201

    after = await client.get(url, headers=auth_headers)
    data = after.json()["data"]
    assert data["total_events"] == 2
    assert data["average_utilization"] == 4.0
    assert data["peak_occupancy"] == 6


@pytest.mark.asyncio
async def test_cache_failure_is_surfaced(
    client: AsyncClient,
    auth_headers: dict,
    test_tenant,
    make_room,
    redis_server,
):
    await make_room("confA")
    redis_server.connected = False

    response = await client.get(f"/api/utilization/{test_tenant.id}/confA", headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["success"] is False

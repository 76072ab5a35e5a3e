"""Result cache tests."""
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.cache import escape_pattern, recommendations_key, utilization_key


async def _seed(cache, *keys):
    for key in keys:
        await cache.set_json(key, "{}", 60)


async def _keys(fake_redis) -> set:
    return set(await fake_redis.keys("*"))


def test_key_formats():
    assert utilization_key("t1", "confA", 7) == "utilization:t1:confA:7d"
    assert recommendations_key("t1", "o1", 30, 0.5) == "recommendations:t1:o1:30d:0.5"


@pytest.mark.parametrize(
    "value, escaped",
    [
        ("confA", "confA"),
        ("A[1]", r"A\[1\]"),
        ("room?", r"room\?"),
        ("*", r"\*"),
        (r"back\slash", r"back\\slash"),
    ],
)
def test_escape_pattern(value, escaped):
    assert escape_pattern(value) == escaped


@pytest.mark.asyncio
async def test_set_and_get_json(cache, fake_redis):
    await cache.set_json("utilization:t1:confA:7d", '{"a": 1}', 3600)

    assert await cache.get_json("utilization:t1:confA:7d") == '{"a": 1}'
    assert 3590 < await fake_redis.ttl("utilization:t1:confA:7d") <= 3600
    assert await cache.get_json("utilization:t1:missing:7d") is None


@pytest.mark.asyncio
async def test_invalidate_room_only_touches_that_room(cache, fake_redis):
    await _seed(
        cache,
        "utilization:t1:confA:7d",
        "utilization:t1:confA:30d",
        "utilization:t1:confAB:7d",
        "utilization:t1:confA:x:7d",
        "utilization:t2:confA:7d",
        "recommendations:t1:o1:30d:0.5",
    )

    removed = await cache.invalidate_room("t1", "confA")

    assert removed == 2
    assert await _keys(fake_redis) == {
        "utilization:t1:confAB:7d",
        "utilization:t1:confA:x:7d",
        "utilization:t2:confA:7d",
        "recommendations:t1:o1:30d:0.5",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("room_id", ["A[1]", "room?", "desk*", r"north\east"])
async def test_invalidate_room_with_glob_characters(cache, fake_redis, room_id):
    """Room ids are matched literally, never as patterns."""
    await _seed(
        cache,
        utilization_key("t1", room_id, 7),
        utilization_key("t1", room_id, 30),
        "utilization:t1:A1:7d",
        "utilization:t1:room1:7d",
        "utilization:t1:desk-2:7d",
        "utilization:t1:north_east:7d",
    )

    removed = await cache.invalidate_room("t1", room_id)

    assert removed == 2
    assert await _keys(fake_redis) == {
        "utilization:t1:A1:7d",
        "utilization:t1:room1:7d",
        "utilization:t1:desk-2:7d",
        "utilization:t1:north_east:7d",
    }


@pytest.mark.asyncio
async def test_invalidate_room_star_only_drops_itself(cache, fake_redis):
    await _seed(cache, "utilization:t1:*:7d", "utilization:t1:confA:7d")

    removed = await cache.invalidate_room("t1", "*")

    assert removed == 1
    assert await _keys(fake_redis) == {"utilization:t1:confA:7d"}


@pytest.mark.asyncio
async def test_invalidate_tenant_sweeps_every_key_for_tenant(cache, fake_redis):
    await _seed(
        cache,
        "utilization:t1:confA:7d",
        "recommendations:t1:o1:30d:0.5",
        "utilization:t2:confA:7d",
    )

    removed = await cache.invalidate_tenant("t1")

    assert removed == 2
    assert await _keys(fake_redis) == {"utilization:t2:confA:7d"}


@pytest.mark.asyncio
async def test_cache_errors_propagate(cache, redis_server):
    redis_server.connected = False

    with pytest.raises(RedisConnectionError):
        await cache.get_json("utilization:t1:confA:7d")
    with pytest.raises(RedisConnectionError):
        await cache.set_json("utilization:t1:confA:7d", "{}", 60)
    with pytest.raises(RedisConnectionError):
        await cache.invalidate_tenant("t1")

"""Redis-backed result cache for computed aggregates."""
import re
from typing import Callable, List, Optional
from fastapi import Request
from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.core.logging import get_logger


logger = get_logger(__name__)

# Window part of a utilization key, e.g. "7d"
WINDOW_SUFFIX = re.compile(r"\d+d")


def utilization_key(tenant_id: str, room_id: str, days: int) -> str:
    return f"utilization:{tenant_id}:{room_id}:{days}d"


def recommendations_key(tenant_id: str, office_id: str, days: int, threshold: float) -> str:
    return f"recommendations:{tenant_id}:{office_id}:{days}d:{threshold}"


def escape_pattern(value: str) -> str:
    """Escape Redis MATCH metacharacters so ``value`` only matches itself."""
    return re.sub(r"([\\*?\[\]])", r"\\\1", value)


def create_redis_client(url: str) -> Redis:
    """Create the process-wide Redis client (connections are opened lazily)."""
    return Redis.from_url(url, decode_responses=True)


class ResultCache:
    """
    Read-through / write-around cache over a Redis client.

    Values are JSON strings. Failures are logged and re-raised so callers
    never silently compute without the cache.
    """

    def __init__(self, client: Redis):
        self.client = client

    async def get_json(self, key: str) -> Optional[str]:
        try:
            value = await self.client.get(key)
        except RedisError:
            logger.exception(f"Cache read failed for key {key}")
            raise
        if value is not None:
            logger.debug(f"Cache hit for key: {key}")
        return value

    async def set_json(self, key: str, payload: str, ttl: int) -> None:
        try:
            await self.client.set(key, payload, ex=ttl)
        except RedisError:
            logger.exception(f"Cache write failed for key {key}")
            raise
        logger.debug(f"Cached key: {key} (TTL: {ttl}s)")

    async def delete_matching(self, pattern: str, key_filter: Optional[Callable[[str], bool]] = None) -> int:
        """
        Delete every key matching a glob pattern, returning the count removed.

        ``key_filter`` narrows the scanned keys further when a glob alone is too broad.
        """
        try:
            keys: List[str] = [
                key async for key in self.client.scan_iter(match=pattern)
                if key_filter is None or key_filter(key)
            ]
            if keys:
                await self.client.delete(*keys)
        except RedisError:
            logger.exception(f"Cache invalidation failed for pattern {pattern}")
            raise
        return len(keys)

    async def invalidate_room(self, tenant_id: str, room_id: str) -> int:
        """Drop cached utilization for one room across all window lengths."""
        prefix = f"utilization:{tenant_id}:{room_id}:"
        removed = await self.delete_matching(
            f"{escape_pattern(prefix)}*d",
            key_filter=lambda key: WINDOW_SUFFIX.fullmatch(key[len(prefix):]) is not None,
        )
        logger.debug(
            f"Invalidated {removed} utilization entries",
            extra={"tenant_id": tenant_id, "room_id": room_id},
        )
        return removed

    async def invalidate_tenant(self, tenant_id: str) -> int:
        """Drop every cached entry whose key mentions the tenant."""
        removed = await self.delete_matching(f"*{escape_pattern(tenant_id)}*")
        logger.info(
            f"Invalidated {removed} cached entries for tenant",
            extra={"tenant_id": tenant_id},
        )
        return removed

    async def close(self) -> None:
        await self.client.aclose()


async def get_cache(request: Request) -> ResultCache:
    """Dependency returning the cache created at startup."""
    return request.app.state.cache

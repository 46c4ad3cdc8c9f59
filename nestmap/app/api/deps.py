"""FastAPI dependencies shared by the routes."""

from collections.abc import AsyncGenerator
from functools import lru_cache

import httpx
import redis.asyncio as aioredis

from nestmap.app.cache.query_cache import InMemoryQueryCache, QueryCache, RedisQueryCache
from nestmap.app.clients.trip_store import TripStoreClient
from nestmap.app.config import get_settings
from nestmap.app.scheduling.scheduler import SchedulePolicy


@lru_cache
def get_query_cache() -> QueryCache:
    """Process-wide query cache (Redis when configured, else in-memory)."""
    settings = get_settings()

    if settings.redis_url:
        client = aioredis.from_url(settings.redis_url, decode_responses=True)
        return RedisQueryCache(client, ttl_seconds=settings.query_cache_ttl_seconds)

    return InMemoryQueryCache(ttl_seconds=settings.query_cache_ttl_seconds)


async def get_trip_store() -> AsyncGenerator[TripStoreClient, None]:
    """Trip store client bound to a per-request httpx client."""
    settings = get_settings()

    async with httpx.AsyncClient(
        base_url=settings.trip_store_url,
        timeout=settings.trip_store_timeout_s,
    ) as http:
        yield TripStoreClient(http, cache=get_query_cache())


def get_schedule_policy() -> SchedulePolicy:
    """Scheduling rules from settings."""
    return SchedulePolicy.from_settings(get_settings())

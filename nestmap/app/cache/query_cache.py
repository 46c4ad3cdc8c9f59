"""Query cache for trip store reads, keyed by (resource, trip_id).

Reads are cache-aside; writes through the trip store invalidate the
affected keys so that the next read refetches. Between a write and the
next read, readers may still see the previous value.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Protocol

import redis.asyncio as aioredis


class ResourceType(str, Enum):
    """Cached trip store resources."""

    trip = "trip"
    activities = "activities"
    todos = "todos"


@dataclass(frozen=True)
class QueryKey:
    """Cache key for one resource of one trip."""

    resource: ResourceType
    trip_id: str

    @classmethod
    def of(cls, resource: ResourceType, trip_id: int | str) -> "QueryKey":
        return cls(resource=resource, trip_id=str(trip_id))

    def redis_key(self) -> str:
        return f"nestmap:query:{self.resource.value}:{self.trip_id}"


class QueryCache(Protocol):
    """Cache interface used by the trip store client.

    Methods are coroutines; network-backed implementations await their I/O.
    """

    async def get(self, key: QueryKey) -> Any | None:
        """Get cached JSON value, or None on miss/expiry."""
        ...

    async def set(self, key: QueryKey, value: Any) -> None:
        """Store a JSON-serializable value."""
        ...

    async def invalidate(self, key: QueryKey) -> None:
        """Drop one key so the next read refetches."""
        ...

    async def invalidate_trip(self, trip_id: int | str) -> None:
        """Drop every cached resource of a trip."""
        ...


class InMemoryQueryCache:
    """Process-local QueryCache with a fixed TTL."""

    def __init__(
        self,
        ttl_seconds: int = 300,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize cache.

        Args:
            ttl_seconds: Entry lifetime in seconds
            clock: Time source (for testing)
        """
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._entries: dict[QueryKey, tuple[datetime, Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: QueryKey) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None

        return value

    async def set(self, key: QueryKey, value: Any) -> None:
        now = self._clock()
        self._evict_expired(now)
        self._entries[key] = (now + self._ttl, value)

    async def invalidate(self, key: QueryKey) -> None:
        self._entries.pop(key, None)

    async def invalidate_trip(self, trip_id: int | str) -> None:
        for resource in ResourceType:
            self._entries.pop(QueryKey.of(resource, trip_id), None)

    def _evict_expired(self, now: datetime) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]


class RedisQueryCache:
    """Redis-backed QueryCache storing JSON with SET EX."""

    def __init__(self, redis_client: aioredis.Redis, ttl_seconds: int = 300) -> None:
        """Initialize cache.

        Args:
            redis_client: asyncio Redis client
            ttl_seconds: Entry lifetime in seconds
        """
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds

    async def get(self, key: QueryKey) -> Any | None:
        raw = await self._redis.get(key.redis_key())
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: QueryKey, value: Any) -> None:
        await self._redis.set(key.redis_key(), json.dumps(value), ex=self._ttl_seconds)

    async def invalidate(self, key: QueryKey) -> None:
        await self._redis.delete(key.redis_key())

    async def invalidate_trip(self, trip_id: int | str) -> None:
        keys = [QueryKey.of(resource, trip_id).redis_key() for resource in ResourceType]
        await self._redis.delete(*keys)

"""Shared pytest fixtures for all test suites."""

from collections.abc import Callable

import httpx
import pytest

from nestmap.app.cache.query_cache import InMemoryQueryCache
from nestmap.app.clients.trip_store import TripStoreClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def query_cache() -> InMemoryQueryCache:
    """Fresh in-memory query cache."""
    return InMemoryQueryCache(ttl_seconds=300)


@pytest.fixture
def store_factory(
    query_cache: InMemoryQueryCache,
) -> Callable[[Handler], TripStoreClient]:
    """Build a TripStoreClient whose HTTP calls are answered by `handler`.

    Usage:
        store = store_factory(lambda request: httpx.Response(200, json=[...]))
    """

    def factory(handler: Handler) -> TripStoreClient:
        http = httpx.AsyncClient(
            base_url="http://trip-store.test",
            transport=httpx.MockTransport(handler),
        )
        return TripStoreClient(http, cache=query_cache)

    return factory

"""Async client for the external trip store REST API.

Reads go through the query cache; writes invalidate the cache key they
affect. Failures are raised as TripStoreError and never retried.
"""

import time
from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from nestmap.app.cache.query_cache import QueryCache, QueryKey, ResourceType
from nestmap.app.clients.errors import TripNotFoundError, TripStoreError
from nestmap.app.models.activity import Activity
from nestmap.app.models.trip import EntityId, Todo, Trip
from nestmap.app.utils.logging import StructuredStoreLogger
from nestmap.app.utils.metrics import PrometheusScheduleMetrics

_log = StructuredStoreLogger()
_metrics = PrometheusScheduleMetrics()

ModelT = TypeVar("ModelT", bound=BaseModel)
ResultT = TypeVar("ResultT")


class TripStoreClient:
    """Typed wrapper around the trip store endpoints."""

    def __init__(self, http: httpx.AsyncClient, cache: QueryCache | None = None) -> None:
        """Initialize client.

        Args:
            http: httpx client with base_url pointing at the trip store
            cache: Optional query cache for reads
        """
        self._http = http
        self._cache = cache

    async def _request(
        self,
        operation: str,
        trip_id: EntityId,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> Any:
        started = time.perf_counter()

        try:
            response = await self._http.request(method, path, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            self._record(operation, trip_id, "http_error", started, status_code=status_code)
            if status_code == 404:
                raise TripNotFoundError(f"{operation}: not found", status_code) from e
            raise TripStoreError(f"{operation}: HTTP {status_code}", status_code) from e
        except httpx.HTTPError as e:
            reason = type(e).__name__
            self._record(operation, trip_id, "network_error", started, error_reason=reason)
            raise TripStoreError(f"{operation}: {reason}") from e

        if response.status_code == 204 or not response.content:
            self._record(operation, trip_id, "success", started, status_code=response.status_code)
            return None

        try:
            data = response.json()
        except ValueError as e:
            self._record(operation, trip_id, "malformed", started, error_reason="invalid JSON")
            raise TripStoreError(f"{operation}: invalid JSON response") from e

        self._record(operation, trip_id, "success", started, status_code=response.status_code)
        return data

    def _record(
        self,
        operation: str,
        trip_id: EntityId,
        outcome: str,
        started: float,
        *,
        cache_hit: bool = False,
        status_code: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        latency_ms = (time.perf_counter() - started) * 1000
        _metrics.record_store_request(operation, outcome)
        _log.log_request(
            operation=operation,
            trip_id=trip_id,
            outcome=outcome,
            latency_ms=latency_ms,
            cache_hit=cache_hit,
            status_code=status_code,
            error_reason=error_reason,
        )

    async def _cached_read(
        self,
        operation: str,
        resource: ResourceType,
        trip_id: EntityId,
        path: str,
        parse: Callable[[Any], ResultT],
    ) -> ResultT:
        """Read through the cache.

        Only payloads that `parse` accepts are cached, so a malformed
        response is refetched on the next read.
        """
        key = QueryKey.of(resource, trip_id)

        if self._cache is not None:
            started = time.perf_counter()
            cached = await self._cache.get(key)
            _metrics.record_cache_lookup(resource.value, hit=cached is not None)
            if cached is not None:
                self._record(operation, trip_id, "cache_hit", started, cache_hit=True)
                return parse(cached)

        data = await self._request(operation, trip_id, "GET", path)
        result = parse(data)

        if self._cache is not None and data is not None:
            await self._cache.set(key, data)

        return result

    async def _invalidate(self, resource: ResourceType, trip_id: EntityId) -> None:
        if self._cache is not None:
            await self._cache.invalidate(QueryKey.of(resource, trip_id))

    async def _invalidate_trip(self, trip_id: EntityId) -> None:
        if self._cache is not None:
            await self._cache.invalidate_trip(trip_id)

    # Reads

    async def get_trip(self, trip_id: EntityId) -> Trip:
        """Fetch a trip by ID."""
        return await self._cached_read(
            "get_trip",
            ResourceType.trip,
            trip_id,
            f"/api/trips/{trip_id}",
            lambda data: _parse(Trip, data, "get_trip"),
        )

    async def list_activities(self, trip_id: EntityId) -> list[Activity]:
        """Fetch all activities of a trip, in store order."""
        return await self._cached_read(
            "list_activities",
            ResourceType.activities,
            trip_id,
            f"/api/trips/{trip_id}/activities",
            lambda data: _parse_list(Activity, data, "list_activities"),
        )

    async def list_todos(self, trip_id: EntityId) -> list[Todo]:
        """Fetch all todos of a trip."""
        return await self._cached_read(
            "list_todos",
            ResourceType.todos,
            trip_id,
            f"/api/trips/{trip_id}/todos",
            lambda data: _parse_list(Todo, data, "list_todos"),
        )

    # Writes

    async def create_activity(self, trip_id: EntityId, payload: dict[str, Any]) -> Activity:
        """Create an activity; the trip's activity list is invalidated."""
        body = {**payload, "tripId": trip_id}
        data = await self._request("create_activity", trip_id, "POST", "/api/activities", json=body)
        await self._invalidate(ResourceType.activities, trip_id)
        return _parse(Activity, data, "create_activity")

    async def update_activity(
        self, trip_id: EntityId, activity_id: EntityId, payload: dict[str, Any]
    ) -> Activity:
        """Update an activity; the trip's activity list is invalidated."""
        data = await self._request(
            "update_activity", trip_id, "PUT", f"/api/activities/{activity_id}", json=payload
        )
        await self._invalidate(ResourceType.activities, trip_id)
        return _parse(Activity, data, "update_activity")

    async def delete_activity(self, trip_id: EntityId, activity_id: EntityId) -> None:
        """Delete an activity; the trip's activity list is invalidated."""
        await self._request("delete_activity", trip_id, "DELETE", f"/api/activities/{activity_id}")
        await self._invalidate(ResourceType.activities, trip_id)

    async def set_trip_completed(self, trip_id: EntityId, completed: bool) -> Trip:
        """Toggle the trip's completed flag and drop everything cached for the trip."""
        data = await self._request(
            "set_trip_completed", trip_id, "PUT", f"/api/trips/{trip_id}", json={"completed": completed}
        )
        await self._invalidate_trip(trip_id)
        return _parse(Trip, data, "set_trip_completed")

    async def ping(self) -> None:
        """Check that the trip store answers."""
        await self._request("ping", "-", "GET", "/api/health")


def _parse(model: type[ModelT], data: Any, operation: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise TripStoreError(f"{operation}: malformed response ({e.error_count()} errors)") from e


def _parse_list(model: type[ModelT], data: Any, operation: str) -> list[ModelT]:
    if not isinstance(data, list):
        raise TripStoreError(f"{operation}: expected a JSON list")
    return [_parse(model, item, operation) for item in data]

"""Health check endpoints.

- /health always answers while the process runs
- /healthz checks the trip store and Redis and reports component status
"""

import json
from typing import Any

import httpx
import redis
from fastapi import APIRouter, Response

from nestmap.app.clients.trip_store import TripStoreClient
from nestmap.app.config import Settings, get_settings

router = APIRouter()


async def check_trip_store(settings: Settings) -> tuple[bool, str]:
    """Check trip store reachability.

    Returns:
        (is_ok, status_message)
    """
    if not settings.enable_outbound_healthcheck:
        return (True, "disabled")

    try:
        async with httpx.AsyncClient(
            base_url=settings.trip_store_url,
            timeout=settings.trip_store_timeout_s,
        ) as http:
            await TripStoreClient(http).ping()
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


async def check_redis(settings: Settings) -> tuple[bool, str]:
    """Check Redis connectivity.

    Returns:
        (is_ok, status_message)
    """
    if not settings.redis_url:
        return (True, "not_configured")

    try:
        client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        client.ping()
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | Response:
    """Health check endpoint.

    Returns:
        200 with component status if all components are ok
        503 if the trip store or Redis fails
    """
    settings = get_settings()

    store_ok, store_status = await check_trip_store(settings)
    redis_ok, redis_status = await check_redis(settings)

    core_ok = store_ok and redis_ok

    response_body = {
        "status": "ok" if core_ok else "degraded",
        "components": {
            "trip_store": store_status,
            "redis": redis_status,
        },
    }

    if not core_ok:
        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body

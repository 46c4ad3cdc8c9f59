"""Structured logging for schedule builds and trip store calls."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredScheduleLogger:
    """Structured logger for schedule builds."""

    def log_build(
        self,
        trip_id: int | str,
        days: int,
        activities: int,
        time_conflicts: int,
        travel_conflicts: int,
        unscheduled_ids: list[int | str],
        latency_ms: float,
    ) -> None:
        """Log a completed schedule build with structured data."""
        log_data: dict[str, Any] = {
            "trip_id": trip_id,
            "days": days,
            "activities": activities,
            "time_conflicts": time_conflicts,
            "travel_conflicts": travel_conflicts,
            "unscheduled": len(unscheduled_ids),
            "latency_ms": round(latency_ms, 2),
        }

        if unscheduled_ids:
            log_data["unscheduled_ids"] = unscheduled_ids
            logger.warning(
                f"Schedule built for trip {trip_id} - "
                f"{len(unscheduled_ids)} activities outside the trip days",
                extra={"structured": log_data},
            )
        else:
            logger.info(f"Schedule built for trip {trip_id}", extra={"structured": log_data})


class StructuredStoreLogger:
    """Structured logger for trip store requests."""

    def log_request(
        self,
        operation: str,
        trip_id: int | str,
        outcome: str,
        latency_ms: float,
        cache_hit: bool = False,
        status_code: int | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log trip store request with structured data."""
        log_data: dict[str, Any] = {
            "operation": operation,
            "trip_id": trip_id,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
            "cache_hit": cache_hit,
        }

        if status_code is not None:
            log_data["status_code"] = status_code
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Trip store: {operation} - {outcome}"

        if outcome in ("success", "cache_hit"):
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

"""Prometheus metrics for scheduling and trip store access."""

from prometheus_client import Counter, Histogram

# Schedule build metrics
schedule_builds_total = Counter(
    "schedule_builds_total",
    "Total trip schedules built",
)

schedule_build_latency_ms = Histogram(
    "schedule_build_latency_ms",
    "Schedule build latency in milliseconds",
    buckets=[0.5, 1, 2, 5, 10, 25, 50, 100, 250],
)

schedule_conflicts_total = Counter(
    "schedule_conflicts_total",
    "Total activities flagged with a conflict",
    ["kind"],
)

schedule_unscheduled_total = Counter(
    "schedule_unscheduled_activities_total",
    "Total activities left out of day views",
)

# Trip store metrics
trip_store_requests_total = Counter(
    "trip_store_requests_total",
    "Total trip store requests",
    ["operation", "outcome"],
)

query_cache_lookups_total = Counter(
    "query_cache_lookups_total",
    "Total query cache lookups",
    ["resource", "result"],
)


class PrometheusScheduleMetrics:
    """Prometheus-based schedule metrics implementation."""

    def record_build(
        self,
        latency_ms: float,
        time_conflicts: int,
        travel_conflicts: int,
        unscheduled: int,
    ) -> None:
        """Record one schedule build."""
        schedule_builds_total.inc()
        schedule_build_latency_ms.observe(latency_ms)
        if time_conflicts:
            schedule_conflicts_total.labels(kind="time_conflict").inc(time_conflicts)
        if travel_conflicts:
            schedule_conflicts_total.labels(kind="travel_time").inc(travel_conflicts)
        if unscheduled:
            schedule_unscheduled_total.inc(unscheduled)

    def record_store_request(self, operation: str, outcome: str) -> None:
        """Increment trip store request counter."""
        trip_store_requests_total.labels(operation=operation, outcome=outcome).inc()

    def record_cache_lookup(self, resource: str, hit: bool) -> None:
        """Increment cache lookup counter."""
        query_cache_lookups_total.labels(resource=resource, result="hit" if hit else "miss").inc()

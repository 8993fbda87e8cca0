"""
Prometheus metrics collection.
"""

from collections.abc import Mapping

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from turn_dispatch.constants import (
    METRIC_API_LATENCY,
    METRIC_API_REQUESTS,
    METRIC_QUEUE_DEPTH,
    METRIC_SNAPSHOT_FAILURES,
    METRIC_TICKETS_DISPATCHED,
    METRIC_TICKETS_REJECTED,
    METRIC_TICKETS_SUBMITTED,
    TicketClass,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for the dispatch service.

    Collects metrics for:
    - Queue depth per ticket class
    - Ticket admissions, rejections and dispatches
    - Snapshot write failures
    - API requests
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.queue_depth = Gauge(
            METRIC_QUEUE_DEPTH,
            "Number of tickets waiting",
            ["ticket_class"],
            registry=self._registry,
        )

        self.tickets_submitted = Counter(
            METRIC_TICKETS_SUBMITTED,
            "Total number of tickets admitted",
            ["ticket_class"],
            registry=self._registry,
        )

        self.tickets_rejected = Counter(
            METRIC_TICKETS_REJECTED,
            "Total number of ticket requests rejected at admission",
            ["reason"],
            registry=self._registry,
        )

        self.tickets_dispatched = Counter(
            METRIC_TICKETS_DISPATCHED,
            "Total number of tickets dispatched",
            ["ticket_class"],
            registry=self._registry,
        )

        self.snapshot_failures = Counter(
            METRIC_SNAPSHOT_FAILURES,
            "Total number of failed snapshot writes",
            registry=self._registry,
        )

        self.api_requests = Counter(
            METRIC_API_REQUESTS,
            "Total number of API requests",
            ["method", "endpoint", "status"],
            registry=self._registry,
        )

        self.api_latency = Histogram(
            METRIC_API_LATENCY,
            "API request latency in seconds",
            ["method", "endpoint"],
            buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
            registry=self._registry,
        )

    def record_ticket_submitted(self, ticket_class: str) -> None:
        """Record an admitted ticket."""
        self.tickets_submitted.labels(ticket_class=ticket_class).inc()

    def record_ticket_rejected(self, reason: str) -> None:
        """Record a rejected ticket request."""
        self.tickets_rejected.labels(reason=reason).inc()

    def record_ticket_dispatched(self, ticket_class: str) -> None:
        """Record a dispatched ticket."""
        self.tickets_dispatched.labels(ticket_class=ticket_class).inc()

    def record_snapshot_failure(self) -> None:
        """Record a failed snapshot write."""
        self.snapshot_failures.inc()

    def update_queue_depths(self, depths: Mapping[TicketClass, int]) -> None:
        """Update queue depth for every class."""
        for ticket_class, depth in depths.items():
            self.queue_depth.labels(ticket_class=ticket_class.value).set(depth)

    def record_api_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration_seconds: float,
    ) -> None:
        """Record an API request."""
        self.api_requests.labels(
            method=method,
            endpoint=endpoint,
            status=str(status),
        ).inc()
        self.api_latency.labels(method=method, endpoint=endpoint).observe(
            duration_seconds
        )

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for metrics response."""
        return CONTENT_TYPE_LATEST


def setup_metrics() -> MetricsCollector:
    """
    Set up and return the metrics collector.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector instance, creating it on first use.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    if _metrics is None:
        return setup_metrics()
    return _metrics

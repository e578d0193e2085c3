"""
Prometheus metrics collection.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from await_queue.constants import (
    METRIC_JOB_ATTEMPT_FAILURES,
    METRIC_JOB_DURATION,
    METRIC_JOBS_COMPLETED,
    METRIC_JOBS_SUBMITTED,
    METRIC_LISTENER_ERRORS,
    METRIC_QUEUE_DEPTH,
    JobOutcome,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for sequencers.

    Every metric is labelled with the sequencer name. Collects:
    - Queue depth
    - Job submissions and outcomes
    - Time from submission to outcome
    - Failed attempts routed to the error-handling middleware
    - Swallowed listener errors
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
            "Number of jobs waiting in or executing from the queue",
            ["queue"],
            registry=self._registry,
        )

        self.jobs_submitted = Counter(
            METRIC_JOBS_SUBMITTED,
            "Total number of jobs submitted",
            ["queue"],
            registry=self._registry,
        )

        self.jobs_completed = Counter(
            METRIC_JOBS_COMPLETED,
            "Total number of jobs removed from the queue",
            ["queue", "outcome"],
            registry=self._registry,
        )

        self.job_duration = Histogram(
            METRIC_JOB_DURATION,
            "Seconds from submission until the job left the queue",
            ["queue", "outcome"],
            buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
            registry=self._registry,
        )

        self.job_attempt_failures = Counter(
            METRIC_JOB_ATTEMPT_FAILURES,
            "Total number of failed job attempts",
            ["queue"],
            registry=self._registry,
        )

        self.listener_errors = Counter(
            METRIC_LISTENER_ERRORS,
            "Total number of errors raised by notification listeners",
            ["queue"],
            registry=self._registry,
        )

    def record_job_submitted(self, queue: str) -> None:
        """Record a job submission."""
        self.jobs_submitted.labels(queue=queue).inc()

    def record_job_completed(
        self,
        queue: str,
        outcome: JobOutcome,
        duration_seconds: float,
    ) -> None:
        """Record a job leaving the queue."""
        self.jobs_completed.labels(queue=queue, outcome=outcome.value).inc()
        self.job_duration.labels(queue=queue, outcome=outcome.value).observe(
            duration_seconds
        )

    def record_attempt_failed(self, queue: str) -> None:
        """Record a failed attempt."""
        self.job_attempt_failures.labels(queue=queue).inc()

    def record_listener_error(self, queue: str) -> None:
        """Record a swallowed listener error."""
        self.listener_errors.labels(queue=queue).inc()

    def update_queue_depth(self, queue: str, depth: int) -> None:
        """Update queue depth for a sequencer."""
        self.queue_depth.labels(queue=queue).set(depth)

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

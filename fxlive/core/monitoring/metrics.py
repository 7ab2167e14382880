"""Prometheus metrics helpers for upstream fetches."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest


class MetricsCollector:
    """Collects fetch latency, outcome and data-integrity metrics."""

    def __init__(self, *, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.fetch_latency_seconds = Histogram(
            "fxlive_fetch_latency_seconds",
            "Latency distribution for upstream rate provider requests.",
            ("endpoint",),
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, float("inf")),
            registry=self.registry,
        )
        self.fetch_requests_total = Counter(
            "fxlive_fetch_requests_total",
            "Total count of upstream rate provider requests.",
            ("endpoint",),
            registry=self.registry,
        )
        self.fetch_failures_total = Counter(
            "fxlive_fetch_failures_total",
            "Total count of failed upstream rate provider requests.",
            ("endpoint",),
            registry=self.registry,
        )
        self.fetch_aborts_total = Counter(
            "fxlive_fetch_aborts_total",
            "Total count of upstream requests abandoned by cancellation.",
            ("endpoint",),
            registry=self.registry,
        )
        self.dropped_points_total = Counter(
            "fxlive_dropped_points_total",
            "Rate values discarded as non-finite or non-positive.",
            registry=self.registry,
        )

    def observe_fetch(self, endpoint: str, latency_seconds: float, *, success: bool = True) -> None:
        """Record one completed upstream request."""

        self.fetch_requests_total.labels(endpoint=endpoint).inc()
        self.fetch_latency_seconds.labels(endpoint=endpoint).observe(latency_seconds)
        if not success:
            self.fetch_failures_total.labels(endpoint=endpoint).inc()

    def record_abort(self, endpoint: str) -> None:
        self.fetch_aborts_total.labels(endpoint=endpoint).inc()

    def record_dropped_points(self, count: int) -> None:
        if count > 0:
            self.dropped_points_total.inc(count)

    def render(self) -> bytes:
        """Render metrics in Prometheus exposition format."""

        return generate_latest(self.registry)


_DEFAULT_COLLECTOR: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Return the process-wide metrics collector."""

    global _DEFAULT_COLLECTOR
    if _DEFAULT_COLLECTOR is None:
        _DEFAULT_COLLECTOR = MetricsCollector()
    return _DEFAULT_COLLECTOR


def configure_metrics_collector(collector: MetricsCollector | None) -> None:
    """Replace the process-wide collector; ``None`` resets it."""

    global _DEFAULT_COLLECTOR
    _DEFAULT_COLLECTOR = collector


__all__ = ["MetricsCollector", "configure_metrics_collector", "get_metrics_collector"]

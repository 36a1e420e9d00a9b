"""
Prometheus metrics for the significant change check.

This module defines the metrics collected while receiving webhooks and
updating check runs on GitHub.
"""

from prometheus_client import Counter, Histogram
import time


# Webhook reception metrics
webhooks_received_total = Counter(
    "sig_change_webhooks_received_total",
    "Total number of webhooks received",
    ["event_type"],  # event_type = check_suite|check_run|ping|etc
)

webhook_processing_duration_seconds = Histogram(
    "sig_change_webhook_processing_duration_seconds",
    "Time spent processing webhooks",
    ["event_type"],
)

webhook_processing_errors_total = Counter(
    "sig_change_webhook_processing_errors_total",
    "Total number of webhook processing errors",
    ["event_type", "error_type"],
)

signature_rejections_total = Counter(
    "sig_change_signature_rejections_total",
    "Total number of webhooks rejected because of their signature",
)

# GitHub check run metrics
check_run_updates_total = Counter(
    "sig_change_check_run_updates_total",
    "Total number of check run writes posted to GitHub",
    ["status", "conclusion"],  # status = queued|in_progress|completed
)


class MetricsContext:
    """Context manager for timing operations and handling errors with metrics."""

    def __init__(self, histogram, error_counter, labels=None, error_labels=None):
        self.histogram = histogram
        self.error_counter = error_counter
        self.labels = labels or []
        self.error_labels = error_labels or []
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            duration = time.time() - self.start_time
            self.histogram.labels(*self.labels).observe(duration)

        if exc_type is not None:
            error_type = exc_type.__name__
            self.error_counter.labels(*self.error_labels, error_type).inc()

        return False  # Don't suppress exceptions


def track_webhook_processing(event_type: str):
    """Context manager for tracking webhook processing metrics."""
    webhooks_received_total.labels(event_type).inc()
    return MetricsContext(
        webhook_processing_duration_seconds,
        webhook_processing_errors_total,
        labels=[event_type],
        error_labels=[event_type],
    )

"""
Prometheus metrics for system monitoring.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

registry = CollectorRegistry()


# Marketplace metrics
JOBS_CREATED = Counter(
    "jobs_created_total",
    "Total number of jobs created",
    ["category"],
    registry=registry,
)

JOB_TRANSITIONS = Counter(
    "job_transitions_total",
    "Total number of successful job status transitions",
    ["from_status", "to_status"],
    registry=registry,
)

JOBS_DELETED = Counter(
    "jobs_deleted_total",
    "Total number of jobs removed by their poster",
    ["status"],
    registry=registry,
)

ASSIGNMENT_CONFLICTS = Counter(
    "job_assignment_conflicts_total",
    "Assignments rejected because another helper won the race",
    registry=registry,
)

RATINGS_RECORDED = Counter(
    "ratings_recorded_total",
    "Total number of ratings recorded",
    ["rating_type"],
    registry=registry,
)

NOTIFICATIONS_CREATED = Counter(
    "notifications_created_total",
    "Total number of notifications created",
    ["type"],
    registry=registry,
)

# Sync layer metrics
SYNC_FETCHES = Counter(
    "sync_fetches_total",
    "Sync layer fetches by key family and outcome",
    ["family", "outcome"],
    registry=registry,
)

SYNC_FETCH_DURATION = Histogram(
    "sync_fetch_duration_seconds",
    "Time spent fetching a sync layer key",
    ["family"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
    registry=registry,
)

# Error metrics
ERRORS_TOTAL = Counter(
    "errors_total",
    "Total number of errors",
    ["error_type", "component"],
    registry=registry,
)


def record_job_creation(category: str):
    """Record job creation metric."""
    JOBS_CREATED.labels(category=category).inc()


def record_job_transition(from_status: str, to_status: str):
    """Record a committed job status transition."""
    JOB_TRANSITIONS.labels(from_status=from_status, to_status=to_status).inc()


def record_job_deletion(status: str):
    JOBS_DELETED.labels(status=status).inc()


def record_assignment_conflict():
    ASSIGNMENT_CONFLICTS.inc()


def record_rating(rating_type: str):
    """Record rating metric."""
    RATINGS_RECORDED.labels(rating_type=rating_type).inc()


def record_notification(notification_type: str):
    NOTIFICATIONS_CREATED.labels(type=notification_type).inc()


def record_sync_fetch(key: str, outcome: str, duration: float):
    """Record a sync layer fetch; keys are grouped by their first two segments."""
    family = ":".join(key.split(":")[:2])
    SYNC_FETCHES.labels(family=family, outcome=outcome).inc()
    SYNC_FETCH_DURATION.labels(family=family).observe(duration)


def record_error(error_type: str, component: str):
    """Record error metric."""
    ERRORS_TOTAL.labels(error_type=error_type, component=component).inc()


def get_metrics():
    """Get all metrics in Prometheus format."""
    return generate_latest(registry)


def get_metrics_content_type():
    """Get the content type for metrics."""
    return CONTENT_TYPE_LATEST

"""
Metrics definitions for HazardWatch.

This module defines Prometheus metrics for monitoring
the hazard notification pipeline and route scoring.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
hazard_events_received = Counter(
    "hazard_events_received_total",
    "Number of hazard change-feed events received",
    ["kind"]
)

hazard_events_invalid = Counter(
    "hazard_events_invalid_total",
    "Number of malformed hazard events dropped"
)

notifications_emitted = Counter(
    "notifications_emitted_total",
    "Number of notification intents emitted",
    ["kind"]
)

notifications_suppressed = Counter(
    "notifications_suppressed_total",
    "Number of hazard events that did not produce a notification",
    ["reason"]
)

route_geometry_fallbacks = Counter(
    "route_geometry_fallbacks_total",
    "Routing failures degraded to straight-line paths"
)

# 히스토그램 메트릭
event_processing_seconds = Histogram(
    "event_processing_seconds",
    "Time spent evaluating a single hazard event",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5]
)

# 게이지 메트릭
notified_keys = Gauge(
    "notified_keys",
    "Number of lifecycle keys in the session dedup set"
)

queue_depth = Gauge(
    "internal_queue_depth",
    "Current depth of session event queue"
)

active_sessions = Gauge(
    "active_sessions",
    "Number of running notification sessions"
)

uptime_seconds = Gauge(
    "uptime_seconds",
    "Service uptime in seconds"
)

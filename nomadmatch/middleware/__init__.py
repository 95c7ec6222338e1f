"""
Middleware Package

Contains FastAPI middleware for:
- Prometheus metrics collection
- Ranking call outcome tracking
"""

from nomadmatch.middleware.metrics import (
    PrometheusMiddleware,
    setup_metrics,
    record_ranking_outcome,
    record_ranking_latency,
    REQUEST_LATENCY,
    REQUEST_COUNT,
    ACTIVE_REQUESTS,
    RANKING_REQUESTS,
    RANKING_LATENCY,
)

__all__ = [
    "PrometheusMiddleware",
    "setup_metrics",
    "record_ranking_outcome",
    "record_ranking_latency",
    "REQUEST_LATENCY",
    "REQUEST_COUNT",
    "ACTIVE_REQUESTS",
    "RANKING_REQUESTS",
    "RANKING_LATENCY",
]

"""Prometheus metric definitions shared across vedicengine components."""

from __future__ import annotations

from collections.abc import Iterable

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

__all__ = [
    "CHART_COMPUTE_DURATION",
    "COMPUTE_ERRORS",
    "EPHEMERIS_FALLBACKS",
    "ensure_metrics_registered",
]


CHART_COMPUTE_DURATION = Histogram(
    "vedicengine_chart_compute_duration_seconds",
    "Duration of chart, dasha and compatibility computations.",
    ("operation",),
    registry=None,
)

EPHEMERIS_FALLBACKS = Counter(
    "vedicengine_ephemeris_fallbacks_total",
    "Number of times the placeholder position provider replaced Swiss Ephemeris.",
    ("reason",),
    registry=None,
)

COMPUTE_ERRORS = Counter(
    "vedicengine_compute_errors_total",
    "Count of structured errors returned by engine operations.",
    ("operation", "code"),
    registry=None,
)


def _iter_metrics() -> Iterable[Counter | Histogram]:
    yield CHART_COMPUTE_DURATION
    yield EPHEMERIS_FALLBACKS
    yield COMPUTE_ERRORS


def ensure_metrics_registered(
    registry: CollectorRegistry | None = None,
) -> None:
    """Register shared metrics with ``registry`` if not already present."""

    target = registry or REGISTRY
    for metric in _iter_metrics():
        try:
            target.register(metric)
        except ValueError:
            # Prometheus raises on duplicate metric names.
            continue

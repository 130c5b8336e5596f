"""Runtime observability primitives for vedicengine modules."""

from __future__ import annotations

from .metrics import (
    CHART_COMPUTE_DURATION,
    COMPUTE_ERRORS,
    EPHEMERIS_FALLBACKS,
    ensure_metrics_registered,
)

__all__ = [
    "CHART_COMPUTE_DURATION",
    "COMPUTE_ERRORS",
    "EPHEMERIS_FALLBACKS",
    "ensure_metrics_registered",
]

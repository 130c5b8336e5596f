"""Vedic derivations built on top of a position provider."""

from __future__ import annotations

from .chart import CHART_BODIES, ChartSnapshot, compute_snapshot
from .compatibility import (
    CompatibilityCheck,
    CompatibilityResult,
    VerdictThresholds,
    score_compatibility,
)
from .dasha import (
    CurrentDasha,
    DashaOutOfRange,
    DashaPeriod,
    DashaSequence,
    VimshottariOptions,
    build_vimshottari,
)
from .houses import compute_houses, house_of
from .nakshatra import nakshatra_index, position_for
from .panchang import PanchangamDay, compute_panchangam
from .varga import DivisionalPosition, navamsa_position
from .zodiac import ZODIAC_SIGNS, rasi_placement, sign_index

__all__ = [
    "CHART_BODIES",
    "ChartSnapshot",
    "CompatibilityCheck",
    "CompatibilityResult",
    "CurrentDasha",
    "DashaOutOfRange",
    "DashaPeriod",
    "DashaSequence",
    "DivisionalPosition",
    "PanchangamDay",
    "VerdictThresholds",
    "VimshottariOptions",
    "ZODIAC_SIGNS",
    "build_vimshottari",
    "compute_houses",
    "compute_panchangam",
    "compute_snapshot",
    "house_of",
    "nakshatra_index",
    "navamsa_position",
    "position_for",
    "rasi_placement",
    "score_compatibility",
    "sign_index",
]

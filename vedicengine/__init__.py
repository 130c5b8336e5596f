"""vedicengine: Vedic chart, dasha and compatibility computations."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("vedicengine")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"

from .core.time import BirthMoment, TimeValue, to_time_value
from .errors import (
    BackendUnavailable,
    ComputationRangeError,
    PlaceNotFoundError,
    ValidationError,
    VedicEngineError,
)
from .service import ChartResult, VedicEngine

__all__ = [
    "BackendUnavailable",
    "BirthMoment",
    "ChartResult",
    "ComputationRangeError",
    "PlaceNotFoundError",
    "TimeValue",
    "ValidationError",
    "VedicEngine",
    "VedicEngineError",
    "__version__",
    "to_time_value",
]

"""Error taxonomy shared by the chart engine, the service facade and the API."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

__all__ = [
    "BackendUnavailable",
    "ComputationRangeError",
    "PlaceNotFoundError",
    "ValidationError",
    "VedicEngineError",
]


class VedicEngineError(Exception):
    """Base class for structured errors raised by :mod:`vedicengine`."""

    code: str = "VEDICENGINE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable representation of the error."""

        return {"code": self.code, "message": self.message, "details": self.details or None}


class ValidationError(VedicEngineError, ValueError):
    """Malformed or out-of-range birth, time or geographic input."""

    code = "VALIDATION_ERROR"


class PlaceNotFoundError(VedicEngineError, LookupError):
    """Place name could not be resolved to coordinates."""

    code = "PLACE_NOT_FOUND"


class ComputationRangeError(VedicEngineError):
    """A query addressed a period outside the generated dasha sequence."""

    code = "COMPUTATION_RANGE"


class BackendUnavailable(VedicEngineError):
    """The Swiss Ephemeris backend could not be loaded or queried."""

    code = "BACKEND_UNAVAILABLE"

"""Angle utilities shared across the Vedic engine."""

from __future__ import annotations

import math
from typing import Final

from ..errors import ValidationError

__all__ = [
    "EPSILON_DEG",
    "ensure_finite",
    "norm360",
    "shortest_separation",
]


EPSILON_DEG: Final[float] = 1e-9


def ensure_finite(value: float, *, label: str = "longitude") -> float:
    """Return ``value`` as a float, rejecting NaN and infinities."""

    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"{label} must be a real number", details={label: repr(value)}
        ) from exc
    if not math.isfinite(numeric):
        raise ValidationError(
            f"{label} must be finite", details={label: repr(value)}
        )
    return numeric


def norm360(angle: float) -> float:
    """Normalize ``angle`` to ``[0, 360)``.

    Values within :data:`EPSILON_DEG` of 360 wrap to ``0`` so tiny negative
    inputs (``-1e-20 % 360 == 360.0``) never escape the interval.
    """

    wrapped = float(angle) % 360.0
    if wrapped >= 360.0 - EPSILON_DEG:
        wrapped = 0.0
    return wrapped


def shortest_separation(a: float, b: float) -> float:
    """Return the unsigned shortest arc between ``a`` and ``b`` in degrees."""

    diff = norm360(b - a)
    return diff if diff <= 180.0 else 360.0 - diff

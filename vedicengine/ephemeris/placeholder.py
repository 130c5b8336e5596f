"""Deterministic placeholder positions used when Swiss Ephemeris is missing.

The values produced here are NOT astronomy.  They are a stable function of
the Julian day and the body code so that charts, dashas and compatibility
scores remain reproducible in development and tests.  Every result built
from this provider is flagged ``placeholder=True``.
"""

from __future__ import annotations

from ..core.time import TimeValue
from ..errors import ValidationError
from ..utils.angles import norm360
from .provider import BODY_CODES, HousePositions, PlanetPosition

__all__ = ["PlaceholderProvider", "placeholder_houses"]


def placeholder_houses(
    time: TimeValue,
    system: str,
    *,
    reason: str | None = None,
) -> HousePositions:
    """Return twelve cusps spaced 30° apart starting at a synthetic ascendant."""

    ascendant = norm360(time.julian_day * 360.0)
    cusps = tuple(norm360(ascendant + idx * 30.0) for idx in range(12))
    return HousePositions(
        system=system,
        cusps=cusps,
        ascendant=ascendant,
        midheaven=norm360(ascendant + 270.0),
        placeholder=True,
        fallback_reason=reason,
    )


class PlaceholderProvider:
    """Stable, non-astronomical stand-in for the Swiss Ephemeris backend."""

    provider_id = "placeholder"
    placeholder = True

    def __init__(self, *, reason: str | None = None) -> None:
        self.reason = reason

    def position(self, time: TimeValue, body: str) -> PlanetPosition:
        try:
            code = BODY_CODES[body]
        except KeyError as exc:
            raise ValidationError(
                f"unsupported body '{body}'", details={"body": body}
            ) from exc
        longitude = norm360(time.julian_day * (code + 1) * 13.0)
        return PlanetPosition(
            body=body,
            longitude=longitude,
            latitude=0.0,
            distance=1.0,
            speed=1.0,
        )

    def houses(
        self,
        time: TimeValue,
        latitude: float,
        longitude: float,
        system: str,
    ) -> HousePositions:
        return placeholder_houses(time, system, reason=self.reason)

    def __repr__(self) -> str:
        return f"PlaceholderProvider(reason={self.reason!r})"

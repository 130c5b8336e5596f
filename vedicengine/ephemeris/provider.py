"""Position provider contract and the value types it produces."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ..core.time import TimeValue

__all__ = [
    "BODY_CODES",
    "HousePositions",
    "PlanetPosition",
    "PositionProvider",
    "PROVIDER_BODIES",
]


# Swiss Ephemeris body indexes; the mean lunar node stands in for Rahu.
BODY_CODES: Mapping[str, int] = {
    "Sun": 0,
    "Moon": 1,
    "Mercury": 2,
    "Venus": 3,
    "Mars": 4,
    "Jupiter": 5,
    "Saturn": 6,
    "MeanNode": 10,
}

PROVIDER_BODIES: tuple[str, ...] = tuple(BODY_CODES)


@dataclass(frozen=True, slots=True)
class PlanetPosition:
    """Ecliptic position of a single body at one :class:`TimeValue`."""

    body: str
    longitude: float
    latitude: float
    distance: float
    speed: float

    @property
    def is_retrograde(self) -> bool:
        return self.speed < 0.0

    def to_dict(self) -> dict[str, float | str | bool]:
        return {
            "body": self.body,
            "longitude": self.longitude,
            "latitude": self.latitude,
            "distance": self.distance,
            "speed": self.speed,
            "retrograde": self.is_retrograde,
        }


@dataclass(frozen=True, slots=True)
class HousePositions:
    """Twelve house cusps plus the angles for a location and time."""

    system: str
    cusps: tuple[float, ...]
    ascendant: float
    midheaven: float
    placeholder: bool = False
    fallback_reason: str | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "system": self.system,
            "cusps": {str(idx): cusp for idx, cusp in enumerate(self.cusps, start=1)},
            "ascendant": self.ascendant,
            "midheaven": self.midheaven,
            "placeholder": self.placeholder,
        }
        if self.fallback_reason is not None:
            payload["fallback_reason"] = self.fallback_reason
        return payload


@runtime_checkable
class PositionProvider(Protocol):
    """Maps ``(TimeValue, body)`` to ecliptic positions.

    Implementations are expected to be stateless from the caller's point of
    view.  ``placeholder`` is ``True`` for providers whose output is only
    shape-compatible test data rather than astronomy.
    """

    provider_id: str
    placeholder: bool

    def position(self, time: TimeValue, body: str) -> PlanetPosition:
        """Return the position of ``body`` with longitude in ``[0, 360)``."""

        ...

    def houses(
        self,
        time: TimeValue,
        latitude: float,
        longitude: float,
        system: str,
    ) -> HousePositions:
        """Return house cusps for ``system`` at the given location."""

        ...

"""Chart snapshots: the nine grahas at a single moment."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from ..core.time import TimeValue
from ..ephemeris.provider import PlanetPosition, PositionProvider
from ..ephemeris.resolve import record_fallback
from ..errors import BackendUnavailable, ValidationError
from ..utils.angles import norm360, shortest_separation
from .varga import DivisionalPosition, navamsa_position
from .zodiac import RasiPlacement, rasi_placement

__all__ = ["CHART_BODIES", "NODE_TOLERANCE_DEG", "ChartSnapshot", "compute_snapshot", "ketu_from"]

CHART_BODIES: tuple[str, ...] = (
    "Sun",
    "Moon",
    "Mars",
    "Mercury",
    "Jupiter",
    "Venus",
    "Saturn",
    "Rahu",
    "Ketu",
)

NODE_TOLERANCE_DEG = 1e-6

_PROVIDER_BODIES: tuple[str, ...] = (
    "Sun",
    "Moon",
    "Mars",
    "Mercury",
    "Jupiter",
    "Venus",
    "Saturn",
)


@dataclass(frozen=True)
class ChartSnapshot:
    """Positions of the nine grahas computed for one :class:`TimeValue`."""

    time: TimeValue
    positions: Mapping[str, PlanetPosition] = field(hash=False)
    provider_id: str = "unknown"
    placeholder: bool = False
    fallback_reason: str | None = None

    def __post_init__(self) -> None:
        missing = [body for body in CHART_BODIES if body not in self.positions]
        if missing:
            raise ValidationError(
                "chart snapshot is missing bodies", details={"missing": missing}
            )
        rahu = self.positions["Rahu"].longitude
        ketu = self.positions["Ketu"].longitude
        if shortest_separation(norm360(rahu + 180.0), ketu) > NODE_TOLERANCE_DEG:
            raise ValidationError(
                "Ketu must lie opposite Rahu",
                details={"Rahu": rahu, "Ketu": ketu},
            )

    def longitude(self, body: str) -> float:
        return self.positions[body].longitude

    @property
    def sun_longitude(self) -> float:
        return self.longitude("Sun")

    @property
    def moon_longitude(self) -> float:
        return self.longitude("Moon")

    def rasi(self) -> dict[str, RasiPlacement]:
        return {body: rasi_placement(self.longitude(body)) for body in CHART_BODIES}

    def navamsa(self) -> dict[str, DivisionalPosition]:
        return {body: navamsa_position(self.longitude(body)) for body in CHART_BODIES}

    def to_dict(self) -> dict[str, object]:
        return {
            body: self.positions[body].to_dict() for body in CHART_BODIES
        }


def ketu_from(rahu: PlanetPosition) -> PlanetPosition:
    """Return the south node, always exactly opposite ``rahu``."""

    return PlanetPosition(
        body="Ketu",
        longitude=norm360(rahu.longitude + 180.0),
        latitude=-rahu.latitude,
        distance=rahu.distance,
        speed=rahu.speed,
    )


def _collect(time: TimeValue, provider: PositionProvider) -> dict[str, PlanetPosition]:
    positions = {body: provider.position(time, body) for body in _PROVIDER_BODIES}
    node = provider.position(time, "MeanNode")
    rahu = PlanetPosition(
        body="Rahu",
        longitude=node.longitude,
        latitude=node.latitude,
        distance=node.distance,
        speed=node.speed,
    )
    positions["Rahu"] = rahu
    positions["Ketu"] = ketu_from(rahu)
    return positions


def compute_snapshot(
    time: TimeValue,
    provider: PositionProvider,
    *,
    fallback: PositionProvider | None = None,
) -> ChartSnapshot:
    """Query ``provider`` for every graha and assemble a :class:`ChartSnapshot`.

    If ``provider`` raises :class:`BackendUnavailable` and ``fallback`` is
    given, the whole snapshot is recomputed from ``fallback`` and flagged as
    placeholder data.  Positions are never mixed across providers.
    """

    try:
        positions = _collect(time, provider)
    except BackendUnavailable as exc:
        if fallback is None:
            raise
        record_fallback(exc.message, stage="positions")
        return ChartSnapshot(
            time=time,
            positions=_collect(time, fallback),
            provider_id=fallback.provider_id,
            placeholder=True,
            fallback_reason=exc.message,
        )
    return ChartSnapshot(
        time=time,
        positions=positions,
        provider_id=provider.provider_id,
        placeholder=bool(provider.placeholder),
        fallback_reason=getattr(provider, "reason", None),
    )

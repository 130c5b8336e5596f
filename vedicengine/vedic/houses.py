"""House cusps with a best-effort placeholder when the backend fails."""

from __future__ import annotations

import logging

from ..core.time import TimeValue
from ..ephemeris.placeholder import placeholder_houses
from ..ephemeris.provider import HousePositions, PositionProvider
from ..ephemeris.resolve import record_fallback
from ..errors import BackendUnavailable, ValidationError
from ..utils.angles import ensure_finite, norm360

LOG = logging.getLogger(__name__)

__all__ = ["DEFAULT_HOUSE_SYSTEM", "compute_houses", "house_of"]

DEFAULT_HOUSE_SYSTEM = "placidus"


def compute_houses(
    time: TimeValue,
    latitude: float,
    longitude: float,
    provider: PositionProvider,
    *,
    system: str = DEFAULT_HOUSE_SYSTEM,
) -> HousePositions:
    """Return twelve cusps and the ascendant for the given place and time.

    Backend failures (including quadrant systems that are undefined near the
    poles) yield placeholder cusps flagged ``placeholder=True``.
    """

    lat = ensure_finite(latitude, label="latitude")
    lon = ensure_finite(longitude, label="longitude")
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise ValidationError(
            "house coordinates out of range",
            details={"latitude": lat, "longitude": lon},
        )
    try:
        return provider.houses(time, lat, lon, system)
    except BackendUnavailable as exc:
        LOG.warning(
            "house system %s failed at lat=%.4f; using placeholder cusps", system, lat
        )
        record_fallback(exc.message, stage="houses")
        return placeholder_houses(time, system, reason=exc.message)


def house_of(longitude: float, houses: HousePositions) -> int:
    """Return the 1-based house whose cusp arc contains ``longitude``."""

    lon = norm360(ensure_finite(longitude))
    cusps = houses.cusps
    for idx in range(12):
        start = cusps[idx]
        span = norm360(cusps[(idx + 1) % 12] - start)
        if norm360(lon - start) < span:
            return idx + 1
    return 12

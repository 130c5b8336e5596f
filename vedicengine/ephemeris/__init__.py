"""Position providers: Swiss Ephemeris and the deterministic placeholder."""

from __future__ import annotations

from .placeholder import PlaceholderProvider, placeholder_houses
from .provider import (
    BODY_CODES,
    PROVIDER_BODIES,
    HousePositions,
    PlanetPosition,
    PositionProvider,
)
from .resolve import record_fallback, resolve_provider
from .swe import has_swe, load_swe
from .swiss import SwissEphemerisProvider, resolve_house_code

__all__ = [
    "BODY_CODES",
    "PROVIDER_BODIES",
    "HousePositions",
    "PlaceholderProvider",
    "PlanetPosition",
    "PositionProvider",
    "SwissEphemerisProvider",
    "has_swe",
    "load_swe",
    "placeholder_houses",
    "record_fallback",
    "resolve_house_code",
    "resolve_provider",
]

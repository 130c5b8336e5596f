from __future__ import annotations

import datetime as _dt
import importlib.util
from collections.abc import Mapping

import pytest

from vedicengine.atlas import PlaceDirectory
from vedicengine.config import Settings
from vedicengine.core import BirthMoment, TimeValue
from vedicengine.ephemeris import HousePositions, PlaceholderProvider, PlanetPosition
from vedicengine.errors import BackendUnavailable
from vedicengine.service import VedicEngine
from vedicengine.utils import norm360

# 2000-01-01 12:00 UT is JD 2451545.0; the placeholder provider then yields
# Sun 5, Moon 10, Mercury 15, Venus 20, Mars 25, Jupiter 30, Saturn 35, Rahu 55.
J2000_BIRTH = BirthMoment(2000, 1, 1, 12, 0, 0.0, 13.0827, 80.2707)
FIXED_NOW = _dt.datetime(2010, 6, 1, 0, 0, tzinfo=_dt.UTC)


def _have_pyswisseph() -> bool:
    return importlib.util.find_spec("swisseph") is not None


def pytest_collection_modifyitems(config, items):
    """Skip Swiss Ephemeris checks when the extension is not installed."""

    if _have_pyswisseph():
        return
    skip_swiss = pytest.mark.skip(reason="Swiss Ephemeris unavailable (no pyswisseph).")
    for item in items:
        if "swiss" in item.keywords:
            item.add_marker(skip_swiss)


class FixedProvider:
    """Provider returning the same longitudes for every moment."""

    provider_id = "fixed"
    placeholder = False

    def __init__(self, longitudes: Mapping[str, float], ascendant: float = 0.0) -> None:
        self.longitudes = dict(longitudes)
        self.ascendant = ascendant

    def position(self, time: TimeValue, body: str) -> PlanetPosition:
        return PlanetPosition(
            body=body,
            longitude=self.longitudes.get(body, 0.0),
            latitude=0.0,
            distance=1.0,
            speed=1.0,
        )

    def houses(self, time, latitude, longitude, system) -> HousePositions:
        cusps = tuple(norm360(self.ascendant + 30.0 * idx) for idx in range(12))
        return HousePositions(
            system=system,
            cusps=cusps,
            ascendant=self.ascendant,
            midheaven=norm360(self.ascendant + 270.0),
        )


class UnavailableProvider(FixedProvider):
    """Provider whose backend fails on every call."""

    provider_id = "swiss"

    def position(self, time, body):
        raise BackendUnavailable("no ephemeris files")

    def houses(self, time, latitude, longitude, system):
        raise BackendUnavailable("no ephemeris files")


@pytest.fixture
def placeholder_provider() -> PlaceholderProvider:
    return PlaceholderProvider(reason="tests")


@pytest.fixture
def fixed_provider() -> FixedProvider:
    return FixedProvider(
        {
            "Sun": 280.0,
            "Moon": 0.0,
            "Mercury": 265.0,
            "Venus": 300.0,
            "Mars": 95.0,
            "Jupiter": 35.0,
            "Saturn": 60.0,
            "MeanNode": 100.0,
        },
        ascendant=15.0,
    )


@pytest.fixture
def engine(placeholder_provider) -> VedicEngine:
    return VedicEngine(
        placeholder_provider,
        Settings(),
        places=PlaceDirectory(),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def vedic_home(tmp_path, monkeypatch):
    """Point the settings directory at a temporary location."""

    monkeypatch.setenv("VEDICENGINE_HOME", str(tmp_path))
    return tmp_path

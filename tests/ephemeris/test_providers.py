import pytest

from vedicengine.config import Settings
from vedicengine.core import TimeValue
from vedicengine.ephemeris import (
    PlaceholderProvider,
    SwissEphemerisProvider,
    resolve_house_code,
    resolve_provider,
)
from vedicengine.ephemeris import resolve as resolve_module
from vedicengine.errors import BackendUnavailable, ValidationError

J2000 = TimeValue(2451545.0)


def test_placeholder_positions_are_stable():
    provider = PlaceholderProvider()
    assert provider.position(J2000, "Sun").longitude == pytest.approx(5.0)
    assert provider.position(J2000, "Moon").longitude == pytest.approx(10.0)
    assert provider.position(J2000, "MeanNode").longitude == pytest.approx(55.0)
    assert provider.position(J2000, "Venus") == provider.position(J2000, "Venus")


def test_placeholder_rejects_unknown_body():
    with pytest.raises(ValidationError):
        PlaceholderProvider().position(J2000, "Pluto")


def test_placeholder_houses_are_equal_arcs():
    houses = PlaceholderProvider(reason="tests").houses(J2000, 13.0, 80.0, "placidus")
    assert houses.placeholder is True
    assert houses.fallback_reason == "tests"
    assert houses.ascendant == pytest.approx(0.0)
    assert houses.midheaven == pytest.approx(270.0)
    assert houses.cusps[3] == pytest.approx(90.0)
    assert set(houses.to_dict()["cusps"]) == {str(idx) for idx in range(1, 13)}


def test_resolve_provider_honours_placeholder_source():
    settings = Settings.model_validate({"ephemeris": {"source": "placeholder"}})
    provider = resolve_provider(settings)
    assert provider.placeholder is True
    assert provider.reason == "configured"


def _broken_swiss(*args, **kwargs):
    raise BackendUnavailable("pyswisseph is not installed")


def test_resolve_provider_falls_back_when_swiss_missing(monkeypatch, caplog):
    monkeypatch.setattr(resolve_module, "SwissEphemerisProvider", _broken_swiss)
    with caplog.at_level("WARNING"):
        provider = resolve_provider(Settings())
    assert provider.provider_id == "placeholder"
    assert provider.reason == "pyswisseph is not installed"
    assert "ephemeris_fallback" in caplog.text


def test_resolve_provider_raises_without_fallback(monkeypatch):
    monkeypatch.setattr(resolve_module, "SwissEphemerisProvider", _broken_swiss)
    settings = Settings.model_validate({"ephemeris": {"allow_placeholder": False}})
    with pytest.raises(BackendUnavailable):
        resolve_provider(settings)


@pytest.mark.parametrize(
    "token, expected",
    [
        (None, ("placidus", "P")),
        ("W", ("whole_sign", "W")),
        ("ws", ("whole_sign", "W")),
        ("Equal", ("equal", "A")),
    ],
)
def test_resolve_house_code(token, expected):
    assert resolve_house_code(token) == expected


def test_resolve_house_code_rejects_unknown():
    with pytest.raises(ValidationError):
        resolve_house_code("regiomontanus-ish")


@pytest.mark.swiss
def test_swiss_sidereal_positions_are_in_range():
    provider = SwissEphemerisProvider()
    for body in ("Sun", "Moon", "MeanNode"):
        position = provider.position(J2000, body)
        assert 0.0 <= position.longitude < 360.0
    # Lahiri ayanamsa near J2000 is about 23.85 degrees.
    tropical = SwissEphemerisProvider(zodiac="tropical").position(J2000, "Sun").longitude
    sidereal = provider.position(J2000, "Sun").longitude
    assert (tropical - sidereal) % 360.0 == pytest.approx(23.85, abs=0.1)


@pytest.mark.swiss
def test_swiss_houses_return_twelve_cusps():
    houses = SwissEphemerisProvider().houses(J2000, 13.0827, 80.2707, "whole_sign")
    assert len(houses.cusps) == 12
    assert houses.placeholder is False
    assert houses.cusps[0] % 30.0 == pytest.approx(0.0, abs=1e-6)

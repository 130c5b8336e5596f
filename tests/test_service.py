from datetime import UTC, datetime

import pytest
from prometheus_client import CollectorRegistry

from tests.conftest import FIXED_NOW, J2000_BIRTH, UnavailableProvider
from vedicengine import BirthMoment, VedicEngine
from vedicengine.atlas import PlaceDirectory
from vedicengine.config import Settings
from vedicengine.errors import (
    BackendUnavailable,
    ComputationRangeError,
    PlaceNotFoundError,
    ValidationError,
)
from vedicengine.observability.metrics import ensure_metrics_registered
from vedicengine.vedic.dasha import CurrentDasha, DashaOutOfRange


def test_generate_chart_from_placeholder(engine):
    result = engine.generate_chart(J2000_BIRTH)
    payload = result.to_dict()
    assert result.placeholder is True
    assert payload["placeholder"] is True
    assert payload["time"]["julian_day"] == 2451545.0
    assert payload["planets"]["Sun"]["longitude"] == pytest.approx(5.0)
    assert payload["planets"]["Sun"]["house"] == 1
    assert payload["planets"]["Jupiter"]["house"] == 2
    assert payload["rasi"]["Rahu"]["sign_name"] == "Taurus"
    assert payload["navamsa"]["Sun"]["navamsa_sign_name"] == "Taurus"
    assert payload["panchangam"]["tithi_index"] == 0
    assert payload["panchangam"]["vara"]["english"] == "Saturday"
    assert payload["dasha"]["sequence"][0]["lord"] == "Ketu"
    assert payload["dasha"]["current"]["mahadasha"]["lord"] == "Venus"
    assert payload["provenance"]["provider"] == "placeholder"
    assert payload["provenance"]["ayanamsa"] == "lahiri"


def test_generate_chart_is_deterministic(engine):
    assert engine.generate_chart(J2000_BIRTH).to_dict() == engine.generate_chart(
        J2000_BIRTH
    ).to_dict()


def test_generate_chart_with_place_lookup(engine):
    result = engine.generate_chart(J2000_BIRTH, place_name="mumbai")
    assert result.place is not None
    assert result.place.name == "Mumbai"
    assert result.birth.latitude == pytest.approx(19.076)
    assert result.to_dict()["place"]["state"] == "Maharashtra"


def test_unknown_place(engine):
    with pytest.raises(PlaceNotFoundError):
        engine.generate_chart(J2000_BIRTH, place_name="Atlantis")


def test_invalid_birth_is_rejected(engine):
    bad = BirthMoment(2001, 2, 29, 10, 0, 5.5, 13.0, 80.0)
    with pytest.raises(ValidationError):
        engine.generate_chart(bad)


def test_fixed_moon_at_zero_starts_with_full_ketu(fixed_provider):
    engine = VedicEngine(fixed_provider, Settings(), places=PlaceDirectory())
    sequence = engine.mahadasha_sequence(J2000_BIRTH)
    assert sequence.mahadashas[0].lord == "Ketu"
    assert sequence.mahadashas[0].years == pytest.approx(7.0)
    assert sequence.placeholder is False


def test_dasha_operations_share_one_sequence(engine):
    sequence = engine.mahadasha_sequence(J2000_BIRTH)
    bhuktis = engine.bhuktis(J2000_BIRTH, 1)
    assert bhuktis == sequence.bhuktis(1)
    assert engine.pratyantars(J2000_BIRTH, 1, 0) == sequence.pratyantars(1, 0)
    assert sequence.placeholder is True


def test_current_dasha_uses_the_clock(engine):
    assert engine.now() == FIXED_NOW
    current = engine.current_dasha(J2000_BIRTH)
    assert isinstance(current, CurrentDasha)
    assert current.mahadasha.lord == "Venus"
    before = engine.current_dasha(J2000_BIRTH, datetime(1999, 1, 1, tzinfo=UTC))
    assert isinstance(before, DashaOutOfRange)
    assert before.reason == "before_birth"


def test_current_dasha_accepts_snapshots(engine):
    snapshot = engine.snapshot(J2000_BIRTH)
    assert engine.current_dasha(snapshot) == engine.current_dasha(J2000_BIRTH)


def test_match_accepts_births_and_snapshots(engine):
    result = engine.match(J2000_BIRTH, engine.snapshot(J2000_BIRTH))
    assert result.check("same_nakshatra").value is True
    assert result.placeholder is True
    with pytest.raises(ValidationError):
        engine.match(J2000_BIRTH, {"moon": 10.0})


def test_backend_failure_falls_back_per_call():
    engine = VedicEngine(UnavailableProvider({}), Settings(), places=PlaceDirectory())
    result = engine.generate_chart(J2000_BIRTH)
    assert result.snapshot.placeholder is True
    assert result.houses.placeholder is True
    assert result.provenance["fallback_reason"] == "no ephemeris files"


def test_backend_failure_without_fallback_raises():
    settings = Settings.model_validate({"ephemeris": {"allow_placeholder": False}})
    engine = VedicEngine(UnavailableProvider({}), settings, places=PlaceDirectory())
    with pytest.raises(BackendUnavailable):
        engine.mahadasha_sequence(J2000_BIRTH)


def test_errors_are_counted(engine):
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    labels = {"operation": "bhuktis", "code": "COMPUTATION_RANGE"}
    before = registry.get_sample_value("vedicengine_compute_errors_total", labels) or 0.0
    with pytest.raises(ComputationRangeError):
        engine.bhuktis(J2000_BIRTH, 42)
    assert registry.get_sample_value("vedicengine_compute_errors_total", labels) == before + 1


def test_settings_drive_dasha_options(placeholder_provider):
    settings = Settings.model_validate(
        {"dasha": {"balance_mode": "elapsed", "year_basis_days": 360.0}}
    )
    engine = VedicEngine(placeholder_provider, settings, places=PlaceDirectory())
    sequence = engine.mahadasha_sequence(J2000_BIRTH)
    assert sequence.options.balance_mode == "elapsed"
    assert sequence.mahadashas[0].base_years == pytest.approx(7.0)
    assert engine.provenance()["dasha_balance_mode"] == "elapsed"


def test_birth_near_calendar_end_reports_range_error(engine):
    late = BirthMoment(9950, 6, 1, 12, 0, 0.0, 13.0, 80.0)
    with pytest.raises(ComputationRangeError):
        engine.generate_chart(late)
    with pytest.raises(ComputationRangeError):
        engine.mahadasha_sequence(late)

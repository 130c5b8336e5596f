import math
from datetime import UTC, datetime

import pytest

from vedicengine.core import TimeValue
from vedicengine.errors import ComputationRangeError, ValidationError
from vedicengine.vedic.dasha import (
    TOTAL_YEARS,
    VIMSHOTTARI_YEARS,
    CurrentDasha,
    DashaOutOfRange,
    VimshottariOptions,
    build_vimshottari,
    rotated_order,
    subdivide,
)

BIRTH = TimeValue(2451545.0)
YEAR = 365.25


def test_moon_at_zero_starts_a_full_ketu_period():
    seq = build_vimshottari(0.0, BIRTH)
    first = seq.mahadashas[0]
    assert first.lord == "Ketu"
    assert first.years == pytest.approx(7.0)
    assert first.start_jd == BIRTH.julian_day
    assert first.metadata["janma_nakshatra"] == "Ashwini"
    assert [p.lord for p in seq.mahadashas] == list(rotated_order("Ketu"))
    assert sum(p.years for p in seq.mahadashas) == pytest.approx(TOTAL_YEARS)


def test_partial_balance_extends_past_the_first_cycle():
    seq = build_vimshottari(10.0, BIRTH)
    maha = seq.mahadashas
    assert maha[0].lord == "Ketu"
    assert maha[0].years == pytest.approx(1.75)
    assert maha[0].metadata["balance_fraction"] == pytest.approx(0.25)
    assert len(maha) == 10
    assert maha[-1].lord == "Ketu"
    assert maha[-1].years == VIMSHOTTARI_YEARS["Ketu"]
    assert sum(p.years for p in maha) >= TOTAL_YEARS
    assert seq.horizon_jd == maha[-1].end_jd


def test_mahadashas_are_contiguous():
    seq = build_vimshottari(123.456, BIRTH)
    for prev, nxt in zip(seq.mahadashas, seq.mahadashas[1:]):
        assert prev.end_jd == nxt.start_jd
        assert nxt.years == VIMSHOTTARI_YEARS[nxt.lord]


def test_bhuktis_partition_their_mahadasha():
    seq = build_vimshottari(0.0, BIRTH)
    maha = seq.mahadasha(1)
    bhuktis = seq.bhuktis(1)
    assert maha.lord == "Venus"
    assert [b.lord for b in bhuktis] == list(rotated_order("Venus"))
    assert bhuktis[0].start_jd == maha.start_jd
    assert bhuktis[-1].end_jd == maha.end_jd
    for prev, nxt in zip(bhuktis, bhuktis[1:]):
        assert prev.end_jd == nxt.start_jd
    assert sum(b.years for b in bhuktis) == pytest.approx(maha.years)
    # Venus-Venus bhukti: 20 * 20 / 120 years.
    assert bhuktis[0].years == pytest.approx(20.0 * 20.0 / 120.0)
    assert bhuktis[0].span_days == pytest.approx(bhuktis[0].years * YEAR)


def test_pratyantars_are_the_deepest_level():
    seq = build_vimshottari(0.0, BIRTH)
    bhukti = seq.bhuktis(0)[2]
    pratyantars = seq.pratyantars(0, 2)
    assert len(pratyantars) == 9
    assert pratyantars[0].lineage == ("Ketu", "Sun", "Sun")
    assert pratyantars[0].start_jd == bhukti.start_jd
    assert pratyantars[-1].end_jd == bhukti.end_jd
    assert pratyantars[0].children() == ()
    with pytest.raises(ComputationRangeError):
        subdivide(pratyantars[0])
    payload = pratyantars[1].to_dict()
    assert payload["level"] == "pratyantar"
    assert payload["maha_lord"] == "Ketu"
    assert payload["bhukti_lord"] == "Sun"
    assert payload["sub_lord"] == "Moon"


def test_scaled_balance_shrinks_the_first_bhuktis():
    seq = build_vimshottari(10.0, BIRTH)
    bhuktis = seq.bhuktis(0)
    assert len(bhuktis) == 9
    assert bhuktis[0].lord == "Ketu"
    assert bhuktis[0].years == pytest.approx(1.75 * 7.0 / 120.0)


def test_elapsed_balance_clips_bhuktis_at_birth():
    options = VimshottariOptions(balance_mode="elapsed")
    seq = build_vimshottari(10.0, BIRTH, options=options)
    first = seq.mahadashas[0]
    assert first.base_years == pytest.approx(7.0)
    assert first.base_start_jd == pytest.approx(BIRTH.julian_day - 5.25 * YEAR)
    bhuktis = seq.bhuktis(0)
    # 5.25 of 7 years elapsed: birth falls inside the Ketu-Saturn bhukti.
    assert [b.lord for b in bhuktis] == ["Saturn", "Mercury"]
    assert bhuktis[0].start_jd == BIRTH.julian_day
    assert bhuktis[0].base_years == pytest.approx(7.0 * 19.0 / 120.0)
    assert bhuktis[-1].end_jd == first.end_jd
    assert sum(b.years for b in bhuktis) == pytest.approx(1.75)
    pratyantars = bhuktis[0].children()
    assert pratyantars[0].start_jd == BIRTH.julian_day
    assert pratyantars[-1].end_jd == bhuktis[0].end_jd


def test_lookup_nests_the_three_levels():
    seq = build_vimshottari(200.0, BIRTH)
    target = datetime(2031, 3, 14, 9, 26, tzinfo=UTC)
    current = seq.lookup(target)
    assert isinstance(current, CurrentDasha)
    assert current.mahadasha.contains(current.target_jd)
    assert current.bhukti.contains(current.target_jd)
    assert current.pratyantar.contains(current.target_jd)
    assert current.bhukti.lineage[0] == current.mahadasha.lord
    assert current.pratyantar.lineage[:2] == current.bhukti.lineage
    assert current.to_dict()["status"] == "ok"


def test_lookup_at_birth_returns_first_periods():
    seq = build_vimshottari(0.0, BIRTH)
    current = seq.lookup(BIRTH)
    assert current.mahadasha.lord == "Ketu"
    assert current.bhukti.lord == "Ketu"
    assert current.pratyantar.lord == "Ketu"


def test_lookup_outside_the_sequence():
    seq = build_vimshottari(0.0, BIRTH)
    before = seq.lookup(BIRTH.julian_day - 1.0)
    assert isinstance(before, DashaOutOfRange)
    assert before.reason == "before_birth"
    after = seq.lookup(seq.horizon_jd)
    assert after.reason == "after_horizon"
    assert after.to_dict()["status"] == "out_of_range"


def test_index_errors():
    seq = build_vimshottari(0.0, BIRTH)
    with pytest.raises(ComputationRangeError):
        seq.mahadasha(len(seq.mahadashas))
    with pytest.raises(ComputationRangeError):
        seq.bhuktis(-1)
    with pytest.raises(ComputationRangeError):
        seq.pratyantars(0, 9)


@pytest.mark.parametrize("moon", [360.0, -0.5, math.nan, math.inf])
def test_invalid_moon_longitude(moon):
    with pytest.raises(ValidationError):
        build_vimshottari(moon, BIRTH)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"balance_mode": "proportional"},
        {"year_basis_days": 0.0},
        {"horizon_years": -1.0},
    ],
)
def test_invalid_options(kwargs):
    with pytest.raises(ValidationError):
        VimshottariOptions(**kwargs)


def test_year_basis_and_horizon_options():
    options = VimshottariOptions(year_basis_days=360.0, horizon_years=30.0)
    seq = build_vimshottari(0.0, BIRTH, options=options)
    assert [p.lord for p in seq.mahadashas] == ["Ketu", "Venus", "Sun"]
    assert seq.mahadashas[0].span_days == pytest.approx(7.0 * 360.0)
    assert seq.to_dict()["year_basis_days"] == 360.0


def test_rotated_order_rejects_unknown_lord():
    assert rotated_order("Mars")[:2] == ("Mars", "Rahu")
    with pytest.raises(ValidationError):
        rotated_order("Pluto")


def test_horizon_past_calendar_range_is_rejected():
    # A birth in 9950: the 120 year horizon ends after 9999-12-31.
    with pytest.raises(ComputationRangeError):
        build_vimshottari(10.0, TimeValue(5355305.0))


def test_sequence_near_calendar_end_still_serializes():
    payload = build_vimshottari(10.0, TimeValue(5320000.0)).to_dict()
    assert payload["horizon"].startswith("99")

from __future__ import annotations

from fastapi.testclient import TestClient

from tests.conftest import FIXED_NOW, UnavailableProvider
from vedicengine.api import create_app
from vedicengine.api.schemas import ChartPayload
from vedicengine.api.settings import APISettings
from vedicengine.atlas import PlaceDirectory
from vedicengine.config import Settings
from vedicengine.ephemeris import PlaceholderProvider
from vedicengine.service import VedicEngine

ENGINE = VedicEngine(
    PlaceholderProvider(reason="api-tests"),
    Settings(),
    places=PlaceDirectory(),
    clock=lambda: FIXED_NOW,
)
client = TestClient(create_app(engine=ENGINE, api_settings=APISettings()))

NATAL = {
    "year": 2000,
    "month": 1,
    "day": 1,
    "hour": 17,
    "minute": 30,
    "utc_offset_hours": 5.5,
    "latitude": 13.0827,
    "longitude": 80.2707,
}


def test_healthz_reports_provider():
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "ephemeris": "placeholder"}


def test_chart_endpoint():
    response = client.post("/v1/vedic/chart", json=NATAL)
    assert response.status_code == 200
    payload = response.json()
    assert payload["placeholder"] is True
    assert payload["time"]["julian_day"] == 2451545.0
    assert payload["planets"]["Moon"]["longitude"] == 10.0
    assert payload["panchangam"]["nakshatra"]["name"] == "Ashwini"
    assert payload["dasha"]["current"]["status"] == "ok"
    assert len(payload["houses"]["cusps"]) == 12


def test_chart_with_place_name():
    response = client.post("/v1/vedic/chart", json={**NATAL, "place": "Delhi"})
    assert response.status_code == 200
    assert response.json()["place"]["place"] == "Delhi"


def test_unknown_place_maps_to_404():
    response = client.post("/v1/vedic/chart", json={**NATAL, "place": "Atlantis"})
    assert response.status_code == 404
    assert response.json()["code"] == "PLACE_NOT_FOUND"


def test_invalid_calendar_date_maps_to_422():
    response = client.post("/v1/vedic/chart", json={**NATAL, "month": 2, "day": 30})
    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert "day" in body["details"]


def test_schema_violation_uses_error_envelope():
    response = client.post("/v1/vedic/chart", json={**NATAL, "latitude": 123.0})
    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert body["details"][0]["loc"][-1] == "latitude"


def test_mahadashas_endpoint():
    response = client.post("/v1/vedic/dasha/mahadashas", json=NATAL)
    assert response.status_code == 200
    payload = response.json()
    assert payload["placeholder"] is True
    assert payload["sequence"][0]["lord"] == "Ketu"
    assert payload["sequence"][0]["metadata"]["janma_nakshatra"] == "Ashwini"


def test_bhuktis_and_pratyantars_endpoints():
    bhuktis = client.post(
        "/v1/vedic/dasha/bhuktis", json={**NATAL, "mahadasha_index": 1}
    ).json()
    assert bhuktis["placeholder"] is True
    assert [p["lord"] for p in bhuktis["periods"]][:2] == ["Venus", "Sun"]
    pratyantars = client.post(
        "/v1/vedic/dasha/pratyantars",
        json={**NATAL, "mahadasha_index": 1, "bhukti_index": 1},
    ).json()
    assert len(pratyantars["periods"]) == 9
    assert pratyantars["periods"][0]["lineage"] == ["Venus", "Sun", "Sun"]


def test_bhukti_index_out_of_range():
    response = client.post("/v1/vedic/dasha/bhuktis", json={**NATAL, "mahadasha_index": 99})
    assert response.status_code == 422
    assert response.json()["code"] == "COMPUTATION_RANGE"


def test_current_dasha_endpoint():
    response = client.post(
        "/v1/vedic/dasha/current", json={**NATAL, "target": "2010-06-01T00:00:00Z"}
    )
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["mahadasha"]["lord"] == "Venus"
    assert payload["placeholder"] is True
    before = client.post(
        "/v1/vedic/dasha/current", json={**NATAL, "target": "1990-01-01T00:00:00"}
    ).json()
    assert before["status"] == "out_of_range"
    assert before["reason"] == "before_birth"


def test_current_dasha_defaults_to_engine_clock():
    payload = client.post("/v1/vedic/dasha/current", json=NATAL).json()
    assert payload["target"].startswith("2010-06-01")


def test_match_with_birth_and_chart_inputs():
    chart = {
        "kind": "chart",
        "julian_day": 2451545.0,
        "longitudes": {
            "Sun": 5.0,
            "Moon": 10.0,
            "Mercury": 15.0,
            "Venus": 20.0,
            "Mars": 25.0,
            "Jupiter": 30.0,
            "Saturn": 35.0,
            "Rahu": 55.0,
        },
    }
    response = client.post("/v1/vedic/match", json={"person_a": NATAL, "person_b": chart})
    assert response.status_code == 200
    payload = response.json()
    assert payload["checks"]["same_nakshatra"] is True
    assert payload["checks"]["venus_sign"] is True
    assert payload["aggregate_score"] == 25
    assert payload["verdict"] == "Excellent compatibility"


def test_match_rejects_chart_with_inconsistent_ketu():
    longitudes = dict.fromkeys(("Sun", "Moon", "Mercury", "Venus", "Mars", "Jupiter", "Saturn"), 10.0)
    chart = {
        "kind": "chart",
        "julian_day": 2451545.0,
        "longitudes": {**longitudes, "Rahu": 100.0, "Ketu": 15.0},
    }
    response = client.post("/v1/vedic/match", json={"person_a": NATAL, "person_b": chart})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_match_rejects_incomplete_chart():
    chart = {"kind": "chart", "julian_day": 2451545.0, "longitudes": {"Moon": 10.0}}
    response = client.post("/v1/vedic/match", json={"person_a": NATAL, "person_b": chart})
    assert response.status_code == 422


def test_metrics_endpoint_exposes_counters():
    client.post("/v1/vedic/dasha/mahadashas", json=NATAL)
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "vedicengine_chart_compute_duration_seconds" in response.text


def test_backend_unavailable_maps_to_503():
    settings = Settings.model_validate({"ephemeris": {"allow_placeholder": False}})
    strict = VedicEngine(UnavailableProvider({}), settings, places=PlaceDirectory())
    strict_client = TestClient(create_app(engine=strict, api_settings=APISettings()))
    response = strict_client.post("/v1/vedic/dasha/mahadashas", json=NATAL)
    assert response.status_code == 503
    assert response.json()["code"] == "BACKEND_UNAVAILABLE"


def test_birth_near_calendar_end_maps_to_422():
    response = client.post("/v1/vedic/dasha/mahadashas", json={**NATAL, "year": 9950})
    assert response.status_code == 422
    assert response.json()["code"] == "COMPUTATION_RANGE"


def test_offset_before_year_one_maps_to_422():
    early = {**NATAL, "year": 1, "hour": 0, "minute": 0, "utc_offset_hours": 14.0}
    response = client.post("/v1/vedic/chart", json=early)
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_chart_payload_derives_ketu_from_rahu():
    longitudes = dict.fromkeys(("Sun", "Moon", "Mercury", "Venus", "Mars", "Jupiter", "Saturn"), 10.0)
    derived = ChartPayload(julian_day=2451545.0, longitudes={**longitudes, "Rahu": 100.0})
    assert derived.to_snapshot().longitude("Ketu") == 280.0
    explicit = ChartPayload(
        julian_day=2451545.0, longitudes={**longitudes, "Rahu": 100.0, "Ketu": 280.0}
    )
    assert explicit.to_snapshot().longitude("Ketu") == 280.0

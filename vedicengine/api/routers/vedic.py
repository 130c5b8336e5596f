"""Vedic chart, dasha and compatibility endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ...service import ChartInput, VedicEngine
from ..deps import get_engine
from ..schemas import (
    BhuktiRequest,
    BirthPayload,
    ChartPayload,
    CurrentDashaRequest,
    MatchRequest,
    PratyantarRequest,
)

router = APIRouter(prefix="/v1/vedic", tags=["vedic"])


def _person(engine: VedicEngine, payload: BirthPayload | ChartPayload) -> ChartInput:
    if isinstance(payload, ChartPayload):
        return payload.to_snapshot()
    birth = payload.to_birth()
    if payload.place:
        place = engine.places.resolve(payload.place)
        birth = birth.with_location(place.latitude, place.longitude)
    return birth


@router.post("/chart", response_model=dict[str, Any])
def vedic_chart(
    request: BirthPayload, engine: VedicEngine = Depends(get_engine)
) -> dict[str, Any]:
    return engine.generate_chart(request.to_birth(), request.place).to_dict()


@router.post("/dasha/mahadashas", response_model=dict[str, Any])
def vedic_mahadashas(
    request: BirthPayload, engine: VedicEngine = Depends(get_engine)
) -> dict[str, Any]:
    return engine.mahadasha_sequence(_person(engine, request)).to_dict()


@router.post("/dasha/bhuktis", response_model=dict[str, Any])
def vedic_bhuktis(
    request: BhuktiRequest, engine: VedicEngine = Depends(get_engine)
) -> dict[str, Any]:
    sequence = engine.mahadasha_sequence(_person(engine, request))
    periods = sequence.bhuktis(request.mahadasha_index)
    return {
        "mahadasha_index": request.mahadasha_index,
        "placeholder": sequence.placeholder,
        "periods": [period.to_dict() for period in periods],
    }


@router.post("/dasha/pratyantars", response_model=dict[str, Any])
def vedic_pratyantars(
    request: PratyantarRequest, engine: VedicEngine = Depends(get_engine)
) -> dict[str, Any]:
    sequence = engine.mahadasha_sequence(_person(engine, request))
    periods = sequence.pratyantars(request.mahadasha_index, request.bhukti_index)
    return {
        "mahadasha_index": request.mahadasha_index,
        "bhukti_index": request.bhukti_index,
        "placeholder": sequence.placeholder,
        "periods": [period.to_dict() for period in periods],
    }


@router.post("/dasha/current", response_model=dict[str, Any])
def vedic_current_dasha(
    request: CurrentDashaRequest, engine: VedicEngine = Depends(get_engine)
) -> dict[str, Any]:
    sequence = engine.mahadasha_sequence(_person(engine, request))
    payload = sequence.lookup(
        request.target if request.target is not None else engine.now()
    ).to_dict()
    payload["placeholder"] = sequence.placeholder
    return payload


@router.post("/match", response_model=dict[str, Any])
def vedic_match(
    request: MatchRequest, engine: VedicEngine = Depends(get_engine)
) -> dict[str, Any]:
    result = engine.match(
        _person(engine, request.person_a), _person(engine, request.person_b)
    )
    return result.to_dict()


__all__ = ["router"]

"""Health and metrics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from ...service import VedicEngine
from ..deps import get_engine

router = APIRouter(tags=["system"])


@router.get("/healthz", response_model=dict[str, str])
def health_check(engine: VedicEngine = Depends(get_engine)) -> dict[str, str]:
    """Report readiness and which position provider is serving requests."""

    return {"status": "ok", "ephemeris": engine.provider.provider_id}


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


__all__ = ["router"]

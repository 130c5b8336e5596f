"""Request-scoped access to the shared :class:`VedicEngine`."""

from __future__ import annotations

import logging

from fastapi import Request

from ..config.settings import Settings, default_settings, load_settings
from ..service import VedicEngine

LOGGER = logging.getLogger(__name__)

__all__ = ["get_engine"]


def _load_domain_settings() -> Settings:
    try:
        return load_settings()
    except (OSError, ValueError) as exc:
        LOGGER.warning("Failed to load persisted settings; using defaults: %s", exc)
        return default_settings()


def get_engine(request: Request) -> VedicEngine:
    """Return the engine bound to the app, building it on first use."""

    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        engine = VedicEngine(settings=_load_domain_settings())
        request.app.state.engine = engine
    return engine

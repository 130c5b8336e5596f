"""Select the position provider configured in :class:`Settings`."""

from __future__ import annotations

import logging

from ..config.settings import Settings
from ..errors import BackendUnavailable
from ..observability.metrics import EPHEMERIS_FALLBACKS
from .placeholder import PlaceholderProvider
from .provider import PositionProvider
from .swiss import SwissEphemerisProvider

LOG = logging.getLogger(__name__)

__all__ = ["record_fallback", "resolve_provider"]


def record_fallback(reason: str, *, stage: str) -> None:
    """Log and count a substitution of placeholder data for real positions."""

    LOG.warning(
        {
            "event": "ephemeris_fallback",
            "stage": stage,
            "reason": reason,
            "provider": PlaceholderProvider.provider_id,
        }
    )
    EPHEMERIS_FALLBACKS.labels(reason=stage).inc()


def resolve_provider(settings: Settings | None = None) -> PositionProvider:
    """Return the provider requested by ``settings``.

    When Swiss Ephemeris is requested but cannot be loaded and
    ``allow_placeholder`` is set, a :class:`PlaceholderProvider` is returned
    instead; otherwise :class:`BackendUnavailable` propagates.
    """

    cfg = settings or Settings()
    if cfg.ephemeris.source == "placeholder":
        return PlaceholderProvider(reason="configured")
    try:
        return SwissEphemerisProvider(
            cfg.ephemeris.path,
            zodiac=cfg.zodiac.type,
            ayanamsa=cfg.zodiac.ayanamsa,
        )
    except BackendUnavailable as exc:
        if not cfg.ephemeris.allow_placeholder:
            raise
        record_fallback(exc.message, stage="load")
        return PlaceholderProvider(reason=exc.message)

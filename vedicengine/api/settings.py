"""Runtime configuration for the HTTP service."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass

__all__ = ["APISettings"]


def _parse_origins(value: str | Iterable[str] | None) -> tuple[str, ...]:
    if value is None:
        return ()
    raw_items = value.split(",") if isinstance(value, str) else list(value)
    origins: list[str] = []
    for item in raw_items:
        normalised = str(item).strip()
        if normalised and normalised not in origins:
            origins.append(normalised)
    return tuple(origins)


@dataclass(slots=True)
class APISettings:
    """Settings derived from the environment for API runtime concerns."""

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"
    cors_origins: tuple[str, ...] = ()

    @classmethod
    def from_env(cls) -> APISettings:
        port_raw = os.getenv("VEDICENGINE_API_PORT", "8000")
        try:
            port = int(port_raw)
        except ValueError:
            port = 8000
        return cls(
            host=os.getenv("VEDICENGINE_API_HOST", "0.0.0.0"),
            port=port,
            log_level=os.getenv("VEDICENGINE_API_LOG_LEVEL", "info"),
            cors_origins=_parse_origins(os.getenv("VEDICENGINE_CORS_ORIGINS")),
        )

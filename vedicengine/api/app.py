"""FastAPI application factory used by ASGI servers and the CLI."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from .. import __version__
from ..boot.logging import configure_logging
from ..observability.metrics import ensure_metrics_registered
from ..service import VedicEngine
from ._factory import AppFactoryConfig, RouterSpec
from ._factory import create_app as _create_app
from .errors import install_error_handlers
from .routers import system as system_router
from .routers import vedic as vedic_router
from .settings import APISettings

_ROUTERS = (
    RouterSpec(system_router.router),
    RouterSpec(vedic_router.router),
)


def _cors_installer(api_settings: APISettings):
    def _install(app: FastAPI) -> None:
        if not api_settings.cors_origins:
            return
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(api_settings.cors_origins),
            allow_methods=["POST", "GET"],
            allow_headers=["*"],
        )

    return _install


def create_app(
    engine: VedicEngine | None = None,
    *,
    api_settings: APISettings | None = None,
) -> FastAPI:
    """Build the HTTP app; ``engine`` is created lazily when omitted."""

    resolved = api_settings or APISettings.from_env()
    ensure_metrics_registered()
    config = AppFactoryConfig(
        title="vedicengine API",
        version=__version__,
        default_response_class=ORJSONResponse,
        state={"api_settings": resolved, "engine": engine},
        middlewares=(_cors_installer(resolved),),
        error_handlers=(install_error_handlers,),
        routers=_ROUTERS,
    )
    return _create_app(config)


def run() -> None:  # pragma: no cover - integration entry point
    """Serve the API with uvicorn."""

    import uvicorn

    configure_logging()
    api_settings = APISettings.from_env()
    uvicorn.run(
        create_app(api_settings=api_settings),
        host=api_settings.host,
        port=api_settings.port,
        log_level=api_settings.log_level,
    )


__all__ = ["create_app", "run"]

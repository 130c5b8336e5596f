"""Small declarative wrapper around :class:`FastAPI` construction."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from fastapi import FastAPI
from fastapi.routing import APIRouter
from starlette.responses import Response

Installer = Callable[[FastAPI], None]


@dataclass(frozen=True)
class RouterSpec:
    """An :class:`APIRouter` plus optional mount prefix."""

    router: APIRouter
    prefix: str | None = None

    def install(self, app: FastAPI) -> None:
        if self.prefix:
            app.include_router(self.router, prefix=self.prefix)
        else:
            app.include_router(self.router)


@dataclass(frozen=True)
class AppFactoryConfig:
    title: str
    version: str | None = None
    default_response_class: type[Response] | None = None
    state: Mapping[str, Any] | None = None
    middlewares: Sequence[Installer] = field(default_factory=tuple)
    error_handlers: Sequence[Installer] = field(default_factory=tuple)
    routers: Sequence[RouterSpec] = field(default_factory=tuple)


def create_app(config: AppFactoryConfig) -> FastAPI:
    """Instantiate a FastAPI application according to ``config``."""

    kwargs: dict[str, Any] = {"title": config.title}
    if config.version is not None:
        kwargs["version"] = config.version
    if config.default_response_class is not None:
        kwargs["default_response_class"] = config.default_response_class
    app = FastAPI(**kwargs)

    for key, value in (config.state or {}).items():
        setattr(app.state, key, value)
    for installer in config.middlewares:
        installer(app)
    for installer in config.error_handlers:
        installer(app)
    for spec in config.routers:
        spec.install(app)
    return app


__all__ = ["AppFactoryConfig", "RouterSpec", "create_app"]

"""Logging setup shared by the HTTP app and the command line."""

from __future__ import annotations

import logging
import os
from typing import Any

__all__ = ["configure_logging"]

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _coerce_level(value: str | int | None) -> int:
    """Translate a level name or number into a :mod:`logging` level.

    Unknown names and blank values resolve to :data:`logging.INFO`.
    """

    if value is None or isinstance(value, bool):
        return logging.INFO
    if isinstance(value, int):
        return value
    candidate = value.strip()
    if candidate.isdigit():
        return int(candidate)
    resolved = logging.getLevelName(candidate.upper()) if candidate else None
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, level: str | int | None = None, **kwargs: Any) -> int:
    """Configure the root logger and return the effective level.

    ``level`` overrides the ``LOG_LEVEL`` environment variable; remaining
    keyword arguments go to :func:`logging.basicConfig`.
    """

    effective = _coerce_level(level if level is not None else os.environ.get("LOG_LEVEL"))
    logging.basicConfig(
        level=effective,
        format=kwargs.pop("format", _DEFAULT_FORMAT),
        datefmt=kwargs.pop("datefmt", _DEFAULT_DATEFMT),
        force=kwargs.pop("force", True),
        **kwargs,
    )
    return effective

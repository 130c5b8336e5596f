"""Lazy access to the :mod:`swisseph` extension module."""

from __future__ import annotations

import importlib
import importlib.util
from typing import Any

from ..errors import BackendUnavailable

__all__ = ["has_swe", "load_swe", "reset_swe"]

_swe_mod: Any | None = None


def load_swe() -> Any:
    """Return the imported :mod:`swisseph` module.

    Raises :class:`~vedicengine.errors.BackendUnavailable` when pyswisseph is
    not installed or fails to import.
    """

    global _swe_mod
    if _swe_mod is None:
        try:
            _swe_mod = importlib.import_module("swisseph")
        except ImportError as exc:  # pragma: no cover - import errors depend on env
            raise BackendUnavailable(
                "Swiss Ephemeris not available. Install pyswisseph (package: "
                "'pyswisseph') and set SE_EPHE_PATH to your ephemeris data directory.",
                details={"reason": str(exc)},
            ) from exc
    return _swe_mod


def reset_swe() -> None:
    """For tests: force a re-import of swisseph on the next :func:`load_swe`."""

    global _swe_mod
    _swe_mod = None


def has_swe() -> bool:
    """Return ``True`` if pyswisseph is importable."""

    if _swe_mod is not None:
        return True
    return importlib.util.find_spec("swisseph") is not None

"""Place lookup for birth locations."""

from __future__ import annotations

from .places import BUILTIN_PLACES, Place, PlaceDirectory

__all__ = ["BUILTIN_PLACES", "Place", "PlaceDirectory"]

"""Navamsa (D9) divisional chart placement.

Each 30° sign is split into nine parts of 3°20'.  Counting of the navamsa
signs starts from a sign that depends on the modality of the natal sign:

* movable signs (Aries, Cancer, Libra, Capricorn) count from themselves;
* fixed signs (Taurus, Leo, Scorpio, Aquarius) count from the 9th sign;
* dual signs (Gemini, Virgo, Sagittarius, Pisces) count from the 5th sign.

The resulting placement is a pure function of the longitude, so every
longitude ``L`` and ``L + 360k`` map to the same navamsa sign.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from ..utils.angles import ensure_finite, norm360
from .zodiac import (
    FIXED_SIGNS,
    MOVABLE_SIGNS,
    SIGN_ARC_DEGREES,
    ZODIAC_SIGNS,
    modality_of,
)

__all__ = [
    "NAVAMSA_ARC_DEGREES",
    "DivisionalPosition",
    "navamsa_chart",
    "navamsa_position",
    "navamsa_sign",
]

NAVAMSA_PARTS = 9
NAVAMSA_ARC_DEGREES = SIGN_ARC_DEGREES / NAVAMSA_PARTS


@dataclass(frozen=True, slots=True)
class DivisionalPosition:
    """Navamsa placement derived from a single longitude."""

    source_sign: int
    navamsa_index: int
    navamsa_sign: int
    navamsa_degree: float

    @property
    def source_sign_name(self) -> str:
        return ZODIAC_SIGNS[self.source_sign]

    @property
    def navamsa_sign_name(self) -> str:
        return ZODIAC_SIGNS[self.navamsa_sign]

    def to_dict(self) -> dict[str, object]:
        return {
            "source_sign": self.source_sign,
            "source_sign_name": self.source_sign_name,
            "modality": modality_of(self.source_sign),
            "navamsa_index": self.navamsa_index,
            "navamsa_sign": self.navamsa_sign,
            "navamsa_sign_name": self.navamsa_sign_name,
            "navamsa_degree": self.navamsa_degree,
        }


def _modal_offset(sign_idx: int) -> int:
    if sign_idx in MOVABLE_SIGNS:
        return 0
    if sign_idx in FIXED_SIGNS:
        return 8
    return 4


def navamsa_position(longitude: float) -> DivisionalPosition:
    """Return the :class:`DivisionalPosition` for ``longitude`` in degrees."""

    lon = norm360(ensure_finite(longitude))
    sign_idx = min(int(lon // SIGN_ARC_DEGREES), 11)
    deg_in_sign = lon - sign_idx * SIGN_ARC_DEGREES
    # Scale before dividing so exact multiples of 3°20' land on the next part.
    scaled = deg_in_sign * NAVAMSA_PARTS
    part = min(int(scaled // SIGN_ARC_DEGREES), NAVAMSA_PARTS - 1)
    degree = scaled - part * SIGN_ARC_DEGREES
    return DivisionalPosition(
        source_sign=sign_idx,
        navamsa_index=part,
        navamsa_sign=(sign_idx + _modal_offset(sign_idx) + part) % 12,
        navamsa_degree=min(max(degree, 0.0), SIGN_ARC_DEGREES),
    )


def navamsa_sign(longitude: float) -> int:
    """Shortcut returning only the navamsa sign index."""

    return navamsa_position(longitude).navamsa_sign


def navamsa_chart(longitudes: Mapping[str, float]) -> dict[str, DivisionalPosition]:
    """Map every body in ``longitudes`` to its navamsa placement."""

    return {body: navamsa_position(lon) for body, lon in longitudes.items()}

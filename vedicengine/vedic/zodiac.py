"""Rasi (sign) helpers for sidereal longitudes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from ..utils.angles import ensure_finite, norm360

__all__ = [
    "DUAL_SIGNS",
    "FIXED_SIGNS",
    "MOVABLE_SIGNS",
    "Modality",
    "RasiPlacement",
    "SIGN_ARC_DEGREES",
    "ZODIAC_SIGNS",
    "modality_of",
    "rasi_placement",
    "sign_distance",
    "sign_index",
    "sign_name",
]

SIGN_ARC_DEGREES = 30.0

ZODIAC_SIGNS: Sequence[str] = (
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
)

Modality = Literal["movable", "fixed", "dual"]

MOVABLE_SIGNS = frozenset({0, 3, 6, 9})
FIXED_SIGNS = frozenset({1, 4, 7, 10})
DUAL_SIGNS = frozenset({2, 5, 8, 11})


@dataclass(frozen=True, slots=True)
class RasiPlacement:
    """Sign occupied by a longitude and the offset within it."""

    sign_index: int
    sign_name: str
    degree_in_sign: float

    def to_dict(self) -> dict[str, object]:
        return {
            "sign_index": self.sign_index,
            "sign_name": self.sign_name,
            "degree_in_sign": self.degree_in_sign,
        }


def sign_index(longitude: float) -> int:
    """Return the zero-based sign index (0 = Aries) for ``longitude``."""

    lon = norm360(ensure_finite(longitude))
    return min(int(lon // SIGN_ARC_DEGREES), 11)


def sign_name(index: int) -> str:
    return ZODIAC_SIGNS[index % 12]


def modality_of(index: int) -> Modality:
    """Return whether the sign at ``index`` is movable, fixed or dual."""

    idx = index % 12
    if idx in MOVABLE_SIGNS:
        return "movable"
    if idx in FIXED_SIGNS:
        return "fixed"
    return "dual"


def sign_distance(a: int, b: int) -> int:
    """Return the shortest number of signs separating ``a`` and ``b`` (0-6)."""

    diff = (b - a) % 12
    return min(diff, 12 - diff)


def rasi_placement(longitude: float) -> RasiPlacement:
    lon = norm360(ensure_finite(longitude))
    idx = sign_index(lon)
    return RasiPlacement(
        sign_index=idx,
        sign_name=ZODIAC_SIGNS[idx],
        degree_in_sign=lon - idx * SIGN_ARC_DEGREES,
    )

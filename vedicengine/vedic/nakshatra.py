"""Nakshatra (lunar mansion) lookup for sidereal longitudes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..utils.angles import ensure_finite, norm360

__all__ = [
    "LORD_SEQUENCE",
    "NAKSHATRA_ARC_DEGREES",
    "NAKSHATRA_COUNT",
    "NAKSHATRA_DATA",
    "PADA_ARC_DEGREES",
    "Nakshatra",
    "NakshatraPosition",
    "fraction_elapsed",
    "lord_of_nakshatra",
    "nakshatra_index",
    "nakshatra_info",
    "position_for",
]

NAKSHATRA_COUNT = 27
NAKSHATRA_ARC_DEGREES = 360.0 / NAKSHATRA_COUNT
PADA_ARC_DEGREES = NAKSHATRA_ARC_DEGREES / 4.0

# Cyclic order of the Vimshottari lords; nakshatra ``i`` is ruled by ``i % 9``.
LORD_SEQUENCE: Sequence[str] = (
    "Ketu",
    "Venus",
    "Sun",
    "Moon",
    "Mars",
    "Rahu",
    "Jupiter",
    "Saturn",
    "Mercury",
)

NAKSHATRA_DATA: Sequence[tuple[str, str, str]] = (
    ("Ashwini", "Horse's head", "Ashvini Kumaras"),
    ("Bharani", "Yoni", "Yama"),
    ("Krittika", "Flame", "Agni"),
    ("Rohini", "Chariot", "Brahma"),
    ("Mrigashira", "Deer's head", "Soma"),
    ("Ardra", "Teardrop", "Rudra"),
    ("Punarvasu", "Quiver", "Aditi"),
    ("Pushya", "Cow's udder", "Brihaspati"),
    ("Ashlesha", "Coiled serpent", "Nagas"),
    ("Magha", "Throne", "Pitrs"),
    ("Purva Phalguni", "Front legs of bed", "Bhaga"),
    ("Uttara Phalguni", "Back legs of bed", "Aryaman"),
    ("Hasta", "Hand", "Savitar"),
    ("Chitra", "Bright jewel", "Tvashtar"),
    ("Swati", "Coral", "Vayu"),
    ("Vishakha", "Triumphal arch", "Indra-Agni"),
    ("Anuradha", "Lotus", "Mitra"),
    ("Jyeshtha", "Earring", "Indra"),
    ("Mula", "Roots", "Nirriti"),
    ("Purva Ashadha", "Fan", "Apah"),
    ("Uttara Ashadha", "Plank", "Vishva Devas"),
    ("Shravana", "Ear", "Vishnu"),
    ("Dhanishta", "Drum", "Vasus"),
    ("Shatabhisha", "Veiling circle", "Varuna"),
    ("Purva Bhadrapada", "Front legs of funeral cot", "Aja Ekapada"),
    ("Uttara Bhadrapada", "Back legs of funeral cot", "Ahirbudhnya"),
    ("Revati", "Fish", "Pushan"),
)


@dataclass(frozen=True, slots=True)
class Nakshatra:
    index: int
    name: str
    symbol: str
    deity: str
    lord: str

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "name": self.name,
            "symbol": self.symbol,
            "deity": self.deity,
            "lord": self.lord,
        }


@dataclass(frozen=True, slots=True)
class NakshatraPosition:
    """Placement of a longitude within its nakshatra and pada."""

    nakshatra: Nakshatra
    pada: int
    degree_in_nakshatra: float
    degree_in_pada: float
    longitude: float

    @property
    def fraction(self) -> float:
        """Portion of the nakshatra arc already traversed, in ``[0, 1)``."""

        return self.degree_in_nakshatra / NAKSHATRA_ARC_DEGREES

    def to_dict(self) -> dict[str, object]:
        payload = self.nakshatra.to_dict()
        payload.update(
            pada=self.pada,
            degree_in_nakshatra=self.degree_in_nakshatra,
            degree_in_pada=self.degree_in_pada,
        )
        return payload


_NAKSHATRAS: Sequence[Nakshatra] = tuple(
    Nakshatra(index=idx, name=name, symbol=symbol, deity=deity, lord=LORD_SEQUENCE[idx % 9])
    for idx, (name, symbol, deity) in enumerate(NAKSHATRA_DATA)
)


def nakshatra_index(longitude: float) -> int:
    """Return the zero-based nakshatra index (0-26) for ``longitude``."""

    lon = norm360(ensure_finite(longitude))
    # 359.9999... divided by the arc can round up to 27.
    return min(int(lon // NAKSHATRA_ARC_DEGREES), NAKSHATRA_COUNT - 1)


def nakshatra_info(index: int) -> Nakshatra:
    return _NAKSHATRAS[index % NAKSHATRA_COUNT]


def lord_of_nakshatra(index: int) -> str:
    """Return the Vimshottari lord ruling nakshatra ``index``."""

    return LORD_SEQUENCE[index % len(LORD_SEQUENCE)]


def fraction_elapsed(longitude: float) -> float:
    """Return how far ``longitude`` sits inside its nakshatra, in ``[0, 1)``."""

    return position_for(longitude).fraction


def position_for(longitude: float) -> NakshatraPosition:
    """Return a :class:`NakshatraPosition` for ``longitude``."""

    lon = norm360(ensure_finite(longitude))
    idx = nakshatra_index(lon)
    offset = min(max(lon - idx * NAKSHATRA_ARC_DEGREES, 0.0), NAKSHATRA_ARC_DEGREES)
    pada_idx = min(int(offset // PADA_ARC_DEGREES), 3)
    if offset >= NAKSHATRA_ARC_DEGREES:
        offset = NAKSHATRA_ARC_DEGREES - 1e-12
    return NakshatraPosition(
        nakshatra=_NAKSHATRAS[idx],
        pada=pada_idx + 1,
        degree_in_nakshatra=offset,
        degree_in_pada=offset - pada_idx * PADA_ARC_DEGREES,
        longitude=lon,
    )

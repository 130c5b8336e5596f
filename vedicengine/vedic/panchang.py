"""Panchangam (lunar calendar) attributes derived from luminary longitudes.

All indices are zero-based: tithi ``0..29``, nakshatra ``0..26``, yoga
``0..26`` and karana ``0..59``.  Everything except the weekday is a pure
integer-bucket derivation from the Sun and Moon longitudes.
"""

from __future__ import annotations

import datetime as _dt
from collections.abc import Sequence
from dataclasses import dataclass

from ..utils.angles import ensure_finite, norm360
from .nakshatra import NAKSHATRA_ARC_DEGREES, NakshatraPosition, position_for

__all__ = [
    "KARANA_ARC_DEGREES",
    "TITHI_ARC_DEGREES",
    "YOGA_ARC_DEGREES",
    "Karana",
    "NakshatraStatus",
    "PanchangamDay",
    "Tithi",
    "Vara",
    "Yoga",
    "compute_panchangam",
    "karana_from_longitudes",
    "nakshatra_from_longitude",
    "tithi_from_longitudes",
    "vara_from_date",
    "yoga_from_longitudes",
]


TITHI_ARC_DEGREES: float = 360.0 / 30.0
YOGA_ARC_DEGREES: float = 360.0 / 27.0
KARANA_ARC_DEGREES: float = TITHI_ARC_DEGREES / 2.0

_TITHI_NAMES: Sequence[str] = (
    "Pratipada",
    "Dwitiya",
    "Tritiya",
    "Chaturthi",
    "Panchami",
    "Shashthi",
    "Saptami",
    "Ashtami",
    "Navami",
    "Dashami",
    "Ekadashi",
    "Dwadashi",
    "Trayodashi",
    "Chaturdashi",
)

_YOGA_NAMES: Sequence[str] = (
    "Vishkambha",
    "Priti",
    "Ayushman",
    "Saubhagya",
    "Shobhana",
    "Atiganda",
    "Sukarma",
    "Dhriti",
    "Shoola",
    "Ganda",
    "Vriddhi",
    "Dhruva",
    "Vyaghata",
    "Harshana",
    "Vajra",
    "Siddhi",
    "Vyatipata",
    "Variyana",
    "Parigha",
    "Shiva",
    "Siddha",
    "Sadhya",
    "Shubha",
    "Shukla",
    "Brahma",
    "Indra",
    "Vaidhriti",
)

_MOVABLE_KARANAS: Sequence[str] = (
    "Bava",
    "Balava",
    "Kaulava",
    "Taitila",
    "Gara",
    "Vanija",
    "Vishti",
)

# (sanskrit, english) indexed by Python's ``date.weekday()`` (Monday = 0).
_VARAS: Sequence[tuple[str, str]] = (
    ("Somavara", "Monday"),
    ("Mangalavara", "Tuesday"),
    ("Budhavara", "Wednesday"),
    ("Guruvara", "Thursday"),
    ("Shukravara", "Friday"),
    ("Shanivara", "Saturday"),
    ("Ravivara", "Sunday"),
)


@dataclass(frozen=True, slots=True)
class Tithi:
    index: int
    name: str
    paksha: str
    longitude_delta: float
    progress: float

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "name": self.name,
            "paksha": self.paksha,
            "longitude_delta": self.longitude_delta,
            "progress": self.progress,
        }


@dataclass(frozen=True, slots=True)
class NakshatraStatus:
    """Nakshatra placement of the Moon with fractional progress."""

    position: NakshatraPosition
    progress: float

    @property
    def index(self) -> int:
        return self.position.nakshatra.index

    def to_dict(self) -> dict[str, object]:
        payload = self.position.to_dict()
        payload["progress"] = self.progress
        return payload


@dataclass(frozen=True, slots=True)
class Yoga:
    index: int
    name: str
    longitude_sum: float
    progress: float

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "name": self.name,
            "longitude_sum": self.longitude_sum,
            "progress": self.progress,
        }


@dataclass(frozen=True, slots=True)
class Karana:
    index: int
    name: str
    progress: float

    def to_dict(self) -> dict[str, object]:
        return {"index": self.index, "name": self.name, "progress": self.progress}


@dataclass(frozen=True, slots=True)
class Vara:
    weekday: int
    name: str
    english: str

    def to_dict(self) -> dict[str, object]:
        return {"weekday": self.weekday, "name": self.name, "english": self.english}


@dataclass(frozen=True, slots=True)
class PanchangamDay:
    """Lunar calendar attributes for one moment."""

    tithi: Tithi
    nakshatra: NakshatraStatus
    yoga: Yoga
    karana: Karana
    vara: Vara | None = None

    @property
    def tithi_index(self) -> int:
        return self.tithi.index

    @property
    def nakshatra_index(self) -> int:
        return self.nakshatra.index

    def to_dict(self) -> dict[str, object]:
        return {
            "tithi_index": self.tithi_index,
            "nakshatra_index": self.nakshatra_index,
            "tithi": self.tithi.to_dict(),
            "nakshatra": self.nakshatra.to_dict(),
            "yoga": self.yoga.to_dict(),
            "karana": self.karana.to_dict(),
            "vara": self.vara.to_dict() if self.vara is not None else None,
        }


def _bucket(angle: float, arc: float, count: int) -> tuple[int, float]:
    index = min(int(angle // arc), count - 1)
    progress = min(max((angle - index * arc) / arc, 0.0), 1.0)
    return index, progress


def _elongation(moon_longitude: float, sun_longitude: float) -> float:
    moon = ensure_finite(moon_longitude, label="moon_longitude")
    sun = ensure_finite(sun_longitude, label="sun_longitude")
    return norm360(moon - sun)


def tithi_from_longitudes(moon_longitude: float, sun_longitude: float) -> Tithi:
    """Return the lunar day for the Moon-Sun elongation (12° per tithi)."""

    delta = _elongation(moon_longitude, sun_longitude)
    index, progress = _bucket(delta, TITHI_ARC_DEGREES, 30)
    if index == 14:
        name, paksha = "Purnima", "Shukla"
    elif index == 29:
        name, paksha = "Amavasya", "Krishna"
    else:
        paksha = "Shukla" if index < 15 else "Krishna"
        name = f"{paksha} {_TITHI_NAMES[index % 15]}"
    return Tithi(
        index=index,
        name=name,
        paksha=paksha,
        longitude_delta=delta,
        progress=progress,
    )


def nakshatra_from_longitude(moon_longitude: float) -> NakshatraStatus:
    position = position_for(ensure_finite(moon_longitude, label="moon_longitude"))
    progress = position.degree_in_nakshatra / NAKSHATRA_ARC_DEGREES
    return NakshatraStatus(position=position, progress=progress)


def yoga_from_longitudes(moon_longitude: float, sun_longitude: float) -> Yoga:
    """Return the yoga for the sum of the luminary longitudes."""

    total = norm360(
        ensure_finite(moon_longitude, label="moon_longitude")
        + ensure_finite(sun_longitude, label="sun_longitude")
    )
    index, progress = _bucket(total, YOGA_ARC_DEGREES, 27)
    return Yoga(index=index, name=_YOGA_NAMES[index], longitude_sum=total, progress=progress)


def _karana_name(index: int) -> str:
    if index == 0:
        return "Kimstughna"
    if index == 57:
        return "Shakuni"
    if index == 58:
        return "Chatushpada"
    if index >= 59:
        return "Naga"
    return _MOVABLE_KARANAS[(index - 1) % len(_MOVABLE_KARANAS)]


def karana_from_longitudes(moon_longitude: float, sun_longitude: float) -> Karana:
    """Return the half-tithi karana (60 per synodic month)."""

    delta = _elongation(moon_longitude, sun_longitude)
    index, progress = _bucket(delta, KARANA_ARC_DEGREES, 60)
    return Karana(index=index, name=_karana_name(index), progress=progress)


def vara_from_date(day: _dt.date) -> Vara:
    weekday = day.weekday()
    name, english = _VARAS[weekday]
    return Vara(weekday=weekday, name=name, english=english)


def compute_panchangam(
    sun_longitude: float,
    moon_longitude: float,
    *,
    local_date: _dt.date | None = None,
) -> PanchangamDay:
    """Return the :class:`PanchangamDay` for the given luminary longitudes."""

    return PanchangamDay(
        tithi=tithi_from_longitudes(moon_longitude, sun_longitude),
        nakshatra=nakshatra_from_longitude(moon_longitude),
        yoga=yoga_from_longitudes(moon_longitude, sun_longitude),
        karana=karana_from_longitudes(moon_longitude, sun_longitude),
        vara=vara_from_date(local_date) if local_date is not None else None,
    )

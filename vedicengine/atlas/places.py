"""Place name to coordinate lookup backed by a small CSV gazetteer."""

from __future__ import annotations

import csv
import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..errors import PlaceNotFoundError, ValidationError

LOG = logging.getLogger(__name__)

__all__ = ["BUILTIN_PLACES", "Place", "PlaceDirectory", "SEARCH_LIMIT"]

SEARCH_LIMIT = 10

# Accepted spellings for each column; the first CSV header found wins.
_COLUMN_ALIASES: Mapping[str, Sequence[str]] = {
    "place": ("place", "iplace", "name", "city"),
    "state": ("state", "istate"),
    "district": ("district", "idistrict"),
    "latitude": ("lat", "latitude", "ilatitudeindia"),
    "longitude": ("lon", "lng", "longitude", "ilongitudeindia"),
    "utc_offset_hours": ("utc_offset", "timezone", "itimezone"),
}


@dataclass(frozen=True, slots=True)
class Place:
    name: str
    latitude: float
    longitude: float
    state: str = ""
    district: str = ""
    utc_offset_hours: float | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "place": self.name,
            "state": self.state,
            "district": self.district,
            "lat": self.latitude,
            "lon": self.longitude,
            "utc_offset_hours": self.utc_offset_hours,
        }


BUILTIN_PLACES: tuple[Place, ...] = (
    Place("Chennai", 13.0827, 80.2707, "Tamil Nadu", "Chennai", 5.5),
    Place("Mumbai", 19.076, 72.8777, "Maharashtra", "Mumbai", 5.5),
    Place("Delhi", 28.7041, 77.1025, "Delhi", "New Delhi", 5.5),
)


def _pick(row: Mapping[str, str], field: str) -> str:
    for alias in _COLUMN_ALIASES[field]:
        value = row.get(alias)
        if value not in (None, ""):
            return value.strip()
    return ""


def _row_to_place(row: Mapping[str, str]) -> Place | None:
    normalized = {(key or "").strip().lower(): value for key, value in row.items()}
    name = _pick(normalized, "place")
    try:
        lat = float(_pick(normalized, "latitude"))
        lon = float(_pick(normalized, "longitude"))
    except ValueError:
        return None
    if not name or not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        return None
    offset_raw = _pick(normalized, "utc_offset_hours")
    try:
        offset = float(offset_raw) if offset_raw else None
    except ValueError:
        offset = None
    return Place(
        name=name,
        latitude=lat,
        longitude=lon,
        state=_pick(normalized, "state"),
        district=_pick(normalized, "district"),
        utc_offset_hours=offset,
    )


class PlaceDirectory:
    """Case-insensitive substring search over a list of :class:`Place`."""

    def __init__(self, places: Iterable[Place] = BUILTIN_PLACES) -> None:
        self._places = tuple(places)

    @classmethod
    def from_csv(cls, path: str | os.PathLike[str]) -> PlaceDirectory:
        """Load places from a CSV file with ``place,state,district,lat,lon`` columns.

        Rows without a name or with unparsable coordinates are skipped.
        """

        source = Path(path)
        with source.open(newline="", encoding="utf-8") as handle:
            reader = csv.DictReader(handle)
            places = [place for row in reader if (place := _row_to_place(row)) is not None]
        LOG.info("loaded %d places from %s", len(places), source)
        return cls(places)

    @classmethod
    def default(cls) -> PlaceDirectory:
        """Return the CSV named by ``VEDICENGINE_PLACES_CSV`` or the bundled list."""

        candidate = os.environ.get("VEDICENGINE_PLACES_CSV")
        if candidate and Path(candidate).is_file():
            return cls.from_csv(candidate)
        return cls()

    def __len__(self) -> int:
        return len(self._places)

    def search(self, query: str, *, limit: int = SEARCH_LIMIT) -> list[Place]:
        needle = (query or "").strip().casefold()
        if not needle:
            raise ValidationError("place query must not be empty", details={"place": query})
        matches = [place for place in self._places if needle in place.name.casefold()]
        # Exact names first, then prefix matches, then everything else.
        matches.sort(
            key=lambda place: (
                place.name.casefold() != needle,
                not place.name.casefold().startswith(needle),
            )
        )
        return matches[:limit]

    def resolve(self, query: str) -> Place:
        """Return the best match for ``query`` or raise :class:`PlaceNotFoundError`."""

        matches = self.search(query, limit=1)
        if not matches:
            raise PlaceNotFoundError(f"place '{query}' not found", details={"place": query})
        return matches[0]

"""High level facade tying time, positions and Vedic derivations together.

:class:`VedicEngine` exposes the public operations (chart generation, dasha
queries and compatibility matching).  The position provider is an explicit
constructor argument; nothing is cached between calls, so one engine can
serve concurrent requests.
"""

from __future__ import annotations

import datetime as _dt
import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Union

from .atlas.places import Place, PlaceDirectory
from .config.settings import Settings
from .core.time import BirthMoment, TimeValue, to_time_value
from .ephemeris.placeholder import PlaceholderProvider
from .ephemeris.provider import HousePositions, PositionProvider
from .ephemeris.resolve import resolve_provider
from .errors import ValidationError, VedicEngineError
from .observability.metrics import CHART_COMPUTE_DURATION, COMPUTE_ERRORS
from .vedic.chart import CHART_BODIES, ChartSnapshot, compute_snapshot
from .vedic.compatibility import CompatibilityResult, VerdictThresholds, score_compatibility
from .vedic.dasha import (
    CurrentDasha,
    DashaOutOfRange,
    DashaPeriod,
    DashaSequence,
    VimshottariOptions,
    build_vimshottari,
)
from .vedic.houses import compute_houses, house_of
from .vedic.panchang import PanchangamDay, compute_panchangam

LOG = logging.getLogger(__name__)

__all__ = ["ChartInput", "ChartResult", "VedicEngine"]

# A chart that is already computed, or the birth data to compute it from.
ChartInput = Union[ChartSnapshot, BirthMoment]


@dataclass(frozen=True)
class ChartResult:
    """Everything derived from one birth moment."""

    birth: BirthMoment
    snapshot: ChartSnapshot
    houses: HousePositions
    panchangam: PanchangamDay
    dasha: DashaSequence
    current: CurrentDasha | DashaOutOfRange
    provenance: dict[str, object]
    place: Place | None = None

    @property
    def placeholder(self) -> bool:
        return self.snapshot.placeholder or self.houses.placeholder

    def to_dict(self) -> dict[str, object]:
        rasi = self.snapshot.rasi()
        navamsa = self.snapshot.navamsa()
        planets: dict[str, object] = {}
        for body in CHART_BODIES:
            entry = self.snapshot.positions[body].to_dict()
            entry["house"] = house_of(self.snapshot.longitude(body), self.houses)
            planets[body] = entry
        return {
            "time": {
                "julian_day": self.snapshot.time.julian_day,
                "utc": self.snapshot.time.to_datetime().isoformat(),
            },
            "place": self.place.to_dict() if self.place else None,
            "planets": planets,
            "rasi": {body: placement.to_dict() for body, placement in rasi.items()},
            "houses": self.houses.to_dict(),
            "navamsa": {body: position.to_dict() for body, position in navamsa.items()},
            "dasha": {
                "sequence": [period.to_dict() for period in self.dasha.mahadashas],
                "current": self.current.to_dict(),
            },
            "panchangam": self.panchangam.to_dict(),
            "placeholder": self.placeholder,
            "provenance": dict(self.provenance),
        }


def _utc_now() -> _dt.datetime:
    return _dt.datetime.now(_dt.UTC)


class VedicEngine:
    """Compute charts, dashas and compatibility for birth moments."""

    def __init__(
        self,
        provider: PositionProvider | None = None,
        settings: Settings | None = None,
        *,
        places: PlaceDirectory | None = None,
        clock: Callable[[], _dt.datetime] = _utc_now,
    ) -> None:
        self.settings = settings or Settings()
        self.provider = provider if provider is not None else resolve_provider(self.settings)
        self.places = places if places is not None else PlaceDirectory.default()
        self._clock = clock
        self._fallback: PositionProvider | None = (
            PlaceholderProvider(reason="runtime")
            if self.settings.ephemeris.allow_placeholder and not self.provider.placeholder
            else None
        )
        dasha_cfg = self.settings.dasha
        self.dasha_options = VimshottariOptions(
            year_basis_days=dasha_cfg.year_basis_days,
            horizon_years=dasha_cfg.horizon_years,
            balance_mode=dasha_cfg.balance_mode,
        )
        compat = self.settings.compatibility
        self.thresholds = VerdictThresholds(
            excellent=compat.excellent, good=compat.good, average=compat.average
        )

    def now(self) -> _dt.datetime:
        """Return the current instant from the injected clock."""

        return self._clock()

    def __repr__(self) -> str:
        return f"VedicEngine(provider={self.provider!r})"

    @contextmanager
    def _timed(self, operation: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        except VedicEngineError as exc:
            COMPUTE_ERRORS.labels(operation=operation, code=exc.code).inc()
            raise
        finally:
            CHART_COMPUTE_DURATION.labels(operation=operation).observe(
                time.perf_counter() - start
            )

    def provenance(self, snapshot: ChartSnapshot | None = None) -> dict[str, object]:
        payload: dict[str, object] = {
            "provider": snapshot.provider_id if snapshot else self.provider.provider_id,
            "zodiac": self.settings.zodiac.type,
            "ayanamsa": self.settings.zodiac.ayanamsa
            if self.settings.zodiac.type == "sidereal"
            else None,
            "house_system": self.settings.houses.system,
            "dasha_balance_mode": self.dasha_options.balance_mode,
        }
        if snapshot is not None and snapshot.fallback_reason:
            payload["fallback_reason"] = snapshot.fallback_reason
        return payload

    # ------------------------------------------------------------------
    # building blocks

    def snapshot(self, birth: BirthMoment) -> ChartSnapshot:
        """Return the nine-graha snapshot for ``birth``."""

        return compute_snapshot(to_time_value(birth), self.provider, fallback=self._fallback)

    def resolve_chart(self, item: ChartInput) -> ChartSnapshot:
        """Return ``item`` unchanged if it is a snapshot, else compute one."""

        if isinstance(item, ChartSnapshot):
            return item
        if isinstance(item, BirthMoment):
            return self.snapshot(item)
        raise ValidationError(
            "expected a ChartSnapshot or BirthMoment",
            details={"type": type(item).__name__},
        )

    def _place(self, birth: BirthMoment, place_name: str | None) -> tuple[BirthMoment, Place | None]:
        if not place_name:
            return birth, None
        place = self.places.resolve(place_name)
        LOG.debug("resolved place %r to %s", place_name, place)
        return birth.with_location(place.latitude, place.longitude), place

    def _sequence(self, snapshot: ChartSnapshot) -> DashaSequence:
        sequence = build_vimshottari(
            snapshot.moon_longitude, snapshot.time, options=self.dasha_options
        )
        return replace(sequence, placeholder=snapshot.placeholder)

    # ------------------------------------------------------------------
    # public operations

    def generate_chart(self, birth: BirthMoment, place_name: str | None = None) -> ChartResult:
        """Compute positions, houses, navamsa, panchangam and dashas for ``birth``."""

        with self._timed("chart"):
            birth, place = self._place(birth, place_name)
            snapshot = self.snapshot(birth)
            houses = compute_houses(
                snapshot.time,
                birth.latitude,
                birth.longitude,
                self.provider if not snapshot.placeholder else (self._fallback or self.provider),
                system=self.settings.houses.system,
            )
            panchangam = compute_panchangam(
                snapshot.sun_longitude,
                snapshot.moon_longitude,
                local_date=birth.local_date(),
            )
            sequence = self._sequence(snapshot)
            return ChartResult(
                birth=birth,
                snapshot=snapshot,
                houses=houses,
                panchangam=panchangam,
                dasha=sequence,
                current=sequence.lookup(self.now()),
                provenance=self.provenance(snapshot),
                place=place,
            )

    def mahadasha_sequence(self, birth: ChartInput) -> DashaSequence:
        with self._timed("mahadashas"):
            return self._sequence(self.resolve_chart(birth))

    def bhuktis(self, birth: ChartInput, mahadasha_index: int) -> tuple[DashaPeriod, ...]:
        with self._timed("bhuktis"):
            return self._sequence(self.resolve_chart(birth)).bhuktis(mahadasha_index)

    def pratyantars(
        self, birth: ChartInput, mahadasha_index: int, bhukti_index: int
    ) -> tuple[DashaPeriod, ...]:
        with self._timed("pratyantars"):
            sequence = self._sequence(self.resolve_chart(birth))
            return sequence.pratyantars(mahadasha_index, bhukti_index)

    def current_dasha(
        self,
        birth: ChartInput,
        target: _dt.datetime | TimeValue | None = None,
    ) -> CurrentDasha | DashaOutOfRange:
        """Return the running periods at ``target`` (defaults to now)."""

        with self._timed("current_dasha"):
            sequence = self._sequence(self.resolve_chart(birth))
            return sequence.lookup(target if target is not None else self.now())

    def match(self, person_a: ChartInput, person_b: ChartInput) -> CompatibilityResult:
        """Score two people given either computed charts or birth data."""

        with self._timed("match"):
            return score_compatibility(
                self.resolve_chart(person_a),
                self.resolve_chart(person_b),
                thresholds=self.thresholds,
            )

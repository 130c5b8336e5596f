"""Vimshottari dasha sequences with lazily derived sub-periods.

The Mahadasha sequence starts at birth with the lord of the Moon's
nakshatra.  Only the balance of that first period remains at birth; the
following lords run for their full table years until the configured horizon
(120 elapsed years by default) is covered.

Sub-periods are never stored on the sequence.  :meth:`DashaPeriod.children`
partitions a period into nine contiguous children, starting with the parent's
own lord, each lasting ``parent_years * lord_years / 120``.  Boundaries are
accumulated forward from the parent start and the final child always ends on
the parent end, so adjacent periods share exact float boundaries at every
level.

Two treatments of the partial first Mahadasha are available:

``scaled``
    the balance itself is subdivided, children keep the usual proportions
    but shrink with the balance;
``elapsed``
    the full table period is subdivided starting at the virtual dasha start
    (birth minus the elapsed portion) and everything before birth is clipped
    away.
"""

from __future__ import annotations

import bisect
import datetime as _dt
import itertools
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal

from ..core.time import MAX_JULIAN_DAY, TimeValue, from_julian_day, julian_day
from ..errors import ComputationRangeError, ValidationError
from ..utils.angles import ensure_finite
from .nakshatra import LORD_SEQUENCE, position_for

LOG = logging.getLogger(__name__)

__all__ = [
    "CurrentDasha",
    "DASHA_LEVELS",
    "DashaOutOfRange",
    "DashaPeriod",
    "DashaSequence",
    "TOTAL_YEARS",
    "VIMSHOTTARI_YEARS",
    "VimshottariOptions",
    "build_vimshottari",
    "rotated_order",
    "subdivide",
]


VIMSHOTTARI_YEARS: Mapping[str, float] = {
    "Ketu": 7.0,
    "Venus": 20.0,
    "Sun": 6.0,
    "Moon": 10.0,
    "Mars": 7.0,
    "Rahu": 18.0,
    "Jupiter": 16.0,
    "Saturn": 19.0,
    "Mercury": 17.0,
}
TOTAL_YEARS = sum(VIMSHOTTARI_YEARS.values())

DASHA_LEVELS: Sequence[str] = ("maha", "bhukti", "pratyantar")

BalanceMode = Literal["scaled", "elapsed"]

_YEARS_EPSILON = 1e-9


@dataclass(frozen=True)
class VimshottariOptions:
    """Runtime options for sequence construction."""

    year_basis_days: float = 365.25
    horizon_years: float = TOTAL_YEARS
    balance_mode: BalanceMode = "scaled"

    def __post_init__(self) -> None:
        mode = str(self.balance_mode).lower()
        if mode not in {"scaled", "elapsed"}:
            raise ValidationError(
                "balance_mode must be 'scaled' or 'elapsed'",
                details={"balance_mode": self.balance_mode},
            )
        if not self.year_basis_days > 0.0:
            raise ValidationError(
                "year_basis_days must be positive",
                details={"year_basis_days": self.year_basis_days},
            )
        if not self.horizon_years > 0.0:
            raise ValidationError(
                "horizon_years must be positive",
                details={"horizon_years": self.horizon_years},
            )
        object.__setattr__(self, "balance_mode", mode)


def rotated_order(lord: str) -> tuple[str, ...]:
    """Return the nine lords in cyclic order beginning with ``lord``."""

    try:
        start = LORD_SEQUENCE.index(lord)
    except ValueError as exc:
        raise ValidationError(
            f"unknown Vimshottari lord '{lord}'", details={"lord": lord}
        ) from exc
    return tuple(LORD_SEQUENCE[(start + offset) % 9] for offset in range(9))


@dataclass(frozen=True)
class DashaPeriod:
    """One dasha span ``[start, end)`` at a given depth.

    ``base_start_jd``/``base_years`` describe the nominal period that children
    are proportioned from.  They differ from ``start_jd``/``years`` only for
    periods clipped at birth in ``elapsed`` balance mode.
    """

    lord: str
    level: int
    start_jd: float
    end_jd: float
    years: float
    year_basis_days: float
    lineage: tuple[str, ...] = ()
    base_start_jd: float | None = None
    base_years: float | None = None
    metadata: dict[str, object] = field(default_factory=dict, compare=False, hash=False)

    @property
    def level_name(self) -> str:
        return DASHA_LEVELS[self.level - 1]

    @property
    def parent_lord(self) -> str | None:
        return self.lineage[-2] if len(self.lineage) > 1 else None

    @property
    def start(self) -> _dt.datetime:
        return from_julian_day(self.start_jd)

    @property
    def end(self) -> _dt.datetime:
        return from_julian_day(self.end_jd)

    @property
    def span_days(self) -> float:
        return self.end_jd - self.start_jd

    def contains(self, jd: float) -> bool:
        return self.start_jd <= jd < self.end_jd

    def children(self) -> tuple[DashaPeriod, ...]:
        """Return the next level of sub-periods (empty for Pratyantars)."""

        if self.level >= len(DASHA_LEVELS):
            return ()
        return subdivide(self)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "lord": self.lord,
            "level": self.level_name,
            "lineage": list(self.lineage),
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "start_jd": self.start_jd,
            "end_jd": self.end_jd,
            "years": self.years,
            "span_days": self.span_days,
        }
        if self.level >= 2:
            payload["maha_lord"] = self.lineage[0]
            payload["sub_lord"] = self.lord
        if self.level >= 3:
            payload["bhukti_lord"] = self.lineage[1]
        if self.metadata:
            payload["metadata"] = dict(self.metadata)
        return payload


def _partition(
    *,
    start_jd: float,
    end_jd: float,
    years: float,
    lord: str,
    level: int,
    year_basis_days: float,
    lineage: tuple[str, ...],
    clip_jd: float,
) -> tuple[DashaPeriod, ...]:
    order = rotated_order(lord)
    children: list[DashaPeriod] = []
    cursor = start_jd
    for idx, sub_lord in enumerate(order):
        sub_years = years * VIMSHOTTARI_YEARS[sub_lord] / TOTAL_YEARS
        if idx == len(order) - 1:
            sub_end = end_jd
        else:
            sub_end = min(cursor + sub_years * year_basis_days, end_jd)
        sub_start = cursor
        cursor = sub_end
        if sub_end <= clip_jd:
            continue
        base_start: float | None = None
        base_years: float | None = None
        actual_years = sub_years
        if sub_start < clip_jd:
            base_start, base_years = sub_start, sub_years
            actual_years = (sub_end - clip_jd) / year_basis_days
            sub_start = clip_jd
        children.append(
            DashaPeriod(
                lord=sub_lord,
                level=level,
                start_jd=sub_start,
                end_jd=sub_end,
                years=actual_years,
                year_basis_days=year_basis_days,
                lineage=lineage + (sub_lord,),
                base_start_jd=base_start,
                base_years=base_years,
            )
        )
    return tuple(children)


def subdivide(parent: DashaPeriod) -> tuple[DashaPeriod, ...]:
    """Split ``parent`` into nine contiguous children headed by its own lord.

    Children are proportioned from the parent's nominal period and clipped at
    the parent start, so the first child starts and the last child ends
    exactly on the parent boundaries.
    """

    if parent.level >= len(DASHA_LEVELS):
        raise ComputationRangeError(
            "pratyantar periods are not subdivided",
            details={"level": parent.level_name},
        )
    base_start = parent.start_jd if parent.base_start_jd is None else parent.base_start_jd
    base_years = parent.years if parent.base_years is None else parent.base_years
    return _partition(
        start_jd=base_start,
        end_jd=parent.end_jd,
        years=base_years,
        lord=parent.lord,
        level=parent.level + 1,
        year_basis_days=parent.year_basis_days,
        lineage=parent.lineage or (parent.lord,),
        clip_jd=parent.start_jd,
    )


@dataclass(frozen=True)
class CurrentDasha:
    """Mahadasha, Bhukti and Pratyantar active at ``target_jd``."""

    target_jd: float
    mahadasha: DashaPeriod
    bhukti: DashaPeriod
    pratyantar: DashaPeriod

    def to_dict(self) -> dict[str, object]:
        return {
            "status": "ok",
            "target": from_julian_day(self.target_jd).isoformat(),
            "mahadasha": self.mahadasha.to_dict(),
            "bhukti": self.bhukti.to_dict(),
            "pratyantar": self.pratyantar.to_dict(),
        }


@dataclass(frozen=True)
class DashaOutOfRange:
    """Lookup result for targets before birth or past the horizon."""

    target_jd: float
    reason: Literal["before_birth", "after_horizon"]
    birth_jd: float
    horizon_jd: float

    def to_dict(self) -> dict[str, object]:
        return {
            "status": "out_of_range",
            "reason": self.reason,
            "target": from_julian_day(self.target_jd).isoformat(),
            "birth": from_julian_day(self.birth_jd).isoformat(),
            "horizon": from_julian_day(self.horizon_jd).isoformat(),
        }


def _find(periods: Sequence[DashaPeriod], jd: float) -> DashaPeriod | None:
    starts = [period.start_jd for period in periods]
    idx = bisect.bisect_right(starts, jd) - 1
    if idx < 0:
        return None
    period = periods[idx]
    return period if period.contains(jd) else None


def _as_jd(target: TimeValue | _dt.datetime | float) -> float:
    if isinstance(target, TimeValue):
        return target.julian_day
    if isinstance(target, _dt.datetime):
        return julian_day(target)
    return ensure_finite(target, label="target")


@dataclass(frozen=True)
class DashaSequence:
    """Ordered, gap-free Mahadashas for one birth."""

    birth_jd: float
    moon_longitude: float
    options: VimshottariOptions
    mahadashas: tuple[DashaPeriod, ...]
    placeholder: bool = False

    @property
    def horizon_jd(self) -> float:
        return self.mahadashas[-1].end_jd

    def mahadasha(self, index: int) -> DashaPeriod:
        if not 0 <= index < len(self.mahadashas):
            raise ComputationRangeError(
                f"mahadasha index {index} outside 0..{len(self.mahadashas) - 1}",
                details={"mahadasha_index": index, "count": len(self.mahadashas)},
            )
        return self.mahadashas[index]

    def bhuktis(self, mahadasha_index: int) -> tuple[DashaPeriod, ...]:
        return self.mahadasha(mahadasha_index).children()

    def pratyantars(self, mahadasha_index: int, bhukti_index: int) -> tuple[DashaPeriod, ...]:
        bhuktis = self.bhuktis(mahadasha_index)
        if not 0 <= bhukti_index < len(bhuktis):
            raise ComputationRangeError(
                f"bhukti index {bhukti_index} outside 0..{len(bhuktis) - 1}",
                details={"bhukti_index": bhukti_index, "count": len(bhuktis)},
            )
        return bhuktis[bhukti_index].children()

    def lookup(self, target: TimeValue | _dt.datetime | float) -> CurrentDasha | DashaOutOfRange:
        """Return the periods containing ``target`` or an out-of-range marker."""

        jd = _as_jd(target)
        if jd < self.birth_jd or jd >= self.horizon_jd:
            return DashaOutOfRange(
                target_jd=jd,
                reason="before_birth" if jd < self.birth_jd else "after_horizon",
                birth_jd=self.birth_jd,
                horizon_jd=self.horizon_jd,
            )
        maha = _find(self.mahadashas, jd)
        bhukti = _find(maha.children(), jd) if maha else None
        pratyantar = _find(bhukti.children(), jd) if bhukti else None
        if maha is None or bhukti is None or pratyantar is None:
            # Unreachable while boundaries stay contiguous.
            raise ComputationRangeError(
                "no dasha period contains the target", details={"target_jd": jd}
            )
        return CurrentDasha(target_jd=jd, mahadasha=maha, bhukti=bhukti, pratyantar=pratyantar)

    def to_dict(self) -> dict[str, object]:
        return {
            "system": "vimshottari",
            "balance_mode": self.options.balance_mode,
            "year_basis_days": self.options.year_basis_days,
            "birth": from_julian_day(self.birth_jd).isoformat(),
            "horizon": from_julian_day(self.horizon_jd).isoformat(),
            "placeholder": self.placeholder,
            "sequence": [period.to_dict() for period in self.mahadashas],
        }


def build_vimshottari(
    moon_longitude: float,
    birth: TimeValue,
    *,
    options: VimshottariOptions | None = None,
) -> DashaSequence:
    """Return the Mahadasha sequence for a natal Moon at ``moon_longitude``."""

    lon = ensure_finite(moon_longitude, label="moon_longitude")
    if not 0.0 <= lon < 360.0:
        raise ValidationError(
            "moon_longitude must lie in [0, 360)", details={"moon_longitude": lon}
        )
    opts = options or VimshottariOptions()
    basis = opts.year_basis_days
    moon = position_for(lon)
    first_lord = moon.nakshatra.lord
    full_years = VIMSHOTTARI_YEARS[first_lord]
    remaining = 1.0 - moon.fraction
    balance_years = full_years * remaining
    elapsed_years = full_years - balance_years

    periods: list[DashaPeriod] = []
    cursor = birth.julian_day
    covered = 0.0
    order = rotated_order(first_lord)
    for step in itertools.count():
        if covered >= opts.horizon_years - _YEARS_EPSILON:
            break
        lord = order[step % 9]
        years = balance_years if step == 0 else VIMSHOTTARI_YEARS[lord]
        end = cursor + years * basis
        if end <= cursor:
            # Balance shorter than the Julian day resolution.
            continue
        base_start: float | None = None
        base_years: float | None = None
        metadata: dict[str, object] = {}
        if not periods:
            metadata = {
                "janma_nakshatra": moon.nakshatra.name,
                "janma_pada": moon.pada,
                "balance_years": balance_years,
                "balance_fraction": remaining,
            }
            if step == 0 and opts.balance_mode == "elapsed" and elapsed_years > 0.0:
                base_start = cursor - elapsed_years * basis
                base_years = full_years
        periods.append(
            DashaPeriod(
                lord=lord,
                level=1,
                start_jd=cursor,
                end_jd=end,
                years=years,
                year_basis_days=basis,
                lineage=(lord,),
                base_start_jd=base_start,
                base_years=base_years,
                metadata=metadata,
            )
        )
        cursor = end
        covered += years

    if cursor >= MAX_JULIAN_DAY:
        raise ComputationRangeError(
            "dasha horizon extends past the supported calendar range",
            details={"birth_jd": birth.julian_day, "horizon_jd": cursor},
        )
    LOG.debug(
        "vimshottari sequence: lord=%s balance_years=%.6f periods=%d mode=%s",
        first_lord,
        balance_years,
        len(periods),
        opts.balance_mode,
    )
    return DashaSequence(
        birth_jd=birth.julian_day,
        moon_longitude=lon,
        options=opts,
        mahadashas=tuple(periods),
    )

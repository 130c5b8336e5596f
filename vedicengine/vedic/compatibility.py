"""Porutham-style compatibility between two chart snapshots.

Each check is named and carries fixed points; the aggregate is the sum of
the points earned.  Only Moon and Venus longitudes are consulted, so the
result is a pure function of the two snapshots.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .chart import ChartSnapshot
from .nakshatra import NAKSHATRA_COUNT, nakshatra_index, nakshatra_info
from .zodiac import sign_distance, sign_index

__all__ = [
    "CHECK_POINTS",
    "GANA_BY_NAKSHATRA",
    "MAX_SCORE",
    "CompatibilityCheck",
    "CompatibilityResult",
    "VerdictThresholds",
    "score_compatibility",
    "verdict_for",
]


CHECK_POINTS: dict[str, int] = {
    "same_nakshatra": 10,
    "adjacent_nakshatra": 5,
    "dina": 6,
    "gana": 6,
    "rasi": 6,
    "venus_sign": 3,
}
MAX_SCORE = sum(CHECK_POINTS.values())

# Temperament of each nakshatra, indexed 0 (Ashwini) .. 26 (Revati).
GANA_BY_NAKSHATRA: Sequence[str] = (
    "Deva", "Manushya", "Rakshasa", "Manushya", "Deva", "Manushya",
    "Deva", "Deva", "Rakshasa", "Rakshasa", "Manushya", "Manushya",
    "Deva", "Rakshasa", "Deva", "Rakshasa", "Deva", "Rakshasa",
    "Rakshasa", "Manushya", "Manushya", "Deva", "Rakshasa", "Rakshasa",
    "Manushya", "Manushya", "Deva",
)

_GOOD_TARAS = frozenset({2, 4, 6, 8, 0})


@dataclass(frozen=True)
class VerdictThresholds:
    excellent: int = 24
    good: int = 16
    average: int = 8


@dataclass(frozen=True)
class CompatibilityCheck:
    """Outcome of a single named porutham."""

    name: str
    value: bool | int
    points: int
    max_points: int
    detail: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "value": self.value,
            "points": self.points,
            "max_points": self.max_points,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class CompatibilityResult:
    checks: tuple[CompatibilityCheck, ...]
    aggregate_score: int
    max_score: int
    verdict: str
    nakshatra_a: int
    nakshatra_b: int
    placeholder: bool = False

    def check(self, name: str) -> CompatibilityCheck:
        for item in self.checks:
            if item.name == name:
                return item
        raise KeyError(name)

    def to_dict(self) -> dict[str, object]:
        return {
            "checks": {item.name: item.value for item in self.checks},
            "details": {item.name: item.to_dict() for item in self.checks},
            "aggregate_score": self.aggregate_score,
            "max_score": self.max_score,
            "verdict": self.verdict,
            "nakshatra_a": nakshatra_info(self.nakshatra_a).to_dict(),
            "nakshatra_b": nakshatra_info(self.nakshatra_b).to_dict(),
            "placeholder": self.placeholder,
        }


def verdict_for(score: int, thresholds: VerdictThresholds | None = None) -> str:
    limits = thresholds or VerdictThresholds()
    if score >= limits.excellent:
        return "Excellent compatibility"
    if score >= limits.good:
        return "Good compatibility"
    if score >= limits.average:
        return "Average compatibility"
    return "Low compatibility"


def _flag(name: str, passed: bool, detail: str) -> CompatibilityCheck:
    points = CHECK_POINTS[name]
    return CompatibilityCheck(
        name=name,
        value=passed,
        points=points if passed else 0,
        max_points=points,
        detail=detail,
    )


def _dina(nak_a: int, nak_b: int) -> CompatibilityCheck:
    count = (nak_b - nak_a) % NAKSHATRA_COUNT + 1
    tara = count % 9
    return _flag("dina", tara in _GOOD_TARAS, f"tara count {count} (remainder {tara})")


def _gana(nak_a: int, nak_b: int) -> CompatibilityCheck:
    gana_a = GANA_BY_NAKSHATRA[nak_a]
    gana_b = GANA_BY_NAKSHATRA[nak_b]
    passed = gana_a == gana_b or {gana_a, gana_b} == {"Deva", "Manushya"}
    return _flag("gana", passed, f"{gana_a} / {gana_b}")


def _rasi(moon_a: float, moon_b: float) -> CompatibilityCheck:
    distance = sign_distance(sign_index(moon_a), sign_index(moon_b))
    points = max(CHECK_POINTS["rasi"] - distance, 0)
    return CompatibilityCheck(
        name="rasi",
        value=points,
        points=points,
        max_points=CHECK_POINTS["rasi"],
        detail=f"moon signs {distance} apart",
    )


def score_compatibility(
    chart_a: ChartSnapshot,
    chart_b: ChartSnapshot,
    *,
    thresholds: VerdictThresholds | None = None,
) -> CompatibilityResult:
    """Score ``chart_a`` against ``chart_b`` using Moon and Venus placements."""

    nak_a = nakshatra_index(chart_a.moon_longitude)
    nak_b = nakshatra_index(chart_b.moon_longitude)
    gap = abs(nak_a - nak_b)
    venus_a = sign_index(chart_a.longitude("Venus"))
    venus_b = sign_index(chart_b.longitude("Venus"))

    checks = (
        _flag("same_nakshatra", nak_a == nak_b, f"{nak_a} / {nak_b}"),
        _flag("adjacent_nakshatra", gap in (1, NAKSHATRA_COUNT - 1), f"gap {gap}"),
        _dina(nak_a, nak_b),
        _gana(nak_a, nak_b),
        _rasi(chart_a.moon_longitude, chart_b.moon_longitude),
        _flag("venus_sign", venus_a == venus_b, f"signs {venus_a} / {venus_b}"),
    )
    score = sum(item.points for item in checks)
    return CompatibilityResult(
        checks=checks,
        aggregate_score=score,
        max_score=MAX_SCORE,
        verdict=verdict_for(score, thresholds),
        nakshatra_a=nak_a,
        nakshatra_b=nak_b,
        placeholder=chart_a.placeholder or chart_b.placeholder,
    )

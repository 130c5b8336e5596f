"""Request bodies accepted by the Vedic HTTP endpoints."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.time import BirthMoment, TimeValue
from ..ephemeris.provider import PlanetPosition
from ..utils.angles import norm360, shortest_separation
from ..vedic.chart import CHART_BODIES, NODE_TOLERANCE_DEG, ChartSnapshot, ketu_from

__all__ = [
    "BhuktiRequest",
    "BirthPayload",
    "ChartPayload",
    "CurrentDashaRequest",
    "MatchRequest",
    "PratyantarRequest",
]


class BirthPayload(BaseModel):
    """Local civil birth time, fixed UTC offset and coordinates."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["birth"] = "birth"
    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)
    hour: int = Field(ge=0, le=23)
    minute: int = Field(ge=0, le=59)
    second: float = Field(default=0.0, ge=0.0, lt=60.0)
    utc_offset_hours: float = Field(ge=-14.0, le=14.0)
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    place: str | None = None

    def to_birth(self) -> BirthMoment:
        return BirthMoment(
            year=self.year,
            month=self.month,
            day=self.day,
            hour=self.hour,
            minute=self.minute,
            second=self.second,
            utc_offset_hours=self.utc_offset_hours,
            latitude=self.latitude,
            longitude=self.longitude,
        )


class ChartPayload(BaseModel):
    """A chart computed elsewhere: a Julian day plus sidereal longitudes."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["chart"] = "chart"
    julian_day: float
    longitudes: dict[str, float]

    @field_validator("longitudes")
    @classmethod
    def _require_bodies(cls, value: dict[str, float]) -> dict[str, float]:
        missing = [body for body in CHART_BODIES if body != "Ketu" and body not in value]
        if missing:
            raise ValueError(f"missing longitudes for {', '.join(missing)}")
        ketu = value.get("Ketu")
        if ketu is None:
            return value
        if shortest_separation(value["Rahu"] + 180.0, ketu) > NODE_TOLERANCE_DEG:
            raise ValueError("Ketu must lie opposite Rahu; omit it to have it derived")
        return value

    def to_snapshot(self) -> ChartSnapshot:
        positions = {
            body: PlanetPosition(
                body=body,
                longitude=norm360(self.longitudes[body]),
                latitude=0.0,
                distance=1.0,
                speed=0.0,
            )
            for body in CHART_BODIES
            if body != "Ketu"
        }
        positions["Ketu"] = ketu_from(positions["Rahu"])
        return ChartSnapshot(
            time=TimeValue(self.julian_day),
            positions=positions,
            provider_id="client",
        )


class BhuktiRequest(BirthPayload):
    mahadasha_index: int = Field(ge=0)


class PratyantarRequest(BhuktiRequest):
    bhukti_index: int = Field(ge=0, le=8)


class CurrentDashaRequest(BirthPayload):
    target: datetime | None = None

    @field_validator("target", mode="before")
    @classmethod
    def _coerce_target(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class MatchRequest(BaseModel):
    person_a: Union[BirthPayload, ChartPayload]
    person_b: Union[BirthPayload, ChartPayload]

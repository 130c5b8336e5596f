"""Civil time to continuous time conversion.

Every downstream calculation works on a single real-valued day number: the
Julian day in Universal Time.  :class:`BirthMoment` captures the civil input
(local date, local clock time, fixed UTC offset and geographic coordinates)
and :func:`to_time_value` converts it exactly once into a :class:`TimeValue`.
The conversion is a pure Gregorian-calendar computation so that identical
inputs always yield bit-identical day numbers regardless of which ephemeris
backend is installed.
"""

from __future__ import annotations

import calendar
import datetime as _dt
import math
from dataclasses import dataclass
from typing import Final

from ..errors import ComputationRangeError, ValidationError

__all__ = [
    "BirthMoment",
    "J2000",
    "MAX_JULIAN_DAY",
    "MIN_JULIAN_DAY",
    "SECONDS_PER_DAY",
    "TimeValue",
    "from_julian_day",
    "julian_day",
    "to_time_value",
]


SECONDS_PER_DAY: Final[float] = 86_400.0
J2000: Final[float] = 2_451_545.0
_J2000_EPOCH: Final[_dt.datetime] = _dt.datetime(2000, 1, 1, 12, 0, tzinfo=_dt.UTC)


@dataclass(frozen=True, order=True)
class TimeValue:
    """Continuous astronomical time expressed as a Julian day (UT)."""

    julian_day: float

    def __float__(self) -> float:
        return self.julian_day

    def plus_days(self, days: float) -> TimeValue:
        """Return a new :class:`TimeValue` shifted by ``days``."""

        return TimeValue(self.julian_day + float(days))

    def to_datetime(self) -> _dt.datetime:
        """Return the UTC :class:`datetime` corresponding to this value."""

        return from_julian_day(self.julian_day)


@dataclass(frozen=True)
class BirthMoment:
    """Local civil birth time with a fixed UTC offset and a location."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    utc_offset_hours: float
    latitude: float
    longitude: float
    second: float = 0.0

    def validate(self) -> BirthMoment:
        """Raise :class:`ValidationError` when any field is out of range."""

        problems: dict[str, str] = {}
        if not 1 <= self.month <= 12:
            problems["month"] = "month must be between 1 and 12"
        elif not 1 <= self.year <= 9999:
            problems["year"] = "year must be between 1 and 9999"
        else:
            last_day = calendar.monthrange(self.year, self.month)[1]
            if not 1 <= self.day <= last_day:
                problems["day"] = f"day must be between 1 and {last_day}"
        if not 0 <= self.hour < 24:
            problems["hour"] = "hour must be in [0, 24)"
        if not 0 <= self.minute < 60:
            problems["minute"] = "minute must be in [0, 60)"
        if not (math.isfinite(self.second) and 0.0 <= self.second < 60.0):
            problems["second"] = "second must be in [0, 60)"
        if not (math.isfinite(self.utc_offset_hours) and -14.0 <= self.utc_offset_hours <= 14.0):
            problems["utc_offset_hours"] = "utc offset must be within [-14, 14] hours"
        if not (math.isfinite(self.latitude) and -90.0 <= self.latitude <= 90.0):
            problems["latitude"] = "latitude must be between -90 and 90"
        if not (math.isfinite(self.longitude) and -180.0 <= self.longitude <= 180.0):
            problems["longitude"] = "longitude must be between -180 and 180"
        if problems:
            raise ValidationError("invalid birth moment", details=problems)
        return self

    @classmethod
    def from_datetime(
        cls, moment: _dt.datetime, latitude: float, longitude: float
    ) -> BirthMoment:
        """Build a :class:`BirthMoment` from a timezone-aware ``moment``."""

        offset = moment.utcoffset()
        if offset is None:
            raise ValidationError("datetime must be timezone-aware")
        return cls(
            year=moment.year,
            month=moment.month,
            day=moment.day,
            hour=moment.hour,
            minute=moment.minute,
            second=moment.second + moment.microsecond / 1e6,
            utc_offset_hours=offset.total_seconds() / 3600.0,
            latitude=float(latitude),
            longitude=float(longitude),
        )

    def with_location(self, latitude: float, longitude: float) -> BirthMoment:
        """Return a copy placed at ``latitude``/``longitude``."""

        return BirthMoment(
            year=self.year,
            month=self.month,
            day=self.day,
            hour=self.hour,
            minute=self.minute,
            second=self.second,
            utc_offset_hours=self.utc_offset_hours,
            latitude=float(latitude),
            longitude=float(longitude),
        )

    def local_date(self) -> _dt.date:
        return _dt.date(self.year, self.month, self.day)

    def utc_datetime(self) -> _dt.datetime:
        """Return the birth instant as an aware UTC :class:`datetime`."""

        return to_time_value(self).to_datetime()


def julian_day(moment: _dt.datetime) -> float:
    """Return the Julian day for ``moment`` (naive values are taken as UTC)."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=_dt.UTC)
    moment = moment.astimezone(_dt.UTC)
    hours = (
        moment.hour
        + moment.minute / 60.0
        + (moment.second + moment.microsecond / 1e6) / 3600.0
    )
    return _gregorian_julian_day(moment.year, moment.month, moment.day, hours)


def _gregorian_julian_day(year: int, month: int, day: int, ut_hours: float) -> float:
    # Meeus, Astronomical Algorithms ch. 7; ut_hours may fall outside [0, 24).
    if month <= 2:
        year -= 1
        month += 12
    a = year // 100
    b = 2 - a + (a // 4)
    jd0 = math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + b - 1524.5
    return jd0 + ut_hours / 24.0


# Instants representable as a datetime: MIN_JULIAN_DAY <= jd < MAX_JULIAN_DAY.
MIN_JULIAN_DAY: Final[float] = _gregorian_julian_day(1, 1, 1, 0.0)
MAX_JULIAN_DAY: Final[float] = _gregorian_julian_day(9999, 12, 31, 24.0)


def from_julian_day(jd: float) -> _dt.datetime:
    """Convert a Julian day (UT) to an aware UTC :class:`datetime`."""

    value = float(jd)
    error = ComputationRangeError(
        f"julian day {value} is outside the supported calendar range",
        details={"julian_day": value},
    )
    if not MIN_JULIAN_DAY <= value < MAX_JULIAN_DAY:
        raise error
    try:
        return _J2000_EPOCH + _dt.timedelta(days=value - J2000)
    except OverflowError as exc:
        # Rounding to microseconds can still step past datetime.max.
        raise error from exc


def to_time_value(birth: BirthMoment) -> TimeValue:
    """Validate ``birth`` and convert it to a :class:`TimeValue`."""

    birth.validate()
    local_hours = birth.hour + birth.minute / 60.0 + birth.second / 3600.0
    ut_hours = local_hours - birth.utc_offset_hours
    jd = _gregorian_julian_day(birth.year, birth.month, birth.day, ut_hours)
    if not MIN_JULIAN_DAY <= jd < MAX_JULIAN_DAY:
        raise ValidationError(
            "birth instant falls outside years 1..9999 in UTC",
            details={"utc_offset_hours": "offset moves the instant out of range"},
        )
    return TimeValue(jd)

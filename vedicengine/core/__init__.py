"""Time conversion primitives."""

from __future__ import annotations

from .time import BirthMoment, TimeValue, from_julian_day, julian_day, to_time_value

__all__ = ["BirthMoment", "TimeValue", "from_julian_day", "julian_day", "to_time_value"]

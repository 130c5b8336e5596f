"""Swiss Ephemeris position provider with sidereal awareness."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar

from ..core.time import TimeValue
from ..errors import BackendUnavailable, ValidationError
from ..utils.angles import norm360
from .provider import BODY_CODES, HousePositions, PlanetPosition
from .swe import load_swe

LOG = logging.getLogger(__name__)

__all__ = [
    "HOUSE_ALIASES",
    "HOUSE_CODE_BY_NAME",
    "SUPPORTED_AYANAMSAS",
    "SwissEphemerisProvider",
    "resolve_house_code",
]


HOUSE_CODE_BY_NAME: Mapping[str, str] = {
    "placidus": "P",
    "koch": "K",
    "equal": "A",
    "whole_sign": "W",
    "porphyry": "O",
}

HOUSE_ALIASES: Mapping[str, str] = {
    "ws": "whole_sign",
    "wholesign": "whole_sign",
    "whole": "whole_sign",
    "w": "whole_sign",
}

_AYANAMSA_ATTRS: Mapping[str, str] = {
    "lahiri": "SIDM_LAHIRI",
    "raman": "SIDM_RAMAN",
    "krishnamurti": "SIDM_KRISHNAMURTI",
    "fagan_bradley": "SIDM_FAGAN_BRADLEY",
}

SUPPORTED_AYANAMSAS: tuple[str, ...] = tuple(_AYANAMSA_ATTRS)

_ENV_KEYS: tuple[str, ...] = ("SE_EPHE_PATH", "VEDICENGINE_EPHEMERIS_PATH")

# swisseph keeps the sidereal mode and ephemeris path in process-global state.
_SWE_LOCK = threading.Lock()


def resolve_house_code(name_or_code: str | None) -> tuple[str, str]:
    """Return the canonical name and Swiss code for ``name_or_code``."""

    token = (name_or_code or "").strip()
    if not token:
        return "placidus", HOUSE_CODE_BY_NAME["placidus"]
    lowered = token.lower()
    if len(token) == 1 and token.upper() in HOUSE_CODE_BY_NAME.values():
        code = token.upper()
        for name, mapped in HOUSE_CODE_BY_NAME.items():
            if mapped == code:
                return name, code
    canonical = HOUSE_ALIASES.get(lowered, lowered)
    if canonical in HOUSE_CODE_BY_NAME:
        return canonical, HOUSE_CODE_BY_NAME[canonical]
    raise ValidationError(
        f"Unsupported house system '{name_or_code}'. Valid options: "
        f"{sorted(HOUSE_CODE_BY_NAME)}",
        details={"house_system": name_or_code},
    )


def _ephemeris_path(explicit: str | os.PathLike[str] | None) -> str | None:
    candidates: list[str | os.PathLike[str]] = []
    if explicit:
        candidates.append(explicit)
    candidates.extend(os.environ[key] for key in _ENV_KEYS if os.environ.get(key))
    candidates.extend(
        (Path.home() / ".sweph", Path("/usr/share/sweph"), Path("/usr/share/libswisseph"))
    )
    for candidate in candidates:
        path = Path(candidate).expanduser()
        if path.is_dir():
            return str(path)
    return None


class SwissEphemerisProvider:
    """High level wrapper around :mod:`pyswisseph` with sane defaults.

    Construction fails with :class:`BackendUnavailable` when the extension
    module cannot be imported.  Individual calls that the backend rejects are
    reported the same way so callers can substitute placeholder data.
    """

    provider_id: ClassVar[str] = "swiss"
    placeholder: ClassVar[bool] = False

    def __init__(
        self,
        ephemeris_path: str | os.PathLike[str] | None = None,
        *,
        zodiac: str = "sidereal",
        ayanamsa: str = "lahiri",
    ) -> None:
        zodiac_key = zodiac.lower()
        if zodiac_key not in {"sidereal", "tropical"}:
            raise ValidationError(
                f"Unknown zodiac mode '{zodiac}'", details={"zodiac": zodiac}
            )
        ayanamsa_key = ayanamsa.lower()
        if zodiac_key == "sidereal" and ayanamsa_key not in _AYANAMSA_ATTRS:
            raise ValidationError(
                f"Unsupported ayanamsa '{ayanamsa}'. Supported options: "
                f"{', '.join(SUPPORTED_AYANAMSAS)}",
                details={"ayanamsa": ayanamsa},
            )

        swe = load_swe()
        self.zodiac = zodiac_key
        self.ayanamsa = ayanamsa_key if zodiac_key == "sidereal" else None
        self._sidereal_mode: int | None = (
            int(getattr(swe, _AYANAMSA_ATTRS[ayanamsa_key])) if self.ayanamsa else None
        )
        self._calc_flags = swe.FLG_SWIEPH | swe.FLG_SPEED
        self._fallback_flags = swe.FLG_MOSEPH | swe.FLG_SPEED
        if self._sidereal_mode is not None:
            self._calc_flags |= swe.FLG_SIDEREAL
            self._fallback_flags |= swe.FLG_SIDEREAL
        self.ephemeris_path = _ephemeris_path(ephemeris_path)
        if self.ephemeris_path:
            with _SWE_LOCK:
                swe.set_ephe_path(self.ephemeris_path)

    def _apply_sidereal_mode(self, swe: Any) -> None:
        if self._sidereal_mode is not None:
            swe.set_sid_mode(self._sidereal_mode, 0.0, 0.0)

    def _calc(self, swe: Any, jd_ut: float, code: int) -> tuple[float, ...]:
        try:
            values, ret_flag = swe.calc_ut(jd_ut, code, self._calc_flags)
        except Exception as exc:
            # Missing .se1 files: retry with the analytical Moshier ephemeris.
            LOG.debug("swiss ephemeris files unavailable, using Moshier: %s", exc)
            values, ret_flag = swe.calc_ut(jd_ut, code, self._fallback_flags)
        if ret_flag < 0:
            raise RuntimeError(f"Swiss ephemeris returned error code {ret_flag}")
        return tuple(values)

    def position(self, time: TimeValue, body: str) -> PlanetPosition:
        try:
            code = BODY_CODES[body]
        except KeyError as exc:
            raise ValidationError(
                f"unsupported body '{body}'", details={"body": body}
            ) from exc
        swe = load_swe()
        try:
            with _SWE_LOCK:
                self._apply_sidereal_mode(swe)
                lon, lat, dist, speed_lon, _, _ = self._calc(swe, time.julian_day, code)
        except Exception as exc:
            raise BackendUnavailable(
                f"Swiss ephemeris failed for {body} at JD {time.julian_day}",
                details={"body": body, "julian_day": time.julian_day, "reason": str(exc)},
            ) from exc
        return PlanetPosition(
            body=body,
            longitude=norm360(lon),
            latitude=lat,
            distance=dist,
            speed=speed_lon,
        )

    def houses(
        self,
        time: TimeValue,
        latitude: float,
        longitude: float,
        system: str,
    ) -> HousePositions:
        name, code = resolve_house_code(system)
        swe = load_swe()
        try:
            with _SWE_LOCK:
                self._apply_sidereal_mode(swe)
                cusps, angles = swe.houses_ex(
                    time.julian_day,
                    latitude,
                    longitude,
                    code.encode("ascii"),
                    swe.FLG_SIDEREAL if self._sidereal_mode is not None else 0,
                )
        except Exception as exc:
            # Quadrant systems fail above the polar circles.
            raise BackendUnavailable(
                f"house system '{name}' could not be computed",
                details={"house_system": name, "latitude": latitude, "reason": str(exc)},
            ) from exc
        return HousePositions(
            system=name,
            cusps=tuple(norm360(c) for c in cusps[:12]),
            ascendant=norm360(angles[0]),
            midheaven=norm360(angles[1]),
        )

    def __repr__(self) -> str:
        return (
            f"SwissEphemerisProvider(zodiac={self.zodiac!r}, ayanamsa={self.ayanamsa!r}, "
            f"ephemeris_path={self.ephemeris_path!r})"
        )

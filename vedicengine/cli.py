"""Command line access to chart, dasha and compatibility computations."""

from __future__ import annotations

import argparse
import datetime as _dt
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from .boot.logging import configure_logging
from .config.settings import Settings, load_settings
from .core.time import BirthMoment
from .ephemeris.placeholder import PlaceholderProvider
from .errors import ValidationError, VedicEngineError
from .service import VedicEngine

__all__ = ["build_parser", "main"]


def _add_birth_arguments(parser: argparse.ArgumentParser, prefix: str = "") -> None:
    flag = f"--{prefix}-" if prefix else "--"
    label = f"{prefix.upper()} " if prefix else ""
    parser.add_argument(f"{flag}date", required=True, help=f"{label}local birth date YYYY-MM-DD")
    parser.add_argument(f"{flag}time", required=True, help=f"{label}local birth time HH:MM[:SS]")
    parser.add_argument(
        f"{flag}tz", type=float, required=True, help=f"{label}UTC offset in hours, e.g. 5.5"
    )
    parser.add_argument(f"{flag}lat", type=float, default=0.0, help=f"{label}latitude")
    parser.add_argument(f"{flag}lon", type=float, default=0.0, help=f"{label}longitude")
    parser.add_argument(f"{flag}place", default=None, help=f"{label}place name to look up")


def _birth_from_args(args: argparse.Namespace, engine: VedicEngine, prefix: str = "") -> BirthMoment:
    key = f"{prefix}_" if prefix else ""
    raw_date = getattr(args, f"{key}date")
    raw_time = getattr(args, f"{key}time")
    try:
        day = _dt.date.fromisoformat(raw_date)
        clock = _dt.time.fromisoformat(raw_time)
    except ValueError as exc:
        raise ValidationError(
            f"invalid date/time: {raw_date} {raw_time}",
            details={"date": raw_date, "time": raw_time},
        ) from exc
    birth = BirthMoment(
        year=day.year,
        month=day.month,
        day=day.day,
        hour=clock.hour,
        minute=clock.minute,
        second=clock.second + clock.microsecond / 1e6,
        utc_offset_hours=getattr(args, f"{key}tz"),
        latitude=getattr(args, f"{key}lat"),
        longitude=getattr(args, f"{key}lon"),
    )
    place_name = getattr(args, f"{key}place")
    if place_name:
        place = engine.places.resolve(place_name)
        birth = birth.with_location(place.latitude, place.longitude)
    return birth


def _engine_from_args(args: argparse.Namespace) -> VedicEngine:
    settings = load_settings(Path(args.settings)) if args.settings else Settings()
    provider = PlaceholderProvider(reason="cli") if args.placeholder else None
    return VedicEngine(provider, settings)


def _cmd_chart(args: argparse.Namespace, engine: VedicEngine) -> object:
    return engine.generate_chart(_birth_from_args(args, engine)).to_dict()


def _cmd_dasha(args: argparse.Namespace, engine: VedicEngine) -> object:
    birth = _birth_from_args(args, engine)
    if args.maha is None:
        return engine.mahadasha_sequence(birth).to_dict()
    if args.bhukti is None:
        periods = engine.bhuktis(birth, args.maha)
    else:
        periods = engine.pratyantars(birth, args.maha, args.bhukti)
    return [period.to_dict() for period in periods]


def _cmd_current(args: argparse.Namespace, engine: VedicEngine) -> object:
    target = None
    if args.target:
        try:
            target = _dt.datetime.fromisoformat(args.target.replace("Z", "+00:00"))
        except ValueError as exc:
            raise ValidationError(
                f"invalid target: {args.target}", details={"target": args.target}
            ) from exc
        if target.tzinfo is None:
            target = target.replace(tzinfo=_dt.UTC)
    return engine.current_dasha(_birth_from_args(args, engine), target).to_dict()


def _cmd_match(args: argparse.Namespace, engine: VedicEngine) -> object:
    person_a = _birth_from_args(args, engine, "a")
    person_b = _birth_from_args(args, engine, "b")
    return engine.match(person_a, person_b).to_dict()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vedicengine", description="Vedic chart engine CLI")
    parser.add_argument("--settings", help="Path to a settings.yaml file")
    parser.add_argument(
        "--placeholder",
        action="store_true",
        help="Use deterministic placeholder positions instead of Swiss Ephemeris",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    chart = sub.add_parser("chart", help="Generate a full chart")
    _add_birth_arguments(chart)
    chart.set_defaults(func=_cmd_chart)

    dasha = sub.add_parser("dasha", help="List Mahadashas, Bhuktis or Pratyantars")
    _add_birth_arguments(dasha)
    dasha.add_argument("--maha", type=int, default=None, help="Mahadasha index for Bhuktis")
    dasha.add_argument("--bhukti", type=int, default=None, help="Bhukti index for Pratyantars")
    dasha.set_defaults(func=_cmd_dasha)

    current = sub.add_parser("current", help="Show the running dasha periods")
    _add_birth_arguments(current)
    current.add_argument("--target", default=None, help="ISO-8601 instant (default: now)")
    current.set_defaults(func=_cmd_current)

    match = sub.add_parser("match", help="Score compatibility of two births")
    _add_birth_arguments(match, "a")
    _add_birth_arguments(match, "b")
    match.set_defaults(func=_cmd_match)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if getattr(args, "bhukti", None) is not None and args.maha is None:
        parser.error("--bhukti requires --maha")
    try:
        engine = _engine_from_args(args)
        payload = args.func(args, engine)
    except VedicEngineError as exc:
        print(json.dumps(exc.as_dict(), indent=2), file=sys.stderr)
        return 2
    print(json.dumps(payload, indent=2))
    return 0

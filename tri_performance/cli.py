from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import FormatError, ValidationError
from .io.time_codec import format_time, parse_time
from .metrics.zones import (
    bike_power_zones_from_test,
    heart_rate_zones,
    run_pace_zones,
    run_threshold_pace,
    swim_pace_zones,
    swim_threshold_pace,
)
from .models.athlete_profile import AthleteProfile, load_athlete_profile
from .models.race_types import RACE_TYPE_NAMES, race_distances
from .models.types import (
    BikeLeg,
    EnvironmentConditions,
    OpenWaterType,
    RaceSegment,
    RaceType,
    RunLeg,
    SwellLevel,
    SwimLeg,
    WaterType,
)
from .prediction.bike import predict_bike_race, single_segment_course
from .prediction.splits import calculate_race_splits
from .prediction.triathlon import predict_triathlon
from .reporting.tables import segments_to_frame, triathlon_to_frame, zones_to_frame

logger = logging.getLogger(__name__)

RACE_CHOICES = [r.value for r in RaceType]


def _segment_arg(value: str) -> RaceSegment:
    """Parse ``KM:GRADIENT`` (gradient in %, may be negative)."""
    try:
        distance, gradient = value.split(":", 1)
        return RaceSegment(distance_km=float(distance), gradient_pct=float(gradient))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Segment must look like KM:GRADIENT, got '{value}'")


def _print_frame(title: str, df) -> None:
    print(title)
    print(df.to_string(index=False))


def _run_zones(args: argparse.Namespace) -> None:
    if args.sport == "swim":
        if args.threshold_pace:
            threshold = parse_time(args.threshold_pace)
        else:
            threshold = swim_threshold_pace(parse_time(args.test_time))
        zones = swim_pace_zones(threshold)
        title = f"Swim pace zones (threshold {format_time(threshold)}/100m)"
    elif args.sport == "run":
        if args.threshold_pace:
            threshold = parse_time(args.threshold_pace)
        else:
            threshold = run_threshold_pace(args.test_distance, parse_time(args.test_time))
        zones = run_pace_zones(threshold)
        title = f"Run pace zones (threshold {format_time(threshold)}/km)"
    elif args.sport == "bike":
        zones = bike_power_zones_from_test(args.test_power, args.test_minutes)
        title = f"Bike power zones ({args.test_minutes}min test at {args.test_power:g}W)"
    else:
        zones = heart_rate_zones(args.max_hr, args.resting_hr)
        title = f"Heart rate zones (max {args.max_hr:g}, resting {args.resting_hr:g})"
    _print_frame(title, zones_to_frame(zones)[["zone", "name", "range", "description"]])


def _athlete_from_args(args: argparse.Namespace) -> AthleteProfile:
    if args.profile:
        return load_athlete_profile(Path(args.profile))
    if args.ftp is None or args.weight is None or args.bike_weight is None:
        raise ValidationError("Provide --profile or all of --ftp, --weight and --bike-weight")
    return AthleteProfile(ftp_watts=args.ftp, athlete_weight_kg=args.weight, bike_weight_kg=args.bike_weight)


def _run_bike(args: argparse.Namespace) -> None:
    athlete = _athlete_from_args(args)
    if args.segment:
        segments = args.segment
    else:
        segments = single_segment_course(args.distance, args.elevation)
    conditions = EnvironmentConditions(
        wind_speed_ms=args.wind,
        temperature_c=args.temperature,
        cda_m2=args.cda,
        crr=args.crr,
        altitude_m=args.altitude,
    )
    prediction = predict_bike_race(athlete, args.pct, segments, conditions)
    _print_frame("Segments", segments_to_frame(prediction).drop(columns=["time_s"]))
    print(f"Total: {format_time(prediction.total_time_s)} ({prediction.average_speed_kmh:.1f} km/h avg)")
    for factor in prediction.factors:
        print(f"  - {factor}")


def _run_triathlon(args: argparse.Namespace) -> None:
    distances = race_distances(RaceType(args.race))
    swim = SwimLeg(
        base_time_s=parse_time(args.swim_test_time),
        base_distance_m=args.swim_test_distance,
        race_distance_m=args.swim_distance or distances.swim_m,
        water=WaterType.OPEN_WATER if args.open_water else WaterType.POOL,
        open_water_type=OpenWaterType.SEA if args.sea else OpenWaterType.LAKE,
        swell=SwellLevel(args.swell),
        wetsuit=args.wetsuit,
    )
    bike = BikeLeg(
        ftp_watts=args.ftp,
        ftp_percentage=args.pct,
        athlete_weight_kg=args.weight,
        bike_weight_kg=args.bike_weight,
        distance_km=args.bike_distance or distances.bike_km,
        elevation_m=args.elevation,
        cda_m2=args.cda,
        wind_speed_ms=args.wind,
        temperature_c=args.temperature,
    )
    run = RunLeg(
        base_time_s=parse_time(args.run_test_time),
        base_distance_km=args.run_test_distance,
        race_distance_km=args.run_distance or distances.run_km,
        run_zone=args.run_zone,
    )
    prediction = predict_triathlon(swim, bike, run, t1=args.t1, t2=args.t2)
    _print_frame(
        f"{RACE_TYPE_NAMES[prediction.race_type]} prediction",
        triathlon_to_frame(prediction)[["leg", "time", "elapsed"]],
    )
    print(f"Total: {format_time(prediction.total_time_s)}")
    for label, leg in (("Swim", prediction.swim), ("Bike", prediction.bike), ("Run", prediction.run)):
        print(f"{label}:")
        for factor in leg.factors:
            print(f"  - {factor}")


def _run_splits(args: argparse.Namespace) -> None:
    splits = calculate_race_splits(args.race, args.swim, args.bike, args.run, t1=args.t1, t2=args.t2)
    print(f"{RACE_TYPE_NAMES[splits.race_type]} total: {format_time(splits.total_time_s)}")
    print(f"  Swim {format_time(splits.swim_s)} ({splits.swim_pace})")
    print(f"  Bike {format_time(splits.bike_s)} ({splits.bike_speed})")
    print(f"  Run  {format_time(splits.run_s)} ({splits.run_pace})")


def _add_env_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--cda", type=float, help="Drag area CdA in m^2 (default: 0.32)")
    parser.add_argument("--wind", type=float, help="Wind in m/s, headwind positive (default: 0)")
    parser.add_argument("--temperature", type=float, help="Air temperature in C (default: 25)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Training zones and race time predictions for swim, bike and run")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    zones = sub.add_parser("zones", help="Training zones from a field test")
    zsub = zones.add_subparsers(dest="sport", required=True)
    zswim = zsub.add_parser("swim", help="Swim pace zones from a 400m test")
    zswim.add_argument("--test-time", help="400m test time (MM:SS)")
    zswim.add_argument("--threshold-pace", help="Threshold pace per 100m (MM:SS), instead of a test")
    zrun = zsub.add_parser("run", help="Run pace zones from a 3km or 5km test")
    zrun.add_argument("--test-distance", type=float, default=5.0, help="Test distance in km (default: 5)")
    zrun.add_argument("--test-time", help="Test time (MM:SS or H:MM:SS)")
    zrun.add_argument("--threshold-pace", help="Threshold pace per km (MM:SS), instead of a test")
    zbike = zsub.add_parser("bike", help="Bike power zones from an FTP test")
    zbike.add_argument("--test-power", type=float, required=True, help="Average power of the test in watts")
    zbike.add_argument("--test-minutes", type=int, choices=[20, 60], default=60, help="Test length (default: 60)")
    zhr = zsub.add_parser("hr", help="Karvonen heart rate zones")
    zhr.add_argument("--max-hr", type=float, required=True)
    zhr.add_argument("--resting-hr", type=float, required=True)

    bike = sub.add_parser("bike", help="Bike race time at constant power")
    bike.add_argument("--profile", help="Athlete profile JSON (ftp_watts, athlete_weight_kg, bike_weight_kg)")
    bike.add_argument("--ftp", type=float)
    bike.add_argument("--weight", type=float, help="Athlete weight in kg")
    bike.add_argument("--bike-weight", type=float, help="Bike weight in kg")
    bike.add_argument("--pct", type=float, required=True, help="Share of FTP to hold, 0-100")
    bike.add_argument("--segment", type=_segment_arg, action="append", help="KM:GRADIENT, repeat in course order")
    bike.add_argument("--distance", type=float, help="Course distance in km when no segments are given")
    bike.add_argument("--elevation", type=float, default=0.0, help="Total climbing in m (default: 0)")
    bike.add_argument("--crr", type=float, help="Rolling resistance coefficient (default: 0.004)")
    bike.add_argument("--altitude", type=float, help="Course altitude in m (default: 0)")
    _add_env_args(bike)

    tri = sub.add_parser("triathlon", help="Full triathlon prediction")
    tri.add_argument("--race", choices=RACE_CHOICES, required=True, help="Race type for default distances")
    tri.add_argument("--swim-test-time", required=True, help="Swim test time (MM:SS)")
    tri.add_argument("--swim-test-distance", type=float, default=400.0, help="Swim test distance in m (default: 400)")
    tri.add_argument("--swim-distance", type=float, help="Race swim distance in m")
    tri.add_argument("--open-water", action="store_true")
    tri.add_argument("--sea", action="store_true", help="Open water swim is in the sea (otherwise lake)")
    tri.add_argument("--swell", choices=[s.value for s in SwellLevel], default=SwellLevel.NONE.value)
    tri.add_argument("--wetsuit", action="store_true")
    tri.add_argument("--ftp", type=float, required=True)
    tri.add_argument("--pct", type=float, required=True, help="Share of FTP to hold on the bike, 0-100")
    tri.add_argument("--weight", type=float, required=True, help="Athlete weight in kg")
    tri.add_argument("--bike-weight", type=float, required=True, help="Bike weight in kg")
    tri.add_argument("--bike-distance", type=float, help="Race bike distance in km")
    tri.add_argument("--elevation", type=float, default=0.0, help="Bike course climbing in m (default: 0)")
    _add_env_args(tri)
    tri.add_argument("--run-test-time", required=True, help="Recent run time (MM:SS or H:MM:SS)")
    tri.add_argument("--run-test-distance", type=float, default=5.0, help="Distance of that run in km (default: 5)")
    tri.add_argument("--run-distance", type=float, help="Race run distance in km")
    tri.add_argument("--run-zone", type=int, choices=[1, 2, 3, 4, 5], default=4, help="Run intensity zone (default: 4)")
    tri.add_argument("--t1", help="T1 time (MM:SS); race default when omitted")
    tri.add_argument("--t2", help="T2 time (MM:SS); race default when omitted")

    splits = sub.add_parser("splits", help="Total time and paces from leg times")
    splits.add_argument("--race", choices=RACE_CHOICES, required=True)
    splits.add_argument("--swim", required=True, help="Swim time (MM:SS or H:MM:SS)")
    splits.add_argument("--bike", required=True, help="Bike time (H:MM:SS, or a bare number of hours)")
    splits.add_argument("--run", required=True, help="Run time (MM:SS or H:MM:SS)")
    splits.add_argument("--t1", help="T1 time (MM:SS)")
    splits.add_argument("--t2", help="T2 time (MM:SS)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "zones": _run_zones,
        "bike": _run_bike,
        "triathlon": _run_triathlon,
        "splits": _run_splits,
    }
    try:
        handlers[args.command](args)
    except (FormatError, ValidationError) as e:
        logger.debug("Rejected input for %s", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

from typing import Optional

from ..errors import ValidationError
from ..io.time_codec import (
    format_run_pace,
    format_swim_pace,
    normalize_hours_shorthand,
    parse_time,
)
from ..models.race_types import race_distances
from ..models.types import RaceSplits, RaceType


def _required_leg(text: Optional[str], label: str) -> int:
    if text is None or not str(text).strip():
        raise ValidationError(f"Please enter {label} time")
    seconds = parse_time(text)
    if seconds <= 0:
        raise ValidationError(f"{label} time must be greater than 0")
    return seconds


def _optional_leg(text: Optional[str]) -> int:
    if text is None or not str(text).strip():
        return 0
    return parse_time(text)


def calculate_race_splits(
    race_type: RaceType,
    swim: str,
    bike: str,
    run: str,
    t1: Optional[str] = None,
    t2: Optional[str] = None,
) -> RaceSplits:
    """Total race time and per-leg paces from entered leg durations.

    Swim, bike and run are required; blank transitions count as zero. The
    bike field accepts a bare number of hours.
    """
    race_type = RaceType(race_type)
    distances = race_distances(race_type)

    swim_s = _required_leg(swim, "Swim")
    bike_s = _required_leg(normalize_hours_shorthand(bike) if bike is not None else None, "Bike")
    run_s = _required_leg(run, "Run")
    t1_s = _optional_leg(t1)
    t2_s = _optional_leg(t2)

    kmh = distances.bike_km / (bike_s / 3600.0)
    return RaceSplits(
        race_type=race_type,
        swim_s=swim_s,
        t1_s=t1_s,
        bike_s=bike_s,
        t2_s=t2_s,
        run_s=run_s,
        total_time_s=swim_s + t1_s + bike_s + t2_s + run_s,
        swim_pace=format_swim_pace(swim_s / distances.swim_m * 100.0),
        bike_speed=f"{kmh:.1f} km/h",
        run_pace=format_run_pace(run_s / distances.run_km),
    )

"""Full triathlon finishing-time estimate.

swim -> T1 -> bike -> T2 -> run. The swim scales a test swim linearly and
applies open-water adjustments; the bike reuses the bike race predictor;
the run scales a recent run with Riegel's formula and then applies a
post-bike fatigue multiplier driven by race length and the power zone the
bike leg was ridden in.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Tuple, Union

from .. import config
from ..errors import ValidationError
from ..io.time_codec import format_run_pace, format_time, parse_time, round_half_up
from ..metrics.zones import intensity_zone_index
from ..models.athlete_profile import AthleteProfile
from ..models.race_types import classify_race_type, transition_defaults
from ..models.types import (
    BikeLeg,
    EnvironmentConditions,
    LegResult,
    OpenWaterType,
    RacePrediction,
    RaceSegment,
    RaceType,
    RunLeg,
    SwellLevel,
    SwimLeg,
    TriathlonPrediction,
    WaterType,
)
from .bike import predict_bike_race, race_profile_stats, single_segment_course, target_power, validate_race_inputs

logger = logging.getLogger(__name__)

TransitionInput = Union[None, str, int, float]

OPEN_WATER_FACTOR = 1.05
SEA_FACTOR = 1.03
SWELL_FACTORS: Dict[SwellLevel, float] = {
    SwellLevel.NONE: 1.0,
    SwellLevel.LIGHT: 1.02,
    SwellLevel.MODERATE: 1.05,
}
WETSUIT_FACTOR = 0.95

# Pace multiplier relative to threshold (zone 4) for the chosen run zone
RUN_ZONE_PACE_FACTORS: Dict[int, Tuple[float, str]] = {
    1: (1.35, "Easy/Recovery"),
    2: (1.20, "Endurance"),
    3: (1.10, "Marathon Pace"),
    4: (1.00, "Threshold"),
    5: (0.94, "VO2 Max"),
}

# Post-bike run slowdown at the reference bike effort (zone 3), per race length
RUN_FATIGUE_BASE: Dict[RaceType, float] = {
    RaceType.SPRINT: 0.02,
    RaceType.OLYMPIC: 0.04,
    RaceType.HALF: 0.06,
    RaceType.FULL: 0.10,
}

# Scales the base slowdown by how hard the bike was ridden (power zone 1-7)
BIKE_ZONE_FATIGUE_SCALE: Dict[int, float] = {
    1: 0.50,
    2: 0.75,
    3: 1.00,
    4: 1.25,
    5: 1.50,
    6: 1.75,
    7: 2.00,
}


def _require_positive(value: float, label: str) -> None:
    if value is None or not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{label} must be greater than 0, got {value}")


def _leg_result(seconds: float, factors: List[str]) -> LegResult:
    time_s = round_half_up(seconds)
    return LegResult(time_s=time_s, factors=factors, formatted=format_time(time_s))


# ---------------------------------------------------------------- swim

def _validate_swim(leg: SwimLeg) -> None:
    _require_positive(leg.base_time_s, "Swim base time")
    _require_positive(leg.base_distance_m, "Swim base distance")
    _require_positive(leg.race_distance_m, "Swim race distance")
    try:
        WaterType(leg.water)
        if leg.open_water_type is not None:
            OpenWaterType(leg.open_water_type)
        SwellLevel(leg.swell)
    except ValueError as e:
        raise ValidationError(f"Invalid swim conditions: {e}") from e


def predict_swim(leg: SwimLeg) -> LegResult:
    _validate_swim(leg)
    factors: List[str] = []

    pace_per_100m = leg.base_time_s / leg.base_distance_m * 100.0
    estimate = pace_per_100m * leg.race_distance_m / 100.0

    if WaterType(leg.water) is WaterType.OPEN_WATER:
        estimate *= OPEN_WATER_FACTOR
        factors.append("+5% open water")

        if leg.open_water_type is not None and OpenWaterType(leg.open_water_type) is OpenWaterType.SEA:
            estimate *= SEA_FACTOR
            factors.append("+3% sea")

            swell = SwellLevel(leg.swell)
            if swell is not SwellLevel.NONE:
                swell_factor = SWELL_FACTORS[swell]
                estimate *= swell_factor
                factors.append(f"+{round((swell_factor - 1) * 100)}% {swell.value} swell")

        if leg.wetsuit:
            estimate *= WETSUIT_FACTOR
            factors.append("-5% wetsuit")
    else:
        factors.append("Pool (no adjustments)")

    return _leg_result(estimate, factors)


# ---------------------------------------------------------------- bike

def _bike_inputs(leg: BikeLeg) -> Tuple[AthleteProfile, List[RaceSegment], EnvironmentConditions]:
    athlete = AthleteProfile(
        ftp_watts=leg.ftp_watts,
        athlete_weight_kg=leg.athlete_weight_kg,
        bike_weight_kg=leg.bike_weight_kg,
    )
    if leg.segments:
        segments = list(leg.segments)
    else:
        segments = single_segment_course(leg.distance_km, leg.elevation_m)
    conditions = EnvironmentConditions(
        cda_m2=leg.cda_m2,
        wind_speed_ms=leg.wind_speed_ms,
        temperature_c=leg.temperature_c,
    )
    return athlete, segments, conditions


def _validate_bike(leg: BikeLeg) -> None:
    athlete, segments, conditions = _bike_inputs(leg)
    validate_race_inputs(athlete, leg.ftp_percentage, segments, conditions.resolved())


def predict_bike_leg(leg: BikeLeg) -> Tuple[LegResult, RacePrediction]:
    athlete, segments, conditions = _bike_inputs(leg)
    prediction = predict_bike_race(athlete, leg.ftp_percentage, segments, conditions)

    _, climbing_m = race_profile_stats(segments)
    factors = list(prediction.factors)
    factors.insert(1, f"Elevation: {round(climbing_m)}m")
    return _leg_result(prediction.total_time_s, factors), prediction


def bike_intensity_zone(leg: BikeLeg) -> int:
    """Power zone (1-7) the bike leg is ridden in."""
    return intensity_zone_index(leg.ftp_watts, target_power(leg.ftp_watts, leg.ftp_percentage))


# ---------------------------------------------------------------- run

def riegel_time(
    base_time_s: float,
    base_distance: float,
    race_distance: float,
    exponent: float = config.RIEGEL_EXPONENT,
) -> float:
    """Riegel's endurance scaling: T2 = T1 * (D2 / D1) ** exponent."""
    _require_positive(base_time_s, "Base time")
    _require_positive(base_distance, "Base distance")
    _require_positive(race_distance, "Race distance")
    return base_time_s * (race_distance / base_distance) ** exponent


def fatigue_multiplier(race_type: RaceType, bike_zone: int) -> float:
    """Run slowdown after the bike; grows with race length and bike effort."""
    race_type = RaceType(race_type)
    if bike_zone not in BIKE_ZONE_FATIGUE_SCALE:
        raise ValidationError(f"Bike intensity zone must be 1-7, got {bike_zone}")
    return 1.0 + RUN_FATIGUE_BASE[race_type] * BIKE_ZONE_FATIGUE_SCALE[bike_zone]


def _validate_run(leg: RunLeg) -> None:
    _require_positive(leg.base_time_s, "Run base time")
    _require_positive(leg.base_distance_km, "Run base distance")
    _require_positive(leg.race_distance_km, "Run race distance")
    if leg.run_zone not in RUN_ZONE_PACE_FACTORS:
        raise ValidationError(f"Run zone must be 1-5, got {leg.run_zone}")


def predict_run(leg: RunLeg, race_type: RaceType, bike_zone: int = 3) -> LegResult:
    _validate_run(leg)
    factors: List[str] = []

    estimate = riegel_time(leg.base_time_s, leg.base_distance_km, leg.race_distance_km)

    zone_factor, zone_name = RUN_ZONE_PACE_FACTORS[leg.run_zone]
    estimate *= zone_factor
    if zone_factor != 1.0:
        sign = "+" if zone_factor > 1 else "-"
        factors.append(f"Zone {leg.run_zone} ({zone_name}): {sign}{round(abs(zone_factor - 1) * 100)}% pace")
    else:
        factors.append(f"Zone {leg.run_zone} ({zone_name})")

    fatigue = fatigue_multiplier(race_type, bike_zone)
    estimate *= fatigue

    factors.append(f"Base pace: {format_run_pace(leg.base_time_s / leg.base_distance_km)}")
    factors.append(f"Riegel formula (exponent {config.RIEGEL_EXPONENT:g})")
    factors.append(
        f"+{(fatigue - 1) * 100:.1f}% post-bike fatigue ({RaceType(race_type).value}, bike Z{bike_zone})"
    )
    return _leg_result(estimate, factors)


# ---------------------------------------------------------------- composite

def resolve_transition(value: TransitionInput, default_s: int) -> int:
    """Transition seconds: default when absent or blank, otherwise parsed strictly."""
    if value is None:
        return default_s
    if isinstance(value, str):
        if not value.strip():
            return default_s
        return parse_time(value)
    if isinstance(value, bool) or not math.isfinite(value) or value < 0:
        raise ValidationError(f"Transition time must be a non-negative number of seconds, got {value!r}")
    return round_half_up(value)


def predict_triathlon(
    swim: Optional[SwimLeg],
    bike: Optional[BikeLeg],
    run: Optional[RunLeg],
    t1: TransitionInput = None,
    t2: TransitionInput = None,
) -> TriathlonPrediction:
    missing = [name for name, leg in (("swim", swim), ("bike", bike), ("run", run)) if leg is None]
    if missing:
        raise ValidationError(f"Missing leg data: {', '.join(missing)}")

    _validate_swim(swim)
    _validate_bike(bike)
    _validate_run(run)
    race_type = classify_race_type(swim.race_distance_m)
    defaults = transition_defaults(race_type)
    t1_s = resolve_transition(t1, defaults.t1_s)
    t2_s = resolve_transition(t2, defaults.t2_s)

    bike_zone = bike_intensity_zone(bike)
    logger.debug("Triathlon: race type %s, bike zone Z%d, T1 %ds, T2 %ds", race_type.value, bike_zone, t1_s, t2_s)

    swim_result = predict_swim(swim)
    bike_result, bike_prediction = predict_bike_leg(bike)
    run_result = predict_run(run, race_type, bike_zone)

    total = swim_result.time_s + t1_s + bike_result.time_s + t2_s + run_result.time_s
    return TriathlonPrediction(
        race_type=race_type,
        swim=swim_result,
        t1_s=t1_s,
        bike=bike_result,
        t2_s=t2_s,
        run=run_result,
        total_time_s=total,
        bike_prediction=bike_prediction,
    )

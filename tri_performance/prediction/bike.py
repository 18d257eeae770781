from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .. import config
from ..errors import ValidationError
from ..models.athlete_profile import AthleteProfile
from ..models.types import EnvironmentConditions, RacePrediction, RaceSegment, SegmentResult
from .solver import solve_segment

logger = logging.getLogger(__name__)


def _is_finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def race_profile_stats(segments: Sequence[RaceSegment]) -> Tuple[float, float]:
    """Total distance (km) and total climbing (m); descents do not count."""
    total_distance = 0.0
    total_elevation = 0.0
    for segment in segments:
        total_distance += segment.distance_km
        gain = segment.elevation_change_m
        if gain > 0:
            total_elevation += gain
    return total_distance, total_elevation


def single_segment_course(distance_km: float, elevation_m: float = 0.0) -> List[RaceSegment]:
    """One segment at the average gradient implied by distance and elevation."""
    if not _is_finite(distance_km) or distance_km <= 0:
        raise ValidationError(f"Bike distance must be greater than 0, got {distance_km}")
    if not _is_finite(elevation_m) or elevation_m < 0:
        raise ValidationError(f"Elevation must be 0 or more, got {elevation_m}")
    gradient_pct = elevation_m / (distance_km * 1000.0) * 100.0
    return [RaceSegment(distance_km=distance_km, gradient_pct=gradient_pct)]


def target_power(ftp_watts: float, ftp_percentage: float) -> float:
    return ftp_watts * ftp_percentage / 100.0


def validate_race_inputs(
    athlete: AthleteProfile,
    ftp_percentage: float,
    segments: Sequence[RaceSegment],
    env: EnvironmentConditions,
) -> None:
    errors = []
    try:
        athlete.validate()
    except ValidationError as e:
        errors.append(str(e))
    if not _is_finite(ftp_percentage) or not (0 < ftp_percentage <= 100):
        errors.append(f"FTP percentage must be in (0, 100], got {ftp_percentage}")
    if not segments:
        errors.append("Race must have at least one segment")
    else:
        for idx, segment in enumerate(segments, start=1):
            if not _is_finite(segment.distance_km) or segment.distance_km <= 0:
                errors.append(f"Segment {idx} distance must be greater than 0")
            if not _is_finite(segment.gradient_pct):
                errors.append(f"Segment {idx} gradient must be a number")
        if sum(s.distance_km for s in segments if _is_finite(s.distance_km)) <= 0:
            errors.append("Total race distance must be greater than 0")
    if not _is_finite(env.cda_m2) or env.cda_m2 <= 0:
        errors.append(f"CdA must be greater than 0, got {env.cda_m2}")
    if not _is_finite(env.crr) or env.crr < 0:
        errors.append(f"Rolling resistance must be 0 or more, got {env.crr}")
    if not _is_finite(env.drivetrain_efficiency) or not (0 < env.drivetrain_efficiency <= 1):
        errors.append(f"Drivetrain efficiency must be in (0, 1], got {env.drivetrain_efficiency}")
    if not _is_finite(env.wind_speed_ms):
        errors.append(f"Wind speed must be a number, got {env.wind_speed_ms}")
    if not _is_finite(env.altitude_m):
        errors.append(f"Altitude must be a number, got {env.altitude_m}")
    if not _is_finite(env.temperature_c) or env.temperature_c <= -config.KELVIN_OFFSET:
        errors.append(f"Temperature must be above absolute zero, got {env.temperature_c}")
    if errors:
        raise ValidationError("; ".join(errors))


def describe_factors(
    ftp_watts: float,
    ftp_percentage: float,
    segments: Sequence[RaceSegment],
    env: EnvironmentConditions,
) -> List[str]:
    """Qualitative notes on what drives the prediction. Never fed back into the numbers."""
    factors = [f"{ftp_percentage:g}% of FTP ({round(target_power(ftp_watts, ftp_percentage))}W)"]

    total_distance, total_elevation = race_profile_stats(segments)
    steepest = max(s.gradient_pct for s in segments)
    if steepest >= config.CLIMB_GRADIENT_PCT or total_elevation / total_distance >= config.CLIMB_METERS_PER_KM:
        factors.append(f"Significant climbing ({round(total_elevation)}m, max {steepest:.1f}%)")
    if min(s.gradient_pct for s in segments) <= config.DESCENT_GRADIENT_PCT:
        factors.append("Fast descents")

    wind = env.wind_speed_ms
    if wind >= config.STRONG_WIND_MS:
        factors.append(f"Strong headwind ({wind:g} m/s)")
    elif wind <= -config.STRONG_WIND_MS:
        factors.append(f"Tailwind assistance ({abs(wind):g} m/s)")
    elif wind != 0:
        factors.append(f"Light wind ({wind:+g} m/s)")

    if ftp_percentage >= config.HARD_EFFORT_PCT:
        factors.append("Hard pacing, close to threshold")
    elif ftp_percentage <= config.EASY_EFFORT_PCT:
        factors.append("Conservative pacing")

    if env.temperature_c >= config.HOT_TEMPERATURE_C:
        factors.append(f"Hot conditions ({env.temperature_c:g}C, thinner air)")
    elif env.temperature_c <= config.COLD_TEMPERATURE_C:
        factors.append(f"Cold conditions ({env.temperature_c:g}C, denser air)")

    if env.altitude_m >= config.HIGH_ALTITUDE_M:
        factors.append(f"Altitude {round(env.altitude_m)}m (lower drag)")
    if env.cda_m2 != config.DEFAULT_CDA_M2:
        factors.append(f"CdA: {env.cda_m2:g}")
    return factors


def predict_bike_race(
    athlete: AthleteProfile,
    ftp_percentage: float,
    segments: Sequence[RaceSegment],
    conditions: Optional[EnvironmentConditions] = None,
) -> RacePrediction:
    """Race time at constant power (a fixed share of FTP) over ordered segments."""
    env = (conditions or EnvironmentConditions()).resolved()
    validate_race_inputs(athlete, ftp_percentage, segments, env)

    power_w = target_power(athlete.ftp_watts, ftp_percentage)
    logger.debug("Bike race: %d segments at %.1fW, mass %.1fkg", len(segments), power_w, athlete.total_mass_kg)

    results: List[SegmentResult] = [
        solve_segment(power_w, athlete, segment, env, index=idx) for idx, segment in enumerate(segments)
    ]
    total_time_s = sum(r.time_s for r in results)
    total_distance_km, total_elevation_m = race_profile_stats(segments)

    return RacePrediction(
        total_time_s=total_time_s,
        segments=results,
        factors=describe_factors(athlete.ftp_watts, ftp_percentage, segments, env),
        target_power_w=power_w,
        total_distance_km=total_distance_km,
        total_elevation_m=total_elevation_m,
        average_speed_kmh=total_distance_km / (total_time_s / 3600.0),
    )

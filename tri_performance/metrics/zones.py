"""Training-zone tables for swim, bike, run and heart rate.

Each table is built from a static band definition (fractions of a single
reference value) so that every table is contiguous and exhaustive:

- Swim pace: fractions of threshold pace per 100 m (5 zones)
- Bike power: Coggan bands, fractions of FTP (7 zones)
- Run pace: fractions of threshold pace per km (5 zones)
- Heart rate: Karvonen, fractions of heart-rate reserve (5 zones)

Pace tables are in seconds per distance, so zone 1 (slowest) is the
unbounded upper end of the axis and the fastest zone starts at 0.
"""

from __future__ import annotations

import math
from typing import Callable, List, Optional, Sequence, Tuple

from .. import config
from ..errors import ValidationError
from ..io.time_codec import format_run_pace, format_swim_pace, round_half_up
from ..models.types import Zone

# (name, description, low fraction, high fraction)
Band = Tuple[str, str, float, float]

SWIM_PACE_BANDS: Tuple[Band, ...] = (
    ("Easy/Recovery", "Very easy, technical focus", 1.12, math.inf),
    ("Endurance", "Aerobic development", 1.06, 1.12),
    ("Moderate", "Sustained effort", 1.00, 1.06),
    ("Threshold", "Race pace for longer distances", 0.94, 1.00),
    ("Speed", "High-intensity intervals", 0.0, 0.94),
)

BIKE_POWER_BANDS: Tuple[Band, ...] = (
    ("Active Recovery", "Very easy, gentle effort", 0.0, 0.55),
    ("Endurance", "All day pace, conversational", 0.55, 0.75),
    ("Tempo", "Moderate effort, slightly challenging", 0.75, 0.90),
    ("Threshold", "Challenging, race pace effort", 0.90, 1.05),
    ("VO2 Max", "Very hard, 3-8 minute intervals", 1.05, 1.20),
    ("Anaerobic", "Short, high-intensity efforts", 1.20, 1.50),
    ("Neuromuscular", "All-out sprints", 1.50, math.inf),
)

RUN_PACE_BANDS: Tuple[Band, ...] = (
    ("Easy/Recovery", "Very easy, recovery runs", 1.25, math.inf),
    ("Endurance", "Long runs, base building", 1.15, 1.25),
    ("Marathon Pace", "Slightly faster than easy pace", 1.08, 1.15),
    ("Threshold", "Comfortably hard pace", 0.98, 1.08),
    ("VO2 Max", "Hard effort, 3-5 minute repeats", 0.0, 0.98),
)

HEART_RATE_BANDS: Tuple[Band, ...] = (
    ("Recovery", "Very light, active recovery", 0.50, 0.60),
    ("Aerobic Endurance", "Easy, conversational aerobic work", 0.60, 0.70),
    ("Tempo", "Moderate, steady aerobic effort", 0.70, 0.80),
    ("Threshold", "Hard, around lactate threshold", 0.80, 0.90),
    ("VO2 Max", "Maximal effort, short intervals", 0.90, 1.00),
)

# Multiplier from field-test power to FTP, keyed by test length in minutes
FTP_TEST_FACTORS = {
    20: config.TWENTY_MINUTE_TEST_FACTOR,
    60: 1.0,
}


def _require_positive(value: float, label: str) -> float:
    if value is None or not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{label} must be a positive number, got {value}")
    return float(value)


def _pace_range(lower: float, upper: float, fmt: Callable[[float], str]) -> str:
    if math.isinf(upper):
        return f"> {fmt(lower)}"
    if lower <= 0:
        return f"< {fmt(upper)}"
    # Faster bound first, as paces are read on a watch
    fast, _, unit = fmt(lower).partition("/")
    slow, _, _ = fmt(upper).partition("/")
    return f"{fast}-{slow}/{unit}"


def _power_range(lower: float, upper: float) -> str:
    if lower <= 0:
        return f"<{round_half_up(upper)}W"
    if math.isinf(upper):
        return f">{round_half_up(lower)}W"
    return f"{round_half_up(lower)}-{round_half_up(upper)}W"


def _build_pace_zones(bands: Sequence[Band], threshold: float, fmt: Callable[[float], str]) -> List[Zone]:
    zones: List[Zone] = []
    for idx, (name, description, lo, hi) in enumerate(bands, start=1):
        lower = lo * threshold
        upper = math.inf if math.isinf(hi) else hi * threshold
        zones.append(
            Zone(
                index=idx,
                name=name,
                description=description,
                lower=lower,
                upper=upper,
                display_range=_pace_range(lower, upper, fmt),
                target_low=lower if lower > 0 else None,
                target_high=None if math.isinf(upper) else upper,
            )
        )
    return zones


def swim_threshold_pace(time_400m_s: float) -> float:
    """Threshold pace in seconds per 100 m from a 400 m test."""
    t = _require_positive(time_400m_s, "400m test time")
    return t / config.SWIM_TEST_DISTANCE_M * 100.0


def run_threshold_pace(test_distance_km: float, time_s: float) -> float:
    """Threshold pace in seconds per km from a 3 km or 5 km test."""
    d = _require_positive(test_distance_km, "Test distance")
    t = _require_positive(time_s, "Test time")
    return t / d


def swim_pace_zones(threshold_pace_s_per_100m: float) -> List[Zone]:
    threshold = _require_positive(threshold_pace_s_per_100m, "Threshold swim pace")
    return _build_pace_zones(SWIM_PACE_BANDS, threshold, format_swim_pace)


def run_pace_zones(threshold_pace_s_per_km: float) -> List[Zone]:
    threshold = _require_positive(threshold_pace_s_per_km, "Threshold run pace")
    return _build_pace_zones(RUN_PACE_BANDS, threshold, format_run_pace)


def estimate_ftp(test_power_w: float, test_minutes: int = 60) -> float:
    """FTP from a field test; a 20 minute test is scaled by 0.95."""
    power = _require_positive(test_power_w, "Test power")
    factor = FTP_TEST_FACTORS.get(int(test_minutes)) if test_minutes is not None else None
    if factor is None:
        raise ValidationError(
            f"Unsupported FTP test duration {test_minutes} min (expected one of {sorted(FTP_TEST_FACTORS)})"
        )
    return power * factor


def bike_power_zones(ftp_watts: float) -> List[Zone]:
    ftp = _require_positive(ftp_watts, "FTP")
    zones: List[Zone] = []
    for idx, (name, description, lo, hi) in enumerate(BIKE_POWER_BANDS, start=1):
        lower = lo * ftp
        upper = math.inf if math.isinf(hi) else hi * ftp
        zones.append(
            Zone(
                index=idx,
                name=name,
                description=description,
                lower=lower,
                upper=upper,
                display_range=_power_range(lower, upper),
                target_low=lower,
                target_high=None if math.isinf(upper) else upper,
            )
        )
    return zones


def bike_power_zones_from_test(test_power_w: float, test_minutes: int = 60) -> List[Zone]:
    return bike_power_zones(estimate_ftp(test_power_w, test_minutes))


def karvonen_target(max_hr: float, resting_hr: float, intensity_fraction: float) -> float:
    return resting_hr + (max_hr - resting_hr) * intensity_fraction


def heart_rate_zones(max_hr: float, resting_hr: float) -> List[Zone]:
    """Karvonen heart-rate zones over 50-100% of heart-rate reserve.

    The partition bounds cover [0, inf): zone 1 extends down to 0 and
    zone 5 upwards without limit. ``target_low``/``target_high`` carry the
    nominal band shown to the athlete.
    """
    max_hr = _require_positive(max_hr, "Max heart rate")
    resting_hr = _require_positive(resting_hr, "Resting heart rate")
    if max_hr <= resting_hr:
        raise ValidationError(
            f"Max heart rate ({max_hr:g}) must be greater than resting heart rate ({resting_hr:g})"
        )

    zones: List[Zone] = []
    last = len(HEART_RATE_BANDS)
    for idx, (name, description, lo, hi) in enumerate(HEART_RATE_BANDS, start=1):
        target_low = karvonen_target(max_hr, resting_hr, lo)
        target_high = karvonen_target(max_hr, resting_hr, hi)
        zones.append(
            Zone(
                index=idx,
                name=name,
                description=description,
                lower=0.0 if idx == 1 else target_low,
                upper=math.inf if idx == last else target_high,
                display_range=f"{round_half_up(target_low)}-{round_half_up(target_high)}bpm",
                target_low=target_low,
                target_high=target_high,
            )
        )
    return zones


def zone_for_value(zones: Sequence[Zone], value: float) -> Zone:
    """Return the zone whose partition contains ``value``."""
    for zone in zones:
        if zone.contains(value):
            return zone
    raise ValidationError(f"Value {value} is outside every zone")


def intensity_zone_index(ftp_watts: float, power_w: float) -> Optional[int]:
    """Power zone number (1-7) of ``power_w`` relative to ``ftp_watts``."""
    if power_w is None or power_w < 0:
        return None
    return zone_for_value(bike_power_zones(ftp_watts), power_w).index

"""Fixed triathlon reference tables: canonical distances and default transitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..errors import ValidationError
from .types import RaceType


@dataclass(frozen=True)
class RaceDistances:
    swim_m: float
    bike_km: float
    run_km: float


@dataclass(frozen=True)
class TransitionDefaults:
    t1_s: int
    t2_s: int


RACE_DISTANCES: Dict[RaceType, RaceDistances] = {
    RaceType.SPRINT: RaceDistances(swim_m=750, bike_km=20, run_km=5),
    RaceType.OLYMPIC: RaceDistances(swim_m=1500, bike_km=40, run_km=10),
    RaceType.HALF: RaceDistances(swim_m=1900, bike_km=90, run_km=21.1),
    RaceType.FULL: RaceDistances(swim_m=3800, bike_km=180, run_km=42.2),
}

TRANSITION_DEFAULTS: Dict[RaceType, TransitionDefaults] = {
    RaceType.SPRINT: TransitionDefaults(t1_s=60, t2_s=45),
    RaceType.OLYMPIC: TransitionDefaults(t1_s=90, t2_s=60),
    RaceType.HALF: TransitionDefaults(t1_s=120, t2_s=90),
    RaceType.FULL: TransitionDefaults(t1_s=180, t2_s=120),
}

RACE_TYPE_NAMES: Dict[RaceType, str] = {
    RaceType.SPRINT: "Sprint",
    RaceType.OLYMPIC: "Olympic",
    RaceType.HALF: "70.3 (Half Ironman)",
    RaceType.FULL: "Ironman (Full)",
}

# Upper swim distance (inclusive) for each race type, checked in order
_SWIM_BREAKPOINTS_M: Tuple[Tuple[float, RaceType], ...] = (
    (750, RaceType.SPRINT),
    (1500, RaceType.OLYMPIC),
    (1900, RaceType.HALF),
)


def classify_race_type(swim_meters: float) -> RaceType:
    """Race type implied by the swim leg distance."""
    if swim_meters is None or swim_meters <= 0:
        raise ValidationError(f"Swim distance must be positive, got {swim_meters}")
    for limit, race_type in _SWIM_BREAKPOINTS_M:
        if swim_meters <= limit:
            return race_type
    return RaceType.FULL


def race_distances(race_type: RaceType) -> RaceDistances:
    return RACE_DISTANCES[RaceType(race_type)]


def transition_defaults(race_type: RaceType) -> TransitionDefaults:
    return TRANSITION_DEFAULTS[RaceType(race_type)]

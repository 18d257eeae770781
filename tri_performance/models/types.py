from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .. import config


class RaceType(str, Enum):
    SPRINT = "sprint"
    OLYMPIC = "olympic"
    HALF = "half"
    FULL = "full"


class WaterType(str, Enum):
    POOL = "pool"
    OPEN_WATER = "open_water"


class OpenWaterType(str, Enum):
    SEA = "sea"
    LAKE = "lake"


class SwellLevel(str, Enum):
    NONE = "none"
    LIGHT = "light"
    MODERATE = "moderate"


@dataclass(frozen=True)
class Zone:
    index: int
    name: str
    description: str
    lower: float  # inclusive
    upper: float  # exclusive, math.inf when unbounded
    display_range: str
    target_low: Optional[float] = None
    target_high: Optional[float] = None

    def contains(self, value: float) -> bool:
        return self.lower <= value < self.upper


@dataclass(frozen=True)
class RaceSegment:
    distance_km: float
    gradient_pct: float = 0.0

    @property
    def elevation_change_m(self) -> float:
        return self.distance_km * 1000.0 * self.gradient_pct / 100.0


@dataclass(frozen=True)
class EnvironmentConditions:
    wind_speed_ms: Optional[float] = None  # headwind positive
    temperature_c: Optional[float] = None
    cda_m2: Optional[float] = None
    crr: Optional[float] = None
    altitude_m: Optional[float] = None
    drivetrain_efficiency: Optional[float] = None

    def resolved(self) -> "EnvironmentConditions":
        """Copy with every unset field replaced by its configured default."""
        return EnvironmentConditions(
            wind_speed_ms=config.DEFAULT_WIND_MS if self.wind_speed_ms is None else self.wind_speed_ms,
            temperature_c=config.DEFAULT_TEMPERATURE_C if self.temperature_c is None else self.temperature_c,
            cda_m2=config.DEFAULT_CDA_M2 if self.cda_m2 is None else self.cda_m2,
            crr=config.DEFAULT_CRR if self.crr is None else self.crr,
            altitude_m=config.DEFAULT_ALTITUDE_M if self.altitude_m is None else self.altitude_m,
            drivetrain_efficiency=(
                config.DEFAULT_DRIVETRAIN_EFFICIENCY
                if self.drivetrain_efficiency is None
                else self.drivetrain_efficiency
            ),
        )


@dataclass(frozen=True)
class SolverResult:
    velocity_ms: float
    power_w: float
    residual_w: float
    iterations: int
    converged: bool


@dataclass(frozen=True)
class SegmentResult:
    index: int
    distance_km: float
    gradient_pct: float
    velocity_ms: float
    speed_kmh: float
    time_s: float
    power_w: float
    converged: bool = True


@dataclass(frozen=True)
class RacePrediction:
    total_time_s: float
    segments: List[SegmentResult]
    factors: List[str]
    target_power_w: float
    total_distance_km: float
    total_elevation_m: float
    average_speed_kmh: float

    @property
    def segment_times_s(self) -> List[float]:
        return [s.time_s for s in self.segments]


@dataclass(frozen=True)
class LegResult:
    time_s: int
    factors: List[str] = field(default_factory=list)
    formatted: str = ""


@dataclass
class SwimLeg:
    base_time_s: float
    base_distance_m: float
    race_distance_m: float
    water: WaterType = WaterType.POOL
    open_water_type: Optional[OpenWaterType] = None
    swell: SwellLevel = SwellLevel.NONE
    wetsuit: bool = False


@dataclass
class BikeLeg:
    ftp_watts: float
    ftp_percentage: float
    athlete_weight_kg: float
    bike_weight_kg: float
    distance_km: float
    elevation_m: float = 0.0
    segments: Optional[List[RaceSegment]] = None
    cda_m2: Optional[float] = None
    wind_speed_ms: Optional[float] = None
    temperature_c: Optional[float] = None


@dataclass
class RunLeg:
    base_time_s: float
    base_distance_km: float
    race_distance_km: float
    run_zone: int = config.DEFAULT_RUN_ZONE


@dataclass(frozen=True)
class TriathlonPrediction:
    race_type: RaceType
    swim: LegResult
    t1_s: int
    bike: LegResult
    t2_s: int
    run: LegResult
    total_time_s: int
    bike_prediction: Optional[RacePrediction] = None


@dataclass(frozen=True)
class RaceSplits:
    race_type: RaceType
    swim_s: int
    t1_s: int
    bike_s: int
    t2_s: int
    run_s: int
    total_time_s: int
    swim_pace: str
    bike_speed: str
    run_pace: str

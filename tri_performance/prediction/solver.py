"""Sustainable bike speed for a constant power on a road segment.

Rider power balances three resistive forces at ground speed ``v``:

- gravity along the slope: ``m * g * sin(atan(grade))``
- rolling resistance: ``crr * m * g * cos(atan(grade))``
- aerodynamic drag against the apparent wind:
  ``0.5 * rho * CdA * v_air * |v_air|`` with ``v_air = v + wind``

Power = sum of forces * v / drivetrain efficiency. The drag term makes
this cubic in ``v``, so speed is found by capped bisection.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np

from .. import config
from ..errors import ValidationError
from ..models.athlete_profile import AthleteProfile
from ..models.types import EnvironmentConditions, RaceSegment, SegmentResult, SolverResult

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]


def air_density(temperature_c: float, altitude_m: float = 0.0) -> float:
    """Air density (kg/m^3) corrected for temperature and altitude.

    rho = 1.225 * 273.15 / (T + 273.15) * exp(-altitude / 8435)
    """
    kelvin = temperature_c + config.KELVIN_OFFSET
    if not np.isfinite(kelvin) or kelvin <= 0:
        raise ValidationError(f"Temperature must be above absolute zero, got {temperature_c}")
    rho_temp = config.AIR_DENSITY_SEA_LEVEL * (config.KELVIN_OFFSET / kelvin)
    return float(rho_temp * np.exp(-altitude_m / config.ATMOSPHERE_SCALE_HEIGHT_M))


def power_required(
    velocity_ms: ArrayLike,
    mass_kg: float,
    gradient_pct: float,
    conditions: Optional[EnvironmentConditions] = None,
) -> ArrayLike:
    """Rider power (W) needed to hold ``velocity_ms``; accepts scalars or arrays."""
    env = (conditions or EnvironmentConditions()).resolved()
    rho = air_density(env.temperature_c, env.altitude_m)
    theta = np.arctan(gradient_pct / 100.0)
    v = np.asarray(velocity_ms, dtype=float)

    f_gravity = mass_kg * config.GRAVITY_MS2 * np.sin(theta)
    f_rolling = env.crr * mass_kg * config.GRAVITY_MS2 * np.cos(theta)
    v_air = v + env.wind_speed_ms
    f_aero = 0.5 * rho * env.cda_m2 * v_air * np.abs(v_air)

    power = (f_gravity + f_rolling + f_aero) * v / env.drivetrain_efficiency
    if np.ndim(power) == 0:
        return float(power)
    return power


def solve_velocity(
    power_w: float,
    mass_kg: float,
    gradient_pct: float,
    conditions: Optional[EnvironmentConditions] = None,
    tolerance_w: float = config.SOLVER_TOLERANCE_W,
    max_iterations: int = config.SOLVER_MAX_ITERATIONS,
) -> SolverResult:
    """Bisection for the velocity whose required power matches ``power_w``.

    Searches [SOLVER_MIN_VELOCITY_MS, SOLVER_MAX_VELOCITY_MS]. When the
    iteration cap is reached, or the target lies outside what the bracket
    can produce, the candidate with the smallest residual is returned with
    ``converged=False``.
    """
    env = (conditions or EnvironmentConditions()).resolved()
    lo = config.SOLVER_MIN_VELOCITY_MS
    hi = config.SOLVER_MAX_VELOCITY_MS

    def _residual(v: float) -> float:
        return power_required(v, mass_kg, gradient_pct, env) - power_w

    lo_residual = _residual(lo)
    hi_residual = _residual(hi)
    best_v, best_residual = (lo, lo_residual) if abs(lo_residual) <= abs(hi_residual) else (hi, hi_residual)

    iterations = 0
    # Without a sign change the target is outside the bracket and the nearer end stands
    if abs(best_residual) > tolerance_w and lo_residual < 0 < hi_residual:
        for iterations in range(1, max_iterations + 1):
            mid = 0.5 * (lo + hi)
            residual = _residual(mid)
            if abs(residual) < abs(best_residual):
                best_v, best_residual = mid, residual
            if abs(residual) <= tolerance_w:
                break
            if residual < 0:
                lo = mid
            else:
                hi = mid

    converged = abs(best_residual) <= tolerance_w
    if not converged:
        logger.debug(
            "Velocity solver fallback: target=%.1fW gradient=%.2f%% v=%.3fm/s residual=%.2fW after %d iterations",
            power_w, gradient_pct, best_v, best_residual, iterations,
        )
    return SolverResult(
        velocity_ms=best_v,
        power_w=best_residual + power_w,
        residual_w=best_residual,
        iterations=iterations,
        converged=converged,
    )


def solve_segment(
    power_w: float,
    athlete: AthleteProfile,
    segment: RaceSegment,
    conditions: Optional[EnvironmentConditions] = None,
    index: int = 0,
) -> SegmentResult:
    result = solve_velocity(power_w, athlete.total_mass_kg, segment.gradient_pct, conditions)
    time_s = segment.distance_km * 1000.0 / result.velocity_ms
    return SegmentResult(
        index=index,
        distance_km=segment.distance_km,
        gradient_pct=segment.gradient_pct,
        velocity_ms=result.velocity_ms,
        speed_kmh=result.velocity_ms * 3.6,
        time_s=time_s,
        power_w=result.power_w,
        converged=result.converged,
    )

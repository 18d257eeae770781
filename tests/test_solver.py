import numpy as np
import pytest

from tri_performance import config
from tri_performance.errors import ValidationError
from tri_performance.models.athlete_profile import AthleteProfile
from tri_performance.models.types import EnvironmentConditions, RaceSegment
from tri_performance.prediction.solver import air_density, power_required, solve_segment, solve_velocity

def test_air_density_reference_and_corrections():
    assert air_density(0.0, 0.0) == pytest.approx(1.225)
    assert air_density(30.0) < air_density(10.0)
    assert air_density(25.0, 2000.0) < air_density(25.0, 0.0)

def test_power_required_accepts_arrays():
    v = np.linspace(2.0, 15.0, 10)
    power = power_required(v, 79.0, 0.0)
    assert isinstance(power, np.ndarray)
    assert np.all(np.diff(power) > 0)
    assert isinstance(power_required(10.0, 79.0, 0.0), float)

def test_solves_200w_on_the_flat():
    conditions = EnvironmentConditions(cda_m2=0.32)
    result = solve_velocity(200.0, 79.0, 0.0, conditions)
    assert result.converged
    assert abs(result.power_w - 200.0) <= config.SOLVER_TOLERANCE_W
    assert power_required(result.velocity_ms, 79.0, 0.0, conditions) == pytest.approx(result.power_w)
    # Roughly 35 km/h for this rider
    assert 30.0 < result.velocity_ms * 3.6 < 40.0

def test_steeper_is_slower():
    speeds = [solve_velocity(200.0, 79.0, g).velocity_ms for g in (-2.0, 0.0, 2.0, 5.0)]
    assert speeds == sorted(speeds, reverse=True)

def test_headwind_is_slower():
    calm = solve_velocity(200.0, 79.0, 0.0, EnvironmentConditions(wind_speed_ms=0.0))
    head = solve_velocity(200.0, 79.0, 0.0, EnvironmentConditions(wind_speed_ms=4.0))
    tail = solve_velocity(200.0, 79.0, 0.0, EnvironmentConditions(wind_speed_ms=-4.0))
    assert tail.velocity_ms > calm.velocity_ms > head.velocity_ms

@pytest.mark.parametrize("max_iterations", [1, 3, 6])
def test_iteration_cap_returns_best_candidate(max_iterations):
    target = 200.0
    result = solve_velocity(target, 79.0, 0.0, tolerance_w=1e-9, max_iterations=max_iterations)
    assert not result.converged
    assert result.iterations == max_iterations
    assert config.SOLVER_MIN_VELOCITY_MS <= result.velocity_ms <= config.SOLVER_MAX_VELOCITY_MS
    assert result.residual_w == pytest.approx(result.power_w - target)

    lo_residual = power_required(config.SOLVER_MIN_VELOCITY_MS, 79.0, 0.0) - target
    hi_residual = power_required(config.SOLVER_MAX_VELOCITY_MS, 79.0, 0.0) - target
    assert abs(result.residual_w) <= abs(lo_residual)
    assert abs(result.residual_w) <= abs(hi_residual)

    # The last midpoint is within one final bracket width of the root
    root = solve_velocity(target, 79.0, 0.0).velocity_ms
    width = (config.SOLVER_MAX_VELOCITY_MS - config.SOLVER_MIN_VELOCITY_MS) / 2 ** max_iterations
    low = max(root - width, config.SOLVER_MIN_VELOCITY_MS)
    high = min(root + width, config.SOLVER_MAX_VELOCITY_MS)
    spread = power_required(high, 79.0, 0.0) - power_required(low, 79.0, 0.0)
    assert abs(result.residual_w) <= spread + config.SOLVER_TOLERANCE_W

def test_air_density_rejects_absolute_zero():
    with pytest.raises(ValidationError):
        air_density(-273.15)
    with pytest.raises(ValidationError):
        air_density(float("nan"))

def test_target_outside_bracket_returns_nearest_end():
    fast = solve_velocity(100000.0, 79.0, 0.0)
    assert not fast.converged
    assert fast.velocity_ms == config.SOLVER_MAX_VELOCITY_MS

    slow = solve_velocity(0.1, 79.0, 0.0)
    assert not slow.converged
    assert slow.velocity_ms == config.SOLVER_MIN_VELOCITY_MS

def test_solve_segment_time():
    athlete = AthleteProfile(ftp_watts=250.0, athlete_weight_kg=70.0, bike_weight_kg=9.0)
    result = solve_segment(200.0, athlete, RaceSegment(distance_km=10.0), index=2)
    assert result.index == 2
    assert result.time_s == pytest.approx(10000.0 / result.velocity_ms)
    assert result.speed_kmh == pytest.approx(result.velocity_ms * 3.6)

"""Central config with the engine's named constants."""

# Environment defaults (used when EnvironmentConditions leaves a field unset)
DEFAULT_CDA_M2: float = 0.32
DEFAULT_CRR: float = 0.004
DEFAULT_WIND_MS: float = 0.0
DEFAULT_TEMPERATURE_C: float = 25.0
DEFAULT_ALTITUDE_M: float = 0.0
DEFAULT_DRIVETRAIN_EFFICIENCY: float = 1.0

# Physical constants
GRAVITY_MS2: float = 9.81
AIR_DENSITY_SEA_LEVEL: float = 1.225  # kg/m^3 at 0 C
KELVIN_OFFSET: float = 273.15
ATMOSPHERE_SCALE_HEIGHT_M: float = 8435.0

# Velocity solver
SOLVER_TOLERANCE_W: float = 0.5
SOLVER_MAX_ITERATIONS: int = 60
SOLVER_MIN_VELOCITY_MS: float = 0.5
SOLVER_MAX_VELOCITY_MS: float = 25.0

# Field tests
TWENTY_MINUTE_TEST_FACTOR: float = 0.95
SWIM_TEST_DISTANCE_M: float = 400.0

# Run model
RIEGEL_EXPONENT: float = 1.06
DEFAULT_RUN_ZONE: int = 4

# Narrative factor thresholds (descriptive only)
CLIMB_GRADIENT_PCT: float = 3.0
DESCENT_GRADIENT_PCT: float = -3.0
CLIMB_METERS_PER_KM: float = 10.0
STRONG_WIND_MS: float = 3.0
HARD_EFFORT_PCT: float = 90.0
EASY_EFFORT_PCT: float = 65.0
HOT_TEMPERATURE_C: float = 30.0
COLD_TEMPERATURE_C: float = 10.0
HIGH_ALTITUDE_M: float = 1000.0

import pytest

from tri_performance.models.athlete_profile import AthleteProfile
from tri_performance.models.types import BikeLeg, RunLeg, SwimLeg


@pytest.fixture
def athlete():
    # 70 kg rider on a 9 kg bike
    return AthleteProfile(ftp_watts=250.0, athlete_weight_kg=70.0, bike_weight_kg=9.0)


@pytest.fixture
def olympic_legs():
    swim = SwimLeg(base_time_s=360, base_distance_m=400, race_distance_m=1500)
    bike = BikeLeg(
        ftp_watts=250.0,
        ftp_percentage=80.0,
        athlete_weight_kg=70.0,
        bike_weight_kg=9.0,
        distance_km=40.0,
        elevation_m=200.0,
    )
    run = RunLeg(base_time_s=1200, base_distance_km=5.0, race_distance_km=10.0)
    return swim, bike, run

import pytest

from tri_performance.errors import FormatError, ValidationError
from tri_performance.models.types import RaceType
from tri_performance.prediction.splits import calculate_race_splits


def test_olympic_splits_and_paces():
    splits = calculate_race_splits(RaceType.OLYMPIC, "25:00", "1", "45:00")
    assert splits.swim_s == 1500
    assert splits.bike_s == 3600
    assert splits.run_s == 2700
    assert (splits.t1_s, splits.t2_s) == (0, 0)
    assert splits.total_time_s == 7800
    assert splits.swim_pace == "1:40/100m"
    assert splits.bike_speed == "40.0 km/h"
    assert splits.run_pace == "4:30/km"


def test_transitions_are_added():
    splits = calculate_race_splits("sprint", "12:30", "35:00", "22:00", t1="1:30", t2="1:00")
    assert splits.total_time_s == 750 + 90 + 2100 + 60 + 1320
    assert splits.race_type is RaceType.SPRINT


@pytest.mark.parametrize("field", ["swim", "bike", "run"])
def test_required_legs(field):
    legs = {"swim": "25:00", "bike": "1:05:00", "run": "45:00"}
    legs[field] = ""
    with pytest.raises(ValidationError):
        calculate_race_splits(RaceType.OLYMPIC, **legs)


def test_zero_leg_rejected():
    with pytest.raises(ValidationError):
        calculate_race_splits(RaceType.OLYMPIC, "00:00", "1:05:00", "45:00")


def test_malformed_leg_rejected():
    with pytest.raises(FormatError):
        calculate_race_splits(RaceType.OLYMPIC, "25:00", "1:05:00", "45:99")

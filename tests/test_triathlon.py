import pytest

from tri_performance.errors import FormatError, ValidationError
from tri_performance.models.race_types import classify_race_type, race_distances, transition_defaults
from tri_performance.models.types import (
    OpenWaterType,
    RaceType,
    RunLeg,
    SwellLevel,
    SwimLeg,
    WaterType,
)
from tri_performance.prediction.triathlon import (
    BIKE_ZONE_FATIGUE_SCALE,
    bike_intensity_zone,
    fatigue_multiplier,
    predict_run,
    predict_swim,
    predict_triathlon,
    resolve_transition,
    riegel_time,
)


def test_pool_swim_scales_linearly():
    result = predict_swim(SwimLeg(base_time_s=360, base_distance_m=400, race_distance_m=750))
    assert result.time_s == 675
    assert result.formatted == "11:15"
    assert result.factors == ["Pool (no adjustments)"]


def test_open_water_adjustments_compound():
    leg = SwimLeg(
        base_time_s=360,
        base_distance_m=400,
        race_distance_m=1500,
        water=WaterType.OPEN_WATER,
        open_water_type=OpenWaterType.SEA,
        swell=SwellLevel.MODERATE,
        wetsuit=True,
    )
    result = predict_swim(leg)
    assert result.time_s == round(1350 * 1.05 * 1.03 * 1.05 * 0.95)
    assert result.factors == ["+5% open water", "+3% sea", "+5% moderate swell", "-5% wetsuit"]


def test_lake_ignores_swell():
    leg = SwimLeg(360, 400, 1500, water=WaterType.OPEN_WATER, open_water_type=OpenWaterType.LAKE, swell=SwellLevel.LIGHT)
    assert predict_swim(leg).factors == ["+5% open water"]


def test_riegel_identity_and_growth():
    assert riegel_time(1200, 5.0, 5.0) == pytest.approx(1200)
    assert riegel_time(1200, 5.0, 10.0) == pytest.approx(1200 * 2 ** 1.06)
    assert riegel_time(1200, 5.0, 10.0) > 2400


def test_fatigue_grows_with_race_length_and_bike_zone():
    races = [RaceType.SPRINT, RaceType.OLYMPIC, RaceType.HALF, RaceType.FULL]
    for zone in BIKE_ZONE_FATIGUE_SCALE:
        values = [fatigue_multiplier(r, zone) for r in races]
        assert values == sorted(values)
    for race in races:
        values = [fatigue_multiplier(race, z) for z in sorted(BIKE_ZONE_FATIGUE_SCALE)]
        assert values == sorted(values)
        assert values[0] > 1.0
    assert fatigue_multiplier(RaceType.FULL, 3) == pytest.approx(1.10)
    with pytest.raises(ValidationError):
        fatigue_multiplier(RaceType.SPRINT, 8)


def test_run_applies_zone_and_fatigue():
    leg = RunLeg(base_time_s=1200, base_distance_km=5.0, race_distance_km=10.0, run_zone=4)
    result = predict_run(leg, RaceType.OLYMPIC, bike_zone=3)
    assert result.time_s == round(1200 * 2 ** 1.06 * 1.04)
    assert result.factors[0] == "Zone 4 (Threshold)"
    easy = predict_run(RunLeg(1200, 5.0, 10.0, run_zone=2), RaceType.OLYMPIC, bike_zone=3)
    assert easy.time_s > result.time_s
    with pytest.raises(ValidationError):
        predict_run(RunLeg(1200, 5.0, 10.0, run_zone=6), RaceType.OLYMPIC)


def test_race_type_from_swim_distance():
    assert classify_race_type(750) is RaceType.SPRINT
    assert classify_race_type(751) is RaceType.OLYMPIC
    assert classify_race_type(1500) is RaceType.OLYMPIC
    assert classify_race_type(1900) is RaceType.HALF
    assert classify_race_type(3800) is RaceType.FULL
    with pytest.raises(ValidationError):
        classify_race_type(0)


def test_reference_tables():
    assert race_distances(RaceType.HALF).bike_km == 90
    assert transition_defaults("olympic").t1_s == 90


def test_resolve_transition():
    assert resolve_transition(None, 90) == 90
    assert resolve_transition("  ", 90) == 90
    assert resolve_transition("1:30", 60) == 90
    assert resolve_transition(45.5, 60) == 46
    assert resolve_transition(0, 60) == 0
    with pytest.raises(FormatError):
        resolve_transition("abc", 60)
    with pytest.raises(ValidationError):
        resolve_transition(-5, 60)


def test_bike_zone_from_effort(olympic_legs):
    _, bike, _ = olympic_legs
    assert bike_intensity_zone(bike) == 3


def test_total_is_sum_of_legs_and_transitions(olympic_legs):
    swim, bike, run = olympic_legs
    prediction = predict_triathlon(swim, bike, run)
    assert prediction.race_type is RaceType.OLYMPIC
    assert prediction.t1_s == 90
    assert prediction.t2_s == 60
    assert prediction.swim.time_s == 1350
    assert prediction.total_time_s == (
        prediction.swim.time_s + prediction.t1_s + prediction.bike.time_s + prediction.t2_s + prediction.run.time_s
    )
    assert prediction.bike.factors[1] == "Elevation: 200m"
    assert prediction.bike_prediction is not None


def test_explicit_transitions(olympic_legs):
    swim, bike, run = olympic_legs
    prediction = predict_triathlon(swim, bike, run, t1="2:00", t2=30)
    assert (prediction.t1_s, prediction.t2_s) == (120, 30)


def test_malformed_transition_fails_before_computing(olympic_legs):
    swim, bike, run = olympic_legs
    with pytest.raises(FormatError):
        predict_triathlon(swim, bike, run, t1="1:75")


def test_missing_leg(olympic_legs):
    swim, bike, _ = olympic_legs
    with pytest.raises(ValidationError, match="run"):
        predict_triathlon(swim, bike, None)


def test_invalid_leg_is_rejected(olympic_legs):
    swim, bike, run = olympic_legs
    bike.ftp_percentage = 0
    with pytest.raises(ValidationError):
        predict_triathlon(swim, bike, run)


@pytest.mark.parametrize(
    "overrides",
    [{"water": "lagoon"}, {"water": "open_water", "open_water_type": "river"}, {"swell": "huge"}],
)
def test_unknown_swim_conditions_rejected(overrides):
    leg = SwimLeg(base_time_s=360, base_distance_m=400, race_distance_m=1500, **overrides)
    with pytest.raises(ValidationError, match="swim conditions"):
        predict_swim(leg)


def test_swim_conditions_accept_plain_strings():
    leg = SwimLeg(360, 400, 1500, water="open_water", open_water_type="sea", swell="light")
    assert predict_swim(leg).factors == ["+5% open water", "+3% sea", "+2% light swell"]

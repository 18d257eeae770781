from tri_performance.io.time_codec import format_time
from tri_performance.metrics.zones import bike_power_zones, heart_rate_zones
from tri_performance.models.types import RaceSegment
from tri_performance.prediction.bike import predict_bike_race
from tri_performance.prediction.triathlon import predict_triathlon
from tri_performance.reporting.tables import segments_to_frame, triathlon_to_frame, zones_to_frame


def test_zones_frame():
    df = zones_to_frame(bike_power_zones(250))
    assert list(df["zone"]) == [f"Z{i}" for i in range(1, 8)]
    assert df.loc[1, "range"] == "138-188W"
    assert df["upper"].isna().iloc[-1]

    hr = zones_to_frame(heart_rate_zones(190, 60))
    assert hr.loc[0, "range"] == "125-138bpm"


def test_segments_frame_cumulative_time(athlete):
    prediction = predict_bike_race(athlete, 80.0, [RaceSegment(10.0, 0.0), RaceSegment(10.0, 3.0)])
    df = segments_to_frame(prediction)
    assert list(df["segment"]) == [1, 2]
    assert df["cumulative_time"].iloc[-1] == format_time(prediction.total_time_s)


def test_triathlon_frame(olympic_legs):
    prediction = predict_triathlon(*olympic_legs)
    df = triathlon_to_frame(prediction)
    assert list(df["leg"]) == ["Swim", "T1", "Bike", "T2", "Run"]
    assert df["time_s"].sum() == prediction.total_time_s
    assert df["elapsed"].iloc[-1] == format_time(prediction.total_time_s)

from __future__ import annotations

import math
from typing import List, Sequence

import pandas as pd

from ..io.time_codec import format_time
from ..models.types import RacePrediction, TriathlonPrediction, Zone


def zones_to_frame(zones: Sequence[Zone]) -> pd.DataFrame:
    rows = []
    for z in zones:
        rows.append(
            {
                "zone": f"Z{z.index}",
                "name": z.name,
                "range": z.display_range,
                "description": z.description,
                "lower": z.lower,
                "upper": None if math.isinf(z.upper) else z.upper,
            }
        )
    return pd.DataFrame(rows)


def segments_to_frame(prediction: RacePrediction) -> pd.DataFrame:
    rows = []
    for s in prediction.segments:
        rows.append(
            {
                "segment": s.index + 1,
                "distance_km": s.distance_km,
                "gradient_pct": round(s.gradient_pct, 2),
                "speed_kmh": round(s.speed_kmh, 1),
                "power_w": round(s.power_w, 1),
                "time": format_time(s.time_s),
                "time_s": s.time_s,
            }
        )
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    df["cumulative_time"] = df["time_s"].cumsum().map(format_time)
    return df


def triathlon_to_frame(prediction: TriathlonPrediction) -> pd.DataFrame:
    legs: List[tuple] = [
        ("Swim", prediction.swim.time_s, "; ".join(prediction.swim.factors)),
        ("T1", prediction.t1_s, ""),
        ("Bike", prediction.bike.time_s, "; ".join(prediction.bike.factors)),
        ("T2", prediction.t2_s, ""),
        ("Run", prediction.run.time_s, "; ".join(prediction.run.factors)),
    ]
    df = pd.DataFrame(legs, columns=["leg", "time_s", "factors"])
    df["time"] = df["time_s"].map(format_time)
    df["elapsed"] = df["time_s"].cumsum().map(format_time)
    return df[["leg", "time", "elapsed", "time_s", "factors"]]

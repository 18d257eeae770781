from __future__ import annotations

import json
import math
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict

from ..errors import ValidationError


def _is_positive(value: float) -> bool:
    return value is not None and math.isfinite(value) and value > 0


@dataclass(frozen=True)
class AthleteProfile:
    ftp_watts: float
    athlete_weight_kg: float
    bike_weight_kg: float

    @property
    def total_mass_kg(self) -> float:
        return self.athlete_weight_kg + self.bike_weight_kg

    def validate(self) -> None:
        errors = []
        if not _is_positive(self.ftp_watts):
            errors.append("FTP must be a positive number")
        if not _is_positive(self.athlete_weight_kg):
            errors.append("Athlete weight must be a positive number")
        if not _is_positive(self.bike_weight_kg):
            errors.append("Bike weight must be a positive number")
        if errors:
            raise ValidationError(f"Athlete profile errors: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_athlete_profile(profile_path: Path) -> AthleteProfile:
    """Load an athlete profile from a JSON file (read-only)."""
    with open(profile_path, "r") as f:
        data = json.load(f)
    try:
        profile = AthleteProfile(
            ftp_watts=float(data["ftp_watts"]),
            athlete_weight_kg=float(data["athlete_weight_kg"]),
            bike_weight_kg=float(data["bike_weight_kg"]),
        )
    except KeyError as e:
        raise ValidationError(f"Athlete profile {profile_path} is missing {e}") from e
    profile.validate()
    return profile

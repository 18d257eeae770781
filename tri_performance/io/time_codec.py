from __future__ import annotations

import math
import re
from typing import List

import numpy as np

from ..errors import FormatError, ValidationError


_GROUP_RE = re.compile(r"^\d+$")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(np.floor(float(value) + 0.5))


def _split_groups(text: str) -> List[int]:
    if text is None:
        raise FormatError("Time is required")
    stripped = str(text).strip()
    if not stripped:
        raise FormatError("Time is required")
    parts = stripped.split(":")
    if len(parts) > 3:
        raise FormatError(f"Too many ':' groups in time '{stripped}'")
    groups: List[int] = []
    for part in parts:
        if not _GROUP_RE.match(part):
            raise FormatError(f"Invalid time group '{part}' in '{stripped}'")
        groups.append(int(part))
    # Minutes and seconds are bounded once a colon is present; hours are not
    bounded = groups[-2:] if len(groups) > 1 else []
    if any(g >= 60 for g in bounded):
        raise FormatError(f"Minutes and seconds must be below 60 in '{stripped}'")
    return groups


def parse_time(text: str) -> int:
    """Parse ``SS``, ``MM:SS`` or ``H:MM:SS`` into whole seconds.

    A bare number is read as seconds. Raises FormatError for empty text,
    non-numeric groups, more than three groups, or minutes/seconds >= 60.
    """
    groups = _split_groups(text)
    if len(groups) == 1:
        return groups[0]
    if len(groups) == 2:
        minutes, seconds = groups
        return minutes * 60 + seconds
    hours, minutes, seconds = groups
    return hours * 3600 + minutes * 60 + seconds


def is_valid_time_format(text: str) -> bool:
    try:
        _split_groups(text)
    except FormatError:
        return False
    return True


def format_time(seconds: float) -> str:
    """Format seconds as ``MM:SS`` or ``H:MM:SS`` (hour group only when non-zero)."""
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        raise ValidationError(f"Duration must be a non-negative number, got {seconds}")
    total = round_half_up(seconds)
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def normalize_hours_shorthand(text: str) -> str:
    """Expand a bare number typed into an hours-capable field to ``<n>:00:00``.

    Used by callers collecting leg durations; text that already contains a
    colon (or is blank) is returned stripped but otherwise untouched.
    """
    stripped = (text or "").strip()
    if stripped and ":" not in stripped and _GROUP_RE.match(stripped):
        return f"{int(stripped)}:00:00"
    return stripped


def _format_pace(seconds: float) -> str:
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        raise ValidationError(f"Pace must be a non-negative number, got {seconds}")
    total = round_half_up(seconds)
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def format_swim_pace(seconds_per_100m: float) -> str:
    return f"{_format_pace(seconds_per_100m)}/100m"


def format_run_pace(seconds_per_km: float) -> str:
    return f"{_format_pace(seconds_per_km)}/km"

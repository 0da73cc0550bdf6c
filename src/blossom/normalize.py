"""Convert log entries into fully-populated numeric vectors.

All defaulting for optional log fields happens here, once.  Scoring and
correlation code downstream works on ``NormalizedDay`` and can assume every
field is present.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from src.blossom.config_loader import EngineConfig, get_engine_config
from src.blossom.models import DietPattern, ExerciseIntensity, Flow, LogEntry, StressLevel

_PHYSICAL_SYMPTOMS = ("acne", "hirsutism", "hair_loss", "bloat", "cramps")
_STRESS_LINKED_SYMPTOMS = ("acne", "bloat", "cramps")


@dataclass(frozen=True)
class NormalizedDay:
    """Numeric view of one log entry.

    Attributes:
        date:                  Calendar date of the entry.
        flow:                  Bleeding intensity.
        symptom_score:         Mean of the five physical symptom severities.
        stress_symptom_burden: Mean of acne, bloat and cramps.
        sleep_hours:           Hours implied by the sleep bucket (0 if not logged).
        exercise:              Raw exercise intensity, if logged.
        exercise_level:        Ordinal exercise level (0 if not logged).
        diet:                  Raw diet pattern, if logged.
        stress:                Raw stress level, if logged.
        anxiety_level:         Anxiety on a 0-10 scale (default when not logged).
        mood:                  Mood rescaled onto 0-100 (default when not logged).
        energy:                Custom energy tag, else sleep hours capped at 10.
    """

    date: date
    flow: Flow
    symptom_score: float
    stress_symptom_burden: float
    sleep_hours: float
    exercise: ExerciseIntensity | None
    exercise_level: float
    diet: DietPattern | None
    stress: StressLevel | None
    anxiety_level: float
    mood: float
    energy: float


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def normalize_entry(entry: LogEntry, config: EngineConfig | None = None) -> NormalizedDay:
    """Build the numeric vector for a single entry."""
    cfg = config or get_engine_config()
    scales = cfg.scales

    symptoms = entry.symptoms
    psych = entry.psych
    lifestyle = entry.lifestyle

    symptom_score = mean([float(getattr(symptoms, name)) for name in _PHYSICAL_SYMPTOMS])
    stress_burden = mean([float(getattr(symptoms, name)) for name in _STRESS_LINKED_SYMPTOMS])

    sleep_hours = (
        scales.sleep_hours.get(lifestyle.sleep.value, 0.0) if lifestyle.sleep is not None else 0.0
    )
    exercise_level = (
        scales.exercise_levels.get(lifestyle.exercise.value, 0.0)
        if lifestyle.exercise is not None
        else 0.0
    )
    anxiety_level = (
        scales.anxiety_levels.get(psych.anxiety.value, scales.anxiety_default)
        if psych.anxiety is not None
        else scales.anxiety_default
    )

    if psych.mood is None:
        mood = scales.mood_default
    else:
        mood = clamp(psych.mood * 100.0 / scales.mood_scale_max, 0.0, 100.0)

    energy_tag = _find_tag(entry.custom_values, scales.energy_tag)
    energy = energy_tag if energy_tag is not None else min(scales.energy_cap, sleep_hours)

    return NormalizedDay(
        date=entry.date,
        flow=entry.flow,
        symptom_score=symptom_score,
        stress_symptom_burden=stress_burden,
        sleep_hours=sleep_hours,
        exercise=lifestyle.exercise,
        exercise_level=exercise_level,
        diet=lifestyle.diet,
        stress=psych.stress,
        anxiety_level=anxiety_level,
        mood=mood,
        energy=energy,
    )


def normalize_entries(
    entries: Sequence[LogEntry], config: EngineConfig | None = None
) -> list[NormalizedDay]:
    """Normalize entries, preserving their order."""
    cfg = config or get_engine_config()
    return [normalize_entry(entry, cfg) for entry in entries]


def _find_tag(custom_values: dict[str, float] | None, tag: str) -> float | None:
    if not custom_values:
        return None
    for name, value in custom_values.items():
        if name.strip().lower() == tag.lower():
            return float(value)
    return None

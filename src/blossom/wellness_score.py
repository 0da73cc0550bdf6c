"""Blossom wellness score calculator.

Computes a 0–100 score from the last couple of weeks of journal entries by
comparing the older half of the window with the newer half.

Score formula (from engine_config.yaml):
    - Symptom improvement, older vs newer half  (weight: 0.40)
    - Self-care consistency in the newer half   (weight: 0.30)
    - Emotional wellbeing (mean mood, 0-100)    (weight: 0.30)

With fewer than ``min_entries`` logs the neutral score is returned instead.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Sequence

from src.blossom.config_loader import EngineConfig, WellnessConfig, get_engine_config
from src.blossom.models import DietPattern, ExerciseIntensity, LogEntry, sort_entries
from src.blossom.normalize import NormalizedDay, clamp, mean, normalize_entries, round_half_up

logger = logging.getLogger("blossom.wellness")

SYMPTOM_IMPROVEMENT = "symptom_improvement"
SELF_CARE_CONSISTENCY = "self_care_consistency"
EMOTIONAL_WELLBEING = "emotional_wellbeing"


@dataclass
class WellnessComponentScore:
    """Score for a single wellness component.

    Attributes:
        name:        Component identifier (matches config key).
        raw_score:   Unrounded component score 0.0–100.0.
        weight:      Configured weight for this component.
        explanation: Human-readable detail line for display.
    """

    name: str
    raw_score: float
    weight: float
    explanation: str = ""

    @property
    def value(self) -> int:
        return round_half_up(self.raw_score)

    @property
    def weighted(self) -> float:
        return self.raw_score * self.weight


@dataclass
class WellnessScore:
    """The complete wellness score for one window of entries.

    Attributes:
        total:           Final 0–100 score.
        components:      Per-component breakdown.
        has_enough_data: False when the neutral default was returned.
        entries_used:    Number of entries in the window.
    """

    total: int
    components: list[WellnessComponentScore] = field(default_factory=list)
    has_enough_data: bool = True
    entries_used: int = 0

    def component(self, name: str) -> WellnessComponentScore | None:
        for component in self.components:
            if component.name == name:
                return component
        return None

    @property
    def details(self) -> dict[str, str]:
        return {c.name: c.explanation for c in self.components}


# ---------------------------------------------------------------------------
# Component scorers
# ---------------------------------------------------------------------------


def _score_symptom_improvement(
    previous: Sequence[NormalizedDay],
    current: Sequence[NormalizedDay],
    weight: float,
    detail_threshold_pct: float = 10.0,
) -> WellnessComponentScore:
    """Score the change in mean symptom severity between the two halves.

    50 is "no change"; each percent of improvement adds a point.  A
    symptom-free older half cannot show improvement, so it yields 100 when
    the newer half is also symptom-free and the neutral 50 otherwise.
    """
    prev_avg = mean([d.symptom_score for d in previous])
    curr_avg = mean([d.symptom_score for d in current])

    if prev_avg > 0:
        improvement = (prev_avg - curr_avg) / prev_avg * 100
        raw = clamp(50 + improvement, 0.0, 100.0)
        if improvement > detail_threshold_pct:
            explanation = f"Your symptoms improved by {round_half_up(improvement)}%"
        elif improvement < -detail_threshold_pct:
            explanation = f"Symptoms increased by {round_half_up(abs(improvement))}%"
        else:
            explanation = "Symptoms remain stable"
    else:
        raw = 100.0 if curr_avg == 0 else 50.0
        explanation = "Baseline established"

    return WellnessComponentScore(
        name=SYMPTOM_IMPROVEMENT, raw_score=raw, weight=weight, explanation=explanation
    )


def _is_self_care_day(day: NormalizedDay, good_sleep_hours: float) -> bool:
    has_good_sleep = day.sleep_hours >= good_sleep_hours
    has_healthy_diet = day.diet is DietPattern.balanced
    has_movement = day.exercise is not None and day.exercise is not ExerciseIntensity.rest
    return has_good_sleep or has_healthy_diet or has_movement


def _score_self_care(
    current: Sequence[NormalizedDay],
    weight: float,
    good_sleep_hours: float = 7.0,
) -> WellnessComponentScore:
    """Percentage of recent days with good sleep, a balanced diet, or movement."""
    if not current:
        return WellnessComponentScore(
            name=SELF_CARE_CONSISTENCY, raw_score=0.0, weight=weight,
            explanation="No recent days logged",
        )

    self_care_days = sum(1 for d in current if _is_self_care_day(d, good_sleep_hours))
    return WellnessComponentScore(
        name=SELF_CARE_CONSISTENCY,
        raw_score=self_care_days / len(current) * 100,
        weight=weight,
        explanation=f"{self_care_days} of {len(current)} days with self-care",
    )


def _score_emotional_wellbeing(
    current: Sequence[NormalizedDay],
    weight: float,
    neutral_score: float = 50.0,
) -> WellnessComponentScore:
    """Mean mood over the recent half; unlogged mood already defaults to 50."""
    raw = mean([d.mood for d in current]) if current else neutral_score
    return WellnessComponentScore(
        name=EMOTIONAL_WELLBEING,
        raw_score=raw,
        weight=weight,
        explanation=f"Average mood: {round_half_up(raw)}/100",
    )


def _neutral_score(ws: WellnessConfig, entries_used: int) -> WellnessScore:
    components = [
        WellnessComponentScore(
            name=SYMPTOM_IMPROVEMENT, raw_score=50.0,
            weight=ws.component_weight(SYMPTOM_IMPROVEMENT),
            explanation="Not enough data yet",
        ),
        WellnessComponentScore(
            name=SELF_CARE_CONSISTENCY, raw_score=0.0,
            weight=ws.component_weight(SELF_CARE_CONSISTENCY),
            explanation="Keep logging to see your consistency",
        ),
        WellnessComponentScore(
            name=EMOTIONAL_WELLBEING, raw_score=50.0,
            weight=ws.component_weight(EMOTIONAL_WELLBEING),
            explanation="Your emotional journey is just beginning",
        ),
    ]
    return WellnessScore(
        total=ws.neutral_score,
        components=components,
        has_enough_data=False,
        entries_used=entries_used,
    )


# ---------------------------------------------------------------------------
# Main calculator
# ---------------------------------------------------------------------------


class WellnessCalculator:
    """Compute the Blossom wellness score from a window of entries.

    Usage::

        calc = WellnessCalculator()
        score = calc.compute(last_14_days)
        print(score.total, score.details)
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or get_engine_config()

    @property
    def _ws_config(self) -> WellnessConfig:
        return self._config.wellness

    def compute(self, entries: Iterable[LogEntry | Mapping[str, Any]]) -> WellnessScore:
        """Compute the wellness score.

        Args:
            entries: The caller-selected window (typically the last 14 days),
                     in any order.

        Returns:
            WellnessScore with a 0–100 total and component breakdown.
        """
        ws = self._ws_config
        ordered = sort_entries(entries)

        if len(ordered) < ws.min_entries:
            logger.info(
                "Insufficient wellness data: %d entries (need %d)",
                len(ordered), ws.min_entries,
            )
            return _neutral_score(ws, len(ordered))

        days = normalize_entries(ordered, self._config)
        # Older half takes the extra entry when the count is odd.
        midpoint = math.ceil(len(days) / 2)
        previous, current = days[:midpoint], days[midpoint:]

        symptom = _score_symptom_improvement(
            previous, current,
            ws.component_weight(SYMPTOM_IMPROVEMENT),
            ws.trend_detail_threshold_pct,
        )
        self_care = _score_self_care(
            current, ws.component_weight(SELF_CARE_CONSISTENCY), ws.good_sleep_hours
        )
        emotional = _score_emotional_wellbeing(
            current, ws.component_weight(EMOTIONAL_WELLBEING), ws.neutral_score
        )

        components = [symptom, self_care, emotional]

        total = round_half_up(sum(c.weighted for c in components))
        total = int(clamp(total, 0, 100))

        logger.debug(
            "Wellness score %d from %d entries: symptom=%.2f self_care=%.2f mood=%.2f",
            total, len(days), symptom.raw_score, self_care.raw_score, emotional.raw_score,
        )
        return WellnessScore(
            total=total,
            components=components,
            has_enough_data=True,
            entries_used=len(days),
        )


def compute_wellness_score(
    entries: Iterable[LogEntry | Mapping[str, Any]],
    config: EngineConfig | None = None,
) -> WellnessScore:
    """Functional wrapper around ``WellnessCalculator.compute``."""
    return WellnessCalculator(config).compute(entries)


def compute_wellness_total(
    entries: Iterable[LogEntry | Mapping[str, Any]],
    config: EngineConfig | None = None,
) -> int:
    """Return only the 0–100 total."""
    return compute_wellness_score(entries, config).total

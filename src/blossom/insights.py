"""Lifestyle/outcome correlation stories.

Splits a window of journal entries into cohorts by a lifestyle factor and
compares an outcome between them, surfacing patterns like:
- "On nights you sleep 7h+, your anxiety is 40% lower"
- "You reported 25% more energy on active days"
- "You feel 12% better on balanced-eating days"

Each factor needs a minimum number of days in both cohorts, and the relative
difference must clear a per-factor threshold.  When nothing qualifies, an
educational tip is returned instead so the card is never empty.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from src.blossom.config_loader import EngineConfig, InsightConfig, get_engine_config
from src.blossom.models import DietPattern, LogEntry, StressLevel, sort_entries
from src.blossom.normalize import NormalizedDay, mean, normalize_entries, round_half_up

logger = logging.getLogger("blossom.insights")


class StoryCategory(str, Enum):
    sleep = "sleep"
    movement = "movement"
    diet = "diet"
    stress = "stress"
    education = "education"


class Confidence(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


@dataclass(frozen=True)
class PatternStory:
    """A single generated insight.

    Attributes:
        story:      Sentence shown to the user.
        category:   Lifestyle factor the story is about, or 'education'.
        confidence: high for cohort claims, low for tips and placeholders.
    """

    story: str
    category: StoryCategory
    confidence: Confidence


KEEP_LOGGING_STORY = (
    "Keep logging daily to discover personalized insights about your body's patterns."
)

EDUCATION_TIPS: tuple[str, ...] = (
    "Did you know? Consistent sleep helps regulate insulin levels.",
    "Research shows that regular movement can improve insulin sensitivity by up to 25%.",
    "Balanced meals with low-GI foods help stabilize blood sugar throughout the day.",
    "Chronic stress can worsen PCOS symptoms by increasing cortisol levels.",
    "Staying hydrated supports metabolic function and reduces inflammation.",
    "Strength training builds muscle, which naturally improves insulin resistance.",
    "Mindful eating practices can help reduce inflammation and support hormone balance.",
    "Quality sleep (7-9 hours) is essential for reproductive hormone regulation.",
    "Anti-inflammatory foods like leafy greens and berries support ovarian health.",
    "Regular physical activity helps reduce androgen levels naturally.",
)

# factor → (template when the expected pattern holds, template when it is reversed)
_TEMPLATES: dict[StoryCategory, tuple[str, str]] = {
    StoryCategory.sleep: (
        "On nights you sleep 7h+, your anxiety is {pct}% lower. Rest is your medicine.",
        "Interestingly, your anxiety runs {pct}% higher after 7h+ nights, so sleep "
        "doesn't look like the main driver. Let's explore other factors.",
    ),
    StoryCategory.movement: (
        "Movement fuels you. You reported {pct}% more energy on active days.",
        "Your body is telling you it needs more rest. Energy is {pct}% lower on active days.",
    ),
    StoryCategory.diet: (
        "Balanced nutrition stabilizes your mood. You feel {pct}% better on those days.",
        "Your mood runs {pct}% lower on balanced-eating days than on craving days, "
        "so food may not be what moves it.",
    ),
    StoryCategory.stress: (
        "Lower stress days come with {pct}% fewer physical symptoms. "
        "Your mind-body connection is strong.",
        "Physical symptoms run {pct}% higher on low-stress days, so stress may not "
        "be what drives them.",
    ),
}


@dataclass(frozen=True)
class _Factor:
    """Cohort rule and outcome for one lifestyle factor.

    ``favoured`` is the cohort expected to do better, ``reference`` the one
    expected to do worse.  ``percent_difference`` is measured against the
    reference cohort, signed so that positive means the expected pattern.
    """

    category: StoryCategory
    favoured: Callable[[NormalizedDay], bool]
    reference: Callable[[NormalizedDay], bool]
    outcome: Callable[[NormalizedDay], float]
    higher_is_better: bool


def percent_difference(
    favoured_mean: float, reference_mean: float, higher_is_better: bool
) -> float | None:
    """Relative difference of the favoured cohort vs the reference cohort, in percent.

    Returns None when the reference mean is 0, since no meaningful ratio exists.
    """
    if reference_mean == 0:
        return None
    if higher_is_better:
        return (favoured_mean - reference_mean) / reference_mean * 100
    return (reference_mean - favoured_mean) / reference_mean * 100


def _build_factors(ic: InsightConfig) -> tuple[_Factor, ...]:
    # Unlogged sleep and exercise normalize to 0, so they fall in the poor-sleep and rest cohorts.
    return (
        _Factor(
            category=StoryCategory.sleep,
            favoured=lambda d: d.sleep_hours >= ic.good_sleep_hours,
            reference=lambda d: d.sleep_hours < ic.poor_sleep_hours,
            outcome=lambda d: d.anxiety_level,
            higher_is_better=False,
        ),
        _Factor(
            category=StoryCategory.movement,
            favoured=lambda d: d.exercise_level >= ic.active_exercise_level,
            reference=lambda d: d.exercise_level < ic.active_exercise_level,
            outcome=lambda d: d.energy,
            higher_is_better=True,
        ),
        _Factor(
            category=StoryCategory.diet,
            favoured=lambda d: d.diet is DietPattern.balanced,
            reference=lambda d: d.diet is DietPattern.cravings,
            outcome=lambda d: d.mood,
            higher_is_better=True,
        ),
        _Factor(
            category=StoryCategory.stress,
            favoured=lambda d: d.stress is StressLevel.low,
            reference=lambda d: d.stress in (StressLevel.medium, StressLevel.high),
            outcome=lambda d: d.stress_symptom_burden,
            higher_is_better=False,
        ),
    )


class InsightEngine:
    """Generate pattern stories from a window of journal entries.

    Usage::

        engine = InsightEngine(rng=random.Random(7))
        for story in engine.generate(last_30_days):
            print(story.category.value, story.story)
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config or get_engine_config()
        self._rng = rng or random.Random()

    @property
    def _ic_config(self) -> InsightConfig:
        return self._config.insights

    def generate(self, entries: Iterable[LogEntry | Mapping[str, Any]]) -> list[PatternStory]:
        """Return stories in factor declaration order (sleep, movement, diet, stress).

        Args:
            entries: The caller-selected window (typically the last 30 days).
        """
        ic = self._ic_config
        ordered = sort_entries(entries)

        if len(ordered) < ic.min_entries:
            logger.info(
                "Insufficient insight data: %d entries (need %d)",
                len(ordered), ic.min_entries,
            )
            return [PatternStory(KEEP_LOGGING_STORY, StoryCategory.education, Confidence.low)]

        days = normalize_entries(ordered, self._config)
        stories = [
            story
            for story in (self._evaluate(factor, days) for factor in _build_factors(ic))
            if story is not None
        ]

        if not stories:
            tip = self._rng.choice(EDUCATION_TIPS)
            logger.debug("No factor cleared its threshold; falling back to a tip")
            stories.append(PatternStory(tip, StoryCategory.education, Confidence.low))

        return stories

    def primary_story(self, entries: Iterable[LogEntry | Mapping[str, Any]]) -> str:
        """First high-confidence story, else the first story of any confidence."""
        stories = self.generate(entries)
        for story in stories:
            if story.confidence is Confidence.high:
                return story.story
        return stories[0].story

    def _evaluate(self, factor: _Factor, days: Sequence[NormalizedDay]) -> PatternStory | None:
        ic = self._ic_config
        favoured = [factor.outcome(d) for d in days if factor.favoured(d)]
        reference = [factor.outcome(d) for d in days if factor.reference(d)]

        if len(favoured) < ic.min_cohort_size or len(reference) < ic.min_cohort_size:
            logger.debug(
                "Skipping %s: cohorts %d/%d below minimum %d",
                factor.category.value, len(favoured), len(reference), ic.min_cohort_size,
            )
            return None

        diff = percent_difference(mean(favoured), mean(reference), factor.higher_is_better)
        if diff is None:
            logger.debug("Skipping %s: reference cohort mean is 0", factor.category.value)
            return None

        threshold = ic.threshold(factor.category.value)
        if abs(diff) <= threshold:
            return None

        positive, reversed_ = _TEMPLATES[factor.category]
        template = positive if diff > 0 else reversed_
        logger.debug("%s difference %.1f%% cleared %.0f%%", factor.category.value, diff, threshold)
        return PatternStory(
            story=template.format(pct=round_half_up(abs(diff))),
            category=factor.category,
            confidence=Confidence.high,
        )


def generate_insights(
    entries: Iterable[LogEntry | Mapping[str, Any]],
    rng: random.Random | None = None,
    config: EngineConfig | None = None,
) -> list[PatternStory]:
    """Functional wrapper around ``InsightEngine.generate``."""
    return InsightEngine(config, rng).generate(entries)


def select_primary_story(
    entries: Iterable[LogEntry | Mapping[str, Any]],
    rng: random.Random | None = None,
    config: EngineConfig | None = None,
) -> str:
    """Functional wrapper around ``InsightEngine.primary_story``."""
    return InsightEngine(config, rng).primary_story(entries)

"""Point-in-time cycle analysis built on detected true periods.

Turns the chronological list of true periods into:
- the current cycle day and long-cycle flag
- cycle-length variability over the most recent cycles
- a regular / irregular / long classification with an average length
- the inferred phase and a one-line description for the dashboard

Nothing here assumes a 28-day cycle except as the documented fallback when
there is no usable history.
"""

from __future__ import annotations

import logging
import statistics
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from src.blossom.config_loader import EngineConfig, get_engine_config
from src.blossom.cycle.period_detector import CycleEvent, detect_true_periods
from src.blossom.models import LogEntry
from src.blossom.normalize import mean, round_half_up

logger = logging.getLogger("blossom.cycle.cycle_analyzer")


class CycleStatus(str, Enum):
    regular = "regular"
    irregular = "irregular"
    long = "long"
    unknown = "unknown"


class InferredPhase(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulation = "ovulation"
    luteal = "luteal"


@dataclass
class CycleAnalysis:
    """Snapshot of the cycle relative to a reference date.

    Attributes:
        current_day:      Days since the last true period started (0 if untracked).
        is_long_cycle:    True once current_day passes the long-cycle threshold.
        variability:      Population standard deviation of recent cycle lengths,
                          short cycles included. describe() reads the summary's
                          regularity instead.
        last_true_period: Most recent true period, if any.
        cycle_history:    All true periods, oldest first.
        is_untracked:     True when no true period could be established.
    """

    current_day: int = 0
    is_long_cycle: bool = False
    variability: float = 0.0
    last_true_period: CycleEvent | None = None
    cycle_history: list[CycleEvent] = field(default_factory=list)
    is_untracked: bool = True


@dataclass
class CycleSummary:
    """Dashboard-level cycle figures.

    Attributes:
        current_cycle_day:    Same as CycleAnalysis.current_day.
        last_cycle_length:    Length of the most recent complete cycle.
        average_cycle_length: Rounded mean of recent valid cycle lengths.
        regularity:           Std deviation of recent valid cycle lengths.
        status:               regular / irregular / long / unknown.
        has_enough_data:      False until two true periods give a plausible length.
        phase:                Inferred phase for current_cycle_day (None if untracked).
    """

    current_cycle_day: int
    last_cycle_length: int
    average_cycle_length: int
    regularity: float = 0.0
    status: CycleStatus = CycleStatus.unknown
    has_enough_data: bool = False
    phase: InferredPhase | None = None


class CycleAnalyzer:
    """Analyze cycle history from journal entries.

    Usage::

        analyzer = CycleAnalyzer()
        analysis = analyzer.analyze(entries, today=date(2026, 2, 23))
        summary = analyzer.summarize(entries, today=date(2026, 2, 23))
        print(summary.status, summary.average_cycle_length)
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or get_engine_config()

    def analyze(
        self,
        entries: Iterable[LogEntry | Mapping[str, Any]],
        today: date | None = None,
    ) -> CycleAnalysis:
        """Build a CycleAnalysis from the full log history.

        Args:
            entries: Log entries in any order.
            today:   Reference date (defaults to today).
        """
        history = detect_true_periods(entries, self._config)
        if not history:
            logger.info("No true period found; cycle is untracked")
            return CycleAnalysis()

        today = today or date.today()
        last = history[-1]
        current_day = (today - last.start_date).days
        if current_day < 0:
            logger.warning(
                "Reference date %s precedes last period start %s; clamping cycle day to 0",
                today, last.start_date,
            )
            current_day = 0

        recent_lengths = [
            e.days_from_previous
            for e in history[-self._config.cycle.history_window:]
            if e.days_from_previous is not None
        ]
        variability = statistics.pstdev(recent_lengths) if len(recent_lengths) >= 2 else 0.0

        analysis = CycleAnalysis(
            current_day=current_day,
            is_long_cycle=current_day > self._config.phases.long_cycle_days,
            variability=variability,
            last_true_period=last,
            cycle_history=history,
            is_untracked=False,
        )
        logger.debug(
            "Cycle analysis: day=%d long=%s variability=%.2f periods=%d",
            analysis.current_day, analysis.is_long_cycle, analysis.variability, len(history),
        )
        return analysis

    def summarize(
        self,
        entries: Iterable[LogEntry | Mapping[str, Any]],
        today: date | None = None,
    ) -> CycleSummary:
        """Compute last/average cycle length and the regularity status."""
        return self.summarize_analysis(self.analyze(entries, today))

    def summarize_analysis(self, analysis: CycleAnalysis) -> CycleSummary:
        """Derive a CycleSummary from an existing analysis."""
        rules = self._config.cycle
        summary = CycleSummary(
            current_cycle_day=analysis.current_day,
            last_cycle_length=rules.default_cycle_length,
            average_cycle_length=rules.default_cycle_length,
            phase=None if analysis.is_untracked else self.phase_for_day(analysis.current_day),
        )

        lengths = [
            e.days_from_previous
            for e in analysis.cycle_history
            if e.days_from_previous is not None
        ]
        if not lengths:
            return summary

        last_length = lengths[-1]
        if last_length < rules.min_cycle_days:
            logger.info(
                "Last cycle length %d is below the %d-day minimum; not enough data",
                last_length, rules.min_cycle_days,
            )
            return summary

        recent_valid = [
            length for length in lengths[-rules.history_window:]
            if length >= rules.min_cycle_days
        ]
        regularity = statistics.pstdev(recent_valid) if len(recent_valid) >= 2 else 0.0

        summary.last_cycle_length = last_length
        summary.average_cycle_length = round_half_up(mean(recent_valid))
        summary.regularity = regularity
        summary.status = self.classify(last_length, regularity)
        summary.has_enough_data = True
        return summary

    def classify(self, last_cycle_length: int, variability: float) -> CycleStatus:
        """Classify a cycle: long beats irregular beats regular."""
        if last_cycle_length > self._config.phases.long_cycle_days:
            return CycleStatus.long
        if variability > self._config.cycle.irregular_variability_days:
            return CycleStatus.irregular
        return CycleStatus.regular

    def phase_for_day(self, cycle_day: int) -> InferredPhase:
        """Return the inferred phase for a cycle day."""
        phases = self._config.phases
        if cycle_day <= phases.menstrual_end_day:
            return InferredPhase.menstrual
        if cycle_day <= phases.follicular_end_day:
            return InferredPhase.follicular
        if cycle_day == phases.ovulation_day:
            return InferredPhase.ovulation
        return InferredPhase.luteal

    def describe(self, analysis: CycleAnalysis) -> str:
        """One-line, phase-aware description of the analysis."""
        if analysis.is_untracked:
            return "Start tracking your cycle to see insights"

        day = analysis.current_day
        if analysis.is_long_cycle:
            return f"Day {day} - Long cycle detected. Consider metabolic support."
        # Same figure the summary reports, so cycles under min_cycle_days are left out.
        regularity = self.summarize_analysis(analysis).regularity
        if regularity > self._config.cycle.irregular_variability_days:
            return (
                f"Day {day} - High variability ({round_half_up(regularity)} days). "
                "Focus on cycle regulation."
            )

        phase = self.phase_for_day(day)
        if phase is InferredPhase.menstrual:
            return f"Day {day} - Menstrual phase. Rest and replenish."
        if phase is InferredPhase.follicular:
            return f"Day {day} - Follicular phase. Energy building."
        if phase is InferredPhase.ovulation:
            return f"Day {day} - Ovulation window. Peak energy."
        if day <= self._config.phases.luteal_end_day:
            return f"Day {day} - Luteal phase. Nurture and balance."
        return f"Day {day} - Listen to your body's rhythm."


def analyze_cycle(
    entries: Iterable[LogEntry | Mapping[str, Any]],
    today: date | None = None,
    config: EngineConfig | None = None,
) -> CycleAnalysis:
    """Functional wrapper around ``CycleAnalyzer.analyze``."""
    return CycleAnalyzer(config).analyze(entries, today)


def summarize_cycle(
    entries: Iterable[LogEntry | Mapping[str, Any]],
    today: date | None = None,
    config: EngineConfig | None = None,
) -> CycleSummary:
    """Functional wrapper around ``CycleAnalyzer.summarize``."""
    return CycleAnalyzer(config).summarize(entries, today)


def describe_cycle(analysis: CycleAnalysis, config: EngineConfig | None = None) -> str:
    """Functional wrapper around ``CycleAnalyzer.describe``."""
    return CycleAnalyzer(config).describe(analysis)


def classify_cycle_status(
    last_cycle_length: int, variability: float, config: EngineConfig | None = None
) -> CycleStatus:
    """Functional wrapper around ``CycleAnalyzer.classify``."""
    return CycleAnalyzer(config).classify(last_cycle_length, variability)

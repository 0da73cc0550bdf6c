"""Tests for cycle analysis, regularity classification and phase inference."""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from src.blossom.config_loader import EngineConfig
from src.blossom.cycle import (
    CycleAnalysis,
    CycleAnalyzer,
    CycleStatus,
    InferredPhase,
    analyze_cycle,
    classify_cycle_status,
    describe_cycle,
    summarize_cycle,
)
from src.blossom.models import LogEntry
from src.blossom.tests.conftest import TEST_DATE, days_ago, make_entry, periods_with_lengths


@pytest.fixture
def analyzer(engine_config: EngineConfig) -> CycleAnalyzer:
    return CycleAnalyzer(engine_config)


class TestAnalyze:
    def test_untracked_without_true_period(self, analyzer: CycleAnalyzer) -> None:
        entries = [make_entry(days_ago(3), "spotting"), make_entry(days_ago(2), "light")]
        analysis = analyzer.analyze(entries, today=TEST_DATE)
        assert analysis.is_untracked
        assert analysis.current_day == 0
        assert analysis.last_true_period is None
        assert analysis.cycle_history == []

    def test_sarah_current_day_ignores_stray_light_day(
        self, analyzer: CycleAnalyzer, sarah_entries: list[LogEntry]
    ) -> None:
        analysis = analyzer.analyze(sarah_entries, today=TEST_DATE)
        assert analysis.current_day == 32
        assert not analysis.is_untracked
        assert not analysis.is_long_cycle

    def test_alex_long_cycle(self, analyzer: CycleAnalyzer, alex_entries: list[LogEntry]) -> None:
        analysis = analyzer.analyze(alex_entries, today=TEST_DATE)
        assert analysis.current_day == 65
        assert analysis.is_long_cycle
        assert len(analysis.cycle_history) == 1
        assert analysis.variability == 0.0

    def test_day_35_is_not_yet_long(self, analyzer: CycleAnalyzer) -> None:
        entries = periods_with_lengths(days_ago(35), [])
        assert not analyzer.analyze(entries, today=TEST_DATE).is_long_cycle
        assert analyzer.analyze(entries, today=TEST_DATE + timedelta(days=1)).is_long_cycle

    def test_variability_uses_recent_window(self, analyzer: CycleAnalyzer) -> None:
        # Only the last three lengths (28, 30, 29) count; the 60 drops out.
        entries = periods_with_lengths(days_ago(160), [60, 28, 30, 29])
        analysis = analyzer.analyze(entries, today=TEST_DATE)
        assert analysis.variability == pytest.approx(0.8165, abs=1e-3)

    def test_reference_date_before_last_period_clamps_to_zero(
        self, analyzer: CycleAnalyzer, caplog: pytest.LogCaptureFixture
    ) -> None:
        entries = periods_with_lengths(days_ago(10), [])
        with caplog.at_level(logging.WARNING, logger="blossom.cycle.cycle_analyzer"):
            analysis = analyzer.analyze(entries, today=days_ago(15))
        assert analysis.current_day == 0
        assert "clamping" in caplog.text

    def test_functional_wrapper(self, engine_config: EngineConfig, alex_entries: list[LogEntry]) -> None:
        assert analyze_cycle(alex_entries, TEST_DATE, engine_config).current_day == 65


class TestSummarize:
    def test_regular_cycles(self, analyzer: CycleAnalyzer) -> None:
        entries = periods_with_lengths(days_ago(97), [28, 30, 29])
        summary = analyzer.summarize(entries, today=TEST_DATE)
        assert summary.has_enough_data
        assert summary.status is CycleStatus.regular
        assert summary.last_cycle_length == 29
        assert summary.average_cycle_length == 29
        assert summary.regularity == pytest.approx(0.8165, abs=1e-3)
        assert summary.current_cycle_day == 10
        assert summary.phase is InferredPhase.follicular

    def test_long_beats_irregular(self, analyzer: CycleAnalyzer) -> None:
        entries = periods_with_lengths(days_ago(70), [20, 40])
        summary = analyzer.summarize(entries, today=TEST_DATE)
        assert summary.status is CycleStatus.long
        assert summary.last_cycle_length == 40
        assert summary.average_cycle_length == 30
        assert summary.regularity == pytest.approx(10.0)

    def test_irregular_cycles(self, analyzer: CycleAnalyzer) -> None:
        entries = periods_with_lengths(days_ago(82), [18, 34, 20])
        summary = analyzer.summarize(entries, today=TEST_DATE)
        assert summary.status is CycleStatus.irregular
        assert summary.regularity == pytest.approx(7.118, abs=1e-3)
        assert summary.average_cycle_length == 24

    def test_short_last_cycle_is_not_enough_data(self, analyzer: CycleAnalyzer) -> None:
        entries = periods_with_lengths(days_ago(40), [28, 10])
        summary = analyzer.summarize(entries, today=TEST_DATE)
        assert not summary.has_enough_data
        assert summary.status is CycleStatus.unknown
        assert summary.last_cycle_length == 28
        assert summary.average_cycle_length == 28

    def test_short_cycles_excluded_from_average(self, analyzer: CycleAnalyzer) -> None:
        entries = periods_with_lengths(days_ago(80), [10, 30, 28])
        summary = analyzer.summarize(entries, today=TEST_DATE)
        assert summary.has_enough_data
        assert summary.average_cycle_length == 29
        assert summary.regularity == pytest.approx(1.0)

    def test_single_period_has_defaults(
        self, analyzer: CycleAnalyzer, alex_entries: list[LogEntry]
    ) -> None:
        summary = analyzer.summarize(alex_entries, today=TEST_DATE)
        assert not summary.has_enough_data
        assert summary.status is CycleStatus.unknown
        assert summary.average_cycle_length == 28
        assert summary.current_cycle_day == 65
        assert summary.phase is InferredPhase.luteal

    def test_untracked_has_no_phase(self, engine_config: EngineConfig) -> None:
        summary = summarize_cycle([], TEST_DATE, engine_config)
        assert summary.phase is None
        assert summary.current_cycle_day == 0


class TestClassifyAndPhase:
    @pytest.mark.parametrize(
        "length, variability, expected",
        [
            (29, 0.8, CycleStatus.regular),
            (29, 7.0, CycleStatus.regular),
            (29, 7.1, CycleStatus.irregular),
            (36, 0.0, CycleStatus.long),
            (36, 12.0, CycleStatus.long),
        ],
    )
    def test_classify(
        self, analyzer: CycleAnalyzer, length: int, variability: float, expected: CycleStatus
    ) -> None:
        assert analyzer.classify(length, variability) is expected

    def test_functional_classify(self, engine_config: EngineConfig) -> None:
        assert classify_cycle_status(40, 0.0, engine_config) is CycleStatus.long
        assert classify_cycle_status(28, 9.5, engine_config) is CycleStatus.irregular

    @pytest.mark.parametrize(
        "day, expected",
        [
            (0, InferredPhase.menstrual),
            (5, InferredPhase.menstrual),
            (6, InferredPhase.follicular),
            (13, InferredPhase.follicular),
            (14, InferredPhase.ovulation),
            (15, InferredPhase.luteal),
            (40, InferredPhase.luteal),
        ],
    )
    def test_phase_for_day(self, analyzer: CycleAnalyzer, day: int, expected: InferredPhase) -> None:
        assert analyzer.phase_for_day(day) is expected


class TestDescribe:
    def test_untracked(self, engine_config: EngineConfig) -> None:
        assert describe_cycle(CycleAnalysis(), engine_config) == (
            "Start tracking your cycle to see insights"
        )

    @pytest.mark.parametrize(
        "day, expected",
        [
            (3, "Day 3 - Menstrual phase. Rest and replenish."),
            (9, "Day 9 - Follicular phase. Energy building."),
            (14, "Day 14 - Ovulation window. Peak energy."),
            (18, "Day 18 - Luteal phase. Nurture and balance."),
            (26, "Day 26 - Listen to your body's rhythm."),
        ],
    )
    def test_phase_messages(self, analyzer: CycleAnalyzer, day: int, expected: str) -> None:
        analysis = CycleAnalysis(current_day=day, is_untracked=False)
        assert analyzer.describe(analysis) == expected

    def test_long_cycle_message(
        self, analyzer: CycleAnalyzer, alex_entries: list[LogEntry]
    ) -> None:
        analysis = analyzer.analyze(alex_entries, today=TEST_DATE)
        assert analyzer.describe(analysis) == (
            "Day 65 - Long cycle detected. Consider metabolic support."
        )

    def test_high_variability_message(self, analyzer: CycleAnalyzer) -> None:
        entries = periods_with_lengths(days_ago(82), [18, 34, 20])
        analysis = analyzer.analyze(entries, today=TEST_DATE)
        assert analyzer.describe(analysis) == (
            "Day 10 - High variability (7 days). Focus on cycle regulation."
        )

    def test_short_cycles_do_not_count_as_variability(self, analyzer: CycleAnalyzer) -> None:
        entries = periods_with_lengths(days_ago(80), [10, 30, 28])
        analysis = analyzer.analyze(entries, today=TEST_DATE)
        assert analysis.variability > 7
        assert analyzer.summarize_analysis(analysis).regularity == pytest.approx(1.0)
        assert analyzer.describe(analysis) == "Day 12 - Follicular phase. Energy building."

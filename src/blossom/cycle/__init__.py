"""Menstrual cycle inference for Blossom.

Modules:
    period_detector — Group flow logs into bleeding runs and keep true periods
    cycle_analyzer  — Current cycle day, variability, regularity status, phase
"""

from src.blossom.cycle.cycle_analyzer import (
    CycleAnalysis,
    CycleAnalyzer,
    CycleStatus,
    CycleSummary,
    InferredPhase,
    analyze_cycle,
    classify_cycle_status,
    describe_cycle,
    summarize_cycle,
)
from src.blossom.cycle.period_detector import CycleEvent, detect_true_periods, is_true_period

__all__ = [
    "CycleEvent",
    "CycleAnalysis",
    "CycleAnalyzer",
    "CycleStatus",
    "CycleSummary",
    "InferredPhase",
    "analyze_cycle",
    "classify_cycle_status",
    "describe_cycle",
    "detect_true_periods",
    "is_true_period",
    "summarize_cycle",
]

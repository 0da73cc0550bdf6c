"""Blossom cycle-inference and wellness-scoring engine.

Pure, stateless analytics over a caller-supplied window of daily journal
entries.  Nothing in this package reads or writes storage.

Subpackages:
    cycle/ — True-period detection and cycle analysis
    api/   — Stateless FastAPI surface over the engines

Core modules:
    models         — LogEntry and its validated sections
    normalize      — LogEntry → fully-populated numeric vector
    config_loader  — Load/validate/hot-reload engine_config.yaml
    wellness_score — 0–100 composite wellness score
    insights       — Lifestyle/outcome correlation stories
"""

from src.blossom.config_loader import EngineConfig, get_engine_config
from src.blossom.cycle import (
    CycleAnalysis,
    CycleEvent,
    CycleSummary,
    analyze_cycle,
    classify_cycle_status,
    describe_cycle,
    detect_true_periods,
    summarize_cycle,
)
from src.blossom.insights import PatternStory, generate_insights, select_primary_story
from src.blossom.models import LogEntry, MalformedEntryError
from src.blossom.wellness_score import (
    WellnessScore,
    compute_wellness_score,
    compute_wellness_total,
)

__all__ = [
    "EngineConfig",
    "get_engine_config",
    "LogEntry",
    "MalformedEntryError",
    "CycleEvent",
    "CycleAnalysis",
    "CycleSummary",
    "detect_true_periods",
    "analyze_cycle",
    "classify_cycle_status",
    "summarize_cycle",
    "describe_cycle",
    "WellnessScore",
    "compute_wellness_score",
    "compute_wellness_total",
    "PatternStory",
    "generate_insights",
    "select_primary_story",
]

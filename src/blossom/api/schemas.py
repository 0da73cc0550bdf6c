"""Request and response schemas for the analysis endpoints."""

from __future__ import annotations

from datetime import date

from pydantic import Field

from src.blossom.cycle import CycleStatus, InferredPhase
from src.blossom.insights import Confidence, StoryCategory
from src.blossom.models import BlossomBase, LogEntry


class AnalysisRequest(BlossomBase):
    entries: list[LogEntry] = Field(default_factory=list)
    today: date | None = None


class InsightRequest(AnalysisRequest):
    seed: int | None = None  # makes the fallback tip reproducible


# ---------- Cycle ----------

class CycleEventRead(BlossomBase):
    start_date: date
    end_date: date
    days_from_previous: int | None = None


class CycleAnalysisRead(BlossomBase):
    current_day: int
    is_long_cycle: bool
    variability: float
    last_true_period: CycleEventRead | None = None
    cycle_history: list[CycleEventRead]
    is_untracked: bool


class CycleSummaryRead(BlossomBase):
    current_cycle_day: int
    last_cycle_length: int
    average_cycle_length: int
    regularity: float
    status: CycleStatus
    has_enough_data: bool
    phase: InferredPhase | None = None


class CycleReport(BlossomBase):
    analysis: CycleAnalysisRead
    summary: CycleSummaryRead
    description: str


# ---------- Wellness ----------

class WellnessComponentRead(BlossomBase):
    name: str
    value: int
    raw_score: float
    weight: float
    explanation: str


class WellnessScoreRead(BlossomBase):
    total: int
    components: list[WellnessComponentRead]
    has_enough_data: bool
    entries_used: int


# ---------- Insights ----------

class PatternStoryRead(BlossomBase):
    story: str
    category: StoryCategory
    confidence: Confidence


class PrimaryStoryRead(BlossomBase):
    story: str

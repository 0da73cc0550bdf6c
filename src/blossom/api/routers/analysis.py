"""Stateless analysis endpoints: cycle, wellness score, insight stories."""

from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from typing import Any

from fastapi import APIRouter

from src.blossom.api.schemas import (
    AnalysisRequest,
    CycleAnalysisRead,
    CycleReport,
    CycleSummaryRead,
    InsightRequest,
    PatternStoryRead,
    PrimaryStoryRead,
    WellnessScoreRead,
)
from src.blossom.config_loader import get_engine_config
from src.blossom.cycle import CycleAnalyzer
from src.blossom.insights import InsightEngine
from src.blossom.models import LogEntry
from src.blossom.wellness_score import WellnessCalculator

router = APIRouter(prefix="/analysis", tags=["analysis"])
logger = logging.getLogger("blossom.api.analysis")


def _recent_window(entries: list[LogEntry], days: int, today: date | None) -> list[LogEntry]:
    """Keep the last ``days`` days of entries, ending at ``today`` or the newest entry."""
    if not entries:
        return entries
    end = today or max(e.date for e in entries)
    start = end - timedelta(days=days)
    window = [e for e in entries if start < e.date <= end]
    if len(window) < len(entries):
        logger.debug(
            "Window %s..%s keeps %d of %d entries", start, end, len(window), len(entries)
        )
    return window


def _insight_engine(body: InsightRequest) -> InsightEngine:
    rng = random.Random(body.seed) if body.seed is not None else None
    return InsightEngine(get_engine_config(), rng)


@router.post("/cycle", response_model=CycleReport)
async def analyze_cycle(body: AnalysisRequest) -> Any:
    analyzer = CycleAnalyzer(get_engine_config())
    analysis = analyzer.analyze(body.entries, today=body.today)
    logger.debug("Cycle analysis over %d entries", len(body.entries))
    return CycleReport(
        analysis=CycleAnalysisRead.model_validate(analysis),
        summary=CycleSummaryRead.model_validate(analyzer.summarize_analysis(analysis)),
        description=analyzer.describe(analysis),
    )


@router.post("/wellness-score", response_model=WellnessScoreRead)
async def wellness_score(body: AnalysisRequest) -> Any:
    config = get_engine_config()
    entries = _recent_window(body.entries, config.wellness.window_days, body.today)
    score = WellnessCalculator(config).compute(entries)
    return WellnessScoreRead.model_validate(score)


@router.post("/insights", response_model=list[PatternStoryRead])
async def insights(body: InsightRequest) -> Any:
    entries = _recent_window(body.entries, get_engine_config().insights.window_days, body.today)
    stories = _insight_engine(body).generate(entries)
    return [PatternStoryRead.model_validate(s) for s in stories]


@router.post("/insights/primary", response_model=PrimaryStoryRead)
async def primary_story(body: InsightRequest) -> Any:
    entries = _recent_window(body.entries, get_engine_config().insights.window_days, body.today)
    return PrimaryStoryRead(story=_insight_engine(body).primary_story(entries))

"""Shared fixtures and log builders for Blossom engine tests."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Iterator

import pytest

from src.blossom.config_loader import EngineConfig, load_engine_config
from src.blossom.models import LogEntry

TEST_DATE = date(2026, 2, 23)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def engine_config() -> EngineConfig:
    """Load the real engine config for tests."""
    return load_engine_config()


# ---------------------------------------------------------------------------
# Log builders
# ---------------------------------------------------------------------------


def days_ago(n: int) -> date:
    return TEST_DATE - timedelta(days=n)


def make_entry(
    day: date,
    flow: str = "none",
    *,
    symptoms: dict[str, int] | None = None,
    psych: dict[str, Any] | None = None,
    lifestyle: dict[str, Any] | None = None,
    custom_values: dict[str, float] | None = None,
) -> LogEntry:
    """Build a validated LogEntry from snake_case sections."""
    return LogEntry.model_validate(
        {
            "date": day,
            "flow": flow,
            "symptoms": symptoms or {},
            "psych": psych or {},
            "lifestyle": lifestyle or {},
            "custom_values": custom_values,
        }
    )


def period(start: date, flows: tuple[str, ...] = ("heavy", "medium", "light")) -> list[LogEntry]:
    """A bleeding episode on consecutive days, closed by a logged no-flow day."""
    entries = [make_entry(start + timedelta(days=i), flow) for i, flow in enumerate(flows)]
    entries.append(make_entry(start + timedelta(days=len(flows)), "none"))
    return entries


def periods_with_lengths(first_start: date, lengths: list[int]) -> list[LogEntry]:
    """True periods starting at ``first_start`` and separated by ``lengths`` days."""
    entries = period(first_start)
    start = first_start
    for length in lengths:
        start = start + timedelta(days=length)
        entries.extend(period(start))
    return entries


# ---------------------------------------------------------------------------
# Personas
# ---------------------------------------------------------------------------


@pytest.fixture
def sarah_entries() -> list[LogEntry]:
    """Two true periods (78 and 32 days ago) and a stray light day 5 days ago.

    Only bleeding days are logged, so nothing but the calendar separates the
    episodes.
    """
    entries = [
        make_entry(days_ago(78), "heavy"),
        make_entry(days_ago(77), "heavy"),
        make_entry(days_ago(76), "medium"),
        make_entry(days_ago(75), "light"),
        make_entry(days_ago(32), "medium"),
        make_entry(days_ago(31), "heavy"),
        make_entry(days_ago(30), "light"),
        make_entry(days_ago(5), "light"),
    ]
    return list(reversed(entries))


@pytest.fixture
def alex_entries() -> list[LogEntry]:
    """A single true period 65 days ago followed by 60 days of lifestyle logs."""
    entries = [
        make_entry(days_ago(65), "heavy"),
        make_entry(days_ago(64), "heavy"),
        make_entry(days_ago(63), "medium"),
    ]
    for n in range(60, 0, -1):
        entries.append(
            make_entry(
                days_ago(n),
                lifestyle={"sleep": "7-8h", "exercise": "light", "diet": "balanced"},
                psych={"stress": "medium", "mood": 6},
            )
        )
    return entries


@pytest.fixture
def improving_fortnight() -> list[LogEntry]:
    """Eight days: a rough first half, then a symptom-free, well-rested second half."""
    rough = [
        make_entry(
            days_ago(n),
            symptoms={"acne": 4},
            psych={"mood": 3},
            lifestyle={"sleep": "<6h", "exercise": "rest", "diet": "cravings"},
        )
        for n in (8, 7, 6, 5)
    ]
    good = [
        make_entry(days_ago(n), psych={"mood": 8}, lifestyle={"sleep": "7-8h"})
        for n in (4, 3, 2, 1)
    ]
    # Deliberately out of order; engines sort by date.
    return good[::-1] + rough


@pytest.fixture
def client() -> Iterator[Any]:
    from fastapi.testclient import TestClient

    from src.blossom.api.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client

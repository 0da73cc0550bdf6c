"""True-period detection from raw flow logs.

Logged bleeding is noisy: a single spotting or light day is common between
periods and must not restart the cycle clock.  A run of bleeding entries
only counts as a period when it contains two neighbouring medium/heavy
days no more than one calendar day apart.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Sequence

from src.blossom.config_loader import EngineConfig, get_engine_config
from src.blossom.models import LogEntry, sort_entries

logger = logging.getLogger("blossom.cycle.period_detector")

# Two significant days at most this far apart confirm a period.
_MAX_SIGNIFICANT_GAP_DAYS = 1


@dataclass(frozen=True)
class CycleEvent:
    """A confirmed menstrual period.

    Attributes:
        start_date:         First logged bleeding day of the episode.
        end_date:           Last logged bleeding day of the episode.
        days_from_previous: Days since the previous event's start, i.e. the
                            length of the cycle this event closes.  None for
                            the first event.
    """

    start_date: date
    end_date: date
    days_from_previous: int | None = None


def is_true_period(run: Sequence[LogEntry]) -> bool:
    """Return True if a bleeding run contains an adjacent medium/heavy pair.

    Only immediate neighbours in date order are compared, so two heavy days
    separated by a light day do not confirm a period on their own.
    """
    if len(run) < 2:
        return False

    ordered = sorted(run, key=lambda e: e.date)
    for current, nxt in zip(ordered, ordered[1:]):
        gap = abs((nxt.date - current.date).days)
        if current.flow.is_significant and nxt.flow.is_significant and gap <= _MAX_SIGNIFICANT_GAP_DAYS:
            return True
    return False


def split_bleeding_runs(
    entries: Sequence[LogEntry], max_gap_days: int = 7
) -> list[list[LogEntry]]:
    """Group chronologically sorted entries into runs of non-``none`` flow.

    A run is closed by any logged day with no flow, or by an unlogged
    stretch of more than ``max_gap_days`` between two bleeding entries.
    Shorter unlogged gaps do not close a run.
    """
    runs: list[list[LogEntry]] = []
    current: list[LogEntry] = []
    for entry in entries:
        if entry.flow.is_bleeding:
            if current and (entry.date - current[-1].date).days > max_gap_days:
                runs.append(current)
                current = []
            current.append(entry)
        elif current:
            runs.append(current)
            current = []
    if current:
        runs.append(current)
    return runs


def detect_true_periods(
    entries: Iterable[LogEntry | Mapping[str, Any]],
    config: EngineConfig | None = None,
) -> list[CycleEvent]:
    """Reconstruct the chronological list of true periods from a log.

    Args:
        entries: Log entries in any order.
        config:  Engine config (episode gap rule); defaults to the global config.

    Returns:
        CycleEvents oldest first.  Empty when no run qualifies.

    Raises:
        MalformedEntryError: If an entry cannot be validated.
    """
    cfg = config or get_engine_config()
    ordered = sort_entries(entries)
    events: list[CycleEvent] = []

    for run in split_bleeding_runs(ordered, cfg.cycle.max_episode_gap_days):
        if not is_true_period(run):
            logger.debug(
                "Ignoring bleeding run %s..%s (%d entries): no adjacent medium/heavy pair",
                run[0].date, run[-1].date, len(run),
            )
            continue

        start, end = run[0].date, run[-1].date
        days_from_previous = (start - events[-1].start_date).days if events else None
        events.append(
            CycleEvent(start_date=start, end_date=end, days_from_previous=days_from_previous)
        )

    logger.debug("Detected %d true period(s) from %d entries", len(events), len(ordered))
    return events

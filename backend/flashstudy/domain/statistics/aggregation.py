"""
Roll-ups over a user's completed study sessions.

Pure functions over plain values so the report logic can be tested without a
database. The service feeds them rows and adds the lifetime deck and
flashcard counts.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from flashstudy.core.enums import StatsRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSample:
    total_duration: int | None
    percentage: int | None


@dataclass(frozen=True)
class SessionTotals:
    total_sessions: int
    total_study_time: int  # minutes
    average_score: int


def resolve_range(raw: str | None, default: StatsRange = StatsRange.last_7_days) -> StatsRange:
    """
    Parse a client supplied range; anything unknown falls back to `default`.
    """
    if raw is None:
        return default
    try:
        return StatsRange(raw.strip().lower())
    except ValueError:
        logger.warning("Unknown statistics range %r, falling back to %s", raw, default.value)
        return default


def window_start(time_range: StatsRange, now: datetime) -> datetime | None:
    if time_range.days is None:
        return None
    return now - timedelta(days=time_range.days)


def summarize_sessions(samples: Iterable[SessionSample]) -> SessionTotals:
    total_sessions = 0
    total_seconds = 0
    score_sum = 0
    scored = 0

    for sample in samples:
        total_sessions += 1
        total_seconds += sample.total_duration or 0
        # sessions finished without a single answer have no score to average
        if sample.percentage is not None:
            score_sum += sample.percentage
            scored += 1

    average = (2 * score_sum + scored) // (2 * scored) if scored else 0
    return SessionTotals(
        total_sessions=total_sessions,
        total_study_time=total_seconds // 60,
        average_score=average,
    )


@dataclass(frozen=True)
class StatisticsOverview:
    total_decks: int
    total_flashcards: int
    total_sessions: int
    total_study_time: int  # minutes
    average_score: int

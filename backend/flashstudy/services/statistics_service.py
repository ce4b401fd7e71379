import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from flashstudy.core.clock import utc_now
from flashstudy.core.config import settings
from flashstudy.core.enums import StatsRange
from flashstudy.domain.statistics.aggregation import (
    SessionSample,
    StatisticsOverview,
    resolve_range,
    summarize_sessions,
    window_start,
)
from flashstudy.models.deck import Deck
from flashstudy.models.flashcard import Flashcard
from flashstudy.models.study_session import StudySession

logger = logging.getLogger(__name__)


@dataclass
class StatisticsReport:
    time_range: StatsRange
    overview: StatisticsOverview
    recent_activity: list[StudySession]


class StatisticsService:
    """Read-only roll-ups over a user's completed sessions, decks and flashcards."""

    def __init__(
        self,
        db: Session,
        *,
        clock: Callable[[], datetime] = utc_now,
        recent_limit: int | None = None,
        default_range: StatsRange | None = None,
    ):
        self.db = db
        self.clock = clock
        self.recent_limit = recent_limit or settings.RECENT_ACTIVITY_LIMIT
        self.default_range = default_range or settings.DEFAULT_STATS_RANGE

    def get_user_statistics(self, user_id: UUID, time_range: StatsRange | str | None = None) -> StatisticsReport:
        if isinstance(time_range, StatsRange):
            resolved = time_range
        else:
            resolved = resolve_range(time_range, self.default_range)

        query = select(StudySession.total_duration, StudySession.percentage).where(
            StudySession.user_id == user_id,
            StudySession.is_completed.is_(True),
        )
        since = window_start(resolved, self.clock())
        if since is not None:
            query = query.where(StudySession.start_time >= since)

        totals = summarize_sessions(
            SessionSample(total_duration=duration, percentage=percentage)
            for duration, percentage in self.db.execute(query)
        )

        # lifetime counts, not limited to the window
        total_decks = self.db.scalar(
            select(func.count(Deck.id)).where(
                Deck.owner_id == user_id,
                Deck.pending_deletion.is_(False),
            )
        )
        total_flashcards = self.db.scalar(
            select(func.count(Flashcard.id))
            .join(Deck, Deck.id == Flashcard.deck_id)
            .where(
                Flashcard.owner_id == user_id,
                Deck.pending_deletion.is_(False),
            )
        )

        recent = list(self.db.scalars(
            select(StudySession)
            .options(selectinload(StudySession.deck))
            .where(
                StudySession.user_id == user_id,
                StudySession.is_completed.is_(True),
            )
            .order_by(StudySession.start_time.desc())
            .limit(self.recent_limit)
        ))

        logger.debug("Statistics for user %s over %s: %s", user_id, resolved.value, totals)
        return StatisticsReport(
            time_range=resolved,
            overview=StatisticsOverview(
                total_decks=total_decks or 0,
                total_flashcards=total_flashcards or 0,
                total_sessions=totals.total_sessions,
                total_study_time=totals.total_study_time,
                average_score=totals.average_score,
            ),
            recent_activity=recent,
        )

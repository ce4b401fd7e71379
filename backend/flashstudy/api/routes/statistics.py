from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from flashstudy.api.responses import score_response
from flashstudy.auth.dependencies import get_current_user_id
from flashstudy.db.session import get_db
from flashstudy.schemas.statistics import RecentSession, StatisticsOverviewResponse, StatisticsResponse
from flashstudy.services.statistics_service import StatisticsService

router = APIRouter(tags=["statistics"])


@router.get("/", response_model=StatisticsResponse)
def get_statistics(
    range: Optional[str] = Query(default=None, description="7d, 30d, 90d or all; anything else means 7d"),
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    report = StatisticsService(db).get_user_statistics(user_id, range)
    overview = report.overview

    return StatisticsResponse(
        range=report.time_range,
        overview=StatisticsOverviewResponse(
            total_decks=overview.total_decks,
            total_flashcards=overview.total_flashcards,
            total_sessions=overview.total_sessions,
            total_study_time=overview.total_study_time,
            average_score=overview.average_score,
        ),
        recent_activity=[
            RecentSession(
                session_id=s.id,
                deck_id=s.deck_id,
                deck_name=s.deck.name,
                deck_category=s.deck.category,
                start_time=s.start_time,
                end_time=s.end_time,
                total_duration=s.total_duration,
                score=score_response(s),
            )
            for s in report.recent_activity
        ],
    )

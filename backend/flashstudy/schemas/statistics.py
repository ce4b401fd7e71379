from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from flashstudy.core.enums import StatsRange
from flashstudy.schemas.study import ScoreResponse


class StatisticsOverviewResponse(BaseModel):
    total_decks: int
    total_flashcards: int
    total_sessions: int
    total_study_time: int
    average_score: int


class RecentSession(BaseModel):
    session_id: UUID
    deck_id: UUID
    deck_name: str
    deck_category: str
    start_time: datetime
    end_time: Optional[datetime] = None
    total_duration: Optional[int] = None
    score: ScoreResponse


class StatisticsResponse(BaseModel):
    range: StatsRange
    overview: StatisticsOverviewResponse
    recent_activity: List[RecentSession]

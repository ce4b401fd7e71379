from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from flashstudy.core.enums import CardOutcome
from flashstudy.schemas.decks import DeckSettings
from flashstudy.schemas.flashcards import FlashcardResponse


class SessionCardRecord(BaseModel):
    flashcard_id: UUID
    outcome: CardOutcome
    time_spent: int
    attempts: int


class ScoreResponse(BaseModel):
    correct: int
    incorrect: int
    percentage: Optional[int] = None


class StudySessionResponse(BaseModel):
    session_id: UUID
    user_id: UUID
    deck_id: UUID
    start_time: datetime
    end_time: Optional[datetime] = None
    is_completed: bool
    total_duration: Optional[int] = None
    cards: List[SessionCardRecord]
    score: ScoreResponse
    warnings: List[str] = []


class StartSessionResponse(BaseModel):
    session: StudySessionResponse
    flashcards: List[FlashcardResponse]
    deck_settings: DeckSettings


class RecordOutcomeRequest(BaseModel):
    flashcard_id: UUID
    is_correct: bool
    time_spent: int = Field(default=0, ge=0)

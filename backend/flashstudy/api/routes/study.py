from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from flashstudy.api.responses import flashcard_response, session_response
from flashstudy.auth.dependencies import get_current_user_id
from flashstudy.db.session import get_db
from flashstudy.schemas.decks import DeckSettings
from flashstudy.schemas.study import RecordOutcomeRequest, StartSessionResponse, StudySessionResponse
from flashstudy.services.study_session_service import StudySessionService

router = APIRouter(tags=["study"])


def get_study_service(db: Session = Depends(get_db)) -> StudySessionService:
    return StudySessionService(db)


@router.post("/decks/{deck_id}", response_model=StartSessionResponse, status_code=status.HTTP_201_CREATED)
def start_session(
    deck_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: StudySessionService = Depends(get_study_service),
):
    started = service.start_session(deck_id, user_id)
    return StartSessionResponse(
        session=session_response(started.session),
        flashcards=[flashcard_response(card) for card in started.flashcards],
        deck_settings=DeckSettings(**(started.deck.settings or {})),
    )


@router.get("/sessions/{session_id}", response_model=StudySessionResponse)
def get_session(
    session_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: StudySessionService = Depends(get_study_service),
):
    return session_response(service.get_session(session_id, user_id))


@router.put("/sessions/{session_id}", response_model=StudySessionResponse)
def record_outcome(
    session_id: UUID,
    payload: RecordOutcomeRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: StudySessionService = Depends(get_study_service),
):
    result = service.record_outcome(
        session_id,
        user_id,
        flashcard_id=payload.flashcard_id,
        is_correct=payload.is_correct,
        time_spent=payload.time_spent,
    )
    return session_response(result.value, result.warnings)


@router.put("/sessions/{session_id}/complete", response_model=StudySessionResponse)
def complete_session(
    session_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: StudySessionService = Depends(get_study_service),
):
    result = service.complete_session(session_id, user_id)
    return session_response(result.value, result.warnings)

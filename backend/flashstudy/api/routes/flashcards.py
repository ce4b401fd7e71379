from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from flashstudy.api.responses import flashcard_response
from flashstudy.auth.dependencies import get_current_user_id
from flashstudy.core.enums import FlashcardCounter
from flashstudy.db.session import get_db
from flashstudy.schemas.flashcards import FlashcardResponse, UpdateFlashcardRequest
from flashstudy.services.flashcard_store import FlashcardStore

router = APIRouter(tags=["flashcards"])


@router.get("/{flashcard_id}", response_model=FlashcardResponse)
def get_flashcard(flashcard_id: UUID, user_id: UUID = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Single flashcard; every read counts as a view.
    """
    store = FlashcardStore(db)
    card = store.get_for_user(flashcard_id, user_id)
    store.increment_stat(card.id, FlashcardCounter.total_views, 1)
    db.commit()
    db.refresh(card)
    return flashcard_response(card)


@router.patch("/{flashcard_id}", response_model=FlashcardResponse)
def update_flashcard(
    flashcard_id: UUID,
    payload: UpdateFlashcardRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    card = FlashcardStore(db).update_owned(flashcard_id, user_id, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(card)
    return flashcard_response(card)


@router.delete("/{flashcard_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_flashcard(flashcard_id: UUID, user_id: UUID = Depends(get_current_user_id), db: Session = Depends(get_db)):
    FlashcardStore(db).delete_owned(flashcard_id, user_id)
    db.commit()

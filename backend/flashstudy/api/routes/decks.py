from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from flashstudy.api.responses import deck_response, flashcard_response
from flashstudy.auth.dependencies import get_current_user_id
from flashstudy.db.session import get_db
from flashstudy.schemas.decks import DeckCreate, DeckResponse, DeckUpdate
from flashstudy.schemas.flashcards import CreateFlashcardRequest, FlashcardResponse
from flashstudy.services.deck_store import DeckStore
from flashstudy.services.flashcard_store import FlashcardStore

router = APIRouter(tags=["decks"])


@router.get("/", response_model=List[DeckResponse])
def list_user_decks(user_id: UUID = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Decks owned by the user, most recently updated first.
    """
    return [deck_response(deck) for deck in DeckStore(db).list_owned(user_id)]


@router.post("/", response_model=DeckResponse, status_code=status.HTTP_201_CREATED)
def create_deck(
    payload: DeckCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    deck = DeckStore(db).create(
        owner_id=user_id,
        name=payload.name,
        category=payload.category,
        description=payload.description,
        color=payload.color,
        is_public=payload.is_public,
        settings=payload.settings.model_dump(),
    )
    db.commit()
    db.refresh(deck)
    return deck_response(deck)


@router.get("/{deck_id}", response_model=DeckResponse)
def get_deck(deck_id: UUID, user_id: UUID = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return deck_response(DeckStore(db).find_for_user(deck_id, user_id))


@router.patch("/{deck_id}", response_model=DeckResponse)
def update_deck(
    deck_id: UUID,
    payload: DeckUpdate,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    deck = DeckStore(db).update_owned(deck_id, user_id, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(deck)
    return deck_response(deck)


@router.delete("/{deck_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_deck(deck_id: UUID, user_id: UUID = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Removes the deck with all of its flashcards and study sessions.
    """
    DeckStore(db).delete_cascade(deck_id, user_id)


@router.get("/{deck_id}/cards", response_model=List[FlashcardResponse])
def list_deck_cards(deck_id: UUID, user_id: UUID = Depends(get_current_user_id), db: Session = Depends(get_db)):
    deck = DeckStore(db).find_for_user(deck_id, user_id)
    return [flashcard_response(card) for card in FlashcardStore(db).list_by_deck(deck.id)]


@router.post("/{deck_id}/cards", response_model=FlashcardResponse, status_code=status.HTTP_201_CREATED)
def create_card(
    deck_id: UUID,
    payload: CreateFlashcardRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    card = FlashcardStore(db).create(
        deck_id=deck_id,
        owner_id=user_id,
        question=payload.question,
        answer=payload.answer,
        category=payload.category,
        difficulty=payload.difficulty,
        tags=payload.tags,
    )
    db.commit()
    db.refresh(card)
    return flashcard_response(card)

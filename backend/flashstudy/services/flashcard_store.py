import logging
from uuid import UUID

from sqlalchemy import select, update, delete, or_
from sqlalchemy.orm import Session

from flashstudy.core.enums import DeckCounter, Difficulty, FlashcardCounter
from flashstudy.core.exceptions import InvalidArgumentError, NotFoundError
from flashstudy.models.deck import Deck
from flashstudy.models.flashcard import Flashcard
from flashstudy.services.deck_store import DeckStore

logger = logging.getLogger(__name__)


class FlashcardStore:
    def __init__(self, db: Session, decks: DeckStore | None = None):
        self.db = db
        self.decks = decks or DeckStore(db)

    def list_by_deck(self, deck_id: UUID) -> list[Flashcard]:
        # creation order, id breaks ties so the order is stable
        return list(self.db.scalars(
            select(Flashcard)
            .where(Flashcard.deck_id == deck_id)
            .order_by(Flashcard.created_at.asc(), Flashcard.id.asc())
        ))

    def get_for_user(self, flashcard_id: UUID, user_id: UUID) -> Flashcard:
        """Visible when the caller owns the card or the deck is public."""
        card = self.db.scalars(
            select(Flashcard)
            .join(Deck, Deck.id == Flashcard.deck_id)
            .where(
                Flashcard.id == flashcard_id,
                Deck.pending_deletion.is_(False),
                or_(Flashcard.owner_id == user_id, Deck.is_public.is_(True)),
            )
        ).first()
        if not card:
            raise NotFoundError("Flashcard not found")
        return card

    def create(
        self,
        *,
        deck_id: UUID,
        owner_id: UUID,
        question: str,
        answer: str,
        category: str | None = None,
        difficulty: Difficulty | None = None,
        tags: list[str] | None = None,
    ) -> Flashcard:
        deck = self.decks.find_owned(deck_id, owner_id)

        card = Flashcard(
            deck_id=deck.id,
            owner_id=owner_id,
            question=question,
            answer=answer,
            category=category or deck.category,
            difficulty=difficulty or Difficulty.medium,
            tags=list(tags or []),
        )
        self.db.add(card)
        self.db.flush()
        self.decks.increment_stat(deck.id, DeckCounter.total_cards, 1)
        return card

    def update_owned(self, flashcard_id: UUID, user_id: UUID, changes: dict) -> Flashcard:
        card = self.db.scalars(
            select(Flashcard)
            .join(Deck, Deck.id == Flashcard.deck_id)
            .where(
                Flashcard.id == flashcard_id,
                Flashcard.owner_id == user_id,
                Deck.pending_deletion.is_(False),
            )
        ).first()
        if not card:
            raise NotFoundError("Flashcard not found or not authorized")

        for field in ("question", "answer", "category", "difficulty"):
            if changes.get(field) is not None:
                setattr(card, field, changes[field])
        if changes.get("tags") is not None:
            card.tags = list(changes["tags"])
        self.db.flush()
        return card

    def delete_owned(self, flashcard_id: UUID, user_id: UUID) -> None:
        card = self.db.scalars(
            select(Flashcard).where(Flashcard.id == flashcard_id, Flashcard.owner_id == user_id)
        ).first()
        if not card:
            raise NotFoundError("Flashcard not found or not authorized")

        deck_id = card.deck_id
        result = self.db.execute(
            delete(Flashcard).where(Flashcard.id == flashcard_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            self.decks.increment_stat(deck_id, DeckCounter.total_cards, -1)
        self.db.expunge(card)

    def increment_stat(self, flashcard_id: UUID, field: FlashcardCounter | str, delta: int = 1) -> int:
        """Atomic `field += delta`; returns the number of rows touched."""
        try:
            counter = FlashcardCounter(field)
        except ValueError:
            raise InvalidArgumentError(f"Unknown flashcard counter: {field}")

        column = getattr(Flashcard, counter.value)
        result = self.db.execute(
            update(Flashcard)
            .where(Flashcard.id == flashcard_id)
            .values({column: column + delta})
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

import logging
from uuid import UUID

from sqlalchemy import delete, select, update, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flashstudy.core.enums import DeckCounter
from flashstudy.core.exceptions import InvalidArgumentError, NotFoundError, UnavailableError
from flashstudy.domain.study.policy import StudyPolicy
from flashstudy.models.deck import Deck, default_deck_settings
from flashstudy.models.flashcard import Flashcard
from flashstudy.models.study_session import StudySession, StudySessionCard

logger = logging.getLogger(__name__)


class DeckStore:
    """
    Deck records and their aggregate counters.

    Counters are only changed with single UPDATE statements so concurrent
    sessions never lose an increment. Callers own the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------
    # Lookups
    # -------------------------------
    def find_for_user(self, deck_id: UUID, user_id: UUID) -> Deck:
        """Owner-or-public visibility. Missing and hidden decks are indistinguishable."""
        deck = self.db.scalars(
            select(Deck).where(
                Deck.id == deck_id,
                Deck.pending_deletion.is_(False),
                or_(Deck.owner_id == user_id, Deck.is_public.is_(True)),
            )
        ).first()
        if not deck:
            raise NotFoundError("Deck not found")
        return deck

    def find_owned(self, deck_id: UUID, user_id: UUID, *, include_pending: bool = False) -> Deck:
        query = select(Deck).where(Deck.id == deck_id, Deck.owner_id == user_id)
        if not include_pending:
            query = query.where(Deck.pending_deletion.is_(False))
        deck = self.db.scalars(query).first()
        if not deck:
            raise NotFoundError("Deck not found or not authorized")
        return deck

    def list_owned(self, user_id: UUID) -> list[Deck]:
        return list(self.db.scalars(
            select(Deck)
            .where(Deck.owner_id == user_id, Deck.pending_deletion.is_(False))
            .order_by(Deck.updated_at.desc())
        ))

    # -------------------------------
    # Mutations
    # -------------------------------
    def create(
        self,
        *,
        owner_id: UUID,
        name: str,
        category: str,
        description: str | None = None,
        color: str | None = None,
        is_public: bool = False,
        settings: dict | None = None,
    ) -> Deck:
        deck = Deck(
            owner_id=owner_id,
            name=name,
            category=category,
            description=description,
            is_public=is_public,
            settings={**default_deck_settings(), **(settings or {})},
        )
        if color:
            deck.color = color
        self.db.add(deck)
        self.db.flush()
        return deck

    def update_owned(self, deck_id: UUID, user_id: UUID, changes: dict) -> Deck:
        deck = self.find_owned(deck_id, user_id)
        for field in ("name", "category", "description", "color", "is_public"):
            if changes.get(field) is not None:
                setattr(deck, field, changes[field])
        if changes.get("settings") is not None:
            # reassign so the JSON column is flagged dirty
            deck.settings = {**(deck.settings or {}), **changes["settings"]}
        self.db.flush()
        return deck

    def increment_stat(self, deck_id: UUID, field: DeckCounter | str, delta: int) -> int:
        """Atomic `field += delta`; returns the number of rows touched."""
        try:
            counter = DeckCounter(field)
        except ValueError:
            raise InvalidArgumentError(f"Unknown deck counter: {field}")

        column = getattr(Deck, counter.value)
        result = self.db.execute(
            update(Deck)
            .where(Deck.id == deck_id)
            .values({column: column + delta})
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def record_session_score(self, deck_id: UUID, percentage: int) -> int:
        """
        Fold one session percentage into the deck's running mean.
        Both sides of the SET read the old row, so mean and count move together.
        """
        result = self.db.execute(
            update(Deck)
            .where(Deck.id == deck_id)
            .values(
                average_score=StudyPolicy.running_average(
                    Deck.average_score, Deck.scored_sessions, percentage
                ),
                scored_sessions=Deck.scored_sessions + 1,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_cascade(self, deck_id: UUID, user_id: UUID) -> None:
        """
        Delete flashcards, then study sessions, then the deck.

        The deck is first marked pending deletion and committed, which hides it
        from every lookup, so nothing new gets attached while the cascade runs.
        If the cascade fails, the marker stays and calling this again resumes it.
        """
        deck = self.find_owned(deck_id, user_id, include_pending=True)

        if not deck.pending_deletion:
            deck.pending_deletion = True
            self.db.commit()
            logger.info("Deck %s marked pending deletion", deck_id)
        else:
            logger.info("Resuming interrupted deletion of deck %s", deck_id)

        session_ids = select(StudySession.id).where(StudySession.deck_id == deck_id)
        try:
            self.db.execute(
                delete(Flashcard).where(Flashcard.deck_id == deck_id)
                .execution_options(synchronize_session=False)
            )
            self.db.execute(
                delete(StudySessionCard).where(StudySessionCard.session_id.in_(session_ids))
                .execution_options(synchronize_session=False)
            )
            self.db.execute(
                delete(StudySession).where(StudySession.deck_id == deck_id)
                .execution_options(synchronize_session=False)
            )
            self.db.execute(
                delete(Deck).where(Deck.id == deck_id)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("Cascade delete of deck %s interrupted, deck stays pending deletion", deck_id,
                           exc_info=exc)
            raise UnavailableError("Deck deletion did not finish, retry to resume") from exc

        logger.info("Deck %s deleted with its flashcards and study sessions", deck_id)

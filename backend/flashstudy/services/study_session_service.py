import logging
import random
from datetime import datetime
from typing import Callable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from flashstudy.core.clock import utc_now
from flashstudy.core.enums import DeckCounter, FlashcardCounter
from flashstudy.core.exceptions import ConcurrentUpdateError, NotFoundError
from flashstudy.domain.study.dto import OperationResult, StartedSession
from flashstudy.domain.study.entities import ScoreState, SessionCardState, StudySessionState
from flashstudy.domain.study.policy import StudyPolicy
from flashstudy.models.study_session import StudySession, StudySessionCard
from flashstudy.services.deck_store import DeckStore
from flashstudy.services.flashcard_store import FlashcardStore

logger = logging.getLogger(__name__)


def _to_state(session: StudySession) -> StudySessionState:
    return StudySessionState(
        started_at=session.start_time,
        cards=[
            SessionCardState(
                flashcard_id=row.flashcard_id,
                outcome=row.outcome,
                time_spent=row.time_spent,
                attempts=row.attempts,
            )
            for row in session.cards
        ],
        score=ScoreState(correct=session.correct_count, incorrect=session.incorrect_count),
        is_completed=session.is_completed,
        ended_at=session.end_time,
        total_duration=session.total_duration,
    )


def _apply_state(session: StudySession, state: StudySessionState) -> None:
    for row, card in zip(session.cards, state.cards):
        row.outcome = card.outcome
        row.time_spent = card.time_spent
        row.attempts = card.attempts

    session.correct_count = state.score.correct
    session.incorrect_count = state.score.incorrect
    session.percentage = state.score.percentage
    session.is_completed = state.is_completed
    session.end_time = state.ended_at
    session.total_duration = state.total_duration


class StudySessionService:
    """
    Study session lifecycle: start, record outcomes, complete.

    Session rows are written under a row lock plus the optimistic version
    column. Counter updates forwarded to flashcards and decks run after the
    session commit; when they fail the session update stands and the result
    carries a warning instead.
    """

    def __init__(
        self,
        db: Session,
        *,
        decks: DeckStore | None = None,
        flashcards: FlashcardStore | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.decks = decks or DeckStore(db)
        self.flashcards = flashcards or FlashcardStore(db, self.decks)
        self.rng = rng or random.Random()
        self.clock = clock

    # -------------------------------
    # StartSession
    # -------------------------------
    def start_session(self, deck_id: UUID, user_id: UUID) -> StartedSession:
        deck = self.decks.find_for_user(deck_id, user_id)
        cards = StudyPolicy.order_cards(
            self.flashcards.list_by_deck(deck.id),
            random_order=deck.random_order,
            rng=self.rng,
        )

        state = StudySessionState.start([c.id for c in cards], started_at=self.clock())

        session = StudySession(
            user_id=user_id,
            deck_id=deck.id,
            start_time=state.started_at,
            is_completed=False,
            correct_count=0,
            incorrect_count=0,
            percentage=None,
            cards=[
                StudySessionCard(
                    position=i,
                    flashcard_id=card.flashcard_id,
                    outcome=card.outcome,
                    time_spent=card.time_spent,
                    attempts=card.attempts,
                )
                for i, card in enumerate(state.cards)
            ],
        )
        self.db.add(session)
        self.db.commit()

        logger.info("User %s started session %s on deck %s with %d cards",
                    user_id, session.id, deck.id, len(cards))
        return StartedSession(session=session, deck=deck, flashcards=cards)

    # -------------------------------
    # Reads
    # -------------------------------
    def get_session(self, session_id: UUID, user_id: UUID, *, for_update: bool = False) -> StudySession:
        query = select(StudySession).where(
            StudySession.id == session_id,
            StudySession.user_id == user_id,
        )
        if for_update:
            query = query.with_for_update()
        session = self.db.scalars(query).first()
        if not session:
            raise NotFoundError("Study session not found")
        return session

    # -------------------------------
    # RecordOutcome
    # -------------------------------
    def record_outcome(
        self,
        session_id: UUID,
        user_id: UUID,
        *,
        flashcard_id: UUID,
        is_correct: bool,
        time_spent: int,
    ) -> OperationResult[StudySession]:
        session = self.get_session(session_id, user_id, for_update=True)

        state = _to_state(session)
        state.record_outcome(flashcard_id=flashcard_id, is_correct=is_correct, time_spent=time_spent)
        _apply_state(session, state)
        self._commit_session(session_id)

        warnings = self._forward_flashcard_stat(flashcard_id, is_correct)
        return OperationResult(value=session, warnings=warnings)

    # -------------------------------
    # CompleteSession
    # -------------------------------
    def complete_session(self, session_id: UUID, user_id: UUID) -> OperationResult[StudySession]:
        session = self.get_session(session_id, user_id, for_update=True)

        state = _to_state(session)
        state.complete(ended_at=self.clock())
        _apply_state(session, state)
        self._commit_session(session_id)

        logger.info("Session %s completed in %ss with score %s",
                    session_id, state.total_duration, state.score.percentage)

        warnings = self._forward_deck_stats(session.deck_id, state)
        return OperationResult(value=session, warnings=warnings)

    # -------------------------------
    # Helpers
    # -------------------------------
    def _commit_session(self, session_id: UUID) -> None:
        try:
            self.db.commit()
        except StaleDataError as exc:
            self.db.rollback()
            logger.warning("Concurrent update of session %s rejected", session_id)
            raise ConcurrentUpdateError("Study session was modified concurrently, reload and retry") from exc

    def _forward_flashcard_stat(self, flashcard_id: UUID, is_correct: bool) -> list[str]:
        counter = FlashcardCounter.correct_answers if is_correct else FlashcardCounter.incorrect_answers
        try:
            touched = self.flashcards.increment_stat(flashcard_id, counter, 1)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("Could not increment %s of flashcard %s", counter.value, flashcard_id, exc_info=exc)
            return [f"Flashcard statistics were not updated for {flashcard_id}"]

        if not touched:
            logger.warning("Flashcard %s no longer exists, %s not incremented", flashcard_id, counter.value)
            return [f"Flashcard {flashcard_id} no longer exists, its statistics were not updated"]
        return []

    def _forward_deck_stats(self, deck_id: UUID, state: StudySessionState) -> list[str]:
        percentage = state.score.percentage
        try:
            touched = self.decks.increment_stat(
                deck_id, DeckCounter.total_study_time, StudyPolicy.study_minutes(state.total_duration)
            )
            if percentage is not None:
                self.decks.record_session_score(deck_id, percentage)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("Could not update statistics of deck %s", deck_id, exc_info=exc)
            return [f"Deck statistics were not updated for {deck_id}"]

        if not touched:
            logger.warning("Deck %s no longer exists, statistics not updated", deck_id)
            return [f"Deck {deck_id} no longer exists, its statistics were not updated"]
        return []

from flashstudy.models.deck import Deck
from flashstudy.models.flashcard import Flashcard
from flashstudy.models.study_session import StudySession
from flashstudy.schemas.decks import DeckResponse, DeckSettings, DeckStatistics
from flashstudy.schemas.flashcards import FlashcardResponse, FlashcardStatistics
from flashstudy.schemas.study import ScoreResponse, SessionCardRecord, StudySessionResponse


def deck_response(deck: Deck) -> DeckResponse:
    return DeckResponse(
        deck_id=deck.id,
        owner_id=deck.owner_id,
        name=deck.name,
        category=deck.category,
        description=deck.description,
        color=deck.color,
        is_public=deck.is_public,
        settings=DeckSettings(**(deck.settings or {})),
        statistics=DeckStatistics(
            total_cards=deck.total_cards,
            total_study_time=deck.total_study_time,
            average_score=round(deck.average_score, 2),
        ),
        created_at=deck.created_at,
    )


def flashcard_response(card: Flashcard) -> FlashcardResponse:
    return FlashcardResponse(
        flashcard_id=card.id,
        deck_id=card.deck_id,
        question=card.question,
        answer=card.answer,
        category=card.category,
        difficulty=card.difficulty,
        tags=card.tags or [],
        statistics=FlashcardStatistics(
            total_views=card.total_views,
            correct_answers=card.correct_answers,
            incorrect_answers=card.incorrect_answers,
        ),
    )


def score_response(session: StudySession) -> ScoreResponse:
    return ScoreResponse(
        correct=session.correct_count,
        incorrect=session.incorrect_count,
        percentage=session.percentage,
    )


def session_response(session: StudySession, warnings: list[str] | None = None) -> StudySessionResponse:
    return StudySessionResponse(
        session_id=session.id,
        user_id=session.user_id,
        deck_id=session.deck_id,
        start_time=session.start_time,
        end_time=session.end_time,
        is_completed=session.is_completed,
        total_duration=session.total_duration,
        cards=[
            SessionCardRecord(
                flashcard_id=row.flashcard_id,
                outcome=row.outcome,
                time_spent=row.time_spent,
                attempts=row.attempts,
            )
            for row in session.cards
        ],
        score=score_response(session),
        warnings=warnings or [],
    )

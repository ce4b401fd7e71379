# backend/flashstudy/domain/study/entities.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable
from uuid import UUID

from flashstudy.core.enums import CardOutcome
from flashstudy.core.exceptions import Violation, error_for_violations

from .policy import StudyPolicy


@dataclass
class SessionCardState:
    flashcard_id: UUID
    outcome: CardOutcome = CardOutcome.unanswered
    time_spent: int = 0
    attempts: int = 0


@dataclass
class ScoreState:
    correct: int = 0
    incorrect: int = 0

    @property
    def percentage(self) -> int | None:
        return StudyPolicy.percentage(self.correct, self.incorrect)


@dataclass
class StudySessionState:
    """
    Pure domain state of one study session.
    Knows nothing about the database; the service maps it onto the ORM rows.
    """

    started_at: datetime
    cards: list[SessionCardState]
    score: ScoreState = field(default_factory=ScoreState)
    is_completed: bool = False
    ended_at: datetime | None = None
    total_duration: int | None = None

    # ----------------
    # Creation
    # ----------------

    @staticmethod
    def check_start(flashcard_ids: list[UUID]) -> list[Violation]:
        violations = []
        if not flashcard_ids:
            violations.append(Violation("empty_deck", "No flashcards found in this deck"))
        if len(set(flashcard_ids)) != len(flashcard_ids):
            violations.append(Violation("invalid_argument", "Duplicate flashcard in snapshot", "flashcards"))
        return violations

    @classmethod
    def start(cls, flashcard_ids: Iterable[UUID], *, started_at: datetime) -> "StudySessionState":
        ids = list(flashcard_ids)
        violations = cls.check_start(ids)
        if violations:
            raise error_for_violations(violations)
        return cls(
            started_at=started_at,
            cards=[SessionCardState(flashcard_id=card_id) for card_id in ids],
        )

    # ----------------
    # Outcomes
    # ----------------

    def find_card(self, flashcard_id: UUID) -> SessionCardState | None:
        for card in self.cards:
            if card.flashcard_id == flashcard_id:
                return card
        return None

    def check_outcome(self, *, flashcard_id: UUID, time_spent: int) -> list[Violation]:
        violations = []
        if self.is_completed:
            violations.append(Violation("already_completed", "Study session is already completed"))
        if self.find_card(flashcard_id) is None:
            violations.append(
                Violation("unknown_flashcard", "Flashcard not found in this session", "flashcard_id")
            )
        if time_spent < 0:
            violations.append(Violation("invalid_argument", "time_spent cannot be negative", "time_spent"))
        return violations

    def record_outcome(self, *, flashcard_id: UUID, is_correct: bool, time_spent: int) -> SessionCardState:
        violations = self.check_outcome(flashcard_id=flashcard_id, time_spent=time_spent)
        if violations:
            raise error_for_violations(violations)

        card = self.find_card(flashcard_id)
        card.outcome = CardOutcome.correct if is_correct else CardOutcome.incorrect
        card.time_spent += time_spent
        card.attempts += 1

        if is_correct:
            self.score.correct += 1
        else:
            self.score.incorrect += 1

        return card

    # ----------------
    # Completion
    # ----------------

    def check_completion(self, *, ended_at: datetime) -> list[Violation]:
        violations = []
        if self.is_completed:
            violations.append(Violation("already_completed", "Study session is already completed"))
        if ended_at < self.started_at:
            violations.append(Violation("invalid_argument", "end time precedes start time", "end_time"))
        return violations

    def complete(self, *, ended_at: datetime) -> int:
        violations = self.check_completion(ended_at=ended_at)
        if violations:
            raise error_for_violations(violations)

        self.ended_at = ended_at
        self.total_duration = StudyPolicy.duration_seconds(self.started_at, ended_at)
        self.is_completed = True
        return self.total_duration

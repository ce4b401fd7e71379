import uuid
from datetime import datetime, timedelta

import pytest

from flashstudy.core.enums import CardOutcome
from flashstudy.core.exceptions import (
    AlreadyCompletedError,
    EmptyDeckError,
    InvalidArgumentError,
    InvalidReferenceError,
)
from flashstudy.domain.study.entities import StudySessionState

STARTED = datetime(2026, 3, 1, 9, 0, 0)


def _state(n=4):
    ids = [uuid.uuid4() for _ in range(n)]
    return ids, StudySessionState.start(ids, started_at=STARTED)


def test_start_creates_one_unanswered_record_per_card():
    ids, state = _state(4)

    assert [c.flashcard_id for c in state.cards] == ids
    assert all(c.outcome == CardOutcome.unanswered for c in state.cards)
    assert all(c.time_spent == 0 and c.attempts == 0 for c in state.cards)
    assert state.score.correct == 0
    assert state.score.incorrect == 0
    assert state.score.percentage is None


def test_start_without_cards_fails():
    with pytest.raises(EmptyDeckError):
        StudySessionState.start([], started_at=STARTED)


def test_math_scenario_scores_75_percent():
    ids, state = _state(4)

    state.record_outcome(flashcard_id=ids[0], is_correct=True, time_spent=5)
    state.record_outcome(flashcard_id=ids[1], is_correct=False, time_spent=3)
    state.record_outcome(flashcard_id=ids[2], is_correct=True, time_spent=2)
    state.record_outcome(flashcard_id=ids[3], is_correct=True, time_spent=1)

    assert state.score.correct == 3
    assert state.score.incorrect == 1
    assert state.score.percentage == 75
    assert [c.time_spent for c in state.cards] == [5, 3, 2, 1]
    assert state.cards[1].outcome == CardOutcome.incorrect


def test_repeated_answer_accumulates_time_and_attempts():
    ids, state = _state(2)

    state.record_outcome(flashcard_id=ids[0], is_correct=False, time_spent=4)
    card = state.record_outcome(flashcard_id=ids[0], is_correct=True, time_spent=6)

    assert card.attempts == 2
    assert card.time_spent == 10
    assert card.outcome == CardOutcome.correct
    assert state.score.percentage == 50


def test_unknown_card_is_rejected_and_score_untouched():
    ids, state = _state(2)
    state.record_outcome(flashcard_id=ids[0], is_correct=True, time_spent=1)

    with pytest.raises(InvalidReferenceError):
        state.record_outcome(flashcard_id=uuid.uuid4(), is_correct=True, time_spent=1)

    assert state.score.correct == 1
    assert state.score.incorrect == 0


def test_check_outcome_reports_every_violation():
    ids, state = _state(1)
    state.complete(ended_at=STARTED + timedelta(seconds=10))

    violations = state.check_outcome(flashcard_id=uuid.uuid4(), time_spent=-1)

    assert {v.code for v in violations} == {"already_completed", "unknown_flashcard", "invalid_argument"}


def test_outcome_after_completion_fails():
    ids, state = _state(1)
    state.complete(ended_at=STARTED + timedelta(seconds=10))

    with pytest.raises(AlreadyCompletedError) as exc_info:
        state.record_outcome(flashcard_id=ids[0], is_correct=True, time_spent=1)

    assert exc_info.value.violations[0].code == "already_completed"
    assert state.score.correct == 0


def test_negative_time_is_invalid_argument():
    ids, state = _state(1)

    with pytest.raises(InvalidArgumentError):
        state.record_outcome(flashcard_id=ids[0], is_correct=True, time_spent=-3)


def test_complete_sets_duration_once():
    _, state = _state(1)

    duration = state.complete(ended_at=STARTED + timedelta(seconds=90, milliseconds=700))

    assert duration == 90
    assert state.is_completed

    with pytest.raises(AlreadyCompletedError):
        state.complete(ended_at=STARTED + timedelta(seconds=500))

    assert state.total_duration == 90


def test_end_before_start_is_rejected():
    _, state = _state(1)

    with pytest.raises(InvalidArgumentError):
        state.complete(ended_at=STARTED - timedelta(seconds=1))

    assert not state.is_completed

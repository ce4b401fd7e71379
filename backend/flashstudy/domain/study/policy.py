# backend/flashstudy/domain/study/policy.py

import random
from datetime import datetime, timedelta
from typing import Sequence, TypeVar

T = TypeVar("T")


class StudyPolicy:
    """
    Scoring and ordering rules of a study session.
    Pure domain logic, no ORM.
    """

    @staticmethod
    def percentage(correct: int, incorrect: int) -> int | None:
        answered = correct + incorrect
        if answered <= 0:
            return None
        # round half up in integer arithmetic: 0.5 -> 1, 2.5 -> 3
        return (200 * correct + answered) // (2 * answered)

    @staticmethod
    def duration_seconds(started_at: datetime, ended_at: datetime) -> int:
        return (ended_at - started_at) // timedelta(seconds=1)

    @staticmethod
    def study_minutes(duration_seconds: int) -> int:
        return duration_seconds // 60

    @staticmethod
    def running_average(average: float, count: int, score: int) -> float:
        """
        Mean after adding `score` to `count` values whose mean is `average`.
        """
        return average + (score - average) / (count + 1)

    @staticmethod
    def order_cards(cards: Sequence[T], *, random_order: bool, rng: random.Random) -> list[T]:
        ordered = list(cards)
        if random_order:
            # Random.shuffle is Fisher-Yates, every permutation equally likely
            rng.shuffle(ordered)
        return ordered

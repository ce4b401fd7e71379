from enum import Enum


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class CardOutcome(str, Enum):
    unanswered = "unanswered"
    correct = "correct"
    incorrect = "incorrect"


class StatsRange(str, Enum):
    last_7_days = "7d"
    last_30_days = "30d"
    last_90_days = "90d"
    all = "all"

    @property
    def days(self) -> int | None:
        if self is StatsRange.all:
            return None
        return int(self.value.rstrip("d"))


class DeckCounter(str, Enum):
    total_cards = "total_cards"
    total_study_time = "total_study_time"


class FlashcardCounter(str, Enum):
    total_views = "total_views"
    correct_answers = "correct_answers"
    incorrect_answers = "incorrect_answers"

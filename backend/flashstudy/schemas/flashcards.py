from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from flashstudy.core.enums import Difficulty


class FlashcardStatistics(BaseModel):
    total_views: int
    correct_answers: int
    incorrect_answers: int


class CreateFlashcardRequest(BaseModel):
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    category: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    tags: List[str] = []

    @field_validator("question", "answer")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class UpdateFlashcardRequest(BaseModel):
    question: Optional[str] = Field(default=None, min_length=1)
    answer: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[str]] = None

    @field_validator("question", "answer", "category")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class FlashcardResponse(BaseModel):
    flashcard_id: UUID
    deck_id: UUID
    question: str
    answer: str
    category: str
    difficulty: Difficulty
    tags: List[str]
    statistics: FlashcardStatistics

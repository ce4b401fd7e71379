from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DeckSettings(BaseModel):
    model_config = ConfigDict(extra="allow")

    random_order: bool = False


class DeckStatistics(BaseModel):
    total_cards: int
    total_study_time: int
    average_score: float


class DeckCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = None
    is_public: bool = False
    settings: DeckSettings = Field(default_factory=DeckSettings)

    @field_validator("name", "category")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class DeckUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = None
    is_public: Optional[bool] = None
    settings: Optional[DeckSettings] = None


class DeckResponse(BaseModel):
    deck_id: UUID
    owner_id: UUID
    name: str
    category: str
    description: Optional[str] = None
    color: str
    is_public: bool
    settings: DeckSettings
    statistics: DeckStatistics
    created_at: datetime

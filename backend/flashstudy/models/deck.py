import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, Integer, Float, Boolean, DateTime, ForeignKey, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from flashstudy.core.clock import utc_now
from flashstudy.db.base import Base

if TYPE_CHECKING:
    from flashstudy.models.user import User
    from flashstudy.models.flashcard import Flashcard

DEFAULT_DECK_COLOR = "#3B82F6"


def default_deck_settings() -> dict:
    return {"random_order": False}


class Deck(Base):
    __tablename__ = "decks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    category: Mapped[str] = mapped_column(String, nullable=False)
    color: Mapped[str] = mapped_column(String, default=DEFAULT_DECK_COLOR)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    settings: Mapped[dict] = mapped_column(JSON, default=default_deck_settings, nullable=False)

    # Set before the cascade delete starts; such a deck is invisible to every lookup but the retry.
    pending_deletion: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Aggregate statistics, only ever changed through atomic increments
    total_cards: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_study_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # minutes
    average_score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    scored_sessions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, onupdate=utc_now)

    owner: Mapped["User"] = relationship("User", back_populates="decks")

    flashcards: Mapped[list["Flashcard"]] = relationship(
        "Flashcard",
        back_populates="deck",
        passive_deletes=True
    )

    @property
    def random_order(self) -> bool:
        return bool((self.settings or {}).get("random_order", False))

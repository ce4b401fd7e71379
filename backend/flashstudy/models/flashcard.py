import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, Integer, DateTime, ForeignKey, JSON, Enum, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from flashstudy.core.clock import utc_now
from flashstudy.core.enums import Difficulty
from flashstudy.db.base import Base

if TYPE_CHECKING:
    from flashstudy.models.deck import Deck


class Flashcard(Base):
    __tablename__ = "flashcards"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    deck_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("decks.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    question: Mapped[str] = mapped_column(String, nullable=False)
    answer: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(Difficulty, name="flashcard_difficulty"),
        default=Difficulty.medium,
        nullable=False
    )
    tags: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    total_views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    correct_answers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    incorrect_answers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now)

    deck: Mapped["Deck"] = relationship("Deck", back_populates="flashcards")
